"""
Per-session dashboard state for the flowwatch Streamlit application.

This module encapsulates:
- One DashboardContext per browser session, kept in ``st.session_state``.
- A PreferenceStorage backed by ``st.session_state`` so the explicit theme choice
  survives reruns of the same session.

Notes:
    - Streamlit reruns the whole script on every interaction; the context must be
      created once and reused, otherwise store state would reset on each click.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import streamlit as st

from flowwatch.config import DashboardSettings
from flowwatch.context import DashboardContext, build_context

CONTEXT_KEY = "flowwatch_ctx"
PREFERENCE_PREFIX = "flowwatch_pref:"


class SessionPreferenceStorage:
    """PreferenceStorage over a mutable mapping (``st.session_state`` by default).

    Args:
        state (MutableMapping[str, Any] | None): Backing mapping.
        prefix (str): Key prefix separating preferences from other session keys.
    """

    def __init__(
        self, state: MutableMapping[str, Any] | None = None, *, prefix: str = PREFERENCE_PREFIX
    ) -> None:
        self._state = st.session_state if state is None else state
        self._prefix = prefix

    def get(self, key: str) -> str | None:
        value = self._state.get(self._prefix + key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._state[self._prefix + key] = value

    def clear(self, key: str) -> None:
        self._state.pop(self._prefix + key, None)


def get_context(
    settings: DashboardSettings | None = None,
    state: MutableMapping[str, Any] | None = None,
) -> DashboardContext:
    """Return the session's DashboardContext, building it on first use.

    Args:
        settings (DashboardSettings | None): Settings for a new context
            (``DashboardSettings.load()`` when None).
        state (MutableMapping[str, Any] | None): Session mapping; ``st.session_state``
            when None.

    Returns:
        DashboardContext: The context stored under ``CONTEXT_KEY``.
    """
    session = st.session_state if state is None else state
    ctx = session.get(CONTEXT_KEY)
    if isinstance(ctx, DashboardContext):
        return ctx
    ctx = build_context(settings, storage=SessionPreferenceStorage(session))
    session[CONTEXT_KEY] = ctx
    return ctx
