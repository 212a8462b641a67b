from __future__ import annotations

from typing import Any

from app.ui.state import CONTEXT_KEY, PREFERENCE_PREFIX, SessionPreferenceStorage, get_context
from flowwatch.config import DashboardSettings


def test_session_preference_storage_prefixes_keys() -> None:
    state: dict[str, Any] = {}
    storage = SessionPreferenceStorage(state)
    assert storage.get("theme") is None
    storage.set("theme", "light")
    assert state == {PREFERENCE_PREFIX + "theme": "light"}
    assert storage.get("theme") == "light"
    storage.clear("theme")
    assert state == {}
    storage.clear("theme")


def test_session_preference_storage_ignores_non_string_values() -> None:
    storage = SessionPreferenceStorage({PREFERENCE_PREFIX + "theme": 1})
    assert storage.get("theme") is None


def test_get_context_is_built_once_per_session() -> None:
    state: dict[str, Any] = {}
    ctx = get_context(DashboardSettings(prefers_dark=False), state)
    assert state[CONTEXT_KEY] is ctx
    assert get_context(DashboardSettings(prefers_dark=True), state) is ctx
    assert ctx.theme.current_theme() == "light"


def test_theme_choice_is_kept_in_session_state() -> None:
    state: dict[str, Any] = {}
    ctx = get_context(DashboardSettings(), state)
    ctx.theme.toggle()
    assert state[PREFERENCE_PREFIX + "theme"] == "light"

    fresh: dict[str, Any] = {PREFERENCE_PREFIX + "theme": "light"}
    assert get_context(DashboardSettings(prefers_dark=True), fresh).theme.is_dark is False
