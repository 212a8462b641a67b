"""
Theme mode store with persisted-preference and ambient-preference collaborators.

Initialization (on first read)
1) a persisted explicit choice ("dark" | "light") under the storage key, else
2) the host's ambient preference (``AmbientPreference.prefers_dark``).
Initialization itself persists nothing.

After initialization the store follows ambient change notifications only while the
storage holds no explicit choice. ``toggle`` and ``set`` record an explicit choice,
which silences ambient notifications until the key is cleared externally.

Storage failures never escape: they are logged and exposed on ``error``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from flowwatch.charts.config import Palette, palette_for
from flowwatch.constants import THEME_STORAGE_KEY
from flowwatch.errors import PreferenceStorageError
from flowwatch.models import ThemeMode
from flowwatch.reactive import Signal, derive

__all__ = [
    "PreferenceStorage",
    "AmbientPreference",
    "MemoryPreferenceStorage",
    "StaticAmbientPreference",
    "ThemeStore",
]

logger = logging.getLogger(__name__)


class PreferenceStorage(Protocol):
    """Key/value persistence for the explicit theme choice."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class AmbientPreference(Protocol):
    """Host color-scheme signal ("prefers dark")."""

    def prefers_dark(self) -> bool: ...

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]: ...


class MemoryPreferenceStorage:
    """Dict-backed PreferenceStorage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class StaticAmbientPreference:
    """AmbientPreference with a fixed value that can be changed via ``change``."""

    def __init__(self, prefers_dark: bool = True) -> None:
        self._prefers_dark = bool(prefers_dark)
        self._callbacks: list[Callable[[bool], None]] = []

    def prefers_dark(self) -> bool:
        return self._prefers_dark

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def change(self, prefers_dark: bool) -> None:
        """Simulate a host color-scheme change notification."""
        self._prefers_dark = bool(prefers_dark)
        for callback in list(self._callbacks):
            callback(self._prefers_dark)


def _mode_from_value(value: str | None) -> ThemeMode | None:
    if value is None:
        return None
    try:
        return ThemeMode(value.strip().lower())
    except (ValueError, AttributeError):
        return None


class ThemeStore:
    """
    Dark/light mode for the process lifetime.

    Args:
        storage (PreferenceStorage | None): Explicit-choice persistence (in-memory by default).
        ambient (AmbientPreference | None): Host preference (dark by default).
        storage_key (str): Key for the persisted choice.
    """

    def __init__(
        self,
        storage: PreferenceStorage | None = None,
        ambient: AmbientPreference | None = None,
        *,
        storage_key: str = THEME_STORAGE_KEY,
    ) -> None:
        self._lock = threading.RLock()
        self._storage: PreferenceStorage = storage or MemoryPreferenceStorage()
        self._ambient: AmbientPreference = ambient or StaticAmbientPreference()
        self._key = storage_key
        self._initialized = False
        self._unsubscribe: Callable[[], None] | None = None
        self._mode: Signal[ThemeMode] = Signal(ThemeMode.DARK)
        self._error: Signal[str | None] = Signal(None)
        self._theme_name = derive(lambda mode: mode.value, self._mode)
        self._palette = derive(palette_for, self._mode)

    # ---------- collaborators ----------

    def _read_preference(self) -> ThemeMode | None:
        try:
            raw = self._storage.get(self._key)
        except PreferenceStorageError as e:
            logger.warning("theme preference unreadable: %s", e)
            self._error.write(str(e))
            return None
        return _mode_from_value(raw)

    def _persist(self, mode: ThemeMode) -> None:
        try:
            self._storage.set(self._key, mode.value)
        except PreferenceStorageError as e:
            logger.warning("theme preference not saved: %s", e)
            self._error.write(str(e))
        else:
            self._error.write(None)

    def _ensure_initialized(self) -> None:
        with self._lock:
            if self._initialized:
                return
            self._initialized = True
            saved = self._read_preference()
            if saved is not None:
                self._mode.write(saved)
            else:
                prefers_dark = self._ambient.prefers_dark()
                self._mode.write(ThemeMode.DARK if prefers_dark else ThemeMode.LIGHT)
            self._unsubscribe = self._ambient.subscribe(self._on_ambient_change)
            logger.debug(
                "theme initialized mode=%s explicit=%s", self._mode.read().value, saved is not None
            )

    def _on_ambient_change(self, prefers_dark: bool) -> None:
        with self._lock:
            if self._read_preference() is not None:
                return
            self._mode.write(ThemeMode.DARK if prefers_dark else ThemeMode.LIGHT)

    # ---------- reads ----------

    @property
    def mode(self) -> ThemeMode:
        self._ensure_initialized()
        return self._mode.read()

    @property
    def is_dark(self) -> bool:
        return self.mode is ThemeMode.DARK

    @property
    def error(self) -> str | None:
        return self._error.read()

    @property
    def signal(self) -> Signal[ThemeMode]:
        self._ensure_initialized()
        return self._mode

    def current_theme(self) -> str:
        self._ensure_initialized()
        return self._theme_name.read()

    def palette(self) -> Palette:
        self._ensure_initialized()
        return self._palette.read()

    # ---------- mutations ----------

    def toggle(self) -> ThemeMode:
        with self._lock:
            self._ensure_initialized()
            mode = ThemeMode.LIGHT if self._mode.read() is ThemeMode.DARK else ThemeMode.DARK
            self._mode.write(mode)
            self._persist(mode)
            return mode

    def set(self, mode: ThemeMode | str) -> bool:
        """Record an explicit choice; unknown mode strings are a no-op returning False."""
        resolved = mode if isinstance(mode, ThemeMode) else _mode_from_value(mode)
        if resolved is None:
            logger.warning("ignoring unknown theme mode %r", mode)
            return False
        with self._lock:
            self._ensure_initialized()
            self._mode.write(resolved)
            self._persist(resolved)
            return True

    def close(self) -> None:
        """Stop following ambient notifications."""
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
