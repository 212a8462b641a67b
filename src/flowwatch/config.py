"""
Configuration for the flowwatch dashboard.

Defines DashboardSettings, a frozen dataclass carrying runtime configuration for the
stores, the theme initialization fallback, and the Streamlit shell. Defaults are sourced
from flowwatch.constants.

Precedence
- environment (FLOWWATCH_*) > TOML (flowwatch.toml or [tool.flowwatch.dashboard]) > defaults.

Notes
- Invalid values in env/TOML are ignored and the previous value is kept.
- ``prefers_dark`` stands in for the host environment's ambient color-scheme signal
  when no richer source is wired in.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from datetime import tzinfo
from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flowwatch.constants import DEFAULT_TIMEZONE, THEME_STORAGE_KEY, TIME_RANGE_HOURS
from flowwatch.errors import SettingsError

TimeRangeName = Literal["6h", "12h", "24h"]

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class DashboardSettings:
    """
    Runtime settings for the flowwatch dashboard.

    Attributes:
        timezone (str): IANA zone used to derive hour-of-day and "today" (default "UTC").
        default_time_range (Literal["6h","12h","24h"]): Initial filter time range.
        live_updates (bool): Initial live-updates toggle.
        prefers_dark (bool): Ambient dark-mode preference used when the host reports none.
        theme_storage_key (str): Key under which the theme preference is persisted.
        log_level (str): Root log level for ``configure_logging``.
        feed_dir (str): Directory the Streamlit shell reads feeds from.

    Examples:
        >>> from flowwatch.config import DashboardSettings
        >>> DashboardSettings(timezone="Europe/Berlin")  # doctest: +ELLIPSIS
        DashboardSettings(...)
    """

    timezone: str = DEFAULT_TIMEZONE
    default_time_range: TimeRangeName = "24h"
    live_updates: bool = True
    prefers_dark: bool = True
    theme_storage_key: str = THEME_STORAGE_KEY
    log_level: str = "INFO"
    feed_dir: str = "feeds"

    def tzinfo(self) -> tzinfo:
        """Resolve ``timezone`` to a tzinfo.

        Raises:
            SettingsError: If the zone name is unknown.
        """
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise SettingsError(f"unknown timezone: {self.timezone!r}") from e

    @classmethod
    def _apply_mapping(
        cls, base: DashboardSettings, cfg: dict[str, Any] | None
    ) -> DashboardSettings:
        """Apply a loose config mapping onto DashboardSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "timezone" in cfg and isinstance(cfg["timezone"], str) and cfg["timezone"].strip():
            s = replace(s, timezone=cfg["timezone"].strip())

        if "default_time_range" in cfg and isinstance(cfg["default_time_range"], str):
            tr = cfg["default_time_range"].strip().lower()
            if tr in TIME_RANGE_HOURS:
                s = replace(s, default_time_range=tr)  # type: ignore[arg-type]

        if "live_updates" in cfg:
            s = replace(s, live_updates=_bool(cfg["live_updates"]))

        if "prefers_dark" in cfg:
            s = replace(s, prefers_dark=_bool(cfg["prefers_dark"]))

        if "theme_storage_key" in cfg and isinstance(cfg["theme_storage_key"], str):
            if cfg["theme_storage_key"]:
                s = replace(s, theme_storage_key=cfg["theme_storage_key"])

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)

        if "feed_dir" in cfg and isinstance(cfg["feed_dir"], str):
            s = replace(s, feed_dir=cfg["feed_dir"])

        return s

    @classmethod
    def from_env(
        cls, base: DashboardSettings | None = None, prefix: str = "FLOWWATCH_"
    ) -> DashboardSettings:
        """
        Build DashboardSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - FLOWWATCH_TIMEZONE
            - FLOWWATCH_DEFAULT_TIME_RANGE ("6h" | "12h" | "24h")
            - FLOWWATCH_LIVE_UPDATES (1/0/true/false/yes/no/on/off)
            - FLOWWATCH_PREFERS_DARK (same boolean spellings)
            - FLOWWATCH_THEME_STORAGE_KEY
            - FLOWWATCH_LOG_LEVEL
            - FLOWWATCH_FEED_DIR
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for name in (
            "timezone",
            "default_time_range",
            "live_updates",
            "prefers_dark",
            "theme_storage_key",
            "log_level",
            "feed_dir",
        ):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> DashboardSettings:
        """
        Build DashboardSettings from a TOML file.

        Search order when `path` is None:
            1) ./flowwatch.toml (with either a [dashboard] table or direct keys)
            2) ./pyproject.toml under [tool.flowwatch.dashboard]

        Returns defaults if no file is present or the file cannot be parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "flowwatch.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                section = tool.get("flowwatch", {}) if isinstance(tool, dict) else {}
                cfg = section.get("dashboard") if isinstance(section, dict) else None
            else:
                if "dashboard" in data and isinstance(data["dashboard"], dict):
                    cfg = data["dashboard"]
                else:
                    cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> DashboardSettings:
        """
        Load DashboardSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (flowwatch.toml, pyproject.toml).

        Returns:
            DashboardSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
