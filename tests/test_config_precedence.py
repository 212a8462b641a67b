from __future__ import annotations

from pathlib import Path

import pytest

from flowwatch.config import DashboardSettings
from flowwatch.errors import SettingsError

ENV_KEYS = [
    "FLOWWATCH_TIMEZONE",
    "FLOWWATCH_DEFAULT_TIME_RANGE",
    "FLOWWATCH_LIVE_UPDATES",
    "FLOWWATCH_PREFERS_DARK",
    "FLOWWATCH_THEME_STORAGE_KEY",
    "FLOWWATCH_LOG_LEVEL",
    "FLOWWATCH_FEED_DIR",
]


def _write_toml(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def _clear_env(monkeypatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "flowwatch.toml",
        """
        [dashboard]
        timezone = "Europe/Berlin"
        default_time_range = "6h"
        live_updates = true
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("FLOWWATCH_TIMEZONE", "America/New_York")
    monkeypatch.setenv("FLOWWATCH_LIVE_UPDATES", "off")

    s = DashboardSettings.load()

    assert s.timezone == "America/New_York"  # env override
    assert s.live_updates is False  # env override
    assert s.default_time_range == "6h"  # from TOML


def test_settings_from_toml_when_no_env(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "flowwatch.toml",
        """
        timezone = "Asia/Tokyo"
        prefers_dark = false
        theme_storage_key = "ui.theme"
        log_level = "debug"
        feed_dir = "data/feeds"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = DashboardSettings.load()

    assert s.timezone == "Asia/Tokyo"
    assert s.prefers_dark is False
    assert s.theme_storage_key == "ui.theme"
    assert s.log_level == "DEBUG"
    assert s.feed_dir == "data/feeds"


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "pyproject.toml",
        """
        [project]
        name = "demo"

        [tool.flowwatch.dashboard]
        default_time_range = "12h"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    assert DashboardSettings.load().default_time_range == "12h"


def test_invalid_values_keep_defaults(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "flowwatch.toml",
        """
        default_time_range = "48h"
        log_level = "chatty"
        theme_storage_key = ""
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = DashboardSettings.load()

    assert s.default_time_range == "24h"
    assert s.log_level == "INFO"
    assert s.theme_storage_key == "theme"


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = DashboardSettings.load()

    assert s == DashboardSettings()
    assert s.timezone == "UTC"
    assert s.default_time_range == "24h"
    assert s.live_updates is True
    assert s.prefers_dark is True


def test_unparseable_toml_is_ignored(tmp_path: Path, monkeypatch) -> None:
    _write_toml(tmp_path, "flowwatch.toml", "timezone = [unterminated")
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    assert DashboardSettings.load() == DashboardSettings()


def test_unknown_timezone_raises_settings_error() -> None:
    with pytest.raises(SettingsError):
        DashboardSettings(timezone="Mars/Olympus_Mons").tzinfo()
