"""
Logging setup for flowwatch processes.

Purpose
- Library modules only create ``logger = logging.getLogger(__name__)`` and never
  configure handlers themselves.
- Entry points (the Streamlit shell) call ``configure_logging`` once with
  ``DashboardSettings.log_level``.

Notes
- Streamlit reruns the app script on every interaction; repeated calls are harmless
  because ``logging.basicConfig`` is a no-op once the root logger has handlers.
- The ``flowwatch`` logger level is set explicitly, so store and ingest messages
  follow ``log_level`` even when a host already configured the root logger.
"""

from __future__ import annotations

import logging

__all__ = ["LOG_FORMAT", "configure_logging"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler and set the flowwatch log level (e.g. "DEBUG")."""
    resolved = level.upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("flowwatch").setLevel(resolved)
