"""
Top-level Streamlit app package.

This package hosts the interactive workflow-monitoring dashboard (Streamlit)
decoupled from the flowwatch library. Stores, chart specs, and view glue live
under flowwatch.*; the Streamlit UI shell and feed loading live here.

CLI entrypoint (configured in pyproject.toml):
    flowwatch-app = app.main:main
"""

from __future__ import annotations
