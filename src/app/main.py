"""
Launcher for the flowwatch dashboard.

    python -m app.main --feed-dir feeds --watch-ttl 10
    streamlit run src/app/main.py -- --feed-dir feeds --watch-ttl 10
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

from app.ui import streamlit_app


def _parser(**kwargs) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="flowwatch dashboard", **kwargs)
    parser.add_argument("--feed-dir", default=None, help="Directory with the feed files")
    parser.add_argument(
        "--watch-ttl",
        type=int,
        default=10,
        help="Auto-refresh interval in seconds while live updates are on (0 disables)",
    )
    return parser


def _streamlit_command(ns: argparse.Namespace) -> list[str]:
    cmd = [sys.executable, "-m", "streamlit", "run", str(Path(__file__).resolve()), "--"]
    if ns.feed_dir:
        cmd += ["--feed-dir", ns.feed_dir]
    return cmd + ["--watch-ttl", str(ns.watch_ttl)]


def main(argv: list[str] | None = None) -> None:
    """Render inline under a Streamlit server, otherwise hand the process to Streamlit.

    Args:
        argv (list[str] | None): CLI arguments; ``sys.argv[1:]`` when None.
    """
    ns = _parser().parse_args(sys.argv[1:] if argv is None else argv)

    if os.environ.get("STREAMLIT_SERVER_PORT"):
        streamlit_app(default_feed_dir=ns.feed_dir, default_watch_ttl=ns.watch_ttl)
        return

    cmd = _streamlit_command(ns)
    try:
        os.execv(sys.executable, cmd)
    except OSError:
        subprocess.run(cmd, check=False)


if __name__ == "__main__":
    # `streamlit run` passes our flags after "--"; ignore anything else it forwards.
    ns, _ = _parser(add_help=False).parse_known_args(sys.argv[1:])
    streamlit_app(default_feed_dir=ns.feed_dir, default_watch_ttl=ns.watch_ttl)
