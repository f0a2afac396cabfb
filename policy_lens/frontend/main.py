"""
Launcher for Policy Lens.

    python -m policy_lens.frontend.main [ui|server|both]

``ui`` (the default) serves the Streamlit dashboard on ``POLICY_UI_PORT``.
``server`` serves the HTTP API on ``POLICY_API_HOST``/``POLICY_API_PORT``.
``both`` starts the API on a daemon thread, waits until its port accepts
connections, then serves the dashboard in the foreground.
"""

from __future__ import annotations

import argparse
import logging
import socket
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from policy_lens.backend.config import Settings, load_settings

logger = logging.getLogger(__name__)

DASHBOARD_SCRIPT = Path(__file__).parent / "app.py"


def run_server(settings: Settings) -> None:
    from policy_lens.backend import api_server
    api_server.run(host=settings.api_host, port=settings.api_port)


def run_ui(settings: Settings) -> None:
    """Serve the dashboard with ``streamlit run`` in a child process."""
    subprocess.run([
        sys.executable, "-m", "streamlit", "run", str(DASHBOARD_SCRIPT),
        "--server.port", str(settings.ui_port),
        "--server.address", "0.0.0.0",
    ])


def wait_for_port(host: str, port: int, timeout: float = 10.0) -> bool:
    """Poll until ``host:port`` accepts a TCP connection or ``timeout`` passes."""
    probe_host = "127.0.0.1" if host in ("0.0.0.0", "") else host
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            with socket.create_connection((probe_host, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.2)
    return False


def run_both(settings: Settings) -> None:
    threading.Thread(target=run_server, args=(settings,), daemon=True).start()
    if not wait_for_port(settings.api_host, settings.api_port):
        logger.warning(f"API did not open port {settings.api_port}; starting the dashboard anyway")
    run_ui(settings)


COMMANDS: Dict[str, Callable[[Settings], None]] = {
    "ui": run_ui,
    "server": run_server,
    "both": run_both,
}


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(prog="policy-lens", description="Run the Policy Lens dashboard and/or API.")
    parser.add_argument("command", nargs="?", default="ui", type=str.lower, choices=sorted(COMMANDS))
    args = parser.parse_args(argv)
    COMMANDS[args.command](load_settings())


if __name__ == "__main__":
    main()
