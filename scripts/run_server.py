"""Script to launch the Slack RTM formatting service."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn

# Ensure src/ is on sys.path (so imports work when run directly)
SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from slack_rtm.server import create_app  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Slack RTM formatting service.")
    parser.add_argument(
        "--host",
        type=str,
        default=os.environ.get("HOST", "127.0.0.1"),
        help="Host to bind the server to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", "8000")),
        help="Port to bind the server to (default: 8000)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file",
    )
    args = parser.parse_args()

    app = create_app(config_path=args.config)

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
