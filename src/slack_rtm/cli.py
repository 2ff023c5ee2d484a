"""Command line entry point: tail the RTM stream as JSON lines."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .config import load_config
from .directory import Directory
from .events import iter_events
from .pipeline import run
from .snapshot import SnapshotError, fetch_snapshot, start_url

logger = logging.getLogger("slack_rtm")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slack-rtm",
        description="Print Slack RTM events as JSON lines with message markup resolved.",
    )
    parser.add_argument(
        "-i",
        "--inflate",
        action="store_true",
        default=None,
        help='Inflate "user", "channel" ID fields to corresponding JSON objects',
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Leave message text untouched (no markup resolution)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file (default: $SLACK_RTM_CONFIG or config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level for stderr output (default: from config, INFO)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)

    level = (args.log_level or cfg.get("logging", {}).get("level") or "INFO").upper()
    # stdout carries the events; logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    slack_cfg = cfg.get("slack", {})
    stream_cfg = cfg.get("stream", {})
    token_env = str(slack_cfg.get("token_env") or "SLACK_TOKEN")
    token = os.environ.get(token_env)
    if not token:
        print(f"{token_env} not set", file=sys.stderr)
        return 2

    inflate = bool(stream_cfg.get("inflate", False)) if args.inflate is None else args.inflate
    format_text = bool(stream_cfg.get("format_text", True)) and not args.raw

    try:
        return _stream(token, slack_cfg, inflate=inflate, format_text=format_text)
    except KeyboardInterrupt:
        return 0


def _stream(token: str, slack_cfg: Dict[str, Any], *, inflate: bool, format_text: bool) -> int:
    try:
        snapshot = fetch_snapshot(
            token,
            api_url=str(slack_cfg.get("api_url", "https://slack.com/api")),
            timeout=float(slack_cfg.get("timeout", 10)),
            max_retries=int(slack_cfg.get("max_retries", 3)),
        )
        url = start_url(snapshot)
    except SnapshotError as e:
        print(str(e), file=sys.stderr)
        return 1

    directory = Directory.build(snapshot)
    logger.info("Directory ready: %d entries", len(directory))

    count = run(iter_events(url), directory, inflate=inflate, format_text=format_text)
    logger.info("Stream ended after %d events", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
