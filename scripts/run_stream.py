"""Script to tail the Slack RTM stream (same as the ``slack-rtm`` command)."""

from __future__ import annotations

import os
import sys

SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from slack_rtm.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
