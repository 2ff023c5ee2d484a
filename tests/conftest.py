"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from pathlib import Path
import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from slack_rtm.directory import Directory  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the root directory of the project."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """The shipped config/default.yaml."""
    return project_root / "config" / "default.yaml"


@pytest.fixture
def snapshot_payload() -> dict:
    """A trimmed-down rtm.start response."""
    return {
        "ok": True,
        "url": "wss://example.invalid/websocket/abc",
        "self": {"id": "U99999", "name": "bot"},
        "users": [
            {"id": "U12345", "name": "user12345"},
            {"id": "U67890", "name": "alice", "profile": {"real_name": "Alice A."}},
        ],
        "channels": [{"id": "C024BE7LR", "name": "general", "is_channel": True}],
        "groups": [{"id": "G1", "name": "secret-plans"}],
        "mpims": [],
        "ims": [{"id": "D1", "user": "U67890", "is_im": True}],
    }


@pytest.fixture
def directory(snapshot_payload: dict) -> Directory:
    return Directory.build(snapshot_payload)


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    for var in ["SLACK_TOKEN", "SLACK_RTM_CONFIG"]:
        monkeypatch.delenv(var, raising=False)
    for var in list(os.environ):
        if var.startswith("SLACK_RTM__"):
            monkeypatch.delenv(var, raising=False)
    yield
