"""Slack RTM event tail with message markup resolution.

Typical usage
-------------
from slack_rtm import Directory, resolve
directory = Directory.build(snapshot)
resolve("<@U024BE7LH> joined <#C024BE7LR>", directory)

or, from the command line:

slack-rtm --inflate
"""

from __future__ import annotations

from .directory import Directory
from .formatter import resolve, tokenize
from .inflate import inflate, inflate_fields
from .models import Entity, RTMStartResponse
from .pipeline import process_event

__all__ = [
    "Directory",
    "Entity",
    "RTMStartResponse",
    "__version__",
    "get_version",
    "inflate",
    "inflate_fields",
    "process_event",
    "resolve",
    "tokenize",
]

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
