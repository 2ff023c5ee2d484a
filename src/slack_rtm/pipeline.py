"""Per-event transform and the JSON-lines sink."""
from __future__ import annotations

import json
import sys
from typing import Any, Iterable, TextIO

from .directory import Directory
from .formatter import resolve
from .inflate import DEFAULT_FIELDS, inflate_fields


def process_event(
    event: Any,
    directory: Directory,
    *,
    inflate: bool = False,
    format_text: bool = True,
) -> Any:
    """Resolve the event's ``text`` and optionally inflate its id fields.

    The event dict is modified in place and returned. Anything that is not
    a JSON object (acks, pings decoded as lists, ...) is returned as-is.
    """
    if not isinstance(event, dict):
        return event
    if format_text and isinstance(event.get("text"), str):
        event["text"] = resolve(event["text"], directory)
    if inflate:
        inflate_fields(event, directory, DEFAULT_FIELDS)
    return event


def run(
    events: Iterable[Any],
    directory: Directory,
    *,
    inflate: bool = False,
    format_text: bool = True,
    out: TextIO | None = None,
) -> int:
    """Write every processed event to ``out`` as one JSON line."""
    out = out or sys.stdout
    count = 0
    for event in events:
        processed = process_event(event, directory, inflate=inflate, format_text=format_text)
        out.write(json.dumps(processed, ensure_ascii=False) + "\n")
        out.flush()
        count += 1
    return count
