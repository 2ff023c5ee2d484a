"""Live event source: the RTM websocket."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator

from websockets.sync.client import connect as ws_connect

logger = logging.getLogger(__name__)

_SKIP = object()


def decode_frame(message: Any) -> Any:
    """Decode one websocket frame; returns ``_SKIP`` for unusable frames."""
    if isinstance(message, (bytes, bytearray)):
        logger.debug("Ignoring binary frame (%d bytes)", len(message))
        return _SKIP
    try:
        return json.loads(message)
    except json.JSONDecodeError as e:
        logger.warning("Skipping non-JSON frame: %s", e)
        return _SKIP


def iter_events(url: str, *, connect: Callable[..., Any] = ws_connect) -> Iterator[Any]:
    """Yield decoded RTM events until the server closes the stream.

    A clean close ends the iteration; an abnormal one raises
    ``websockets.exceptions.ConnectionClosedError``. There is no reconnect.
    """
    with connect(url) as websocket:
        logger.info("Connected to RTM stream")
        for message in websocket:
            event = decode_frame(message)
            if event is _SKIP:
                continue
            yield event
    logger.info("RTM stream closed")
