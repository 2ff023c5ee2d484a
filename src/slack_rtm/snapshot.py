"""Startup snapshot: Slack's ``rtm.start`` Web API call."""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .models import RTMStartResponse

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------
UA = "slack-rtm/0.1 (+https://api.slack.com/rtm)"
API_URL = "https://slack.com/api"
TIMEOUT = 10.0
MAX_RETRIES = 3
BASE_DELAY = 0.75            # initial backoff delay


class SnapshotError(RuntimeError):
    """The snapshot could not be obtained or is unusable."""


class SlackAPIError(SnapshotError):
    """Slack answered the call with ``ok: false``."""

    def __init__(self, error: Optional[str]):
        self.error = error or "unknown_error"
        super().__init__(f"rtm.start failed: {self.error}")


def _describe(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return str(exc) or type(exc).__name__


def _parse(payload: Any) -> RTMStartResponse:
    if not isinstance(payload, dict):
        raise SnapshotError(f"rtm.start returned {type(payload).__name__}, expected object")
    try:
        snapshot = RTMStartResponse.model_validate(payload)
    except ValidationError as e:
        raise SnapshotError(f"Malformed rtm.start response: {e}") from e
    if not snapshot.ok:
        raise SlackAPIError(snapshot.error)
    return snapshot


def fetch_snapshot(
    token: str,
    *,
    api_url: str = API_URL,
    timeout: float = TIMEOUT,
    max_retries: int = MAX_RETRIES,
    client: Optional[httpx.Client] = None,
) -> RTMStartResponse:
    """Call ``rtm.start`` and return the parsed snapshot.

    Transport failures and HTTP error statuses are retried with a linear
    backoff; an ``ok: false`` answer is not retried and raises
    :class:`SlackAPIError`.
    """
    url = api_url.rstrip("/") + "/rtm.start"
    # token goes in a header: httpx logs request URLs at INFO
    headers = {
        "User-Agent": UA,
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
    }

    attempts = max(1, int(max_retries))
    for attempt in range(1, attempts + 1):
        try:
            if client is not None:
                r = client.get(url, headers=headers)
            else:
                with httpx.Client(timeout=timeout, headers=headers, follow_redirects=True) as c:
                    r = c.get(url)
            r.raise_for_status()
            payload: Any = r.json()
            break
        except (httpx.HTTPError, ValueError) as e:
            reason = _describe(e)
            if attempt == attempts:
                logger.error("rtm.start failed: %s", reason)
                raise SnapshotError(f"rtm.start request failed: {reason}") from e
            delay = BASE_DELAY * attempt
            logger.warning("rtm.start retry %d: %s (sleep %.2fs)", attempt, reason, delay)
            time.sleep(delay)

    snapshot = _parse(payload)
    logger.info(
        "rtm.start ok: %d users, %d channels, %d groups, %d mpims, %d ims",
        len(snapshot.users or []),
        len(snapshot.channels or []),
        len(snapshot.groups or []),
        len(snapshot.mpims or []),
        len(snapshot.ims or []),
    )
    return snapshot


def start_url(snapshot: RTMStartResponse) -> str:
    """Return the websocket URL of the event stream."""
    if not snapshot.url:
        raise SnapshotError("Could not obtain RTM start_url")
    return snapshot.url
