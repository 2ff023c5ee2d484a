"""Record types shared across the package."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Slack objects (users, channels, ims, ...) are schema-free JSON objects.
Entity = Dict[str, Any]

# Merge order of the snapshot sequences; later ones win on duplicate ids.
SNAPSHOT_SEQUENCES = ("users", "channels", "groups", "mpims", "ims")


class RTMStartResponse(BaseModel):
    """Subset of the ``rtm.start`` payload the stream needs.

    See https://api.slack.com/methods/rtm.start
    """

    model_config = ConfigDict(extra="ignore")

    ok: bool = Field(default=False)
    error: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None, description="Websocket URL of the RTM stream.")
    users: Optional[List[Any]] = None
    channels: Optional[List[Any]] = None
    groups: Optional[List[Any]] = None
    mpims: Optional[List[Any]] = None
    ims: Optional[List[Any]] = None
