"""FastAPI service exposing message formatting over a loaded directory."""
from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import load_config
from .directory import Directory
from .formatter import resolve
from .models import RTMStartResponse
from .pipeline import process_event
from .snapshot import fetch_snapshot

logger = logging.getLogger(__name__)


# -----------------------------
# Pydantic request/response
# -----------------------------
class ResolveRequest(BaseModel):
    text: str = Field(..., description="Raw Slack message text.")


class ResolveResponse(BaseModel):
    text: str


class EventRequest(BaseModel):
    event: Dict[str, Any]
    inflate: bool = Field(default=False, description="Replace user/channel ids with objects.")
    format_text: bool = Field(default=True)


class EventResponse(BaseModel):
    event: Dict[str, Any]


# -----------------------------
# Utilities
# -----------------------------
def _default_loader(cfg: Dict[str, Any]) -> Callable[[], RTMStartResponse]:
    slack_cfg = cfg.get("slack", {})

    def load() -> RTMStartResponse:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        token_env = str(slack_cfg.get("token_env") or "SLACK_TOKEN")
        token = os.environ.get(token_env)
        if not token:
            raise RuntimeError(f"{token_env} not set")
        return fetch_snapshot(
            token,
            api_url=str(slack_cfg.get("api_url", "https://slack.com/api")),
            timeout=float(slack_cfg.get("timeout", 10)),
            max_retries=int(slack_cfg.get("max_retries", 3)),
        )

    return load


# -----------------------------
# App factory
# -----------------------------
def create_app(
    config_path: Optional[str] = None,
    directory: Optional[Directory] = None,
    snapshot_loader: Optional[Callable[[], RTMStartResponse]] = None,
) -> FastAPI:
    cfg = load_config(config_path)

    cors_origins = cfg.get("server", {}).get("cors_origins", ["*"])

    if directory is None:
        loader = snapshot_loader or _default_loader(cfg)
        directory = Directory.build(loader())
    logger.info("Serving directory with %d entries", len(directory))

    app = FastAPI(title="Slack RTM Formatter", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "entries": len(directory)}

    @app.post("/resolve", response_model=ResolveResponse)
    def resolve_text(req: ResolveRequest):
        return ResolveResponse(text=resolve(req.text, directory))

    @app.post("/events", response_model=EventResponse)
    def transform_event(req: EventRequest):
        event = process_event(
            req.event,
            directory,
            inflate=req.inflate,
            format_text=req.format_text,
        )
        return EventResponse(event=event)

    @app.get("/entities/{entity_id}")
    def get_entity(entity_id: str) -> Dict[str, Any]:
        entity = directory.lookup(entity_id)
        if entity is None:
            raise HTTPException(status_code=404, detail=f"Unknown id: {entity_id}")
        return dict(entity)

    return app
