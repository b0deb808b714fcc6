"""Application factory that serves both the JSON API and the submission form."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI

from .api import register_api_routes
from .config import ServiceSettings, load_settings
from .service import SubmissionService
from .storage import SubmissionStore
from .web import register_ui_routes
from .webhook import WebhookForwarder


def create_application(
    *,
    settings: Optional[ServiceSettings] = None,
    config_path: Optional[Path] = None,
    store: Optional[SubmissionStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create the combined ASGI application.

    ``store`` and ``transport`` let callers own the submission state and the
    outbound HTTP layer; both default to fresh instances.
    """

    if settings is None:
        settings = load_settings(config_path)

    forwarder = WebhookForwarder(
        settings.webhook_url,
        timeout=settings.webhook_timeout,
        transport=transport,
    )
    service = SubmissionService(store if store is not None else SubmissionStore(), forwarder)

    app = FastAPI(
        title="Horoscope Mood Tracker",
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.service = service

    register_api_routes(app, service)
    register_ui_routes(app, service)

    return app


__all__ = ["create_application"]
