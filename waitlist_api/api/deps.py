"""FastAPI dependencies resolving the components owned by the application.

The store, limiter and service are built once by the app factory and kept on
``app.state``; routes only ever reach them through these functions, which
tests can override with ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from waitlist_api.core.config import AppSettings
from waitlist_api.services.waitlist_service import WaitlistService


def get_waitlist_service(request: Request) -> WaitlistService:
    return request.app.state.waitlist_service


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings.app
