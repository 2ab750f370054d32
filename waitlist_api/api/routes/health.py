from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from waitlist_api.api.deps import get_waitlist_service
from waitlist_api.schemas.waitlist import HealthResponse
from waitlist_api.services.waitlist_service import WaitlistService

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"model": HealthResponse, "description": "Datastore unreachable"}},
)
def health_check(service: WaitlistService = Depends(get_waitlist_service)) -> JSONResponse:
    """Liveness check against the datastore.

    Used by the load balancer. Runs ``SELECT 1`` and reports only a boolean,
    never the failure detail.

    Returns:
        200 ``{"ok": true}`` when the store answers, else 500 ``{"ok": false}``.
    """

    ok = service.is_healthy()
    return JSONResponse(status_code=200 if ok else 500, content={"ok": ok})
