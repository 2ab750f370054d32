"""Waitlist signup route: POST /api/waitlist."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from waitlist_api.adapters.store.base import DuplicateDetected
from waitlist_api.api.deps import get_app_settings, get_waitlist_service
from waitlist_api.core.config import AppSettings
from waitlist_api.core.exception_handlers import error_response
from waitlist_api.core.rate_limit import build_rate_limit_key
from waitlist_api.core.request_meta import resolve_client_ip, resolve_user_agent
from waitlist_api.schemas.waitlist import WaitlistSignupRequest, WaitlistSignupResponse
from waitlist_api.services.waitlist_service import SignupRequest, WaitlistService

router = APIRouter(tags=["Waitlist"])


@router.post(
    "/api/waitlist",
    status_code=status.HTTP_201_CREATED,
    response_model=WaitlistSignupResponse,
    responses={
        400: {"description": "Missing or invalid contact/type"},
        409: {"description": "Contact already on the waitlist"},
        429: {"description": "Too many requests from this client"},
        500: {"description": "Unexpected server failure"},
    },
)
def join_waitlist(
    body: WaitlistSignupRequest,
    request: Request,
    service: WaitlistService = Depends(get_waitlist_service),
    app_settings: AppSettings = Depends(get_app_settings),
):
    """Add an email address or phone number to the waitlist.

    Runs synchronously in the threadpool; the insert is the only blocking
    call. Validation, rate-limit and store failures are raised as AppError
    subclasses and rendered by the global exception handlers.

    Returns:
        201 with a confirmation, or 409 when the contact is already stored.
    """
    signup = SignupRequest(
        contact=body.contact,
        contact_type=body.type,
        source_page=body.source_page,
        client_key=build_rate_limit_key(
            request,
            trust_forwarded_for=app_settings.rate_limit_trust_forwarded_for,
        ),
        user_agent=resolve_user_agent(request),
        ip=resolve_client_ip(request),
    )

    outcome = service.submit(signup)
    if isinstance(outcome, DuplicateDetected):
        return error_response(
            status.HTTP_409_CONFLICT,
            "already_registered",
            "You're already on the waitlist.",
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=WaitlistSignupResponse(message="You're on the waitlist!").model_dump(),
    )
