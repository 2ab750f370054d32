"""Signup flow: request shape check, rate limiting, normalization and storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from waitlist_api.adapters.rate_limit.base import AbstractRateLimiter
from waitlist_api.adapters.store.base import (
    AbstractWaitlistStore,
    DuplicateDetected,
    EntryMetadata,
    InsertOutcome,
)
from waitlist_api.core.errors import ValidationAppError
from waitlist_api.core.rate_limit import enforce_rate_limit
from waitlist_api.utils.contact_normalizer import CONTACT_TYPES, normalize_contact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignupRequest:
    """Everything the signup flow needs from one HTTP request.

    Attributes:
        contact: Raw contact string as submitted (may be None).
        contact_type: Declared type, expected "email" or "phone".
        source_page: Free-text page the form was submitted from.
        client_key: Rate limiter key for the caller.
        user_agent: User-Agent header value, if any.
        ip: Originating address recorded for provenance.
    """

    contact: str | None
    contact_type: str | None
    source_page: str | None
    client_key: str
    user_agent: str | None = None
    ip: str | None = None


class WaitlistService:
    """Runs one signup through rate check, normalization and storage.

    Stateless per call; the limiter and store are owned by the application
    and shared between requests.
    """

    def __init__(
        self,
        *,
        store: AbstractWaitlistStore,
        rate_limiter: AbstractRateLimiter,
        rate_limit_enabled: bool = True,
    ) -> None:
        self._store = store
        self._rate_limiter = rate_limiter
        self._rate_limit_enabled = rate_limit_enabled

    def submit(self, request: SignupRequest) -> InsertOutcome:
        """Record a signup unless its contact is already on the waitlist.

        The request shape is checked before the rate limiter is consulted, so
        malformed submissions never spend a client's budget.

        Args:
            request: Typed request context.

        Returns:
            Inserted or DuplicateDetected.

        Raises:
            ValidationAppError: Missing contact, unknown type, or nothing left
                after normalization.
            RateLimitAppError: Client exceeded its budget for the window.
            StoreAppError: The datastore failed.
        """
        if not request.contact or request.contact_type not in CONTACT_TYPES:
            raise ValidationAppError(
                code="invalid_request",
                message="email or phone required",
                details={"field": "contact" if request.contact_type in CONTACT_TYPES else "type"},
            )

        if self._rate_limit_enabled:
            enforce_rate_limit(self._rate_limiter, request.client_key)

        contact = normalize_contact(request.contact, request.contact_type)

        metadata = EntryMetadata(
            source_page=request.source_page or None,
            user_agent=request.user_agent or None,
            ip=request.ip or None,
        )
        outcome = self._store.insert_if_absent(contact, metadata)

        if isinstance(outcome, DuplicateDetected):
            logger.info("waitlist.duplicate", extra={"contact_type": contact.contact_type})
        else:
            logger.info(
                "waitlist.signup_created",
                extra={"entry_id": outcome.entry_id, "contact_type": contact.contact_type},
            )
        return outcome

    def is_healthy(self) -> bool:
        return self._store.ping()
