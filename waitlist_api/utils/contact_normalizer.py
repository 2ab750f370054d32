from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from waitlist_api.core.errors import ValidationAppError

ContactType = Literal["email", "phone"]

CONTACT_TYPES: tuple[str, ...] = ("email", "phone")

_NON_DIGITS = re.compile(r"\D", re.ASCII)


@dataclass(frozen=True)
class NormalizedContact:
    """Canonical contact; exactly one of email/phone is set."""

    email: str | None = None
    phone: str | None = None

    @property
    def contact_type(self) -> ContactType:
        return "email" if self.email is not None else "phone"


def normalize_contact(raw_contact: str | None, declared_type: str | None) -> NormalizedContact:
    """Canonicalize a raw email or phone number for storage and comparison.

    Emails are trimmed and lowercased, with no format validation beyond being
    non-empty. Phone numbers keep only their ASCII digits, so
    ``"+1 (555) 010-9999"`` becomes ``"15550109999"``.

    Args:
        raw_contact: Contact string exactly as submitted.
        declared_type: Either "email" or "phone".

    Returns:
        NormalizedContact: Value with only the field for declared_type set.

    Raises:
        ValidationAppError: If the contact or type is missing, the type is
            unknown, or nothing remains after normalization.
    """
    if declared_type not in CONTACT_TYPES:
        raise ValidationAppError(
            code="invalid_contact_type",
            message="type must be 'email' or 'phone'",
            details={"field": "type"},
        )
    if raw_contact is None or not raw_contact.strip():
        raise ValidationAppError(
            code="missing_contact",
            message="email or phone required",
            details={"field": "contact"},
        )

    value = raw_contact.strip()
    if declared_type == "email":
        return NormalizedContact(email=value.lower())

    digits = _NON_DIGITS.sub("", value)
    if not digits:
        raise ValidationAppError(
            code="invalid_phone",
            message="phone number must contain digits",
            details={"field": "contact", "declared_type": "phone"},
        )
    return NormalizedContact(phone=digits)
