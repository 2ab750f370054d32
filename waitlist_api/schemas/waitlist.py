"""Pydantic schemas for the waitlist endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WaitlistSignupRequest(BaseModel):
    """Signup body.

    Fields are optional at the schema level so that a missing contact or
    type is answered with the service's own 400 message.
    """

    model_config = ConfigDict(populate_by_name=True)

    contact: str | None = Field(
        default=None,
        description="Email address or phone number as typed by the user.",
        examples=["Jane@Example.com", "+1 (555) 010-9999"],
    )
    type: str | None = Field(
        default=None,
        description="Declared contact type: 'email' or 'phone'.",
        examples=["email"],
    )
    source_page: str | None = Field(
        default=None,
        alias="sourcePage",
        description="Page the signup form was submitted from.",
        examples=["/pricing"],
    )


class WaitlistSignupResponse(BaseModel):
    success: bool = Field(True, description="Always true for a new signup.")
    message: str = Field(..., description="Human-readable confirmation.")


class HealthResponse(BaseModel):
    ok: bool = Field(..., description="Whether the datastore answered a trivial query.")
