"""SQLAlchemy table definition for waitlist entries."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class WaitlistEntry(Base):
    """One signup. Exactly one of email/phone is set; rows are never updated."""

    __tablename__ = "waitlist"
    __table_args__ = (
        UniqueConstraint("email", name="uq_waitlist_email"),
        UniqueConstraint("phone", name="uq_waitlist_phone"),
        CheckConstraint("(email IS NULL) <> (phone IS NULL)", name="ck_waitlist_one_contact"),
    )

    id = Column(String(36), primary_key=True)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    source_page = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    ip = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
