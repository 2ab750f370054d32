"""Waitlist persistence adapters."""

from waitlist_api.adapters.store.base import (
    AbstractWaitlistStore,
    DuplicateDetected,
    EntryMetadata,
    InsertOutcome,
    Inserted,
)
from waitlist_api.adapters.store.sqlalchemy_store import SqlAlchemyWaitlistStore

__all__ = [
    "AbstractWaitlistStore",
    "DuplicateDetected",
    "EntryMetadata",
    "InsertOutcome",
    "Inserted",
    "SqlAlchemyWaitlistStore",
]
