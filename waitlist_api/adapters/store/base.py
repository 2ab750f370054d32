"""Waitlist store interface and insert outcomes.

A duplicate signup is an ordinary, expected outcome, so ``insert_if_absent``
returns it as a value. Only infrastructure failures raise (StoreAppError).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from waitlist_api.utils.contact_normalizer import NormalizedContact


@dataclass(frozen=True)
class EntryMetadata:
    """Provenance recorded alongside a contact."""

    source_page: str | None = None
    user_agent: str | None = None
    ip: str | None = None


@dataclass(frozen=True)
class Inserted:
    entry_id: str


@dataclass(frozen=True)
class DuplicateDetected:
    """The email or phone number is already on the waitlist."""


InsertOutcome = Inserted | DuplicateDetected


class AbstractWaitlistStore(ABC):
    """Interface for waitlist persistence."""

    @abstractmethod
    def insert_if_absent(self, contact: NormalizedContact, metadata: EntryMetadata) -> InsertOutcome:
        """Atomically store a new entry unless its contact already exists.

        Args:
            contact: Normalized contact with exactly one field set.
            metadata: Provenance to record with the entry.

        Returns:
            Inserted with the new id, or DuplicateDetected (nothing written).

        Raises:
            StoreAppError: On any failure other than a duplicate contact.
        """
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the datastore answers a trivial query."""
        raise NotImplementedError

    def create_schema(self) -> None:
        """Create storage structures if the backend needs them."""

    def close(self) -> None:
        """Release pooled resources."""
