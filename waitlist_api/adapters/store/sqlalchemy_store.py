"""SQLAlchemy-backed waitlist store.

Duplicate detection relies on the table's UNIQUE constraints: the insert is
attempted inside its own transaction and a unique violation is reported as
DuplicateDetected. Two concurrent submissions of the same contact therefore
produce exactly one row, because the database serializes the constraint
check. Connections come from the engine pool and are held only for the
duration of one insert or ping.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from waitlist_api.adapters.store.base import (
    AbstractWaitlistStore,
    DuplicateDetected,
    EntryMetadata,
    InsertOutcome,
    Inserted,
)
from waitlist_api.adapters.store.models import Base, WaitlistEntry
from waitlist_api.core.config import DatabaseSettings
from waitlist_api.core.errors import StoreAppError
from waitlist_api.utils.contact_normalizer import NormalizedContact

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION_SQLSTATE = "23505"
_SQLITE_UNIQUE_ERRORNAMES = {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell unique-constraint violations apart from other integrity errors.

    Checks the driver's SQLSTATE first (psycopg2 ``pgcode``, psycopg
    ``sqlstate``), then SQLite's extended error name, then the message.
    """

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == _UNIQUE_VIOLATION_SQLSTATE

    errorname = getattr(orig, "sqlite_errorname", None)
    if errorname:
        return errorname in _SQLITE_UNIQUE_ERRORNAMES

    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


def create_store_engine(db_settings: DatabaseSettings) -> Engine:
    """Build a pooled engine for the configured database URL.

    Creating the engine does not connect; the first checkout does.
    """

    url = db_settings.url

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    connect_args: dict = {}
    if db_settings.ssl_mode:
        connect_args["sslmode"] = db_settings.ssl_mode

    return create_engine(
        url,
        pool_size=db_settings.pool_size,
        pool_pre_ping=db_settings.pool_pre_ping,
        connect_args=connect_args,
    )


class SqlAlchemyWaitlistStore(AbstractWaitlistStore):
    """Waitlist store writing to a relational database through SQLAlchemy."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @classmethod
    def from_settings(cls, db_settings: DatabaseSettings) -> "SqlAlchemyWaitlistStore":
        return cls(create_store_engine(db_settings))

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StoreAppError(
                code="store_unavailable",
                message="Could not create waitlist schema",
                details={"operation": "create_schema", "error_type": type(exc).__name__},
            ) from exc

    def close(self) -> None:
        self._engine.dispose()

    def insert_if_absent(self, contact: NormalizedContact, metadata: EntryMetadata) -> InsertOutcome:
        entry_id = str(uuid.uuid4())
        entry = WaitlistEntry(
            id=entry_id,
            email=contact.email,
            phone=contact.phone,
            source_page=metadata.source_page,
            user_agent=metadata.user_agent,
            ip=metadata.ip,
        )

        try:
            with self._session_factory.begin() as session:
                session.add(entry)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info(
                    "store.duplicate_detected",
                    extra={"contact_type": contact.contact_type},
                )
                return DuplicateDetected()
            logger.error(
                "store.insert_failed",
                # Driver messages for integrity errors echo the row, so omit them
                extra={
                    "operation": "insert",
                    "error_type": type(exc.orig).__name__,
                },
            )
            raise StoreAppError(
                code="store_integrity_error",
                message="Could not save waitlist entry",
                details={"operation": "insert", "error_type": type(exc.orig).__name__},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error(
                "store.insert_failed",
                extra={
                    "operation": "insert",
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise StoreAppError(
                code="store_unavailable",
                message="Could not save waitlist entry",
                details={"operation": "insert", "error_type": type(exc).__name__},
            ) from exc
        except (ValueError, TypeError) as exc:
            # Raised by the driver for values it cannot bind (e.g. NUL bytes);
            # the message may quote the value, so only the type is logged
            logger.error(
                "store.insert_failed",
                extra={"operation": "insert", "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_unavailable",
                message="Could not save waitlist entry",
                details={"operation": "insert", "error_type": type(exc).__name__},
            ) from exc

        logger.info(
            "store.entry_inserted",
            extra={"entry_id": entry_id, "contact_type": contact.contact_type},
        )
        return Inserted(entry_id=entry_id)

    def ping(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning(
                "store.ping_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            return False
        return True
