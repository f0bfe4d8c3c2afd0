"""
client-manager store errors.

Every backend failure leaves the store as one of these. Callers catch
StoreError for "anything went wrong" or a subclass for the cases they
can act on. The store recovers exactly one of them locally
(DatabaseExistsError, inside ensure_database_exists).

Classification order:
  1. SQLSTATE from the driver (psycopg2 .pgcode, psycopg .sqlstate)
  2. the SQLAlchemy exception class
  3. the message text, for drivers that expose neither (SQLite)
"""

from __future__ import annotations

from sqlalchemy import exc as sa_exc


# ─────────────────────────────────────────────────────────────
# SQLSTATE codes we branch on
# ─────────────────────────────────────────────────────────────

FOREIGN_KEY_VIOLATION   = "23503"
DUPLICATE_DATABASE      = "42P04"
CONNECTION_EXCEPTION    = "08"       # class prefix
INTEGRITY_CONSTRAINT    = "23"       # class prefix
DATA_EXCEPTION          = "22"       # class prefix


# ─────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────

class StoreError(Exception):
    """Base error for store operations.

    detail — the backend's own message, verbatim
    code   — SQLSTATE when the driver reports one, else None
    """

    def __init__(self, detail: str, code: str | None = None):
        self.detail = detail
        self.code   = code
        prefix = f"[{code}] " if code else ""
        super().__init__(f"{prefix}{detail}")


class StoreConnectionError(StoreError):
    """The backend could not be reached or the connection was lost."""


class ConstraintViolationError(StoreError):
    """A row was rejected by a length, check, not-null or unique constraint."""


class ForeignKeyViolationError(ConstraintViolationError):
    """A phone referenced a client that does not exist."""


class DatabaseExistsError(StoreError):
    """CREATE DATABASE named a database that is already there."""


class QueryError(StoreError):
    """The backend rejected the statement itself (syntax, missing table, ...)."""


# ─────────────────────────────────────────────────────────────
# Translation
# ─────────────────────────────────────────────────────────────

def sqlstate(err: sa_exc.DBAPIError) -> str | None:
    """Return the SQLSTATE carried by the wrapped driver exception, if any."""
    orig = err.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate(err: sa_exc.DBAPIError) -> StoreError:
    """Map a SQLAlchemy DBAPIError onto the store's error taxonomy."""
    code   = sqlstate(err)
    detail = str(err.orig).strip() if err.orig is not None else str(err)
    lower  = detail.lower()

    if code == DUPLICATE_DATABASE or (
        code is None and "database" in lower and "already exists" in lower
    ):
        return DatabaseExistsError(detail, code)

    if code == FOREIGN_KEY_VIOLATION or "foreign key" in lower:
        return ForeignKeyViolationError(detail, code)

    if code is not None:
        if code.startswith(CONNECTION_EXCEPTION):
            return StoreConnectionError(detail, code)
        if code.startswith((INTEGRITY_CONSTRAINT, DATA_EXCEPTION)):
            return ConstraintViolationError(detail, code)

    if isinstance(err, (sa_exc.IntegrityError, sa_exc.DataError)):
        return ConstraintViolationError(detail, code)

    if err.connection_invalidated or _looks_like_connect_failure(err, lower):
        return StoreConnectionError(detail, code)

    return QueryError(detail, code)


def _looks_like_connect_failure(err: sa_exc.DBAPIError, lower: str) -> bool:
    if not isinstance(err, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        return False
    return any(
        phrase in lower
        for phrase in (
            "could not connect",
            "connection refused",
            "unable to open database",
            "server closed the connection",
            "password authentication failed",
            "does not exist",
        )
    )
