"""
client-manager database schema.

Two tables, one relationship:

  clients   — one row per client. Integer ids from a serial sequence,
              never reused until the sequence is explicitly reset.
  phones    — zero or more numbers per client. Deleting a client deletes
              its phones (ON DELETE CASCADE, enforced by the database).

Length limits are declared twice: as VARCHAR lengths (enforced by
Postgres) and as CHECK constraints (enforced by SQLite, which ignores
VARCHAR lengths). Either way the backend rejects the row, not Python.

No business rules beyond that. Email is a string, not an address.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase


FIRST_NAME_MAX   = 50
LAST_NAME_MAX    = 50
EMAIL_MAX        = 100
PHONE_NUMBER_MAX = 20


# ─────────────────────────────────────────────────────────────
# Base
# ─────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


def _max_length(column: str, limit: int) -> CheckConstraint:
    return CheckConstraint(
        f"length({column}) <= {limit}",
        name=f"len_{column}",
    )


# ─────────────────────────────────────────────────────────────
# Clients
# ─────────────────────────────────────────────────────────────

class DBClient(Base):
    """A client record.

    id is assigned by the database. first_name, last_name and email are
    all replaceable by update; id is not.
    """
    __tablename__ = "clients"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(FIRST_NAME_MAX))
    last_name  = Column(String(LAST_NAME_MAX))
    email      = Column(String(EMAIL_MAX))

    __table_args__ = (
        _max_length("first_name", FIRST_NAME_MAX),
        _max_length("last_name",  LAST_NAME_MAX),
        _max_length("email",      EMAIL_MAX),
        # AUTOINCREMENT keeps SQLite from handing out a deleted max id again
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<DBClient {self.id} {self.first_name!r} {self.last_name!r}>"


# ─────────────────────────────────────────────────────────────
# Phones
# ─────────────────────────────────────────────────────────────

class DBPhone(Base):
    """A phone number owned by exactly one client."""
    __tablename__ = "phones"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    client_id    = Column(
        Integer,
        ForeignKey("clients.id", ondelete="CASCADE"),
    )
    phone_number = Column(String(PHONE_NUMBER_MAX))

    __table_args__ = (
        _max_length("phone_number", PHONE_NUMBER_MAX),
        Index("ix_phones_client_id", "client_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<DBPhone {self.id} client={self.client_id} {self.phone_number!r}>"
