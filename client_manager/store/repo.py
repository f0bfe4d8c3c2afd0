"""
client-manager repository layer.

All database reads and writes go through ClientStore.
Nothing outside this module writes SQL directly.

ClientStore owns exactly one connection, opened when the store is
constructed and closed by close() or by leaving a `with` block. Every
public operation runs in its own transaction on that connection:
committed when the operation returns, rolled back when it raises.
Backend failures are re-raised as StoreError subclasses (store/errors.py).

    with ClientStore("postgresql+psycopg2://...") as store:
        store.ensure_schema()
        client_id = store.add_client("John", "Doe", "john.doe@example.com")
        store.add_phone(client_id, "+1234567890")
        for row in store.search("john"):
            print(row.id, row.email, row.phone_number)

One store, one thread. Concurrent callers each open their own store.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import BaseModel, Field
from sqlalchemy import Connection, Engine, delete, insert, or_, select, text, update
from sqlalchemy import exc as sa_exc

from client_manager.store.errors import (
    DatabaseExistsError,
    QueryError,
    StoreError,
    translate,
)
from client_manager.store.models import Base, DBClient, DBPhone
from client_manager.store.session import get_engine

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "/"


# ─────────────────────────────────────────────────────────────
# Result records
# ─────────────────────────────────────────────────────────────

class SearchResult(BaseModel):
    """One row of a client search: a client joined with one of its phones."""
    id: int = Field(..., description="Client id")
    first_name: Optional[str] = Field(default=None)
    last_name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    phone_number: Optional[str] = Field(
        default=None, description="None when the client has no phones"
    )


# ─────────────────────────────────────────────────────────────
# Database bootstrap
# ─────────────────────────────────────────────────────────────

def ensure_database_exists(admin_url: str, db_name: str) -> bool:
    """Create db_name through the administrative endpoint if it is missing.

    Connects to admin_url (the server's default database, not db_name)
    and issues CREATE DATABASE outside any transaction.

    Returns True when the database was created, False when it already
    existed. Any other failure is raised as a StoreError.

    SQLite has no server to ask: the file appears on first connect, so
    this returns False without touching anything.
    """
    engine = get_engine(admin_url, isolation_level="AUTOCOMMIT")
    try:
        if engine.dialect.name == "sqlite":
            logger.debug("SQLite backend, nothing to create for %r.", db_name)
            return False

        quoted = engine.dialect.identifier_preparer.quote(db_name)
        try:
            with engine.connect() as conn:
                conn.execute(text(f"CREATE DATABASE {quoted}"))
        except sa_exc.DBAPIError as e:
            err = translate(e)
            if isinstance(err, DatabaseExistsError):
                logger.info("Database %r already exists.", db_name)
                return False
            logger.error("Database creation failed: %s", err)
            raise err from e

        logger.info("Database %r created.", db_name)
        return True
    finally:
        engine.dispose()


# ─────────────────────────────────────────────────────────────
# Client store
# ─────────────────────────────────────────────────────────────

class ClientStore:
    """CRUD access to the clients and phones tables over one connection.

    Pass either a URL (the store builds and later disposes its own
    engine) or an existing Engine (the caller keeps ownership of it).
    """

    def __init__(
        self,
        db_url: str | None = None,
        *,
        engine: Engine | None = None,
    ):
        self._owns_engine = engine is None
        self.engine = engine if engine is not None else get_engine(db_url)
        self._conn: Connection | None = None

        try:
            self._conn = self.engine.connect()
        except sa_exc.DBAPIError as e:
            self._dispose_engine()
            raise translate(e) from e

    # ── Lifecycle ─────────────────────────────────────────────

    def __enter__(self) -> "ClientStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
                self._dispose_engine()

    def _dispose_engine(self) -> None:
        if self._owns_engine:
            self.engine.dispose()

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        """One transaction on the store's connection, errors translated."""
        if self._conn is None:
            raise StoreError("ClientStore is closed")
        try:
            with self._conn.begin():
                yield self._conn
        except sa_exc.DBAPIError as e:
            raise translate(e) from e

    # ── Schema ────────────────────────────────────────────────

    def ensure_schema(self) -> None:
        """Create clients and phones if they don't exist. Idempotent."""
        with self._transaction() as conn:
            Base.metadata.create_all(conn)
        logger.info("Tables verified.")

    # ── Clients ───────────────────────────────────────────────

    def add_client(self, first_name: str, last_name: str, email: str) -> int:
        """Insert a client and return the id the database assigned."""
        stmt = insert(DBClient).values(
            first_name=first_name,
            last_name=last_name,
            email=email,
        )
        with self._transaction() as conn:
            result = conn.execute(stmt)
            client_id = result.inserted_primary_key[0]
        logger.info("Client added. id=%s", client_id)
        return client_id

    def update_client(
        self,
        client_id: int,
        first_name: str,
        last_name: str,
        email: str,
    ) -> int:
        """Replace every mutable field of a client.

        Returns the number of rows changed: 0 when client_id is unknown,
        which is not an error.
        """
        stmt = (
            update(DBClient)
            .where(DBClient.id == client_id)
            .values(first_name=first_name, last_name=last_name, email=email)
        )
        with self._transaction() as conn:
            count = conn.execute(stmt).rowcount
        logger.info("Client updated. id=%s rows=%s", client_id, count)
        return count

    def delete_client(self, client_id: int) -> int:
        """Delete a client. Its phones go with it (ON DELETE CASCADE)."""
        with self._transaction() as conn:
            count = conn.execute(
                delete(DBClient).where(DBClient.id == client_id)
            ).rowcount
        logger.info("Client deleted. id=%s rows=%s", client_id, count)
        return count

    def reset_identity_sequence(self) -> None:
        """Make the next add_client receive id 1.

        Only meaningful on an empty clients table. With rows still present
        the next inserts collide with existing ids and fail.
        """
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            stmt = text(
                "SELECT setval(pg_get_serial_sequence('clients', 'id'), 1, false)"
            )
        elif dialect == "sqlite":
            stmt = text("DELETE FROM sqlite_sequence WHERE name = 'clients'")
        else:
            raise QueryError(f"No sequence reset for dialect {dialect!r}")

        with self._transaction() as conn:
            conn.execute(stmt)
        logger.info("Client sequence reset.")

    # ── Phones ────────────────────────────────────────────────

    def add_phone(self, client_id: int, phone_number: str) -> int:
        """Attach a phone number to an existing client. Returns the phone id.

        Raises ForeignKeyViolationError when client_id does not exist.
        """
        stmt = insert(DBPhone).values(client_id=client_id, phone_number=phone_number)
        with self._transaction() as conn:
            phone_id = conn.execute(stmt).inserted_primary_key[0]
        logger.info("Phone added. id=%s client=%s", phone_id, client_id)
        return phone_id

    def delete_phone(self, phone_id: int) -> int:
        with self._transaction() as conn:
            count = conn.execute(
                delete(DBPhone).where(DBPhone.id == phone_id)
            ).rowcount
        logger.info("Phone deleted. id=%s rows=%s", phone_id, count)
        return count

    # ── Search ────────────────────────────────────────────────

    def search(self, pattern: str) -> Iterator[SearchResult]:
        """Case-insensitive substring search over names, email and phone.

        Clients without phones still match on their own fields (LEFT JOIN);
        a client with several phones yields one row per phone. % and _ in
        pattern are matched literally.

        Returns a one-shot iterator. The query runs (and its transaction
        ends) before this returns; result models are built as it is consumed.
        """
        like = f"%{_escape_like(pattern)}%"
        stmt = (
            select(
                DBClient.id,
                DBClient.first_name,
                DBClient.last_name,
                DBClient.email,
                DBPhone.phone_number,
            )
            .select_from(DBClient)
            .outerjoin(DBPhone, DBPhone.client_id == DBClient.id)
            .where(
                or_(
                    DBClient.first_name.ilike(like, escape=LIKE_ESCAPE),
                    DBClient.last_name.ilike(like, escape=LIKE_ESCAPE),
                    DBClient.email.ilike(like, escape=LIKE_ESCAPE),
                    DBPhone.phone_number.ilike(like, escape=LIKE_ESCAPE),
                )
            )
            .order_by(DBClient.id, DBPhone.id)
        )
        with self._transaction() as conn:
            rows = conn.execute(stmt).all()
        return (SearchResult.model_validate(dict(row._mapping)) for row in rows)

    # ── Inspection ────────────────────────────────────────────

    def phone_numbers(self, client_id: int) -> list[str]:
        """All phone numbers currently stored for a client, oldest first."""
        stmt = (
            select(DBPhone.phone_number)
            .where(DBPhone.client_id == client_id)
            .order_by(DBPhone.id)
        )
        with self._transaction() as conn:
            return list(conn.execute(stmt).scalars().all())


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
