"""
Tests for backend error classification.

Driver exceptions are faked: a plain Exception carrying the attributes
psycopg2 (.pgcode) or psycopg (.sqlstate) would set.

Run with: pytest tests/test_errors.py -v
"""

import pytest
from sqlalchemy import exc as sa_exc

from client_manager.store.errors import (
    ConstraintViolationError,
    DatabaseExistsError,
    ForeignKeyViolationError,
    QueryError,
    StoreConnectionError,
    StoreError,
    sqlstate,
    translate,
)


class FakeDriverError(Exception):
    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


class FakePsycopg3Error(Exception):
    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate


def _wrap(cls, orig, **kw):
    return cls("STATEMENT", {}, orig, **kw)


# ─────────────────────────────────────────────────────────────
# SQLSTATE-driven (Postgres)
# ─────────────────────────────────────────────────────────────

class TestPostgresCodes:
    def test_foreign_key(self):
        err = translate(_wrap(
            sa_exc.IntegrityError,
            FakeDriverError('insert or update on table "phones" violates '
                            'foreign key constraint', "23503"),
        ))
        assert isinstance(err, ForeignKeyViolationError)
        assert err.code == "23503"

    def test_string_too_long(self):
        err = translate(_wrap(
            sa_exc.DataError,
            FakeDriverError("value too long for type character varying(50)", "22001"),
        ))
        assert type(err) is ConstraintViolationError

    def test_check_violation(self):
        err = translate(_wrap(
            sa_exc.IntegrityError,
            FakeDriverError('new row violates check constraint "len_email"', "23514"),
        ))
        assert type(err) is ConstraintViolationError

    def test_duplicate_database(self):
        err = translate(_wrap(
            sa_exc.ProgrammingError,
            FakeDriverError('database "clients" already exists', "42P04"),
        ))
        assert isinstance(err, DatabaseExistsError)

    def test_connection_class(self):
        err = translate(_wrap(
            sa_exc.OperationalError,
            FakeDriverError("terminating connection", "08006"),
        ))
        assert isinstance(err, StoreConnectionError)

    def test_syntax_error(self):
        err = translate(_wrap(
            sa_exc.ProgrammingError,
            FakeDriverError('syntax error at or near "SELEC"', "42601"),
        ))
        assert isinstance(err, QueryError)

    def test_missing_table(self):
        err = translate(_wrap(
            sa_exc.ProgrammingError,
            FakeDriverError('relation "clients" does not exist', "42P01"),
        ))
        assert isinstance(err, QueryError)

    def test_psycopg3_sqlstate(self):
        orig = FakePsycopg3Error("violates foreign key constraint", "23503")
        wrapped = _wrap(sa_exc.IntegrityError, orig)
        assert sqlstate(wrapped) == "23503"
        assert isinstance(translate(wrapped), ForeignKeyViolationError)


# ─────────────────────────────────────────────────────────────
# No SQLSTATE (SQLite, connect failures)
# ─────────────────────────────────────────────────────────────

class TestFallbacks:
    def test_sqlite_foreign_key(self):
        err = translate(_wrap(
            sa_exc.IntegrityError,
            FakeDriverError("FOREIGN KEY constraint failed"),
        ))
        assert isinstance(err, ForeignKeyViolationError)
        assert err.code is None

    def test_sqlite_check(self):
        err = translate(_wrap(
            sa_exc.IntegrityError,
            FakeDriverError("CHECK constraint failed: len_first_name"),
        ))
        assert type(err) is ConstraintViolationError

    def test_already_exists_text(self):
        err = translate(_wrap(
            sa_exc.ProgrammingError,
            FakeDriverError('database "clients" already exists'),
        ))
        assert isinstance(err, DatabaseExistsError)

    def test_could_not_connect(self):
        err = translate(_wrap(
            sa_exc.OperationalError,
            FakeDriverError('could not connect to server: Connection refused'),
        ))
        assert isinstance(err, StoreConnectionError)

    def test_invalidated_connection(self):
        err = translate(_wrap(
            sa_exc.OperationalError,
            FakeDriverError("something odd"),
            connection_invalidated=True,
        ))
        assert isinstance(err, StoreConnectionError)

    def test_sqlite_no_such_table(self):
        err = translate(_wrap(
            sa_exc.OperationalError,
            FakeDriverError("no such table: clients"),
        ))
        assert isinstance(err, QueryError)


class TestStoreError:
    def test_message_carries_code_and_detail(self):
        err = StoreError("boom", "XX000")
        assert err.detail == "boom"
        assert str(err) == "[XX000] boom"

    def test_message_without_code(self):
        assert str(StoreError("boom")) == "boom"

    def test_hierarchy(self):
        for cls in (StoreConnectionError, ConstraintViolationError,
                    ForeignKeyViolationError, DatabaseExistsError, QueryError):
            assert issubclass(cls, StoreError)
        assert issubclass(ForeignKeyViolationError, ConstraintViolationError)

    def test_detail_is_backend_text(self):
        err = translate(_wrap(
            sa_exc.IntegrityError,
            FakeDriverError("  FOREIGN KEY constraint failed\n"),
        ))
        assert err.detail == "FOREIGN KEY constraint failed"

    def test_raised_from_store(self):
        with pytest.raises(ConstraintViolationError):
            raise translate(_wrap(
                sa_exc.DataError, FakeDriverError("too long", "22001"),
            ))
