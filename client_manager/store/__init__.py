"""
client-manager persistence layer.

The store package manages all database access. Nothing outside this
package writes SQL directly.

    from client_manager.store import ClientStore, ensure_database_exists

    ensure_database_exists(get_admin_db_url(), get_db_name())
    with ClientStore() as store:
        store.ensure_schema()

One ClientStore holds one connection for its whole lifetime and runs
each operation in its own transaction.
"""

from client_manager.store.errors import (
    ConstraintViolationError,
    DatabaseExistsError,
    ForeignKeyViolationError,
    QueryError,
    StoreConnectionError,
    StoreError,
)
from client_manager.store.repo import (
    ClientStore,
    SearchResult,
    ensure_database_exists,
)
from client_manager.store.session import (
    create_tables,
    drop_tables,
    get_admin_db_url,
    get_db_name,
    get_db_url,
    get_engine,
)

__all__ = [
    "ClientStore", "SearchResult", "ensure_database_exists",
    "StoreError", "StoreConnectionError", "ConstraintViolationError",
    "ForeignKeyViolationError", "DatabaseExistsError", "QueryError",
    "get_engine", "get_db_url", "get_admin_db_url", "get_db_name",
    "create_tables", "drop_tables",
]
