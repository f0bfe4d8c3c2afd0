"""
client-manager demo.

Entry point: python -m client_manager   (or the `client-manager` script)

Walks one client through its whole life:
  1. Ensure the database exists (via the admin endpoint)
  2. Ensure the tables exist
  3. Add John Doe with one phone
  4. Rename him to Johnny, then search for him
  5. Delete the phone, delete the client, reset the id sequence

Configuration via environment variables:

    CLIENTS_DB_URL        Target database URL
    CLIENTS_ADMIN_DB_URL  Admin endpoint URL (default: target server, db "postgres")
    CLIENTS_LOG_LEVEL     Logging level (default: INFO)
"""

from __future__ import annotations

import logging
import os

from client_manager.store import (
    ClientStore,
    SearchResult,
    StoreError,
    ensure_database_exists,
    get_admin_db_url,
    get_db_name,
    get_db_url,
)

logger = logging.getLogger(__name__)


def run_demo(store: ClientStore) -> list[SearchResult]:
    """Run the scripted sequence against an open store.

    Returns the rows found by the search step.
    """
    store.ensure_schema()

    client_id = store.add_client("John", "Doe", "john.doe@example.com")
    phone_id  = store.add_phone(client_id, "+1234567890")
    store.update_client(client_id, "Johnny", "Doe", "johnny.doe@example.com")

    found = list(store.search("Johnny"))
    for row in found:
        logger.info(
            "ID: %s | First Name: %s | Last Name: %s | Email: %s | Phone: %s",
            row.id, row.first_name, row.last_name, row.email, row.phone_number,
        )

    store.delete_phone(phone_id)
    store.delete_client(client_id)
    store.reset_identity_sequence()
    return found


def main() -> int:
    log_level = os.environ.get("CLIENTS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )

    db_url = get_db_url()
    try:
        ensure_database_exists(get_admin_db_url(db_url), get_db_name(db_url))
        with ClientStore(db_url) as store:
            run_demo(store)
    except (StoreError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
