# Overview: Row locking, write-transaction and retry helpers shared by the stock and sales services.

from __future__ import annotations

import logging
import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


logger = logging.getLogger(__name__)


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    begin_write_transaction() covers SQLite.

    populate_existing() overwrites objects already in the session's identity
    map with the locked row; without it a caller holding the entity would
    check and write a stale copy.
    """
    return query.with_for_update().populate_existing()


def begin_write_transaction() -> None:
    """
    Open the unit of work holding the database write lock (SQLite only).

    SQLite has no row locks; BEGIN IMMEDIATE serializes writers so a stock
    check and the decrement that follows it cannot interleave with another
    writer. Must run before the first statement of the unit of work.
    """
    if db.engine.dialect.name != "sqlite":
        return
    dbapi_connection = db.session.connection().connection.driver_connection
    if not dbapi_connection.in_transaction:
        db.session.execute(text("BEGIN IMMEDIATE"))


def run_with_retry(func, *, attempts: int | None = None, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, locks) and StaleDataError
    (optimistic locking conflicts). Any other exception rolls the session
    back and propagates unchanged, so a failed operation leaves no writes.
    """
    if attempts is None:
        attempts = current_app.config.get("SERVICE_RETRY_ATTEMPTS", 3)
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            logger.warning(
                "Transient database failure (attempt %s/%s): %s",
                attempt + 1,
                attempts,
                exc.__class__.__name__,
            )
            time.sleep(backoff_base * (2 ** attempt))
        except Exception:
            db.session.rollback()
            raise
