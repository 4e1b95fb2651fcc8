"""Store factory functions for creating record store instances."""

import os
from pathlib import Path
from typing import Optional

from recordview.store.base import RecordStore
from recordview.store.rest import RestRecordStore
from recordview.store.memory import InMemoryRecordStore
from recordview.store.sqlalchemy_store import SQLAlchemyRecordStore

STORE_ENV_VAR = "RECORDVIEW_STORE"


def create_sqlite_store(collection: str, database_path: Optional[str] = None) -> SQLAlchemyRecordStore:
    """Create a SQLite-backed record store.

    Args:
        collection: Collection the store serves
        database_path: Path to SQLite database file. If None, defaults to
            ~/.recordview/recordview.db

    Returns:
        SQLAlchemyRecordStore instance configured for SQLite
    """
    if database_path is None:
        db_dir = Path.home() / ".recordview"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "recordview.db")

    return SQLAlchemyRecordStore(f"sqlite:///{database_path}", collection)


def create_store(target: Optional[str], collection: str) -> RecordStore:
    """Create a record store from a target string.

    Args:
        target: ``http(s)://...`` for a REST server, ``memory:`` for an
            in-memory store, a SQLAlchemy URL, or a SQLite file path. If
            None, checks the RECORDVIEW_STORE environment variable, then
            falls back to the default SQLite database.
        collection: Collection the store serves

    Returns:
        RecordStore instance
    """
    if target is None:
        target = os.environ.get(STORE_ENV_VAR)

    if target is None:
        return create_sqlite_store(collection)
    if target.startswith(("http://", "https://")):
        return RestRecordStore(target, collection)
    if target == "memory:":
        return InMemoryRecordStore(collection)
    if "://" in target:
        return SQLAlchemyRecordStore(target, collection)
    return create_sqlite_store(collection, database_path=target)
