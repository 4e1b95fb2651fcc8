"""Record store layer for recordview."""

from recordview.store.base import RecordStore
from recordview.store.factories import create_sqlite_store, create_store
from recordview.store.rest import RestRecordStore
from recordview.store.memory import InMemoryRecordStore
from recordview.store.sqlalchemy_store import SQLAlchemyRecordStore

__all__ = [
    "RecordStore",
    "RestRecordStore",
    "InMemoryRecordStore",
    "SQLAlchemyRecordStore",
    "create_sqlite_store",
    "create_store",
]
