"""Shared pytest fixtures for recordview tests."""

import asyncio
import os
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from recordview.domain.container import EntityStateContainer
from recordview.domain.entities import Record
from recordview.domain.errors import StoreError
from recordview.domain.schemas import EXPENSES
from recordview.store.factories import create_sqlite_store
from recordview.store.memory import InMemoryRecordStore


SAMPLE_EXPENSES = [
    {"id": 1, "userId": 1, "name": "Groceries", "category": "Food", "amount": 50, "date": "2024-01-01"},
    {"id": 2, "userId": 1, "name": "Flight", "category": "Travel", "amount": 100, "date": "2024-02-01"},
    {"id": 3, "userId": 1, "name": "Dinner out", "category": "Food", "amount": "25.50", "date": "2024-03-15"},
    {"id": 4, "userId": 2, "name": "Hotel", "category": "Travel", "amount": 300, "date": "2024-01-20"},
]


class SpyStore(InMemoryRecordStore):
    """In-memory store that records calls and fails on demand."""

    def __init__(self, collection="expenses", records=None):
        super().__init__(collection, records)
        self.calls = []
        self.fail_on = set()
        self.error = StoreError("store unavailable")

    async def _spy(self, method, *args):
        self.calls.append((method, args))
        if method in self.fail_on:
            raise self.error

    async def list_records(self, params=None):
        await self._spy("list_records", params)
        return await super().list_records(params)

    async def create_record(self, fields):
        await self._spy("create_record", fields)
        return await super().create_record(fields)

    async def update_record(self, record_id, fields):
        await self._spy("update_record", record_id, fields)
        return await super().update_record(record_id, fields)

    async def delete_record(self, record_id):
        await self._spy("delete_record", record_id)
        return await super().delete_record(record_id)

    async def get_record(self, record_id):
        await self._spy("get_record", record_id)
        return await super().get_record(record_id)

    def methods_called(self):
        return [method for method, _ in self.calls]


class ScriptedStore(InMemoryRecordStore):
    """Store whose calls stay pending until the test resolves them.

    Each call appends a ``PendingCall``; tests resolve or reject calls in
    any order to reproduce interleaved responses.
    """

    def __init__(self, collection="expenses"):
        super().__init__(collection)
        self.pending = []

    async def _wait(self, method, *args):
        call = PendingCall(method, args, asyncio.get_running_loop().create_future())
        self.pending.append(call)
        return await call.future

    async def list_records(self, params=None):
        return await self._wait("list_records", params)

    async def create_record(self, fields):
        return await self._wait("create_record", fields)

    async def update_record(self, record_id, fields):
        return await self._wait("update_record", record_id, fields)

    async def delete_record(self, record_id):
        return await self._wait("delete_record", record_id)

    async def get_record(self, record_id):
        return await self._wait("get_record", record_id)


class PendingCall:
    def __init__(self, method, args, future):
        self.method = method
        self.args = args
        self.future = future

    def resolve(self, value=None):
        self.future.set_result(value)

    def reject(self, error):
        self.future.set_exception(error)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield db_path
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def temp_store(temp_db_path):
    """Create a SQLite-backed expenses store in a temporary database."""
    store = create_sqlite_store("expenses", database_path=temp_db_path)
    store.database_path = temp_db_path
    store.connect()
    yield store
    store.disconnect()


@pytest.fixture
def sample_expenses():
    return [dict(record) for record in SAMPLE_EXPENSES]


@pytest.fixture
def spy_store(sample_expenses):
    """In-memory expenses store seeded with sample records."""
    return SpyStore("expenses", sample_expenses)


@pytest.fixture
def scripted_store():
    return ScriptedStore("expenses")


@pytest.fixture
def container(spy_store):
    """Expense container scoped to user 1."""
    return EntityStateContainer(spy_store, EXPENSES, scope=1)


@pytest.fixture
def loaded_container(container):
    """Expense container with user 1's records loaded."""
    asyncio.run(container.load())
    return container


@pytest.fixture
def make_record():
    """Build a Record from keyword fields."""

    def _make(id, amount=0, **fields):
        return Record(id=id, amount=Decimal(str(amount)), fields=fields)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
