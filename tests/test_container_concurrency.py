"""Tests for interleaved store responses."""

import asyncio
from decimal import Decimal

import pytest

from recordview.domain.container import EntityStateContainer
from recordview.domain.errors import MutationError, RecordNotFoundError
from recordview.domain.schemas import EXPENSES


async def settle():
    """Let every ready task run until it blocks again."""
    for _ in range(5):
        await asyncio.sleep(0)


def ids(records):
    return [record.id for record in records]


@pytest.fixture
def scripted_container(scripted_store):
    return EntityStateContainer(scripted_store, EXPENSES, scope=1)


async def loaded(container, store, records):
    task = asyncio.create_task(container.load())
    await settle()
    store.pending.pop().resolve(records)
    await task


BASE = [
    {"id": 1, "userId": 1, "name": "A", "amount": 10, "date": "2024-01-01"},
    {"id": 2, "userId": 1, "name": "B", "amount": 20, "date": "2024-01-02"},
]


def test_superseded_load_response_is_discarded(scripted_container, scripted_store):
    async def scenario():
        first = asyncio.create_task(scripted_container.load())
        await settle()
        second = asyncio.create_task(scripted_container.load())
        await settle()
        old_call, new_call = scripted_store.pending

        new_call.resolve([{"id": 2, "userId": 1, "amount": 20}])
        await second
        old_call.resolve([{"id": 1, "userId": 1, "amount": 10}])
        await first

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [2]
    assert scripted_container.is_loading is False


def test_superseded_load_failure_is_ignored(scripted_container, scripted_store):
    async def scenario():
        first = asyncio.create_task(scripted_container.load())
        await settle()
        second = asyncio.create_task(scripted_container.load())
        await settle()
        old_call, new_call = scripted_store.pending

        new_call.resolve(BASE)
        await second
        old_call.reject(ConnectionError("timeout"))
        await first

    asyncio.run(scenario())
    assert scripted_container.error is None
    assert ids(scripted_container.records) == [1, 2]


def test_loading_stays_true_until_latest_load(scripted_container, scripted_store):
    async def scenario():
        first = asyncio.create_task(scripted_container.load())
        await settle()
        second = asyncio.create_task(scripted_container.load())
        await settle()
        old_call, new_call = scripted_store.pending

        old_call.resolve(BASE)
        await first
        assert scripted_container.is_loading is True
        new_call.resolve(BASE)
        await second

    asyncio.run(scenario())
    assert scripted_container.is_loading is False


def test_concurrent_mutations_apply_in_resolution_order(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)

        update = asyncio.create_task(scripted_container.update(1, {"name": "A2", "amount": 15}))
        remove = asyncio.create_task(scripted_container.remove(2))
        await settle()
        assert scripted_container.state.pending_mutations == 2
        update_call, delete_call = scripted_store.pending

        delete_call.resolve(None)
        await remove
        update_call.resolve({"id": 1, "userId": 1, "name": "A2", "amount": 15})
        await update

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [1]
    assert scripted_container.records[0].amount == Decimal(15)
    assert scripted_container.state.pending_mutations == 0


def test_older_update_of_same_record_is_discarded(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)

        first = asyncio.create_task(scripted_container.update(1, {"name": "first", "amount": 11}))
        await settle()
        second = asyncio.create_task(scripted_container.update(1, {"name": "second", "amount": 12}))
        await settle()
        first_call, second_call = scripted_store.pending

        second_call.resolve({"id": 1, "userId": 1, "name": "second", "amount": 12})
        await second
        first_call.resolve({"id": 1, "userId": 1, "name": "first", "amount": 11})
        returned = await first
        return returned

    returned = asyncio.run(scenario())
    assert returned.get("name") == "first"
    assert scripted_container.records[0].get("name") == "second"


def test_update_resolving_after_delete_does_not_resurrect(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)

        update = asyncio.create_task(scripted_container.update(1, {"name": "A2", "amount": 15}))
        await settle()
        (update_call,) = scripted_store.pending
        scripted_store.pending.clear()

        reload = asyncio.create_task(scripted_container.load())
        await settle()
        scripted_store.pending.pop().resolve([BASE[1]])
        await reload

        update_call.resolve({"id": 1, "userId": 1, "name": "A2", "amount": 15})
        await update

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [2]


def test_failed_mutation_while_another_succeeds(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)

        update = asyncio.create_task(scripted_container.update(1, {"name": "A2", "amount": 15}))
        remove = asyncio.create_task(scripted_container.remove(2))
        await settle()
        update_call, delete_call = scripted_store.pending

        update_call.reject(ConnectionError("reset by peer"))
        with pytest.raises(MutationError):
            await update
        delete_call.resolve(None)
        await remove

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [1]
    assert scripted_container.records[0].amount == Decimal(10)


def test_scope_change_discards_in_flight_responses(scripted_container, scripted_store):
    async def scenario():
        load = asyncio.create_task(scripted_container.load())
        await settle()
        create_task = asyncio.create_task(scripted_container.create({"name": "C", "amount": 5}))
        await settle()
        load_call, create_call = scripted_store.pending

        scripted_container.set_scope(2)
        load_call.resolve(BASE)
        await load
        create_call.resolve({"id": 7, "userId": 1, "name": "C", "amount": 5})
        await create_task

    asyncio.run(scenario())
    assert scripted_container.records == ()
    assert scripted_container.scope == 2
    assert scripted_container.state.pending_mutations == 0


def test_version_increases_with_each_reconciliation(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)
        after_load = scripted_container.state.version

        remove = asyncio.create_task(scripted_container.remove(2))
        await settle()
        scripted_store.pending.pop().resolve(None)
        await remove
        return after_load

    after_load = asyncio.run(scenario())
    assert after_load == 1
    assert scripted_container.state.version == 2


def test_confirmed_delete_applies_despite_pending_update(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)
        await scripted_container.select(1)

        remove = asyncio.create_task(scripted_container.remove(1))
        await settle()
        update = asyncio.create_task(scripted_container.update(1, {"name": "A2", "amount": 15}))
        await settle()
        delete_call, update_call = scripted_store.pending

        delete_call.resolve(None)
        await remove
        update_call.reject(RecordNotFoundError("Record 1 not found"))
        with pytest.raises(MutationError):
            await update

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [2]
    assert scripted_container.selected is None


def test_update_resolving_after_confirmed_delete_is_discarded(scripted_container, scripted_store):
    async def scenario():
        await loaded(scripted_container, scripted_store, BASE)

        remove = asyncio.create_task(scripted_container.remove(1))
        await settle()
        update = asyncio.create_task(scripted_container.update(1, {"name": "A2", "amount": 15}))
        await settle()
        delete_call, update_call = scripted_store.pending

        delete_call.resolve(None)
        await remove
        update_call.resolve({"id": 1, "userId": 1, "name": "A2", "amount": 15})
        await update

    asyncio.run(scenario())
    assert ids(scripted_container.records) == [2]
