"""Tests for synchronizing the store with durable storage."""

import asyncio

import pytest

from calorie_tracker.domain.errors import PersistenceError
from calorie_tracker.services.persistence import PersistenceSync, SyncState
from calorie_tracker.services.store import CalorieStore
from tests.conftest import InMemoryPreferenceRepository, make_entry


def test_hydrate_loads_goal_and_entries_once() -> None:
    stored = [make_entry(name="Stored")]
    repository = InMemoryPreferenceRepository(goal=1900, entries=stored)
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        await sync.hydrate()
        await sync.hydrate()
        await sync.flush()

    asyncio.run(scenario())

    assert sync.state == SyncState.HYDRATED
    assert store.state.hydrated is True
    assert store.state.daily_goal == 1900
    assert store.state.entries == tuple(stored)
    assert repository.load_calls == 1
    assert repository.save_count == 0


def test_mutations_during_loading_are_not_persisted() -> None:
    repository = InMemoryPreferenceRepository(goal=2100, entries=[make_entry()])
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        repository.load_gate = asyncio.Event()
        load = asyncio.create_task(sync.hydrate())
        await asyncio.sleep(0)
        assert sync.state == SyncState.LOADING

        store.set_goal(1500)
        store.add_entry(make_entry(name="Early"))
        await asyncio.sleep(0)
        assert repository.save_count == 0

        repository.load_gate.set()
        await load
        await sync.flush()

    asyncio.run(scenario())

    assert repository.save_count == 0
    assert store.state.daily_goal == 2100


def test_first_write_after_hydration_carries_full_snapshot() -> None:
    stored = make_entry(name="Stored")
    repository = InMemoryPreferenceRepository(goal=2000, entries=[stored])
    store = CalorieStore()
    sync = PersistenceSync(store, repository)
    added = make_entry(name="Added")

    async def scenario() -> None:
        await sync.hydrate()
        store.add_entry(added)
        await sync.flush()

    asyncio.run(scenario())

    assert repository.saved_goals == [2000]
    assert repository.saved_entries == [[added, stored]]


def test_every_mutation_kind_triggers_a_save() -> None:
    repository = InMemoryPreferenceRepository()
    store = CalorieStore()
    sync = PersistenceSync(store, repository)
    entry = make_entry()

    async def scenario() -> None:
        await sync.hydrate()
        store.set_goal(1700)
        store.add_entry(entry)
        store.update_entry(make_entry(calories=350, entry_id=entry.id))
        store.remove_entry(entry.id)
        store.replace_entries([make_entry(name="Bulk")])
        await sync.flush()

    asyncio.run(scenario())

    assert repository.save_count == 5
    assert repository.goal == 1700
    assert [item.name for item in repository.entries] == ["Bulk"]


def test_saves_are_written_in_mutation_order() -> None:
    repository = InMemoryPreferenceRepository()
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        await sync.hydrate()
        for goal in (1500, 1600, 1700, 1800):
            store.set_goal(goal)
        await sync.flush()

    asyncio.run(scenario())

    assert repository.saved_goals == [1500, 1600, 1700, 1800]
    assert repository.goal == 1800


def test_load_failure_keeps_loading_and_can_retry() -> None:
    repository = InMemoryPreferenceRepository(goal=1850, fail_loads=1)
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        with pytest.raises(PersistenceError):
            await sync.hydrate()
        assert sync.state == SyncState.LOADING
        assert store.state.hydrated is False

        store.set_goal(1200)
        await sync.flush()
        assert repository.save_count == 0

        await sync.hydrate()

    asyncio.run(scenario())

    assert sync.state == SyncState.HYDRATED
    assert store.state.daily_goal == 1850


@pytest.mark.parametrize("stored_goal", [0, -5])
def test_non_positive_stored_goal_is_a_load_failure(stored_goal: int) -> None:
    repository = InMemoryPreferenceRepository(goal=stored_goal)
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        with pytest.raises(PersistenceError):
            await sync.hydrate()
        assert sync.state == SyncState.LOADING
        assert store.state.hydrated is False
        assert store.state.daily_goal == 2400

        repository.goal = 1750
        await sync.hydrate()

    asyncio.run(scenario())

    assert sync.state == SyncState.HYDRATED
    assert store.state.daily_goal == 1750


def test_save_failure_keeps_in_memory_state() -> None:
    repository = InMemoryPreferenceRepository()
    store = CalorieStore()
    sync = PersistenceSync(store, repository)
    entry = make_entry()

    async def scenario() -> None:
        await sync.hydrate()
        repository.fail_saves = True
        store.add_entry(entry)
        await sync.flush()
        assert sync.last_save_error is not None

        repository.fail_saves = False
        store.set_goal(2222)
        await sync.flush()

    asyncio.run(scenario())

    assert store.state.entries == (entry,)
    assert sync.last_save_error is None
    assert repository.entries == [entry]
    assert repository.goal == 2222


def test_close_stops_observing_store() -> None:
    repository = InMemoryPreferenceRepository()
    store = CalorieStore()
    sync = PersistenceSync(store, repository)

    async def scenario() -> None:
        await sync.hydrate()
        sync.close()
        store.set_goal(1234)
        await sync.flush()

    asyncio.run(scenario())

    assert repository.save_count == 0


def test_mutation_outside_event_loop_is_saved_on_flush() -> None:
    repository = InMemoryPreferenceRepository()
    store = CalorieStore()
    sync = PersistenceSync(store, repository)
    seen: list[int] = []
    store.subscribe(lambda change: seen.append(len(change.current.entries)))
    entry = make_entry()

    asyncio.run(sync.hydrate())
    store.add_entry(entry)
    store.set_goal(1950)

    assert store.state.entries == (entry,)
    assert seen[-2:] == [1, 1]
    assert repository.save_count == 0

    asyncio.run(sync.flush())

    assert repository.save_count == 1
    assert repository.entries == [entry]
    assert repository.goal == 1950
