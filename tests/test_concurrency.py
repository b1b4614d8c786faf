from __future__ import annotations

import asyncio
import threading

import pytest

from pyobskv import ABSENT, Mutation, MutationKind, ObservableStore

_THREADS = 8
_KEYS_PER_THREAD = 200


def _run_in_threads(target: object, count: int = _THREADS) -> None:
    threads = [threading.Thread(target=target, args=(i,)) for i in range(count)]  # type: ignore[arg-type]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_concurrent_writers_are_serialized() -> None:
    store = ObservableStore()
    received: list[Mutation] = []
    active = [False]
    overlaps: list[Mutation] = []

    def observer(mutation: Mutation) -> None:
        if active[0]:
            overlaps.append(mutation)
        active[0] = True
        received.append(mutation)
        active[0] = False

    asyncio.run(store.observe(observer))

    def writer(worker: int) -> None:
        async def write_all() -> None:
            for i in range(_KEYS_PER_THREAD):
                await store.set((worker, i), i)
            for i in range(0, _KEYS_PER_THREAD, 2):
                await store.delete((worker, i))

        asyncio.run(write_all())

    _run_in_threads(writer)

    inserts = [m for m in received if m.kind is MutationKind.INSERT]
    deletes = [m for m in received if m.kind is MutationKind.DELETE]
    assert len(inserts) == _THREADS * _KEYS_PER_THREAD
    assert len(deletes) == _THREADS * _KEYS_PER_THREAD // 2
    assert len(store) == _THREADS * _KEYS_PER_THREAD // 2
    assert overlaps == []


def test_concurrent_updates_to_one_key_form_a_chain() -> None:
    store = ObservableStore()
    received: list[Mutation] = []
    asyncio.run(store.observe(received.append))

    def writer(worker: int) -> None:
        async def write_all() -> None:
            for i in range(_KEYS_PER_THREAD):
                await store.set("shared", (worker, i))

        asyncio.run(write_all())

    _run_in_threads(writer)

    # Each mutation's old value must be the previous mutation's new value.
    assert received[0].old_value is ABSENT
    for previous, current in zip(received, received[1:]):
        assert current.old_value == previous.new_value
    assert asyncio.run(store.get("shared")) == received[-1].new_value


def test_observer_changes_from_other_threads_apply_between_rounds() -> None:
    store = ObservableStore()
    started = threading.Event()
    release = threading.Event()
    late_calls: list[Mutation] = []

    def slow(mutation: Mutation) -> None:
        if mutation.key == "first":
            started.set()
            release.wait(timeout=5)

    def late(mutation: Mutation) -> None:
        late_calls.append(mutation)

    asyncio.run(store.observe(slow))

    writer = threading.Thread(target=lambda: asyncio.run(store.set("first", 1)))
    writer.start()
    assert started.wait(timeout=5)

    registrar = threading.Thread(target=lambda: asyncio.run(store.observe(late)))
    registrar.start()
    release.set()
    writer.join()
    registrar.join()

    asyncio.run(store.set("second", 2))

    assert [m.key for m in late_calls] == ["second"]


@pytest.mark.asyncio
async def test_concurrent_tasks_on_one_loop() -> None:
    store = ObservableStore()
    received: list[Mutation] = []
    await store.observe(received.append)

    await asyncio.gather(*(store.set(i, i * i) for i in range(50)))

    assert len(received) == 50
    assert store.snapshot() == {i: i * i for i in range(50)}
