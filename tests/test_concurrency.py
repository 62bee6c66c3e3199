"""Tests for concurrent forcing of a shared collection."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pyopersist as pp

WORKERS = 8


def test_concurrent_first_force_drains_once() -> None:
    """Test that racing threads trigger a single drain and all see the same value."""
    calls: list[int] = []
    lock = threading.Lock()
    barrier = threading.Barrier(WORKERS)

    def _slow(x: int) -> int:
        with lock:
            calls.append(x)
        time.sleep(0.001)
        return x * 2

    data = pp.LazyCollection.from_range(0, 20).map(_slow)

    def _force(_: int) -> object:
        barrier.wait()
        return data.inner()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(_force, range(WORKERS)))

    assert sorted(calls) == list(range(20))
    assert all(result is results[0] for result in results)
    assert data.to_list() == [x * 2 for x in range(20)]


def test_concurrent_forces_on_shared_one_shot_iterator() -> None:
    """Test that derived collections drained in parallel all see every element."""
    source = pp.LazyCollection.from_iter(iter(range(100)))
    derived = [source.map(lambda x, k=k: x + k) for k in range(WORKERS)]
    barrier = threading.Barrier(WORKERS)

    def _force(coll: pp.LazyCollection[int]) -> list[int]:
        barrier.wait()
        return coll.to_list()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(_force, derived))

    for k, result in enumerate(results):
        assert result == [x + k for x in range(100)]


def test_waiters_retry_after_failed_drain() -> None:
    """Test that a failed drain lets the next caller drain again."""
    attempts: list[int] = []

    def _factory() -> range:
        attempts.append(1)
        if len(attempts) == 1:
            msg = "first attempt fails"
            raise ConnectionError(msg)
        return range(3)

    handle = pp.LazyHandle.pending(pp.FactoryProducer(_factory), pp.VECTOR.adapter)
    data = pp.LazyCollection(handle, pp.VECTOR)
    errors: list[BaseException] = []

    def _force() -> None:
        try:
            data.to_list()
        except pp.UpstreamFault as exc:
            errors.append(exc)

    threads = [threading.Thread(target=_force) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 1
    assert len(attempts) == 2
    assert data.to_list() == [0, 1, 2]
