#!/usr/bin/env python3
"""
Unit tests for MatchCoordinator - state machine, deduplication and version
supersession.
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.cache import CacheState, MatchCoordinator

WAIT_SECONDS = 5


class TestCoordinatorStates(unittest.TestCase):
    """Single-threaded state transitions."""

    def setUp(self):
        self.coordinator = MatchCoordinator()

    def test_empty_then_ready(self):
        self.assertEqual(self.coordinator.state("vac"), CacheState.EMPTY)
        value = self.coordinator.get_or_compute("vac", 1, lambda: ["result"])
        self.assertEqual(value, ["result"])
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)
        self.assertEqual(self.coordinator.version("vac"), 1)

    def test_ready_returns_without_recompute(self):
        calls = []

        def compute():
            calls.append(1)
            return "v1"

        self.coordinator.get_or_compute("vac", 1, compute)
        self.coordinator.get_or_compute("vac", 1, compute)
        self.assertEqual(len(calls), 1)

    def test_force_recomputes(self):
        results = iter(["first", "second"])
        self.coordinator.get_or_compute("vac", 1, lambda: next(results))
        value = self.coordinator.get_or_compute("vac", 1, lambda: next(results), force=True)
        self.assertEqual(value, "second")
        self.assertEqual(self.coordinator.peek("vac"), "second")

    def test_new_version_recomputes(self):
        self.coordinator.get_or_compute("vac", 1, lambda: "v1")
        self.assertEqual(self.coordinator.get_or_compute("vac", 2, lambda: "v2"), "v2")
        self.assertEqual(self.coordinator.version("vac"), 2)

    def test_older_version_returned_but_not_stored(self):
        self.coordinator.get_or_compute("vac", 3, lambda: "v3")
        self.assertEqual(self.coordinator.get_or_compute("vac", 2, lambda: "v2"), "v2")
        self.assertEqual(self.coordinator.peek("vac"), "v3")
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)

    def test_failure_returns_to_empty_with_error(self):
        self.coordinator.get_or_compute("vac", 1, lambda: "v1")

        def boom():
            raise RuntimeError("scoring crashed")

        with self.assertRaises(RuntimeError):
            self.coordinator.get_or_compute("vac", 2, boom)

        self.assertEqual(self.coordinator.state("vac"), CacheState.EMPTY)
        self.assertIsNone(self.coordinator.peek("vac"))
        self.assertIsInstance(self.coordinator.last_error("vac"), RuntimeError)

        self.coordinator.get_or_compute("vac", 2, lambda: "v2")
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)
        self.assertIsNone(self.coordinator.last_error("vac"))

    def test_invalidate_evict_clear(self):
        self.coordinator.get_or_compute("a", 1, lambda: "a1")
        self.coordinator.get_or_compute("b", 1, lambda: "b1")

        self.assertTrue(self.coordinator.invalidate("a"))
        self.assertEqual(self.coordinator.state("a"), CacheState.EMPTY)
        self.assertFalse(self.coordinator.invalidate("a"))
        self.assertFalse(self.coordinator.invalidate("missing"))
        self.assertEqual(self.coordinator.get_or_compute("a", 1, lambda: "a1-again"), "a1-again")

        self.assertTrue(self.coordinator.evict("b"))
        self.assertNotIn("b", self.coordinator.keys())
        self.assertFalse(self.coordinator.evict("b"))

        self.coordinator.clear()
        self.assertEqual(self.coordinator.keys(), [])


@pytest.mark.concurrency
class TestCoordinatorConcurrency(unittest.TestCase):
    """Threaded behaviour: one computation per (key, version), highest version wins."""

    def setUp(self):
        self.coordinator = MatchCoordinator()

    def test_concurrent_callers_share_one_computation(self):
        calls = []
        started = threading.Event()
        release = threading.Event()

        def compute():
            calls.append(threading.get_ident())
            started.set()
            release.wait(WAIT_SECONDS)
            return "shared"

        with ThreadPoolExecutor(max_workers=8) as executor:
            first = executor.submit(self.coordinator.get_or_compute, "vac", 1, compute)
            self.assertTrue(started.wait(WAIT_SECONDS))
            self.assertEqual(self.coordinator.state("vac"), CacheState.COMPUTING)
            others = [executor.submit(self.coordinator.get_or_compute, "vac", 1, compute) for _ in range(7)]
            release.set()
            results = [first.result(WAIT_SECONDS)] + [f.result(WAIT_SECONDS) for f in others]

        self.assertEqual(len(calls), 1)
        self.assertEqual(results, ["shared"] * 8)
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)

    def test_waiters_see_the_failure(self):
        started = threading.Event()
        release = threading.Event()

        def compute():
            started.set()
            release.wait(WAIT_SECONDS)
            raise ValueError("bad requirement set")

        with ThreadPoolExecutor(max_workers=2) as executor:
            owner = executor.submit(self.coordinator.get_or_compute, "vac", 1, compute)
            self.assertTrue(started.wait(WAIT_SECONDS))
            waiter = executor.submit(self.coordinator.get_or_compute, "vac", 1, compute)
            release.set()
            with self.assertRaises(ValueError):
                owner.result(WAIT_SECONDS)
            with self.assertRaises(ValueError):
                waiter.result(WAIT_SECONDS)

        self.assertEqual(self.coordinator.state("vac"), CacheState.EMPTY)

    def _race(self, finish_first):
        """Start v1, request v2 while v1 runs, and finish them in the given order."""
        gates = {1: threading.Event(), 2: threading.Event()}
        started = {1: threading.Event(), 2: threading.Event()}

        def computation(version):
            def compute():
                started[version].set()
                gates[version].wait(WAIT_SECONDS)
                return f"v{version}"
            return compute

        with ThreadPoolExecutor(max_workers=2) as executor:
            v1 = executor.submit(self.coordinator.get_or_compute, "vac", 1, computation(1))
            self.assertTrue(started[1].wait(WAIT_SECONDS))
            v2 = executor.submit(self.coordinator.get_or_compute, "vac", 2, computation(2))
            self.assertTrue(started[2].wait(WAIT_SECONDS))

            first, second = (1, 2) if finish_first == 1 else (2, 1)
            futures = {1: v1, 2: v2}
            gates[first].set()
            self.assertEqual(futures[first].result(WAIT_SECONDS), f"v{first}")
            gates[second].set()
            self.assertEqual(futures[second].result(WAIT_SECONDS), f"v{second}")

    def test_version_supersession_old_finishes_first(self):
        self._race(finish_first=1)
        self.assertEqual(self.coordinator.peek("vac"), "v2")
        self.assertEqual(self.coordinator.version("vac"), 2)
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)

    def test_version_supersession_new_finishes_first(self):
        self._race(finish_first=2)
        self.assertEqual(self.coordinator.peek("vac"), "v2")
        self.assertEqual(self.coordinator.version("vac"), 2)
        self.assertEqual(self.coordinator.state("vac"), CacheState.READY)

    def test_invalidate_discards_in_flight_result(self):
        started = threading.Event()
        release = threading.Event()

        def compute():
            started.set()
            release.wait(WAIT_SECONDS)
            return "stale"

        with ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(self.coordinator.get_or_compute, "vac", 1, compute)
            self.assertTrue(started.wait(WAIT_SECONDS))
            self.coordinator.invalidate("vac")
            release.set()
            self.assertEqual(future.result(WAIT_SECONDS), "stale")

        self.assertIsNone(self.coordinator.peek("vac"))
        self.assertEqual(self.coordinator.state("vac"), CacheState.EMPTY)

    def test_different_keys_compute_independently(self):
        calls = []
        lock = threading.Lock()

        def compute(key):
            def run():
                with lock:
                    calls.append(key)
                return key
            return run

        with ThreadPoolExecutor(max_workers=4) as executor:
            futures = [executor.submit(self.coordinator.get_or_compute, k, 1, compute(k)) for k in ("a", "b", "c", "d")]
            results = sorted(f.result(WAIT_SECONDS) for f in futures)

        self.assertEqual(results, ["a", "b", "c", "d"])
        self.assertEqual(sorted(calls), ["a", "b", "c", "d"])


if __name__ == '__main__':
    unittest.main()
