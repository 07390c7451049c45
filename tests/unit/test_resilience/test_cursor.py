"""Tests for atomic counters and backend cursors."""

import threading

import pytest

from comm_relay.resilience.failover import AtomicCounter, BackendCursor


class TestAtomicCounter:
    """Test atomic counter primitives."""

    def test_load_store_add(self):
        """Test basic operations."""
        counter = AtomicCounter()
        assert counter.load() == 0
        counter.store(5)
        assert counter.add(2) == 7
        assert counter.load() == 7

    def test_compare_and_swap(self):
        """Test compare-and-swap only succeeds on the expected value."""
        counter = AtomicCounter(3)
        assert not counter.compare_and_swap(2, 10)
        assert counter.load() == 3
        assert counter.compare_and_swap(3, 10)
        assert counter.load() == 10

    def test_concurrent_adds_are_not_lost(self):
        """Test increments from many threads all land."""
        counter = AtomicCounter()

        def worker():
            for _ in range(1000):
                counter.add(1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter.load() == 8000

    def test_only_one_thread_wins_compare_and_swap(self):
        """Test exactly one of many racing swaps succeeds."""
        counter = AtomicCounter(0)
        barrier = threading.Barrier(8)
        wins = []

        def worker():
            barrier.wait()
            wins.append(counter.compare_and_swap(0, 1))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert wins.count(True) == 1


class TestBackendCursor:
    """Test backend cursor normalization."""

    def test_requires_backends(self):
        """Test a cursor needs at least one position."""
        with pytest.raises(ValueError):
            BackendCursor(0)

    @pytest.mark.parametrize(
        "index,expected",
        [(0, 0), (2, 2), (3, 0), (10, 0), (-1, 0)],
    )
    def test_store_normalizes(self, index, expected):
        """Test out-of-range stores select index 0."""
        cursor = BackendCursor(3)
        cursor.store(index)
        assert cursor.load() == expected

    def test_advance_wraps(self):
        """Test advance moves forward modulo the size."""
        cursor = BackendCursor(3, value=2)
        assert cursor.advance() == 0
        assert cursor.advance() == 1

    def test_compare_and_swap_normalizes_new_value(self):
        """Test swapped-in values stay in range."""
        cursor = BackendCursor(2)
        assert cursor.compare_and_swap(0, 5)
        assert cursor.load() == 0

    def test_single_backend_stays_at_zero(self):
        """Test a one-backend cursor never leaves index 0."""
        cursor = BackendCursor(1)
        assert cursor.advance() == 0
        cursor.store(1)
        assert cursor.load() == 0
