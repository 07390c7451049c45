"""Atomic integer cells shared by concurrent dispatch calls."""

import threading


class AtomicCounter:
    """Integer cell with atomic load, store, add and compare-and-swap.

    The lock guards only the primitive itself and is never held across an
    await, so concurrent dispatch calls never serialize on it.
    """

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value

    def add(self, delta: int = 1) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value += delta
            return self._value

    def compare_and_swap(self, expected: int, new: int) -> bool:
        """Set the value to ``new`` only if it still equals ``expected``.

        Returns:
            True if this call performed the swap
        """
        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.load()})"


class BackendCursor(AtomicCounter):
    """Index of the preferred backend, always within ``[0, size)``."""

    def __init__(self, size: int, value: int = 0):
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        super().__init__(self._normalize(value))

    def _normalize(self, index: int) -> int:
        if index < 0 or index >= self.size:
            return 0
        return index

    def store(self, value: int) -> None:
        """Store an index; out-of-range values (negative included) become 0."""
        super().store(self._normalize(value))

    def add(self, delta: int = 1) -> int:
        """Move ``delta`` positions forward, wrapping modulo ``size``."""
        with self._lock:
            self._value = (self._value + delta) % self.size
            return self._value

    def advance(self) -> int:
        """Move to the next backend and return its index."""
        return self.add(1)

    def compare_and_swap(self, expected: int, new: int) -> bool:
        return super().compare_and_swap(expected, self._normalize(new))
