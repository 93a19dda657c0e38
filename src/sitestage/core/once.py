"""Process-wide init-once state keyed by resource identity."""

import threading
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

T = TypeVar("T")


class InitOnce(Generic[T]):
    """Run an initializer at most once per resource key.

    Values of successful initializations are kept for the lifetime of the
    guard. A failing initializer records nothing, so the next call for
    the same key tries again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._values: dict[Hashable, T] = {}

    def get(self, key: Hashable, init: Callable[[], T]) -> T:
        """Get the value for key, initializing it on first use.

        Args:
            key: Resource identity (e.g., catalog name or script URL)
            init: Initializer producing the value

        Returns:
            The value produced by the first successful init for key
        """
        try:
            return self._values[key]
        except KeyError:
            pass

        # One lock per key; the global lock only guards the lock table
        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        with key_lock:
            if key not in self._values:
                self._values[key] = init()
            return self._values[key]

    def reset(self, key: Hashable | None = None) -> None:
        """Forget one key, or everything when key is None."""
        with self._lock:
            if key is None:
                self._values.clear()
            else:
                self._values.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
