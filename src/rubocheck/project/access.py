"""Read-scoped filesystem access.

Marker-file probes run inside a read action so hosts that guard their file
index with a lock can share it with inspection threads.
"""

import threading
from collections.abc import Callable
from typing import Protocol, TypeVar

T = TypeVar("T")


class ReadAccess(Protocol):
    """Capability for running a callable under the host's read scope."""

    def run_read(self, action: Callable[[], T]) -> T: ...


class DirectReadAccess:
    """Runs read actions immediately without any locking."""

    def run_read(self, action: Callable[[], T]) -> T:
        return action()


class LockedReadAccess:
    """Runs read actions while holding a shared re-entrant lock."""

    def __init__(self, lock: "threading.RLock | None" = None) -> None:
        self.lock = lock or threading.RLock()

    def run_read(self, action: Callable[[], T]) -> T:
        with self.lock:
            return action()
