"""Host mutual-exclusion locks with a bounded wait.

Acquisition never queues forever: ``try_acquire`` gives up after ``timeout``
seconds and returns False. ``hold`` turns that into LockTimeoutError.
"""

import fcntl
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from loguru import logger

from app.errors import ConfigurationError, LockTimeoutError


class HostLock(Protocol):
    def try_acquire(self, timeout: float) -> bool: ...

    def release(self) -> None: ...


class ThreadLock:
    """Process-wide lock for handlers sharing one interpreter."""

    def __init__(self):
        self._lock = threading.Lock()

    def try_acquire(self, timeout: float) -> bool:
        return self._lock.acquire(timeout=max(timeout, 0))

    def release(self) -> None:
        self._lock.release()


class FileLock:
    """Cross-process lock on an exclusive flock of a lock file."""

    def __init__(self, path: str | Path, poll_interval: float = 0.05):
        self.path = Path(path)
        self.poll_interval = poll_interval
        self._fd: int | None = None
        self._guard = threading.Lock()

    def try_acquire(self, timeout: float) -> bool:
        deadline = time.monotonic() + max(timeout, 0)
        if not self._guard.acquire(timeout=max(timeout, 0)):
            return False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            self._guard.release()
            raise ConfigurationError(f"Cannot open lock file {self.path}: {e}") from e

        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                self._fd = fd
                return True
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    os.close(fd)
                    self._guard.release()
                    return False
                time.sleep(self.poll_interval)

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
            self._guard.release()


@contextmanager
def hold(lock: HostLock, timeout: float) -> Iterator[None]:
    """Hold lock for the block; raise LockTimeoutError if not acquired in time."""
    if not lock.try_acquire(timeout):
        logger.warning("Lock not acquired within {}s", timeout)
        raise LockTimeoutError()
    try:
        yield
    finally:
        lock.release()
