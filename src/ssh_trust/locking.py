"""Cross-process advisory lock guarding the known_hosts store."""
from __future__ import annotations

import contextlib
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import portalocker
import structlog

from .errors import LockIOError, LockTimeout

DEFAULT_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.25

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class StoreLock:
    path: Path
    pid: int
    timeout: float
    waited: float


@contextlib.contextmanager
def acquire(
    lock_path: Path,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[StoreLock]:
    """Hold an exclusive lock on ``lock_path`` for the duration of the block.

    Attempts are non-blocking and retried every ``poll_interval`` seconds until
    ``timeout`` elapses, after which ``LockTimeout`` is raised. The owning PID is
    written into the lock file while it is held. The lock is released when the
    block exits, whichever way it exits.
    """

    lock = portalocker.Lock(
        str(lock_path),
        mode="a",
        timeout=timeout,
        check_interval=poll_interval,
        fail_when_locked=False,
        flags=portalocker.LockFlags.EXCLUSIVE | portalocker.LockFlags.NON_BLOCKING,
    )
    started = time.monotonic()
    try:
        handle = lock.acquire()
    except portalocker.exceptions.LockException as exc:
        logger.warning("lock.timeout", path=str(lock_path), timeout=timeout)
        raise LockTimeout(lock_path, timeout) from exc
    except OSError as exc:
        logger.warning("lock.io_error", path=str(lock_path), error=str(exc))
        raise LockIOError(lock_path, exc) from exc

    held = StoreLock(path=lock_path, pid=os.getpid(), timeout=timeout, waited=time.monotonic() - started)
    try:
        try:
            handle.seek(0)
            handle.truncate()
            handle.write(f"{held.pid}\n")
            handle.flush()
        except OSError as exc:
            raise LockIOError(lock_path, exc) from exc
        logger.debug("lock.acquired", path=str(lock_path), pid=held.pid, waited=round(held.waited, 3))
        yield held
    finally:
        lock.release()
        logger.debug("lock.released", path=str(lock_path), pid=held.pid)


__all__ = ["DEFAULT_POLL_INTERVAL", "DEFAULT_TIMEOUT", "StoreLock", "acquire"]
