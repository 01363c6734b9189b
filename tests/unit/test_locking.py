from __future__ import annotations

import os
from pathlib import Path

import portalocker
import pytest

from ssh_trust.errors import LockIOError, LockTimeout
from ssh_trust.locking import acquire


def test_acquire_records_owner_pid(tmp_path: Path) -> None:
    lock_path = tmp_path / "known_hosts.lock"

    with acquire(lock_path, timeout=1.0) as lock:
        assert lock.pid == os.getpid()
        assert lock.path == lock_path
        assert lock_path.read_text(encoding="utf-8").strip() == str(os.getpid())


def test_acquire_times_out_while_held_elsewhere(tmp_path: Path) -> None:
    lock_path = tmp_path / "known_hosts.lock"

    with portalocker.Lock(str(lock_path), mode="a", timeout=1):
        with pytest.raises(LockTimeout) as excinfo:
            with acquire(lock_path, timeout=0.2, poll_interval=0.05):
                pytest.fail("lock should not be granted")

    assert excinfo.value.lock_path == lock_path
    assert excinfo.value.timeout == 0.2


def test_lock_is_released_on_normal_exit(tmp_path: Path) -> None:
    lock_path = tmp_path / "known_hosts.lock"

    with acquire(lock_path, timeout=1.0):
        pass

    with acquire(lock_path, timeout=0.2, poll_interval=0.05) as again:
        assert again.pid == os.getpid()


def test_lock_is_released_when_block_raises(tmp_path: Path) -> None:
    lock_path = tmp_path / "known_hosts.lock"

    with pytest.raises(RuntimeError):
        with acquire(lock_path, timeout=1.0):
            raise RuntimeError("boom")

    with acquire(lock_path, timeout=0.2, poll_interval=0.05):
        pass


def test_nested_acquire_on_same_path_is_exclusive(tmp_path: Path) -> None:
    lock_path = tmp_path / "known_hosts.lock"

    with acquire(lock_path, timeout=1.0):
        with pytest.raises(LockTimeout):
            with acquire(lock_path, timeout=0.2, poll_interval=0.05):
                pass


def test_missing_directory_raises_lock_io_error(tmp_path: Path) -> None:
    lock_path = tmp_path / "missing" / "known_hosts.lock"

    with pytest.raises(LockIOError) as excinfo:
        with acquire(lock_path, timeout=0.2):
            pass

    assert isinstance(excinfo.value.error, OSError)
