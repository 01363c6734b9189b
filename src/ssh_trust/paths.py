"""Filesystem path helpers: config directory and the known_hosts store."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog
from platformdirs import PlatformDirs

from .errors import HomeResolutionFailed

_APP_NAME = "ssh-trust"

SSH_DIR_MODE = 0o700
KNOWN_HOSTS_MODE = 0o644

logger = structlog.get_logger(__name__)


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    if sys.platform in ("win32", "darwin"):
        dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=True)
    else:
        dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=False)
    return Path(dirs.user_config_path)


@dataclass(frozen=True, slots=True)
class StorePaths:
    ssh_dir: Path
    known_hosts: Path

    @property
    def lock_file(self) -> Path:
        return self.known_hosts.with_name(self.known_hosts.name + ".lock")


def home_dir(home: Path | str | None = None) -> Path:
    if home is not None:
        return Path(home).expanduser()
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        logger.warning("store.home_unresolved", error=str(exc))
        raise HomeResolutionFailed(f"Could not find the current user's home directory ({exc})") from exc


def _create_empty(path: Path) -> None:
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, KNOWN_HOSTS_MODE)
    except FileExistsError:
        return
    os.close(fd)


def locate_store(home: Path | str | None = None) -> StorePaths:
    """Resolve ``<home>/.ssh/known_hosts``, creating it empty if missing.

    Creation is best effort: a failure is logged and the paths are still
    returned, so that the open in the updater reports the real problem.
    """

    ssh_dir = home_dir(home) / ".ssh"
    paths = StorePaths(ssh_dir=ssh_dir, known_hosts=ssh_dir / "known_hosts")

    if not paths.known_hosts.exists():
        try:
            ssh_dir.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
            _create_empty(paths.known_hosts)
        except OSError as exc:
            logger.warning("store.create_failed", path=str(paths.known_hosts), error=str(exc))
        else:
            logger.debug("store.created", path=str(paths.known_hosts))

    return paths


__all__ = ["KNOWN_HOSTS_MODE", "SSH_DIR_MODE", "StorePaths", "home_dir", "locate_store", "runtime_config_dir"]
