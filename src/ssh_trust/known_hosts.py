"""Idempotent, lock-serialised additions to the user's known_hosts file."""
from __future__ import annotations

import contextlib
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional

import structlog

from .config import AppConfig
from .errors import (
    CommandFailed,
    OpenFailed,
    QueryFailed,
    ScanFailed,
    SshTrustError,
    WriteFailed,
)
from .locking import StoreLock, acquire
from .paths import StorePaths, locate_store
from .shell import Runner, Shell
from .tools import Strategy, resolve_tools_dir, tool_path
from .utils.validation import ensure_host_name

logger = structlog.get_logger(__name__)

# ssh-keygen -F exits 1 without output when the host has no entry.
_KEYGEN_NO_MATCH_STATUS = 1


class AddOutcome(str, Enum):
    ADDED = "ADDED"
    ALREADY_KNOWN = "ALREADY_KNOWN"


def key_lines(scan_output: str) -> list[str]:
    """Return the host key lines of ``ssh-keyscan`` output.

    ssh-keyscan reports progress as ``#`` comments on stderr, which arrive
    interleaved with the keys when output is combined.
    """

    lines = []
    for line in scan_output.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            lines.append(stripped)
    return lines


class KnownHosts:
    """A located known_hosts store, used while its lock is held.

    Instances are normally obtained from :func:`find_known_hosts`, which takes
    the lock first; calling :meth:`add` without the lock gives up the
    serialisation guarantee.
    """

    def __init__(
        self,
        paths: StorePaths,
        runner: Runner,
        config: Optional[AppConfig] = None,
        *,
        lock: Optional[StoreLock] = None,
        platform: str = sys.platform,
        strategies: Optional[list[Strategy]] = None,
    ) -> None:
        self.paths = paths
        self.runner = runner
        self.config = config or AppConfig()
        self.lock = lock
        self.platform = platform
        self.strategies = strategies

    @property
    def path(self) -> Path:
        return self.paths.known_hosts

    def _tools_dir(self) -> Path:
        return resolve_tools_dir(
            self.runner,
            config=self.config.tools,
            platform=self.platform,
            strategies=self.strategies,
        )

    def _query(self, tools_dir: Path, host: str) -> str:
        argv = [tool_path(tools_dir, self.config.tools.keygen, self.platform), "-f", self.path, "-F", host]
        try:
            return self.runner.run(argv)
        except CommandFailed as exc:
            if exc.exit_code == _KEYGEN_NO_MATCH_STATUS and not exc.output:
                return ""
            logger.warning("known_hosts.query_failed", error=str(exc))
            raise QueryFailed(
                f"Could not perform `ssh-keygen` for {host!r} ({exc})", host=host, path=self.path
            ) from exc

    def _scan(self, tools_dir: Path, host: str) -> list[str]:
        argv = [tool_path(tools_dir, self.config.tools.keyscan, self.platform), host]
        try:
            output = self.runner.run(argv)
        except CommandFailed as exc:
            logger.warning("known_hosts.scan_failed", error=str(exc))
            raise ScanFailed(
                f"Could not perform `ssh-keyscan` for {host!r} ({exc})", host=host, path=self.path
            ) from exc

        lines = key_lines(output)
        if not lines:
            logger.warning("known_hosts.scan_empty")
            raise ScanFailed(f"`ssh-keyscan` returned no host keys for {host!r}", host=host, path=self.path)
        return lines

    def add(self, host: str) -> AddOutcome:
        """Ensure ``host`` has an entry in the store, appending one if absent."""

        host = ensure_host_name(host)
        with structlog.contextvars.bound_contextvars(host=host, store=str(self.path)):
            return self._add(host)

    def _add(self, host: str) -> AddOutcome:
        try:
            handle = self.path.open("a", encoding="utf-8", newline="\n")
        except OSError as exc:
            logger.warning("known_hosts.open_failed", error=str(exc))
            raise OpenFailed(f"Could not open {self.path} for appending ({exc})", host=host, path=self.path) from exc

        with handle:
            tools_dir = self._tools_dir()

            if host in self._query(tools_dir, host):
                logger.info("known_hosts.already_present")
                return AddOutcome.ALREADY_KNOWN

            entry = "\n".join(self._scan(tools_dir, host)) + "\n"
            try:
                handle.write(entry)
                handle.flush()
            except OSError as exc:
                logger.error("known_hosts.write_failed", error=str(exc))
                raise WriteFailed(f"Could not write to {self.path} ({exc})", host=host, path=self.path) from exc

        logger.info("known_hosts.added")
        return AddOutcome.ADDED


@contextlib.contextmanager
def find_known_hosts(
    config: Optional[AppConfig] = None,
    *,
    runner: Optional[Runner] = None,
    platform: str = sys.platform,
    strategies: Optional[list[Strategy]] = None,
) -> Iterator[KnownHosts]:
    """Locate the store and hold its lock while the caller adds hosts."""

    config = config or AppConfig()
    paths = locate_store(config.store.home)
    with structlog.contextvars.bound_contextvars(store=str(paths.known_hosts)):
        with acquire(paths.lock_file, config.lock.timeout, config.lock.poll_interval) as lock:
            yield KnownHosts(
                paths,
                runner or Shell(),
                config,
                lock=lock,
                platform=platform,
                strategies=strategies,
            )


def ensure_known_host(
    host: str,
    config: Optional[AppConfig] = None,
    *,
    runner: Optional[Runner] = None,
    platform: str = sys.platform,
    strategies: Optional[list[Strategy]] = None,
) -> AddOutcome:
    with find_known_hosts(config, runner=runner, platform=platform, strategies=strategies) as known_hosts:
        return known_hosts.add(host)


@dataclass
class BatchResult:
    outcomes: dict[str, AddOutcome] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def ensure_known_hosts(
    hosts: Iterable[str],
    config: Optional[AppConfig] = None,
    *,
    strict: bool = True,
    runner: Optional[Runner] = None,
    platform: str = sys.platform,
    strategies: Optional[list[Strategy]] = None,
) -> BatchResult:
    """Add several hosts under a single lock acquisition.

    Host names are normalised before duplicates are dropped. With ``strict``
    the first failure propagates. Otherwise per-host failures, invalid names
    included, are collected in the result; a lock failure affects every host
    and is recorded against each of them.
    """

    result = BatchResult()
    names: list[str] = []
    for host in hosts:
        try:
            name = ensure_host_name(host)
        except ValueError as exc:
            if strict:
                raise
            result.failures[host] = exc
            continue
        if name not in names:
            names.append(name)

    try:
        with find_known_hosts(config, runner=runner, platform=platform, strategies=strategies) as known_hosts:
            for host in names:
                try:
                    result.outcomes[host] = known_hosts.add(host)
                except SshTrustError as exc:
                    if strict:
                        raise
                    result.failures[host] = exc
    except SshTrustError as exc:
        if strict:
            raise
        for host in names:
            if host not in result.outcomes and host not in result.failures:
                result.failures[host] = exc
    return result


__all__ = [
    "AddOutcome",
    "BatchResult",
    "KnownHosts",
    "ensure_known_host",
    "ensure_known_hosts",
    "find_known_hosts",
    "key_lines",
]
