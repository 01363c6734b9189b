from __future__ import annotations

from pathlib import Path
from typing import Sequence


class SshTrustError(Exception):
    """Base exception for ssh-trust"""


class HomeResolutionFailed(SshTrustError):
    """Raised when the current user's home directory cannot be determined"""


class LockTimeout(SshTrustError):
    """Raised when the store lock is not acquired within the timeout"""

    def __init__(self, lock_path: Path, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:g}s waiting for lock on {lock_path}")
        self.lock_path = lock_path
        self.timeout = timeout


class LockIOError(SshTrustError):
    """Raised when the lock file cannot be opened or written"""

    def __init__(self, lock_path: Path, error: OSError) -> None:
        super().__init__(f"Could not open lock file {lock_path}: {error}")
        self.lock_path = lock_path
        self.error = error


class ToolNotFound(SshTrustError):
    """Raised when no discovery strategy locates the ssh key tools"""


class CommandFailed(SshTrustError):
    """Raised when an external command cannot be launched or exits non-zero"""

    def __init__(
        self,
        argv: Sequence[str],
        *,
        exit_code: int | None = None,
        output: str = "",
        error: OSError | None = None,
    ) -> None:
        if error is not None:
            reason = f"could not be started ({error})"
        else:
            reason = f"exited with status {exit_code}"
        super().__init__(f"`{' '.join(argv)}` {reason}")
        self.argv = tuple(argv)
        self.exit_code = exit_code
        self.output = output
        self.error = error


class HostEntryError(SshTrustError):
    """Base for failures while adding a single host to the store"""

    def __init__(self, message: str, *, host: str, path: Path) -> None:
        super().__init__(message)
        self.host = host
        self.path = path


class OpenFailed(HostEntryError):
    """Raised when the store cannot be opened for appending"""


class QueryFailed(HostEntryError):
    """Raised when ssh-keygen fails for a reason other than 'no match'"""


class ScanFailed(HostEntryError):
    """Raised when ssh-keyscan fails or yields no usable key lines"""


class WriteFailed(HostEntryError):
    """Raised when appending to the store does not complete"""


__all__ = [
    "SshTrustError",
    "HomeResolutionFailed",
    "LockTimeout",
    "LockIOError",
    "ToolNotFound",
    "CommandFailed",
    "HostEntryError",
    "OpenFailed",
    "QueryFailed",
    "ScanFailed",
    "WriteFailed",
]
