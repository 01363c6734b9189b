"""Keep the user's SSH known_hosts populated for unattended agents."""
from .errors import (
    HomeResolutionFailed,
    LockIOError,
    LockTimeout,
    OpenFailed,
    QueryFailed,
    ScanFailed,
    SshTrustError,
    ToolNotFound,
    WriteFailed,
)
from .known_hosts import AddOutcome, KnownHosts, ensure_known_host, ensure_known_hosts, find_known_hosts
from .paths import StorePaths, locate_store
from .version import __version__

__all__ = [
    "AddOutcome",
    "HomeResolutionFailed",
    "KnownHosts",
    "LockIOError",
    "LockTimeout",
    "OpenFailed",
    "QueryFailed",
    "ScanFailed",
    "SshTrustError",
    "StorePaths",
    "ToolNotFound",
    "WriteFailed",
    "__version__",
    "ensure_known_host",
    "ensure_known_hosts",
    "find_known_hosts",
    "locate_store",
]
