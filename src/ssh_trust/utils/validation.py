"""Validation helpers for values passed to external tools."""
from __future__ import annotations


def ensure_host_name(host: str) -> str:
    """Ensure ``host`` is safe to pass as a positional argument to the ssh tools.

    Parameters
    ----------
    host:
        Hostname, IP address or ``[host]:port`` pattern.

    Returns
    -------
    str
        The host with surrounding whitespace removed.

    Raises
    ------
    ValueError
        If ``host`` is empty, contains whitespace or looks like an option.
    """

    host = host.strip()
    if not host:
        raise ValueError("Host must not be empty")
    if any(char.isspace() for char in host):
        raise ValueError(f"Host '{host}' must not contain whitespace")
    if host.startswith("-"):
        raise ValueError(f"Host '{host}' must not start with '-'")
    return host


__all__ = ["ensure_host_name"]
