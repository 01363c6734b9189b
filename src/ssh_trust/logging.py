"""Structured logging setup for ssh-trust."""
from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE = "ssh_trust"

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(level: str | None = None) -> None:
    """Emit one JSON object per event on stderr.

    Records carry ``ts``, ``level``, ``msg`` and ``component`` plus whatever
    context is bound with :func:`structlog.contextvars.bound_contextvars`; the
    updater binds ``store`` and ``host`` so that every lock, tool and write event
    of one add can be correlated across concurrent agents. stdout is left to
    command output.
    """

    numeric_level = _LEVELS.get((level or "info").lower(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            add_component,
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        # Re-running configure (one CLI invocation per call) must take effect
        # on module-level loggers that were already used.
        cache_logger_on_first_use=False,
    )


def add_component(
    logger: structlog.BoundLoggerBase, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    """Name the emitting module without the package prefix, e.g. ``locking``."""

    if "component" not in event_dict:
        name = getattr(logger, "name", None) or _PACKAGE
        if name.startswith(_PACKAGE + "."):
            name = name[len(_PACKAGE) + 1 :]
        event_dict["component"] = name
    return event_dict


__all__ = ["add_component", "configure_logging"]
