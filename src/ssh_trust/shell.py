"""Synchronous command execution used to drive the ssh key tools."""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

import structlog

from .errors import CommandFailed

logger = structlog.get_logger(__name__)


class Runner(Protocol):
    def run(self, argv: Sequence[str | Path]) -> str:
        """Run ``argv`` to completion and return its combined stdout/stderr.

        Raises ``CommandFailed`` when the command cannot be started or exits
        with a non-zero status; the captured output is kept on the exception.
        """
        ...


class Shell:
    """Runs commands as argument vectors, never through a shell."""

    def __init__(self, env: Optional[Mapping[str, str]] = None, cwd: Optional[Path] = None) -> None:
        self.env = dict(env) if env is not None else None
        self.cwd = cwd

    def run(self, argv: Sequence[str | Path]) -> str:
        args = [str(arg) for arg in argv]
        logger.debug("shell.run", argv=args)
        try:
            proc = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
                env=self.env,
                cwd=self.cwd,
                check=False,
            )
        except OSError as exc:
            raise CommandFailed(args, error=exc) from exc

        output = proc.stdout.strip()
        if proc.returncode != 0:
            raise CommandFailed(args, exit_code=proc.returncode, output=output)
        return output


__all__ = ["Runner", "Shell"]
