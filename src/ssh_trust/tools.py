"""Discovery of the directory holding ``ssh-keygen`` and ``ssh-keyscan``.

On Windows the OpenSSH tools usually ship inside the Git for Windows
installation and are not on ``PATH``, so the directory is derived from
``git --exec-path`` before falling back to a ``PATH`` search. Discovery is an
ordered list of strategies; the first one returning a directory wins.
"""
from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

import structlog

from .config import ToolsConfig
from .errors import CommandFailed, ToolNotFound
from .shell import Runner

logger = structlog.get_logger(__name__)

Strategy = Callable[[Runner], Optional[Path]]

# Relative to the directory printed by `git --exec-path`, e.g.
# C:\Program Files\Git\mingw64\libexec\git-core
GIT_RELATIVE_TOOL_DIRS: tuple[tuple[str, ...], ...] = (
    ("..", "..", "..", "usr", "bin"),
    ("..", "..", "bin"),
)


def executable_name(name: str, platform: str = sys.platform) -> str:
    if platform == "win32" and not name.lower().endswith(".exe"):
        return name + ".exe"
    return name


def tool_path(directory: Path, name: str, platform: str = sys.platform) -> Path:
    return directory / executable_name(name, platform)


def configured_directory_strategy(directory: Path, keygen: str = "ssh-keygen", platform: str = sys.platform) -> Strategy:
    def strategy(_runner: Runner) -> Optional[Path]:
        if tool_path(directory, keygen, platform).is_file():
            return directory
        logger.warning("tools.configured_dir_missing", directory=str(directory), tool=keygen)
        return None

    return strategy


def git_exec_path_strategy(git: str = "git", keygen: str = "ssh-keygen", platform: str = "win32") -> Strategy:
    def strategy(runner: Runner) -> Optional[Path]:
        try:
            exec_path = runner.run([git, "--exec-path"])
        except CommandFailed as exc:
            logger.debug("tools.git_exec_path_failed", error=str(exc))
            return None
        if not exec_path:
            return None

        base = Path(exec_path)
        for segments in GIT_RELATIVE_TOOL_DIRS:
            candidate = Path(os.path.normpath(base.joinpath(*segments)))
            if tool_path(candidate, keygen, platform).is_file():
                return candidate
        return None

    return strategy


def search_path_strategy(keygen: str = "ssh-keygen", path: Optional[str] = None) -> Strategy:
    def strategy(_runner: Runner) -> Optional[Path]:
        found = shutil.which(keygen, path=path)
        if found is None:
            return None
        return Path(found).parent

    return strategy


def default_strategies(config: Optional[ToolsConfig] = None, platform: str = sys.platform) -> list[Strategy]:
    config = config or ToolsConfig()
    strategies: list[Strategy] = []
    if config.directory is not None:
        strategies.append(configured_directory_strategy(config.directory, config.keygen, platform))
    if platform == "win32":
        strategies.append(git_exec_path_strategy(config.git, config.keygen, platform))
    strategies.append(search_path_strategy(config.keygen))
    return strategies


def resolve_tools_dir(
    runner: Runner,
    *,
    config: Optional[ToolsConfig] = None,
    platform: str = sys.platform,
    strategies: Optional[Sequence[Strategy]] = None,
) -> Path:
    """Return the directory containing the key-query tool.

    Raises ``ToolNotFound`` when every strategy comes up empty.
    """

    keygen = (config or ToolsConfig()).keygen
    for strategy in strategies if strategies is not None else default_strategies(config, platform):
        directory = strategy(runner)
        if directory is not None:
            logger.debug("tools.resolved", directory=str(directory))
            return directory
    raise ToolNotFound(f"Failed to find path for {keygen}")


__all__ = [
    "GIT_RELATIVE_TOOL_DIRS",
    "Strategy",
    "configured_directory_strategy",
    "default_strategies",
    "executable_name",
    "git_exec_path_strategy",
    "resolve_tools_dir",
    "search_path_strategy",
    "tool_path",
]
