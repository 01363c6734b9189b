"""Configuration loading utilities for ssh-trust."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .paths import runtime_config_dir

_HOME_ENV = "SSH_TRUST_HOME"
_LOCK_TIMEOUT_ENV = "SSH_TRUST_LOCK_TIMEOUT"


class LockConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for the known_hosts lock")
    poll_interval: float = Field(default=0.25, gt=0, description="Seconds between lock attempts")


class ToolsConfig(BaseModel):
    keygen: str = Field(default="ssh-keygen", description="Key-query executable name")
    keyscan: str = Field(default="ssh-keyscan", description="Key-scan executable name")
    git: str = Field(default="git", description="Git executable used for Windows discovery")
    directory: Optional[Path] = Field(default=None, description="Directory searched before discovery")


class StoreConfig(BaseModel):
    home: Optional[Path] = Field(default=None, description="Override the user's home directory")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    lock: LockConfig = Field(default_factory=LockConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".ssh-trust" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def _apply_env(config: AppConfig) -> AppConfig:
    home = os.getenv(_HOME_ENV)
    if home:
        config.store.home = Path(home).expanduser()
    timeout = os.getenv(_LOCK_TIMEOUT_ENV)
    if timeout:
        try:
            config.lock = LockConfig(timeout=float(timeout), poll_interval=config.lock.poll_interval)
        except (ValueError, ValidationError) as exc:
            raise ValueError(f"Invalid {_LOCK_TIMEOUT_ENV} value {timeout!r}: {exc}") from exc
    return config


def load_config(path: Optional[Path] = None) -> AppConfig:
    if path is not None and not path.is_file():
        raise ValueError(f"Configuration file not found: {path}")
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            try:
                return _apply_env(AppConfig.model_validate(data))
            except ValidationError as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return _apply_env(DEFAULT_CONFIG.model_copy(deep=True))


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "LockConfig",
    "LoggingConfig",
    "StoreConfig",
    "ToolsConfig",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
