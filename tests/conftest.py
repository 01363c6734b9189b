from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FakeRunner
from ssh_trust.config import AppConfig, LockConfig, StoreConfig


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "tools"
    directory.mkdir()
    for name in ("ssh-keygen", "ssh-keyscan"):
        (directory / name).write_text("", encoding="utf-8")
    return directory


@pytest.fixture
def fixed_tools(tools_dir: Path) -> list:
    return [lambda _runner: tools_dir]


@pytest.fixture
def home(tmp_path: Path) -> Path:
    directory = tmp_path / "home"
    directory.mkdir()
    return directory


@pytest.fixture
def config(home: Path) -> AppConfig:
    return AppConfig(store=StoreConfig(home=home), lock=LockConfig(timeout=2.0, poll_interval=0.05))
