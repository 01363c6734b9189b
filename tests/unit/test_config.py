from pathlib import Path

import pytest

pytest.importorskip("yaml")

from ssh_trust.config import AppConfig, dump_default_config, load_config


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("ssh_trust.config.runtime_config_dir", lambda: tmp_path / "user-config")
    monkeypatch.delenv("SSH_TRUST_HOME", raising=False)
    monkeypatch.delenv("SSH_TRUST_LOCK_TIMEOUT", raising=False)


def test_defaults_match_thirty_second_lock() -> None:
    config = load_config()
    assert config.lock.timeout == 30.0
    assert config.tools.keygen == "ssh-keygen"
    assert config.tools.keyscan == "ssh-keyscan"
    assert config.store.home is None


def test_explicit_file_is_loaded(tmp_path: Path) -> None:
    target = tmp_path / "custom.yaml"
    target.write_text("lock:\n  timeout: 5\ntools:\n  directory: /opt/openssh/bin\n", encoding="utf-8")

    config = load_config(target)

    assert config.lock.timeout == 5.0
    assert config.tools.directory == Path("/opt/openssh/bin")


def test_project_config_is_discovered(tmp_path: Path) -> None:
    project = tmp_path / ".ssh-trust" / "config.yaml"
    project.parent.mkdir()
    project.write_text("logging:\n  level: debug\n", encoding="utf-8")

    assert load_config().logging.normalized_level() == "DEBUG"


def test_invalid_config_names_the_file(tmp_path: Path) -> None:
    target = tmp_path / "bad.yaml"
    target.write_text("lock:\n  timeout: -1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="bad.yaml"):
        load_config(target)


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_config(tmp_path / "nope.yaml")


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSH_TRUST_HOME", str(tmp_path / "agent-home"))
    monkeypatch.setenv("SSH_TRUST_LOCK_TIMEOUT", "2.5")

    config = load_config()

    assert config.store.home == tmp_path / "agent-home"
    assert config.lock.timeout == 2.5


def test_invalid_timeout_environment_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSH_TRUST_LOCK_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="SSH_TRUST_LOCK_TIMEOUT"):
        load_config()


def test_dumped_defaults_round_trip(tmp_path: Path) -> None:
    target = tmp_path / "out" / "config.yaml"
    dump_default_config(target)

    assert load_config(target) == AppConfig()
