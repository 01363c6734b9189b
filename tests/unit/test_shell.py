from __future__ import annotations

import sys
from pathlib import Path

import pytest

from ssh_trust.errors import CommandFailed
from ssh_trust.shell import Shell


def test_run_returns_combined_output() -> None:
    script = "import sys; print('out'); print('err', file=sys.stderr)"
    output = Shell().run([sys.executable, "-c", script])
    assert "out" in output
    assert "err" in output


def test_run_strips_surrounding_whitespace() -> None:
    assert Shell().run([sys.executable, "-c", "print('  value  ')"]) == "value"


def test_non_zero_exit_keeps_status_and_output() -> None:
    script = "import sys; print('no match'); sys.exit(3)"
    with pytest.raises(CommandFailed) as excinfo:
        Shell().run([sys.executable, "-c", script])

    assert excinfo.value.exit_code == 3
    assert excinfo.value.output == "no match"
    assert excinfo.value.error is None


def test_launch_failure_is_reported(tmp_path: Path) -> None:
    missing = tmp_path / "does-not-exist"
    with pytest.raises(CommandFailed) as excinfo:
        Shell().run([missing, "--version"])

    assert excinfo.value.exit_code is None
    assert isinstance(excinfo.value.error, OSError)
    assert str(missing) in str(excinfo.value)


def test_arguments_are_not_shell_interpreted(tmp_path: Path) -> None:
    marker = tmp_path / "marker"
    output = Shell(cwd=tmp_path).run([sys.executable, "-c", "import sys; print(sys.argv[1])", f"; touch {marker}"])
    assert output == f"; touch {marker}"
    assert not marker.exists()
