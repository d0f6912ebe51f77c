"""Tests for spawning and describing managed processes."""

import signal
import sys

import pytest

from launchbox.exceptions import ProcessStartError
from launchbox.local.supervisor import process_utils
from launchbox.local.supervisor.process_utils import ProcessSpec

from .conftest import python_spec


@pytest.mark.parametrize("returncode, expected", [
    (None, "still running"),
    (0, "exit code 0"),
    (2, "exit code 2"),
    (-signal.SIGTERM, "signal SIGTERM"),
    (-signal.SIGKILL, "signal SIGKILL"),
])
def test_describe_exit(returncode, expected):
    assert process_utils.describe_exit(returncode) == expected


def test_resolve_executable_finds_interpreter():
    spec = ProcessSpec(name="py", args=[sys.executable, "-V"])
    assert process_utils.resolve_executable(spec) == sys.executable


def test_resolve_executable_rejects_empty_command():
    with pytest.raises(ProcessStartError, match="no command configured"):
        process_utils.resolve_executable(ProcessSpec(name="launch", args=[]))


def test_resolve_executable_rejects_missing_binary(tmp_path):
    spec = ProcessSpec(name="launch", args=[str(tmp_path / "launch")])
    with pytest.raises(ProcessStartError) as excinfo:
        process_utils.resolve_executable(spec)
    assert excinfo.value.name == "launch"


def test_resolve_executable_rejects_non_executable_file(tmp_path):
    binary = tmp_path / "launch"
    binary.write_text("not a program")
    binary.chmod(0o644)
    with pytest.raises(ProcessStartError):
        process_utils.resolve_executable(ProcessSpec(name="launch", args=[str(binary)]))


def test_launch_process_records_matching_handle():
    proc = process_utils.launch_process(python_spec("launch", "import sys; sys.exit(0)"))
    try:
        assert proc.name == "launch"
        assert proc.handle.pid == proc.popen.pid == proc.pid
        assert proc.readers == []
    finally:
        assert proc.popen.wait(timeout=10) == 0


def test_launch_process_passes_env_and_cwd(tmp_path):
    code = "import os, sys; sys.exit(0 if os.getcwd() == sys.argv[1] and os.environ['LAUNCH_SERVICE'] == 'web' else 1)"
    spec = process_utils.ProcessSpec(
        name="launch",
        args=[sys.executable, "-c", code, str(tmp_path.resolve())],
        cwd=str(tmp_path),
        env={"LAUNCH_SERVICE": "web"},
    )
    proc = process_utils.launch_process(spec)
    assert proc.popen.wait(timeout=10) == 0


def test_launch_process_missing_binary_raises(tmp_path):
    with pytest.raises(ProcessStartError):
        process_utils.launch_process(ProcessSpec(name="launch", args=[str(tmp_path / "nope")]))


def test_captured_stderr_logged_at_error(caplog):
    caplog.set_level("INFO")
    proc = process_utils.launch_process(
        python_spec("launch", "import sys; print('boom', file=sys.stderr, flush=True)"),
        capture_output=True,
    )
    proc.popen.wait(timeout=10)
    for reader in proc.readers:
        reader.join(5)

    records = [r for r in caplog.records if r.name == "proc.launch"]
    assert [(r.levelname, r.getMessage()) for r in records] == [("ERROR", "boom")]
