"""Pytest configuration and shared fixtures."""

import sys
import threading
from unittest.mock import Mock

import psutil
import pytest

from launchbox.local.supervisor import process_utils
from launchbox.local.supervisor.process_utils import ManagedProcess, ProcessSpec


def python_spec(name: str, code: str) -> ProcessSpec:
    """A spec that runs a snippet of Python in a fresh interpreter."""
    return ProcessSpec(name=name, args=[sys.executable, "-c", code])


SLEEPER = "import time; time.sleep(60)"


# ============================================================================
# Fake processes
# ============================================================================

def fake_process(name: str, pid: int, returncode: int = 0, events: list = None) -> ManagedProcess:
    """A ManagedProcess whose popen and psutil handle are mocks recording into `events`."""
    events = events if events is not None else []

    popen = Mock()
    popen.pid = pid
    popen.poll = Mock(return_value=None)

    def wait():
        events.append(("wait", name))
        return returncode
    popen.wait = Mock(side_effect=wait)

    handle = Mock(spec=psutil.Process)
    handle.pid = pid
    handle.terminate = Mock(side_effect=lambda: events.append(("terminate", name, pid)))
    handle.children = Mock(return_value=[])
    return ManagedProcess(name=name, popen=popen, handle=handle)


class FakeLauncher:
    """Stands in for launch_process; hands out prepared fakes or raises per spec name."""

    def __init__(self, events: list):
        self.events = events
        self.processes = {}
        self.failures = {}
        self.calls = []

    def __call__(self, spec: ProcessSpec, capture_output: bool = False) -> ManagedProcess:
        self.calls.append(spec.name)
        self.events.append(("launch", spec.name))
        if spec.name in self.failures:
            raise self.failures[spec.name]
        return self.processes[spec.name]


@pytest.fixture
def events():
    return []


@pytest.fixture
def fake_launcher(events):
    return FakeLauncher(events)


# ============================================================================
# Real processes
# ============================================================================

class RecordingLauncher:
    """Delegates to the real launch_process and keeps every ManagedProcess it returns."""

    def __init__(self):
        self.launched = []
        self.both_started = threading.Event()

    def __call__(self, spec: ProcessSpec, capture_output: bool = False) -> ManagedProcess:
        proc = process_utils.launch_process(spec, capture_output)
        self.launched.append(proc)
        if len(self.launched) == 2:
            self.both_started.set()
        return proc


@pytest.fixture
def recording_launcher():
    launcher = RecordingLauncher()
    yield launcher
    for proc in launcher.launched:
        if proc.popen.poll() is None:
            proc.popen.kill()
            proc.popen.wait(timeout=5)
