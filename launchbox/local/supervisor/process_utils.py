import os
import shutil
import signal
import logging
import threading
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import psutil

from launchbox.exceptions import ProcessStartError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessSpec:
    """How to start one managed process."""
    name: str
    args: List[str]
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None


@dataclass
class ManagedProcess:
    """A started process: the Popen used to wait on it and the psutil handle used to signal it."""
    name: str
    popen: subprocess.Popen
    handle: psutil.Process
    readers: List[threading.Thread] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.popen.pid


#* --- Process Status ---
def describe_exit(returncode: Optional[int]) -> str:
    """Formats a Popen return code for log messages."""
    if returncode is None:
        return "still running"
    if returncode < 0:
        try:
            return f"signal {signal.Signals(-returncode).name}"
        except ValueError:
            return f"signal {-returncode}"
    return f"exit code {returncode}"


#* --- Process Creation ---
def resolve_executable(spec: ProcessSpec) -> str:
    """
    Resolves argv[0] of a spec to an executable path.

    :raises ProcessStartError: If the command is empty or the binary cannot be found.
    """
    if not spec.args:
        raise ProcessStartError(spec.name, "no command configured")

    program = spec.args[0]
    search_path = spec.env.get("PATH") if spec.env and "PATH" in spec.env else None
    if os.sep in program and spec.cwd and not os.path.isabs(program):
        program = os.path.join(spec.cwd, program)

    resolved = shutil.which(program, path=search_path)
    if resolved is None:
        raise ProcessStartError(spec.name, f"executable '{spec.args[0]}' not found or not executable")
    return resolved


def _read_pipe(pipe, process_name: str, level: int) -> None:
    """Target function for reader threads. Reads and logs lines from a subprocess pipe."""
    proc_logger = logging.getLogger(f"proc.{process_name}")
    try:
        for line_bytes in iter(pipe.readline, b""):
            line = line_bytes.decode("utf-8", errors="replace").rstrip()
            if not line:
                continue
            proc_logger.log(level, line)
    except (OSError, ValueError) as e:
        proc_logger.debug(f"Pipe reader for {process_name} stream exited: {e}")
    finally:
        pipe.close()


def log_process_output(process: subprocess.Popen, name: str) -> List[threading.Thread]:
    """Starts background threads to consume and log a process's stdout/stderr."""
    threads = []
    if process.stdout:
        threads.append(threading.Thread(target=_read_pipe, args=(process.stdout, name, logging.INFO), daemon=True, name=f"{name}-stdout"))
    if process.stderr:
        threads.append(threading.Thread(target=_read_pipe, args=(process.stderr, name, logging.ERROR), daemon=True, name=f"{name}-stderr"))
    for thread in threads:
        thread.start()
    return threads


def launch_process(spec: ProcessSpec, capture_output: bool = False) -> ManagedProcess:
    """
    Launches a single process without waiting for it.

    :param spec: What to run.
    :param capture_output: Pipe stdout/stderr through the logger instead of inheriting them.
    :raises ProcessStartError: If the process could not be spawned.
    """
    log.info(f"Starting process: {spec.name} ({' '.join(spec.args)})...")
    executable = resolve_executable(spec)

    env = None
    if spec.env:
        env = {**os.environ, **spec.env}

    popen_kwargs = {}
    if capture_output:
        popen_kwargs.update(stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    try:
        p = subprocess.Popen(
            [executable, *spec.args[1:]],
            stdin=subprocess.DEVNULL,
            cwd=spec.cwd,
            env=env,
            **popen_kwargs,
        )
    except (OSError, ValueError) as e:
        raise ProcessStartError(spec.name, str(e)) from e

    # The child is not reaped until we wait on it, so the pid stays valid here even if it already exited.
    handle = psutil.Process(p.pid)

    readers = log_process_output(p, spec.name) if capture_output else []
    log.info(f"{spec.name.capitalize()} started successfully with PID: {p.pid}")
    return ManagedProcess(name=spec.name, popen=p, handle=handle, readers=readers)
