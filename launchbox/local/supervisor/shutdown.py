import psutil
import logging
from typing import List

from .process_utils import ManagedProcess

log = logging.getLogger(__name__)

KILL_REAP_TIMEOUT = 1.0  # seconds


def send_termination(proc: ManagedProcess) -> bool:
    """
    Sends SIGTERM to a managed process.
    A process that is already gone is not an error; the failed delivery is only logged.

    :return: True if the signal was handed to the OS.
    """
    try:
        log.debug(f"Sending SIGTERM to {proc.name} (PID {proc.pid})")
        proc.handle.terminate()
        return True
    except psutil.NoSuchProcess:
        log.debug(f"Process {proc.name} (PID {proc.pid}) no longer exists, skipping termination.")
        return False


def _collect_children(proc: ManagedProcess) -> List[psutil.Process]:
    try:
        return proc.handle.children(recursive=True)
    except psutil.NoSuchProcess:
        return []


def _forceful_kill(processes: List[psutil.Process]) -> None:
    """Forcefully kills processes that didn't terminate gracefully."""
    if not processes:
        return

    log.warning(f"{len(processes)} processes did not terminate gracefully. Forcing shutdown...")
    for proc in processes:
        try:
            log.warning(f"Killing stubborn process PID {proc.pid}.")
            proc.kill()
        except psutil.NoSuchProcess:
            continue


def wait_or_kill(proc: ManagedProcess, children: List[psutil.Process], timeout: float) -> None:
    """
    Waits up to `timeout` seconds for a terminated process and its children to exit,
    then SIGKILLs whatever is still alive.
    """
    procs_list = [proc.handle, *children]
    try:
        _, alive = psutil.wait_procs(procs_list, timeout=timeout)
    except psutil.NoSuchProcess:
        alive = []
    _forceful_kill(alive)
    if alive:
        # Collect the killed processes so none is left as a zombie.
        psutil.wait_procs(alive, timeout=KILL_REAP_TIMEOUT)


def reap(proc: ManagedProcess) -> None:
    """Collects the exit status if the process has already exited, without blocking."""
    proc.popen.poll()


def propagate_shutdown(proc: ManagedProcess, grace_period: float = 0) -> bool:
    """
    Terminates the background process after the foreground one has gone away.

    With `grace_period` of 0 this is fire-and-forget: SIGTERM is sent and the
    function returns immediately. A positive value waits that long and then
    SIGKILLs the process and any children it left behind.

    :param proc: The handle recorded when the background process was started.
    :param grace_period: Seconds to wait before force-killing.
    :return: True if the termination signal was delivered.
    """
    log.info(f"Killing {proc.name} (PID {proc.pid})")
    children = _collect_children(proc) if grace_period > 0 else []
    signalled = send_termination(proc)

    if grace_period > 0:
        wait_or_kill(proc, children, grace_period)
    else:
        reap(proc)
    return signalled
