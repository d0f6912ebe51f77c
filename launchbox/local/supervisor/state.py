from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Exit statuses of the supervisor process.
EXIT_OK = 0
EXIT_START_FAILURE = 1
EXIT_USAGE = 2


class SupervisorState(str, Enum):
    """
    Supervisor lifecycle states.

    State transitions:
        NOT_STARTED -> BACKGROUND_RUNNING -> BOTH_RUNNING -> SHUTTING_DOWN -> EXITED
        NOT_STARTED -> FAILED
        BACKGROUND_RUNNING -> FAILED
    """
    NOT_STARTED = "not_started"
    BACKGROUND_RUNNING = "background_running"
    BOTH_RUNNING = "both_running"
    SHUTTING_DOWN = "shutting_down"
    EXITED = "exited"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    SupervisorState.NOT_STARTED: {SupervisorState.BACKGROUND_RUNNING, SupervisorState.FAILED},
    SupervisorState.BACKGROUND_RUNNING: {SupervisorState.BOTH_RUNNING, SupervisorState.FAILED},
    SupervisorState.BOTH_RUNNING: {SupervisorState.SHUTTING_DOWN},
    SupervisorState.SHUTTING_DOWN: {SupervisorState.EXITED},
    SupervisorState.EXITED: set(),
    SupervisorState.FAILED: set(),
}


@dataclass(frozen=True)
class SupervisorResult:
    """Outcome of one supervisor run."""
    state: SupervisorState
    exit_code: int
    background_pid: Optional[int] = None
    foreground_returncode: Optional[int] = None
    termination_sent: bool = False
