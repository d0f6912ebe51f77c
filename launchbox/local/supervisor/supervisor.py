import time
import logging
from typing import Callable, Optional

from launchbox.exceptions import InvalidStateTransition, ProcessStartError
from launchbox.local.supervisor import process_utils, shutdown
from launchbox.local.supervisor.process_utils import ManagedProcess, ProcessSpec
from launchbox.local.supervisor.state import (
    ALLOWED_TRANSITIONS, EXIT_OK, EXIT_START_FAILURE, SupervisorResult, SupervisorState,
)

log = logging.getLogger(__name__)

Launcher = Callable[[ProcessSpec, bool], ManagedProcess]

# Reader threads get this long to drain a pipe after the process exits.
READER_JOIN_TIMEOUT = 1.0


class ProcessSupervisor:
    """
    Runs the application server in the background and the reverse proxy in the
    foreground, and tears the pair down as a unit.

    The lifecycle is strictly linear:
    NOT_STARTED -> BACKGROUND_RUNNING -> BOTH_RUNNING -> SHUTTING_DOWN -> EXITED.
    A start failure at either step ends in FAILED. Nothing is ever restarted.
    """

    def __init__(
        self,
        background: ProcessSpec,
        foreground: ProcessSpec,
        grace_period: float = 0,
        startup_delay: float = 0,
        capture_output: bool = False,
        forward_exit_code: bool = False,
        launcher: Optional[Launcher] = None,
    ) -> None:
        self.background = background
        self.foreground = foreground
        self.grace_period = grace_period
        self.startup_delay = startup_delay
        self.capture_output = capture_output
        self.forward_exit_code = forward_exit_code
        self._launch = launcher or process_utils.launch_process
        self.state = SupervisorState.NOT_STARTED

    def _transition(self, target: SupervisorState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidStateTransition(self.state, target)
        log.debug(f"Supervisor state: {self.state.name} -> {target.name}")
        self.state = target

    def _check_background_alive(self, proc: ManagedProcess) -> None:
        """
        Fails the startup if the background process has already exited,
        e.g. because it rejected its arguments.
        """
        if self.startup_delay > 0:
            time.sleep(self.startup_delay)
        returncode = proc.popen.poll()
        if returncode is not None:
            raise ProcessStartError(
                self.background.name,
                f"exited during startup with {process_utils.describe_exit(returncode)}",
            )

    def _wait_foreground(self, proc: ManagedProcess) -> int:
        """Blocks until the foreground process exits."""
        while True:
            try:
                returncode = proc.popen.wait()
                break
            except KeyboardInterrupt:
                # The interrupt reaches the whole process group; keep waiting for the proxy to go.
                log.info(f"Interrupted. Waiting for {proc.name} (PID {proc.pid}) to exit...")
        for reader in proc.readers:
            reader.join(READER_JOIN_TIMEOUT)
        return returncode

    def _exit_code_for(self, returncode: int) -> int:
        if not self.forward_exit_code:
            return EXIT_OK
        if returncode < 0:
            return 128 - returncode
        return returncode

    def run(self) -> SupervisorResult:
        """
        Executes the full supervision sequence once.

        :return: A SupervisorResult whose exit_code is meant for sys.exit.
        :raises InvalidStateTransition: If the supervisor has already been run.
        """
        if self.state is not SupervisorState.NOT_STARTED:
            raise InvalidStateTransition(self.state, SupervisorState.BACKGROUND_RUNNING)

        try:
            background = self._launch(self.background, self.capture_output)
        except ProcessStartError as e:
            log.critical(f"{e}. Aborting without starting {self.foreground.name}.", exc_info=True)
            self._transition(SupervisorState.FAILED)
            return SupervisorResult(SupervisorState.FAILED, EXIT_START_FAILURE)
        except BaseException:
            self._transition(SupervisorState.FAILED)
            raise
        self._transition(SupervisorState.BACKGROUND_RUNNING)

        try:
            self._check_background_alive(background)
            foreground = self._launch(self.foreground, self.capture_output)
        except ProcessStartError as e:
            log.critical(f"{e}. Shutting down {background.name} to avoid an orphaned process.", exc_info=True)
            signalled = shutdown.propagate_shutdown(background, self.grace_period)
            self._transition(SupervisorState.FAILED)
            return SupervisorResult(
                SupervisorState.FAILED, EXIT_START_FAILURE,
                background_pid=background.pid, termination_sent=signalled,
            )
        except BaseException:
            shutdown.propagate_shutdown(background, self.grace_period)
            self._transition(SupervisorState.FAILED)
            raise
        self._transition(SupervisorState.BOTH_RUNNING)

        try:
            returncode = self._wait_foreground(foreground)
        finally:
            self._transition(SupervisorState.SHUTTING_DOWN)
            log.info(f"{foreground.name.capitalize()} exited. Propagating shutdown to {background.name}.")
            signalled = shutdown.propagate_shutdown(background, self.grace_period)
            self._transition(SupervisorState.EXITED)

        log.info(f"{foreground.name.capitalize()} finished with {process_utils.describe_exit(returncode)}.")
        return SupervisorResult(
            SupervisorState.EXITED,
            self._exit_code_for(returncode),
            background_pid=background.pid,
            foreground_returncode=returncode,
            termination_sent=signalled,
        )
