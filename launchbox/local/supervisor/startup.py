import shlex
import logging
from typing import Any, Tuple

from launchbox.exceptions import ConfigurationError, ProcessStartError
from launchbox.local.supervisor import process_utils
from launchbox.local.supervisor.process_utils import ProcessSpec
from launchbox.local.supervisor.supervisor import ProcessSupervisor

log = logging.getLogger(__name__)


def _split_command(key: str, command: Any) -> list:
    if isinstance(command, (list, tuple)):
        args = [str(part) for part in command]
    else:
        try:
            args = shlex.split(str(command or ""))
        except ValueError as e:
            raise ConfigurationError(key, command, str(e)) from e
    if not args:
        raise ConfigurationError(key, command, "command must not be empty")
    return args


def _non_negative(config: Any, key: str) -> float:
    value = getattr(config, key)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(key, value, "must be a number") from e
    if number < 0:
        raise ConfigurationError(key, value, "must not be negative")
    return number


def build_process_specs(config: Any) -> Tuple[ProcessSpec, ProcessSpec]:
    """
    Builds the background and foreground specs from the effective settings.

    :param config: Settings object exposing the uppercase setting attributes.
    :return: (background, foreground)
    :raises ConfigurationError: If a command is empty or cannot be parsed.
    """
    cwd = config.WORKING_DIR or None
    background = ProcessSpec(
        name=config.BACKGROUND_NAME,
        args=_split_command("BACKGROUND_COMMAND", config.BACKGROUND_COMMAND),
        cwd=cwd,
    )
    foreground = ProcessSpec(
        name=config.FOREGROUND_NAME,
        args=_split_command("FOREGROUND_COMMAND", config.FOREGROUND_COMMAND),
        cwd=cwd,
    )
    return background, foreground


def create_supervisor(config: Any) -> ProcessSupervisor:
    """Creates a ProcessSupervisor configured from the effective settings."""
    background, foreground = build_process_specs(config)
    return ProcessSupervisor(
        background,
        foreground,
        grace_period=_non_negative(config, "SHUTDOWN_GRACE_PERIOD"),
        startup_delay=_non_negative(config, "BACKGROUND_STARTUP_DELAY"),
        capture_output=bool(config.CAPTURE_OUTPUT),
        forward_exit_code=bool(config.FORWARD_EXIT_CODE),
    )


def check_configuration(config: Any) -> bool:
    """
    Validates that both supervised executables can be found.

    :return: True if both executables resolve, otherwise False.
    """
    log.info("Performing configuration and path validation...")
    try:
        specs = build_process_specs(config)
    except ConfigurationError as e:
        log.error(f"CONFIG CHECK FAILED: {e}")
        return False

    all_ok = True
    for spec in specs:
        try:
            path = process_utils.resolve_executable(spec)
        except ProcessStartError as e:
            log.error(f"CONFIG CHECK FAILED: {e.reason} ({spec.name})")
            all_ok = False
        else:
            log.info(f"Config Check OK: Found {spec.name} at '{path}'")
    return all_ok
