import logging
from typing import List

import setproctitle

from launchbox.exceptions import ConfigurationError
from launchbox.local.config import effective_settings as config
from launchbox.local.supervisor import startup
from launchbox.local.supervisor.state import EXIT_OK, EXIT_START_FAILURE, EXIT_USAGE
from launchbox.log.setup import setup_logging

log = logging.getLogger(__name__)


def handle_run_command(args: List[str]) -> int:
    """
    Runs the supervisor in the foreground of this process.

    :return int: The exit status for the container.
    """
    setproctitle.setproctitle(config.SUPERVISOR_PROCESS_TITLE)
    console_level = logging.DEBUG if config.VERBOSE_LOGGING else config.LOG_LEVEL
    try:
        setup_logging(console_level)
    except ValueError as e:
        setup_logging(logging.INFO)
        log.error(f"{e}. Falling back to INFO.")

    try:
        supervisor = startup.create_supervisor(config)
    except ConfigurationError as e:
        log.critical(str(e))
        return EXIT_USAGE

    log.info("=" * 20 + " Supervisor Starting " + "=" * 20)
    result = supervisor.run()
    log.info(f"Supervisor finished in state {result.state.name} with exit status {result.exit_code}.")
    return result.exit_code


def handle_config_command(args: List[str]) -> int:
    """
    Handles all sub-commands for the 'config' command.

    :param args: A list of string arguments following the 'config' command.
    """
    sub_command = args[0].lower() if args else "show"

    if sub_command == "show":
        _config_show()
        return EXIT_OK
    if sub_command == "help":
        _config_help()
        return EXIT_OK

    print(f"Unknown config sub-command: '{sub_command}'. Type 'config help' for available commands.")
    return EXIT_USAGE


def _config_show() -> None:
    """Displays the effective configuration settings."""
    print("\n--- Current Supervisor Configuration ---")
    print(f"(Overrides file: {config.OVERRIDES_JSON_PATH})")
    for key, value in sorted(config.as_dict().items()):
        if key == "MODIFIABLE_SETTINGS":
            continue
        marker = "*" if key in config.MODIFIABLE_SETTINGS else " "
        print(f" {marker}{key} = {value}")
    print("---")
    print("Settings marked with * can be changed in the overrides file.")
    print("----------------------------------------\n")


def _config_help() -> None:
    """Displays help for the config command."""
    print("\nConfig Command Help:")
    print("  config show                - Display all effective settings.")
    print("  config help                - Show this help message.")
    print("Use 'check-config' to validate the supervised executables.")


def handle_check_config_command(args: List[str]) -> int:
    """Validates that both supervised executables can be found."""
    return EXIT_OK if startup.check_configuration(config) else EXIT_START_FAILURE


def toggle_verbose_logging() -> None:
    """Toggles verbose (DEBUG level) logging for the console handler."""
    config.VERBOSE_LOGGING = not config.VERBOSE_LOGGING
    new_level = logging.DEBUG if config.VERBOSE_LOGGING else logging.INFO

    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(new_level)
            break


def print_help() -> int:
    """Prints the main help text for the console."""
    print("\nAvailable commands:")
    print("  run                    - Start the application server and reverse proxy (default).")
    print("  check-config           - Validate that both supervised executables can be found.")
    print("  config <cmd>           - Show configuration. Use 'config help' for more details.")
    print("  help                   - Show this message.")
    print("Add --verbose to any command for DEBUG output.")
    print()
    return EXIT_OK
