import logging
from typing import List

from launchbox.local.console.handler import (
    handle_check_config_command, handle_config_command, handle_run_command, print_help,
)
from launchbox.local.supervisor.state import EXIT_USAGE

log = logging.getLogger(__name__)


def execute_command(command: str, args: List[str]) -> int:
    """
    Executes a single command.

    :param command: The main command string (e.g., 'run', 'config').
    :param args: A list of arguments for the command.
    :return int: The exit status for the process.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "run": lambda: handle_run_command(args),
        "check-config": lambda: handle_check_config_command(args),
        "config": lambda: handle_config_command(args),
        "help": print_help,
    }

    if command in command_map:
        return command_map[command]()

    print(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
    return EXIT_USAGE
