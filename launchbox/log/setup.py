import logging
import sys
from typing import Union


class MainFormatter(logging.Formatter):
    """A custom formatter to handle regular logs and raw subprocess logs."""

    def format(self, record):
        # Lines relayed from a child process are printed exactly as the child wrote them.
        if record.name.startswith('proc.'):
            return record.getMessage()

        original_format = self._style._fmt
        self._style._fmt = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
        formatted_message = super().format(record)
        self._style._fmt = original_format
        return formatted_message


def resolve_level(level: Union[int, str]) -> int:
    """Turns a level name such as 'DEBUG' into its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def setup_logging(console_level: Union[int, str] = logging.INFO) -> None:
    """
    Configures the root logger for the supervisor.
    Any previously configured handlers are cleared to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # stdout is what the container runtime collects.
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(resolve_level(console_level))
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)
