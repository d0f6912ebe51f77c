import sys
import logging
from typing import List, Optional

# Basic console logger for messages BEFORE full setup is complete.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)

import launchbox.local.console as console
from launchbox.log.setup import setup_logging


def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point: `launchbox [command] [args...] [--verbose]`."""
    argv = list(sys.argv[1:] if argv is None else argv)

    # The 'run' command calls this again with the configured level.
    setup_logging(logging.INFO)

    if "--verbose" in argv:
        argv.remove("--verbose")
        console.toggle_verbose_logging()

    command, args = (argv[0].lower(), argv[1:]) if argv else ("run", [])
    return console.execute_command(command, args)


if __name__ == "__main__":
    sys.exit(main())
