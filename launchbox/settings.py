"""
This module contains the configuration settings for the launchbox entrypoint.
It defines the two supervised commands, shutdown behaviour, logging and paths.
Values can be overridden through environment variables or a `.env` file.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't', 'yes', 'y')


#* --- Core Paths ---
OVERRIDES_JSON_PATH = pathlib.Path(os.getenv("LAUNCHBOX_OVERRIDES", "/etc/launchbox/overrides.json"))
WORKING_DIR = os.getenv("LAUNCHBOX_WORKING_DIR") or None

#* --- Supervised Processes ---
# Background: the application server. Started first, terminated on shutdown.
BACKGROUND_NAME = "launch"
BACKGROUND_COMMAND = os.getenv("LAUNCHBOX_BACKGROUND_COMMAND", "/launch server")

# Foreground: the reverse proxy. Its exit triggers the shutdown sequence.
FOREGROUND_NAME = "caddy"
FOREGROUND_COMMAND = os.getenv("LAUNCHBOX_FOREGROUND_COMMAND", "caddy run")

# Public port of the reverse proxy (informational, matches EXPOSE in the image)
PROXY_PORT = int(os.getenv("LAUNCHBOX_PROXY_PORT", "8080"))

#* --- Supervisor Settings ---
# 0 keeps fire-and-forget semantics: SIGTERM is sent and the supervisor exits.
# A positive value waits that many seconds and then SIGKILLs the background process.
SHUTDOWN_GRACE_PERIOD = float(os.getenv("LAUNCHBOX_SHUTDOWN_GRACE_PERIOD", "0"))
# Seconds to wait after spawning the background process before checking it is still alive.
# The check itself always runs; 0 only skips the wait.
BACKGROUND_STARTUP_DELAY = float(os.getenv("LAUNCHBOX_BACKGROUND_STARTUP_DELAY", "1"))
FORWARD_EXIT_CODE = _env_flag("LAUNCHBOX_FORWARD_EXIT_CODE")
CAPTURE_OUTPUT = _env_flag("LAUNCHBOX_CAPTURE_OUTPUT")

#* --- Logging ---
LOG_LEVEL = os.getenv("LAUNCHBOX_LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = False

#* --- Process Titles ---
SUPERVISOR_PROCESS_TITLE = "launchbox - Supervisor"

#* --- MODIFIABLE SETTINGS (Changeable through the overrides file) ---
MODIFIABLE_SETTINGS = {
    "BACKGROUND_COMMAND", "FOREGROUND_COMMAND", "WORKING_DIR",
    "SHUTDOWN_GRACE_PERIOD", "BACKGROUND_STARTUP_DELAY",
    "FORWARD_EXIT_CODE", "CAPTURE_OUTPUT", "LOG_LEVEL",
}
