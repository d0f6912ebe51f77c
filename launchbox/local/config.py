import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import launchbox.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    Merges default settings with JSON/env overrides.

    Precedence, lowest first:
    1. Base values from `settings.py`.
    2. Environment variables and the `.env` file (read in settings.py).
    3. Overrides from the JSON overrides file for keys in `MODIFIABLE_SETTINGS`.
    """

    def __init__(self, overrides_path: Optional[Path] = None) -> None:
        self.OVERRIDES_JSON_PATH: Path = overrides_path or default_settings.OVERRIDES_JSON_PATH

        self._load_defaults()
        self._load_overrides()

    def _load_defaults(self) -> None:
        """Loads all uppercase attributes from the settings module as defaults."""
        for key in dir(default_settings):
            if key.isupper() and key != "OVERRIDES_JSON_PATH":
                setattr(self, key, getattr(default_settings, key))

    def _load_overrides(self) -> None:
        """
        Applies settings from the overrides file.

        Only keys listed in `MODIFIABLE_SETTINGS` are honoured; values are
        coerced to the type of the default they replace.
        """
        if not self.OVERRIDES_JSON_PATH.exists():
            return

        try:
            with self.OVERRIDES_JSON_PATH.open('r') as f:
                overrides = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.error(f"Failed to load or parse overrides file '{self.OVERRIDES_JSON_PATH}': {e}")
            return

        if not isinstance(overrides, dict):
            log.error(f"Overrides file '{self.OVERRIDES_JSON_PATH}' must contain a JSON object. Ignoring.")
            return

        log.info(f"Loading runtime configuration overrides from {self.OVERRIDES_JSON_PATH}")
        for key, value in overrides.items():
            if not hasattr(self, key):
                log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
                continue
            if key not in self.MODIFIABLE_SETTINGS:
                log.warning(f"Attempted to override non-modifiable setting '{key}'. Ignoring.")
                continue

            try:
                setattr(self, key, _coerce(getattr(self, key), value))
            except (ValueError, TypeError) as e:
                log.error(f"Could not convert override '{key}={value}': {e}")
                continue
            log.debug(f"Overridden setting: {key} = {value}")

    def as_dict(self) -> Dict[str, Any]:
        """Returns all effective settings as a plain dictionary."""
        return {key: getattr(self, key) for key in dir(self) if key.isupper()}


def _coerce(original: Any, value: Any) -> Any:
    if isinstance(original, bool):
        return str(value).lower() in ('true', '1', 't', 'yes', 'y')
    if isinstance(original, Path):
        return Path(value)
    if original is None or value is None:
        return value
    return type(original)(value)


# Create a singleton instance to be imported by other modules
effective_settings = MergedSettings()
