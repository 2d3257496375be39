"""Environment-backed settings for the irdata client

Values come from the process environment, then from a `.env` file (loaded
once with python-dotenv, never overriding variables that are already set),
then from the default passed by the caller. The default also decides the
type a raw string is converted to.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Location of the .env file when none is passed explicitly
ENV_FILE_VAR = "IRDATA_ENV_FILE"
TRUTHY = ("true", "1", "yes", "on")


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in TRUTHY


class ConfigLoader:
    """Resolves `IRDATA_*` settings for the client"""

    def __init__(self, env_path: Optional[Union[str, Path]] = None):
        """
        Args:
            env_path: .env file to load. Defaults to $IRDATA_ENV_FILE, then
                `.env` in the working directory.
        """
        self.env_path = Path(env_path or os.getenv(ENV_FILE_VAR) or ".env")
        self.env_file_loaded = False
        if self.env_path.is_file():
            self.env_file_loaded = load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Read settings from {self.env_path}")

    def _convert(self, name: str, raw: str, default: Any) -> Any:
        converter: Optional[Callable[[str], Any]] = None
        # bool first: bool is a subclass of int
        if isinstance(default, bool):
            converter = _parse_bool
        elif isinstance(default, (int, float)):
            converter = type(default)

        if converter is None:
            return raw
        try:
            return converter(raw)
        except ValueError:
            logger.warning(f"Ignoring {name}={raw!r}: expected {type(default).__name__}, using {default!r}")
            return default

    def get(self, env_var: str, default: Any) -> Any:
        """Look up a setting

        Args:
            env_var: Environment variable name
            default: Value used when the variable is unset or empty

        Returns:
            The converted environment value, or the default. A default
            path starting with `~/` is expanded to the home directory.
        """
        raw = os.getenv(env_var)
        if raw:
            return self._convert(env_var, raw, default)

        if isinstance(default, str) and default.startswith("~/"):
            return os.path.expanduser(default)
        return default


_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Shared loader used by irdata.settings"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
