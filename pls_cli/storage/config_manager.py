"""
Manages locating, loading and validating the optional INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pls_cli.exceptions import ConfigurationError
from pls_cli.models.config import PlsConfig

log = logging.getLogger(__name__)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "pls"


def get_config_file() -> Path:
    """The config file path, honouring the PLS_CONFIG override."""
    if override := os.getenv("PLS_CONFIG"):
        return Path(override).expanduser()
    return get_config_dir() / "config.ini"


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, overrides: dict[str, Any] | None = None) -> PlsConfig:
        """
        Loads configuration from the INI file, applies overrides, and validates it.
        A missing file is not an error: defaults are used.

        Args:
            overrides: Settings that take precedence over the file.

        Returns:
            A validated PlsConfig object.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        settings: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            settings = self._get_config_as_dict()
            log.debug(f"Loaded configuration from '{self.config_file_path}'")
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults"
            )

        if env_level := os.getenv("PLS_LOG_LEVEL"):
            settings["log_level"] = env_level
        if overrides:
            settings.update(overrides)

        try:
            return PlsConfig(**settings, config_path=str(self.config_file_path))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        unknown = set(section) - PlsConfig.get_ini_keys()
        for key in sorted(unknown):
            log.warning(f"Ignoring unknown configuration key '{key}'.")
        return {key: section[key] for key in PlsConfig.get_ini_keys() if key in section}
