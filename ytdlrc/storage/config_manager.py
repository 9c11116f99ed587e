"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
import shlex
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ytdlrc.exceptions import ConfigurationError
from ytdlrc.models.config import ArchiveConfig

log = logging.getLogger(__name__)

BOOL_KEYS = {
    name
    for name, field in ArchiveConfig.model_fields.items()
    if field.annotation is bool
}


def _to_ini_value(value: Any) -> str:
    """Renders a setting the way it is written to the INI file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return shlex.join(str(v) for v in value).replace("%", "%%")
    # configparser uses % for interpolation, so templates must be escaped
    return str(value).replace("%", "%%")


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ArchiveConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated, immutable ArchiveConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'ytdlrc init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        try:
            config_from_file = self.get_config_as_dict()
        except (ValueError, configparser.Error) as e:
            raise ConfigurationError(f"Error reading configuration values: {e}") from e

        if cli_options:
            config_from_file.update(cli_options)

        try:
            return ArchiveConfig(**config_from_file)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """
        Creates and saves a new configuration file populated with defaults.

        Args:
            settings: Values that override the defaults.
        """
        settings = settings or {}
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}

        defaults = ArchiveConfig()
        for key in ArchiveConfig.model_fields:
            value = settings.get(key, getattr(defaults, key))
            config["DEFAULT"][key] = _to_ini_value(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {}
        for key in ArchiveConfig.get_ini_keys():
            if key not in section:
                continue
            if key in BOOL_KEYS:
                values[key] = section.getboolean(key)
            else:
                values[key] = section.get(key)
        return values

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = ArchiveConfig()
        needs_saving = False

        config_section = self._parser["DEFAULT"]

        for key in sorted(ArchiveConfig.get_ini_keys()):
            if key not in config_section:
                config_section[key] = _to_ini_value(getattr(defaults, key))
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section.get(key, raw=True)}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
