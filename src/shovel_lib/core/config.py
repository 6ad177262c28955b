# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for shovel.

This module defines dataclasses representing the configurable aspects of shovel:
environment variables, archiver settings, date formats and exit codes.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import re
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by shovel."""

    # Enables shovel debug mode.
    debug_mode: str = "SHOVEL_DEBUG"
    # Explicit path to the shovel config file.
    config_path: str = "SHOVEL_CONFIG"


@dataclass
class ArchiverSettings:
    """Settings for Archiver operations."""

    # Number of added files after which the archive is closed and reopened.
    # Set to 0 to never flush before the final close.
    flush_every: int = 500
    # Regex matched against the resolved path of every file; matching files are skipped.
    ignore_pattern: str = (
        rf"^(.*node_modules|.*resources{re.escape(os.sep)}assets)(.*)$"
    )
    # Whether the ignore pattern is matched case-insensitively.
    ignore_case: bool = True
    # Prefix of archive file names.
    archive_prefix: str = "source_"
    # Suffix of archive file names.
    archive_suffix: str = ".zip"
    # Prefix of deploy directory names.
    deploy_prefix: str = "deploy_"
    # Regex locating the formatted timestamp inside an archive or deploy name.
    name_timestamp_regex: str = r"(\d{4}\.\d{2}\.\d{2}\.\d{6})"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Format of the timestamp embedded in archive and deploy names (always UTC).
    name: str = "%Y.%m.%d.%H%M%S"
    # Format used for timestamps in log output.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Default error code for failures of shovel commands.
    default: int = 91
    # Returned when the provided ignore pattern is not a valid regular expression.
    invalid_pattern: int = 92
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for shovel."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    archiver: ArchiverSettings = field(default_factory=ArchiverSettings)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the shovel binary.
    binary_name: str = "shovel"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read shovel config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            Path(env_path)
            if (env_path := os.getenv(EnvironmentVariables.config_path))
            else None,
            Path.cwd() / "shovel_config.toml",
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "shovel"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Unknown keys are ignored.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        if field_info.name not in data:
            continue

        value = data[field_info.name]
        if is_dataclass(field_info.type) and isinstance(value, dict):
            field_values[field_info.name] = _dict_to_dataclass(field_info.type, value)
        else:
            field_values[field_info.name] = value

    return cls(**field_values)


# Global configuration for shovel.
CFG = Config.load()
