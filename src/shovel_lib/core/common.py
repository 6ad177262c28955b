# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for shovel.

This module provides helpers for path resolution, translation of OS errors
into shovel errors, YAML output and interactive user prompts.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import readchar
import yaml
from rich.live import Live
from rich.text import Text

from .error import PathNotFoundError, PermissionDeniedError, ShovelError
from .logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def load_yaml_dumper() -> type[yaml.Dumper]:
    """Return the fastest available YAML dumper (CDumper if possible)."""
    try:
        from yaml import CDumper as Dumper  # type: ignore[attr-defined]

        logger.debug("Loaded YAML CDumper.")
    except ImportError:
        from yaml import Dumper

        logger.debug("Loaded default YAML dumper.")
    return Dumper


def dump_yaml(data: dict[str, Any], file: Path) -> None:
    """
    Write a dictionary into a YAML file.

    Args:
        data (dict[str, Any]): Data to write.
        file (Path): Path to the output file. Overwritten if it exists.

    Raises:
        ShovelError: If the file cannot be written.
    """
    try:
        with file.open("w") as f:
            yaml.dump(data, f, Dumper=load_yaml_dumper(), sort_keys=False)
    except OSError as e:
        raise translate_os_error(e, f"Could not write report '{file}'") from e

    logger.debug(f"Report written to '{file}'.")


def resolve_in(directory: str | Path | None, name: str) -> Path:
    """
    Join `name` onto `directory` and normalize the result into an absolute path.

    Args:
        directory (str | Path | None): Base directory. The current working directory is used if None.
        name (str): File or directory name to append.

    Returns:
        Path: The absolute, normalized path.
    """
    base = Path(directory) if directory is not None else Path.cwd()
    return (base / name).resolve()


def translate_os_error(error: OSError, message: str) -> ShovelError:
    """
    Convert an OSError into the matching shovel error.

    Args:
        error (OSError): The original error.
        message (str): Context describing the failed operation.

    Returns:
        ShovelError: `PathNotFoundError` for missing paths, `PermissionDeniedError`
            for denied access, plain `ShovelError` otherwise.
    """
    reason = error.strerror or str(error)
    if isinstance(error, FileNotFoundError | NotADirectoryError):
        return PathNotFoundError(f"{message}: {reason}.")
    if isinstance(error, PermissionError):
        return PermissionDeniedError(f"{message}: {reason}.")
    return ShovelError(f"{message}: {reason}.")


def yes_or_no_prompt(prompt: str) -> bool:
    """
    Display an interactive yes/no prompt and return the selection.

    Any key other than 'y' counts as 'No'.

    Args:
        prompt (str): The text to display as the question.

    Returns:
        bool: True if the user presses 'y', False otherwise.
    """
    prompt = f"   {prompt} "
    label = Text("PROMPT", style="magenta") + Text(prompt, style="default")

    with Live(label + Text("[y/N]", style="bold default"), refresh_per_second=1) as live:
        key = readchar.readkey().lower()

        if key == "y":
            choice = Text("[", style="bold default") + Text("y", style="bold green")
            choice += Text("/N]", style="bold default")
        else:
            choice = Text("[y/", style="bold default") + Text("N", style="bold red")
            choice += Text("]", style="bold default")

        live.update(label + choice)

    return key == "y"
