# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a single archiver operation.

    Attributes:
        operation (str): Name of the operation (`create` or `extract`).
        success (bool): Whether the archive was closed successfully.
        duration (float): Elapsed wall-clock time in seconds.
        path (Path): The created archive or the extraction directory.
        files (int): Number of files written into or extracted from the archive.
        ignored (int): Number of files skipped by the ignore predicate.
    """

    operation: str
    success: bool
    duration: float
    path: Path
    files: int = 0
    ignored: int = 0

    def toDict(self) -> dict[str, Any]:
        """
        Return the result as a dictionary of plain values, suitable for YAML output.
        """
        data = asdict(self)
        data["path"] = str(self.path)
        return data
