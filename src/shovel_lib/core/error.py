# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout shovel.

Every failure the archiver can report is a `ShovelError`. The subclasses
distinguish missing paths, denied permissions, unreadable archives and
malformed ignore patterns. Each exception carries the exit code used by
the shovel commands.
"""

from .config import CFG


class ShovelError(Exception):
    """Common exception type for all recoverable shovel errors."""

    exit_code = CFG.exit_codes.default


class PathNotFoundError(ShovelError):
    """Raised when a source directory, archive or parent directory does not exist."""

    pass


class PermissionDeniedError(ShovelError):
    """Raised when a path cannot be read or written due to insufficient permissions."""

    pass


class CorruptArchiveError(ShovelError):
    """Raised when a file is not a readable zip archive."""

    pass


class InvalidPatternError(ShovelError):
    """Raised when an ignore pattern is not a valid regular expression."""

    exit_code = CFG.exit_codes.invalid_pattern
