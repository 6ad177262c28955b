# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the shovel command-line tool.

This package packs source directories into timestamped zip archives and
extracts them into timestamped deploy directories, skipping files that
match an ignore pattern. All shovel CLI commands delegate to the `Archiver`
implemented in `shovel_lib.archive`.
"""

from .archive import Archiver
from .shovel import __version__, cli

__all__ = [
    "__version__",
    "Archiver",
    "cli",
    "archive",
    "core",
    "create",
    "extract",
    "names",
]
