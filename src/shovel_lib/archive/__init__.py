# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Utilities for packing source directories into archives and deploying them.

This module provides the `Archiver` class, which creates timestamped zip
archives of a directory and extracts them into timestamped deploy directories,
together with the predicates deciding which files are left out.
"""

from .archiver import Archiver
from .ignore import GlobIgnore, IgnorePredicate, PrefixIgnore, RegexIgnore
from .result import OperationResult

__all__ = [
    "Archiver",
    "GlobIgnore",
    "IgnorePredicate",
    "OperationResult",
    "PrefixIgnore",
    "RegexIgnore",
]
