# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Predicates deciding which files are left out of an archive.

A predicate takes the resolved absolute path of a file and returns True
if the file should be ignored.
"""

import fnmatch
import re
from collections.abc import Callable, Iterable
from pathlib import Path

from shovel_lib.core.config import CFG
from shovel_lib.core.error import InvalidPatternError

IgnorePredicate = Callable[[Path], bool]


class RegexIgnore:
    """Ignore files whose full path matches a regular expression."""

    def __init__(self, pattern: str, ignore_case: bool | None = None):
        """
        Compile the pattern.

        Args:
            pattern (str): The regular expression, matched from the start of the path.
            ignore_case (bool | None): Whether matching is case-insensitive.
                Defaults to `CFG.archiver.ignore_case`.

        Raises:
            InvalidPatternError: If the pattern is not a valid regular expression.
        """
        if ignore_case is None:
            ignore_case = CFG.archiver.ignore_case

        try:
            self._regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
        except re.error as e:
            raise InvalidPatternError(
                f"Invalid ignore pattern '{pattern}': {e}."
            ) from e

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def __call__(self, path: Path) -> bool:
        return self._regex.match(str(path)) is not None

    def __repr__(self) -> str:
        return f"RegexIgnore({self._regex.pattern!r})"


class GlobIgnore:
    """Ignore files whose full path matches any of the shell-style patterns."""

    def __init__(self, patterns: Iterable[str]):
        self._patterns = list(patterns)

    def __call__(self, path: Path) -> bool:
        return any(fnmatch.fnmatch(str(path), p) for p in self._patterns)

    def __repr__(self) -> str:
        return f"GlobIgnore({self._patterns!r})"


class PrefixIgnore:
    """Ignore files located inside any of the given directories."""

    def __init__(self, prefixes: Iterable[str | Path]):
        self._prefixes = [Path(p).resolve() for p in prefixes]

    def __call__(self, path: Path) -> bool:
        return any(path.is_relative_to(p) for p in self._prefixes)

    def __repr__(self) -> str:
        return f"PrefixIgnore({[str(p) for p in self._prefixes]!r})"


def never_ignore(_path: Path) -> bool:
    return False


def make_ignore_predicate(ignore: str | IgnorePredicate | None) -> IgnorePredicate:
    """
    Build an ignore predicate from the value accepted by `Archiver.create`.

    Args:
        ignore (str | IgnorePredicate | None): `None` selects the default pattern,
            an empty string disables filtering, any other string is compiled as
            a regular expression and a callable is used as is.

    Returns:
        IgnorePredicate: The predicate to apply to every file.

    Raises:
        InvalidPatternError: If a string pattern is not a valid regular expression.
    """
    if ignore is None:
        return RegexIgnore(CFG.archiver.ignore_pattern)
    if callable(ignore):
        return ignore
    if ignore == "":
        return never_ignore
    return RegexIgnore(ignore)
