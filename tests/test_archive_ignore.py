# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import re
from pathlib import Path

import pytest

from shovel_lib.archive.ignore import (
    GlobIgnore,
    PrefixIgnore,
    RegexIgnore,
    make_ignore_predicate,
    never_ignore,
)
from shovel_lib.core.error import InvalidPatternError


@pytest.mark.parametrize(
    "path",
    [
        "/srv/app/node_modules/lodash/index.js",
        "/srv/app/packages/ui/node_modules/react/index.js",
        "/srv/app/NODE_MODULES/x.js",
        f"/srv/app/resources{os.sep}assets/logo.png",
        "/srv/app/Resources/Assets/styles/main.scss",
        "/srv/app/node_modules",
    ],
)
def test_default_pattern_ignores(path):
    assert make_ignore_predicate(None)(Path(path))


@pytest.mark.parametrize(
    "path",
    [
        "/srv/app/src/index.js",
        "/srv/app/resources/views/home.blade.php",
        "/srv/app/assets/logo.png",
        "/srv/app/node/modules.js",
    ],
)
def test_default_pattern_keeps(path):
    assert not make_ignore_predicate(None)(Path(path))


def test_regex_ignore_matches_from_start():
    predicate = RegexIgnore(r"secret")

    assert predicate(Path("secret/key.pem"))
    assert not predicate(Path("/srv/secret/key.pem"))


def test_regex_ignore_case_sensitive():
    predicate = RegexIgnore(r".*\.LOG$", ignore_case=False)

    assert predicate(Path("/var/app.LOG"))
    assert not predicate(Path("/var/app.log"))


def test_regex_ignore_invalid_pattern_raises():
    with pytest.raises(InvalidPatternError, match="Invalid ignore pattern"):
        RegexIgnore("([unclosed")


def test_regex_ignore_exposes_pattern():
    assert RegexIgnore(r".*\.pyc$").pattern == r".*\.pyc$"


def test_glob_ignore():
    predicate = GlobIgnore(["*.pyc", "*/.git/*"])

    assert predicate(Path("/srv/app/module.pyc"))
    assert predicate(Path("/srv/app/.git/HEAD"))
    assert not predicate(Path("/srv/app/module.py"))


def test_glob_ignore_empty():
    assert not GlobIgnore([])(Path("/srv/app/module.py"))


def test_prefix_ignore(tmp_path):
    (tmp_path / "build").mkdir()
    predicate = PrefixIgnore([tmp_path / "build"])

    assert predicate((tmp_path / "build" / "out.o").resolve())
    assert not predicate((tmp_path / "src" / "main.c").resolve())
    assert not predicate((tmp_path / "buildings.txt").resolve())


def test_make_ignore_predicate_empty_string_disables_filtering():
    predicate = make_ignore_predicate("")

    assert predicate is never_ignore
    assert not predicate(Path("/srv/app/node_modules/x.js"))


def test_make_ignore_predicate_passes_callables_through():
    def custom(path: Path) -> bool:
        return path.suffix == ".tmp"

    assert make_ignore_predicate(custom) is custom


def test_make_ignore_predicate_custom_regex():
    predicate = make_ignore_predicate(r".*\.tmp$")

    assert isinstance(predicate, RegexIgnore)
    assert predicate(Path("/a/b.TMP"))
    assert not predicate(Path("/a/node_modules/b.js"))


def test_make_ignore_predicate_invalid_regex_raises():
    with pytest.raises(InvalidPatternError):
        make_ignore_predicate("*.tmp")


def test_regex_ignore_chains_re_error():
    with pytest.raises(InvalidPatternError) as exc_info:
        RegexIgnore("([unclosed")

    assert isinstance(exc_info.value.__cause__, re.error)


def test_regex_ignore_reads_case_setting_at_call_time(monkeypatch):
    from shovel_lib.core.config import CFG

    monkeypatch.setattr(CFG.archiver, "ignore_case", False)

    predicate = RegexIgnore(r".*\.LOG$")
    assert not predicate(Path("/var/app.log"))
    assert predicate(Path("/var/app.LOG"))
