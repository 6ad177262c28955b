# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from shovel_lib.archive import Archiver, GlobIgnore, IgnorePredicate
from shovel_lib.core.common import dump_yaml, resolve_in, yes_or_no_prompt
from shovel_lib.core.config import CFG
from shovel_lib.core.error import ShovelError
from shovel_lib.core.logger import get_logger

logger = get_logger(__name__)


@click.command(
    short_help="Pack a directory into a timestamped zip archive.",
    help=f"""Pack all files of a directory into a zip archive named `{CFG.archiver.archive_prefix}YYYY.MM.DD.HHMMSS{CFG.archiver.archive_suffix}`.

{click.style("SOURCE_DIR", fg="green")}   The directory to pack.

Files are stored under their path relative to SOURCE_DIR. Empty directories are not preserved.

By default, files inside `node_modules` and `resources/assets` directories are skipped.
Use `--ignore` to provide your own regular expression matched against the absolute path of every file,
`--glob` to skip files matching shell-style patterns, or `--no-ignore` to pack everything.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "source_dir",
    type=click.Path(path_type=Path),
    metavar=click.style("SOURCE_DIR", fg="green"),
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory in which the archive is created. Defaults to the current directory.",
)
@click.option(
    "-i",
    "--ignore",
    type=str,
    default=None,
    help="Regular expression (case-insensitive) selecting files that should not be packed.",
)
@click.option(
    "-g",
    "--glob",
    "globs",
    type=str,
    multiple=True,
    help="Shell-style pattern selecting files that should not be packed. Can be repeated.",
)
@click.option(
    "--no-ignore",
    is_flag=True,
    help="Pack all files, including those in dependency and asset directories.",
)
@click.option(
    "-t",
    "--timestamp",
    type=int,
    default=None,
    help="Unix timestamp used to name the archive. Defaults to the current time.",
)
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    help="Overwrite an existing archive of the same name without confirmation.",
)
@click.option(
    "--report",
    type=click.Path(path_type=Path),
    default=None,
    help="Write a YAML report of the operation into this file.",
)
def create(
    source_dir: Path,
    output_dir: Path | None,
    ignore: str | None,
    globs: tuple[str, ...],
    no_ignore: bool,
    timestamp: int | None,
    yes: bool,
    report: Path | None,
) -> NoReturn:
    """
    Pack the source directory into a timestamped zip archive.
    """
    try:
        _create_archive(
            Archiver(timestamp),
            source_dir,
            output_dir,
            _select_ignore(ignore, globs, no_ignore),
            yes,
            report,
        )
        sys.exit(0)
    except ShovelError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def _select_ignore(
    ignore: str | None, globs: tuple[str, ...], no_ignore: bool
) -> str | IgnorePredicate | None:
    """
    Turn the ignore-related command line options into the value accepted by `Archiver`.

    Raises:
        ShovelError: If more than one of the options is used.
    """
    if sum([ignore is not None, bool(globs), no_ignore]) > 1:
        raise ShovelError(
            "Options '--ignore', '--glob' and '--no-ignore' are mutually exclusive."
        )

    if no_ignore:
        return ""
    if globs:
        return GlobIgnore(globs)
    return ignore


def _create_archive(
    archiver: Archiver,
    source_dir: Path,
    output_dir: Path | None,
    ignore: str | IgnorePredicate | None,
    yes: bool,
    report: Path | None,
) -> None:
    """
    Create the archive, asking before an existing archive is overwritten.

    Raises:
        ShovelError: If the archive could not be created or the report could not be written.
    """
    archive = resolve_in(output_dir, archiver.currentArchiveName())
    if (
        archive.exists()
        and not yes
        and not yes_or_no_prompt(f"Archive '{archive}' already exists. Overwrite it?")
    ):
        logger.info("Operation aborted.")
        return

    result = archiver.createArchive(source_dir, output_dir, ignore)
    logger.info(
        f"Created archive '{result.path}' with {result.files} files "
        f"({result.ignored} ignored) in {result.duration:.2f} s."
    )

    if report:
        dump_yaml(result.toDict(), report)
