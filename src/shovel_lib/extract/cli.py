# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from shovel_lib.archive import Archiver
from shovel_lib.core.common import dump_yaml, resolve_in, yes_or_no_prompt
from shovel_lib.core.config import CFG
from shovel_lib.core.error import ShovelError
from shovel_lib.core.logger import get_logger

logger = get_logger(__name__)


@click.command(
    short_help="Extract an archive into a timestamped deploy directory.",
    help=f"""Extract all files of a zip archive into a directory named `{CFG.archiver.deploy_prefix}YYYY.MM.DD.HHMMSS`.

{click.style("ARCHIVE", fg="green")}   The zip archive to extract.

The timestamp of the deploy directory is the current time, unless it is set using `--timestamp`
or taken from the name of the archive using `--match-archive`.

Files already present in the deploy directory are overwritten.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "archive",
    type=click.Path(path_type=Path),
    metavar=click.style("ARCHIVE", fg="green"),
)
@click.option(
    "-d",
    "--destination-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory in which the deploy directory is created. Defaults to the current directory.",
)
@click.option(
    "-t",
    "--timestamp",
    type=int,
    default=None,
    help="Unix timestamp used to name the deploy directory. Defaults to the current time.",
)
@click.option(
    "-m",
    "--match-archive",
    is_flag=True,
    help="Name the deploy directory using the timestamp found in the name of the archive.",
)
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    help="Extract into an existing deploy directory without confirmation.",
)
@click.option(
    "--report",
    type=click.Path(path_type=Path),
    default=None,
    help="Write a YAML report of the operation into this file.",
)
def extract(
    archive: Path,
    destination_dir: Path | None,
    timestamp: int | None,
    match_archive: bool,
    yes: bool,
    report: Path | None,
) -> NoReturn:
    """
    Extract the archive into a timestamped deploy directory.
    """
    try:
        _extract_archive(
            _make_archiver(archive, timestamp, match_archive),
            archive,
            destination_dir,
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


def _make_archiver(
    archive: Path, timestamp: int | None, match_archive: bool
) -> Archiver:
    """
    Create the Archiver whose timestamp names the deploy directory.

    Raises:
        ShovelError: If both a timestamp and `--match-archive` are given
            or the archive name holds no timestamp.
    """
    if match_archive:
        if timestamp is not None:
            raise ShovelError(
                "Options '--timestamp' and '--match-archive' are mutually exclusive."
            )
        return Archiver.fromName(archive)

    return Archiver(timestamp)


def _extract_archive(
    archiver: Archiver,
    archive: Path,
    destination_dir: Path | None,
    yes: bool,
    report: Path | None,
) -> None:
    """
    Extract the archive, asking before extracting into an existing directory.

    Raises:
        ShovelError: If the archive could not be extracted or the report could not be written.
    """
    target = resolve_in(destination_dir, archiver.currentDeployName())
    if (
        target.exists()
        and not yes
        and not yes_or_no_prompt(
            f"Deploy directory '{target}' already exists. Extract into it anyway?"
        )
    ):
        logger.info("Operation aborted.")
        return

    result = archiver.extractArchive(archive, destination_dir)
    logger.info(
        f"Extracted {result.files} files into '{result.path}' in {result.duration:.2f} s."
    )

    if report:
        dump_yaml(result.toDict(), report)
