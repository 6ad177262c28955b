# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from shovel_lib.archive import Archiver
from shovel_lib.core.config import CFG
from shovel_lib.core.error import ShovelError
from shovel_lib.core.logger import get_logger

logger = get_logger(__name__)


@click.command(
    short_help="Print the archive and deploy names for a timestamp.",
    help=f"""Print the name of the archive and of the deploy directory derived from a timestamp.

{click.style("TIMESTAMP", fg="green")}   Unix timestamp to derive the names from. Optional, defaults to the current time.

Names are formatted as `{CFG.archiver.archive_prefix}YYYY.MM.DD.HHMMSS{CFG.archiver.archive_suffix}`
and `{CFG.archiver.deploy_prefix}YYYY.MM.DD.HHMMSS` using the UTC time of the timestamp.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "timestamp",
    type=int,
    metavar=click.style("TIMESTAMP", fg="green"),
    required=False,
    default=None,
)
@click.option(
    "--archive",
    "only",
    flag_value="archive",
    help="Print only the archive name.",
)
@click.option(
    "--deploy",
    "only",
    flag_value="deploy",
    help="Print only the deploy name.",
)
def names(timestamp: int | None, only: str | None) -> NoReturn:
    """
    Print the names derived from the given timestamp.
    """
    try:
        archiver = Archiver(timestamp)
        if only != "deploy":
            click.echo(archiver.currentArchiveName())
        if only != "archive":
            click.echo(archiver.currentDeployName())
        sys.exit(0)
    except ShovelError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
