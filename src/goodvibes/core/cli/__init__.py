"""goodvibes CLI — entry point for show, write, search and links commands."""

from __future__ import annotations

import click

from goodvibes import __version__


@click.group()
@click.version_option(version=__version__, package_name="goodvibes")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML or JSON config file. Defaults to ~/.goodvibes/config.yaml.",
)
@click.option("--data-dir", type=click.Path(file_okay=False), default=None, help="Base directory for diary data.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, data_dir: str | None, verbose: bool) -> None:
    """goodvibes: a diary with one entry per day and full-text search."""
    from goodvibes.core.cli.common import load_config
    from goodvibes.core.utils.logging import setup_logging_from_config

    config = load_config(config_file, data_dir)
    setup_logging_from_config(config, verbose=verbose)
    ctx.obj = config


# Register subcommands
from .entry_cmd import show, write  # noqa: E402
from .links_cmd import links  # noqa: E402
from .search_cmd import search  # noqa: E402

main.add_command(show)
main.add_command(write)
main.add_command(search)
main.add_command(links)
