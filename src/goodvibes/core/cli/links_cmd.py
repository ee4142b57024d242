"""goodvibes links — list and open links found in an entry."""

from __future__ import annotations

import click

from goodvibes.core.cli.common import DATE_ARGUMENT, open_session, resolve_date
from goodvibes.core.exceptions import FileIOError


@click.command()
@click.argument("day", type=DATE_ARGUMENT, required=False)
@click.option("--open", "open_index", type=int, default=None, help="Open the N-th link (1-based) in the default app.")
@click.pass_obj
def links(config, day, open_index: int | None) -> None:
    """List links in the entry for DAY (YYYY-MM-DD, default today)."""
    day = resolve_date(day)
    with open_session(config) as session:
        try:
            found = session.links(session.load_entry(day))
        except FileIOError as e:
            raise click.ClickException(str(e)) from e

        if not found:
            click.echo(f"No links in {day.isoformat()}.")
            return

        if open_index is None:
            for i, link in enumerate(found, start=1):
                click.echo(f"{i}. {link}")
            return

        if not 1 <= open_index <= len(found):
            raise click.BadParameter(f"must be between 1 and {len(found)}", param_hint="--open")
        link = found[open_index - 1]
        if not session.open_link(link):
            raise click.ClickException(f"Failed to open link: {link}")
        click.echo(f"Opened {link}")
