"""goodvibes show / write — read and edit a single day's entry."""

from __future__ import annotations

import sys

import click

from goodvibes.core.cli.common import DATE_ARGUMENT, open_session, resolve_date
from goodvibes.core.exceptions import FileIOError


@click.command()
@click.argument("day", type=DATE_ARGUMENT, required=False)
@click.pass_obj
def show(config, day) -> None:
    """Print the entry for DAY (YYYY-MM-DD, default today)."""
    day = resolve_date(day)
    with open_session(config) as session:
        try:
            text = session.load_entry(day)
        except FileIOError as e:
            raise click.ClickException(str(e)) from e
    if text:
        click.echo(text)
    else:
        click.echo(f"No entry for {day.isoformat()}.", err=True)


@click.command()
@click.argument("day", type=DATE_ARGUMENT, required=False)
@click.option("--text", "-t", default=None, help="Entry text. Read from stdin or an editor when omitted.")
@click.pass_obj
def write(config, day, text: str | None) -> None:
    """Save the entry for DAY (YYYY-MM-DD, default today).

    Without --text, piped stdin is used; on a terminal the current entry
    opens in $EDITOR.
    """
    day = resolve_date(day)
    with open_session(config) as session:
        try:
            current = session.load_entry(day)
        except FileIOError as e:
            raise click.ClickException(str(e)) from e

        if text is None:
            stdin = click.get_text_stream("stdin")
            if stdin.isatty():
                text = click.edit(current, extension=".txt")
                if text is None:
                    click.echo("No changes.")
                    return
            else:
                text = stdin.read()

        if not session.on_focus_lost(text):
            click.echo(f"Could not save entry for {day.isoformat()}.", err=True)
            sys.exit(1)
    click.echo(f"Saved {day.isoformat()}.")
