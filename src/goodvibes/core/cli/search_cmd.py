"""goodvibes search — full-text search with highlighted matches."""

from __future__ import annotations

import click

from goodvibes.core.cli.common import open_session
from goodvibes.core.utils.text import truncate_text
from goodvibes.journal.highlight import apply_highlight, highlight_spans


def _mark(fragment: str) -> str:
    return click.style(fragment, fg="black", bg="yellow")


def _matching_lines(text: str, query: str) -> list[str]:
    lines = []
    for line in text.splitlines():
        spans = highlight_spans(line, query)
        if spans:
            lines.append(apply_highlight(line, spans, _mark))
    return lines


@click.command()
@click.argument("query")
@click.pass_obj
def search(config, query: str) -> None:
    """Search all entries for QUERY and show the matching lines."""
    if not query.strip():
        click.echo("Please enter a search term.")
        return

    with open_session(config) as session:
        results = session.search(query)

    if not results:
        click.echo("No matches found.")
        return

    for result in results:
        click.secho(str(result), bold=True)
        lines = _matching_lines(result.text, result.query)
        if not lines:
            # Matched through a partial token; no literal occurrence to highlight
            first_line = result.text.strip().splitlines()[0] if result.text.strip() else ""
            lines = [truncate_text(first_line, 80)]
        for line in lines:
            click.echo(f"  {line}")
