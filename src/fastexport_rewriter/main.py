"""fastexport-rewriter - fold bzr bug metadata into git commit messages.

Usage:
    bzr fast-export --no-plain --git-branch=master . | fastexport-rewriter | git fast-import
    fastexport-rewriter -i export.fi -o import.fi --stats
    fastexport-rewriter --bug-url 'https://bugs.launchpad.net/bugs/{id}'
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .bugs import BugPatterns
from .config import DEFAULT_BLOCK_SIZE, DEFAULT_BUG_URL_TEMPLATE, NEWLINES, RewriterConfig
from .errors import RewriteError
from .rewriter import FastImportRewriter, RewriteStats

# stdout carries the fast-import stream, so everything for humans goes to stderr.
err_console = Console(stderr=True, highlight=False, emoji=False)


def warn(message: str) -> None:
    err_console.print(message, markup=False, soft_wrap=True)


@click.command()
@click.version_option(version=__version__)
@click.option("--input", "-i", "source", type=click.File("rb"), default="-", help="fast-export stream (default: stdin)")
@click.option("--output", "-o", "sink", type=click.File("wb"), default="-", help="fast-import stream (default: stdout)")
@click.option("--block-size", type=click.IntRange(min=1), default=DEFAULT_BLOCK_SIZE, show_default=True, help="Chunk size for copying file contents")
@click.option("--bug-url", default=DEFAULT_BUG_URL_TEMPLATE, show_default=True, help="Bug tracker URL, {id} marks the bug number")
@click.option("--newline", type=click.Choice(sorted(NEWLINES)), default="platform", show_default=True, help="Line terminator for the output stream")
@click.option("--stats", is_flag=True, help="Print a summary to stderr when done")
def cli(source, sink, block_size: int, bug_url: str, newline: str, stats: bool):
    """Rewrite a bzr fast-export stream for git fast-import.

    Bug URLs from each commit's "property bugs" metadata are appended to
    the commit message unless the message already mentions the bug.
    Directory renames and deletes are dropped, tag names with spaces are
    made valid.
    """
    try:
        patterns = BugPatterns.from_url_template(bug_url)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--bug-url")

    config = RewriterConfig(block_size=block_size, newline=NEWLINES[newline])
    rewriter = FastImportRewriter(source, sink, config=config, patterns=patterns, warn=warn)
    try:
        result = rewriter.run()
    except RewriteError as e:
        sink.flush()
        raise click.ClickException(e.message)

    if stats:
        _print_stats(result)


def _print_stats(stats: RewriteStats) -> None:
    """Print a compact summary of the run."""
    table = Table(show_header=False, border_style="dim")
    table.add_column("Key", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Commits", f"{stats.commits:,}")
    table.add_row("Resets", f"{stats.resets:,}")
    table.add_row("Blobs", f"{stats.blobs:,} ({stats.blob_bytes:,} bytes)")
    table.add_row("Bug references added", f"{stats.bug_references_added:,}")
    if stats.directory_ops_suppressed:
        table.add_row("Directory ops dropped", f"{stats.directory_ops_suppressed:,}")
    if stats.skipped_tokens:
        table.add_row("Skipped lines", f"{stats.skipped_tokens:,}", style="yellow")

    err_console.print(Panel.fit(table, title="Rewrite summary", border_style="green"))


if __name__ == "__main__":
    cli()
