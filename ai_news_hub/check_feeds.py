#!/usr/bin/env python3
"""Feed reachability check utility."""

import asyncio
import sys
import time
from datetime import UTC, datetime

import click
import orjson
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import get_settings
from .ingest.news import FeedSource, NewsFeedAdapter
from .logging import get_logger

logger = get_logger(__name__)
console = Console()


async def check_feed(adapter: NewsFeedAdapter, source: FeedSource) -> dict:
    """Fetch one feed and report its status.

    ``entry_count`` is every entry in the document; ``admitted_count`` is
    what survives the keyword filter for category feeds. A reachable feed
    with entries is healthy even when none are admitted.
    """
    start_time = time.perf_counter()
    try:
        parsed = await adapter.fetch_parsed(source)
    except Exception as e:
        logger.warning("Feed check failed", source=source.name, error=str(e))
        return {
            'name': source.name,
            'url': source.url,
            'status': 'unreachable',
            'response_time': time.perf_counter() - start_time,
            'entry_count': 0,
            'admitted_count': 0,
            'error': str(e),
        }

    items = adapter.admit_entries(parsed, source, datetime.now(UTC))
    return {
        'name': source.name,
        'url': source.url,
        'status': 'healthy' if parsed.entries else 'empty',
        'response_time': time.perf_counter() - start_time,
        'entry_count': len(parsed.entries),
        'admitted_count': len(items),
        'error': None,
    }


async def check_all_feeds(query: str) -> dict:
    """Check every feed used for ``query``."""
    async with NewsFeedAdapter(get_settings()) as adapter:
        sources = adapter.feed_sources(query)
        results = await asyncio.gather(*(check_feed(adapter, source) for source in sources))

    summary = {
        status: sum(1 for r in results if r['status'] == status)
        for status in ('healthy', 'empty', 'unreachable')
    }
    summary['total'] = len(results)
    return {
        'timestamp': datetime.now(UTC).isoformat(),
        'query': query,
        'summary': summary,
        'feeds': results,
    }


def display_report(report: dict):
    """Display feed report in a formatted table."""
    summary = report['summary']
    console.print(Panel(
        f"[green]Healthy: {summary['healthy']}[/green] | "
        f"[yellow]Empty: {summary['empty']}[/yellow] | "
        f"[red]Unreachable: {summary['unreachable']}[/red] | "
        f"Total: {summary['total']}",
        title="[bold]Feed Check Summary[/bold]",
        border_style="cyan"
    ))

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Feed", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Response Time", justify="right")
    table.add_column("Entries", justify="right")
    table.add_column("Admitted", justify="right")
    table.add_column("Last Error", overflow="fold")

    status_colors = {'healthy': 'green', 'empty': 'yellow', 'unreachable': 'red'}
    for feed in report['feeds']:
        color = status_colors[feed['status']]
        error = feed['error'] or '-'
        if len(error) > 50:
            error = error[:47] + "..."
        table.add_row(
            feed['name'],
            f"[{color}]{feed['status'].upper()}[/{color}]",
            f"{feed['response_time']:.2f}s",
            str(feed['entry_count']),
            str(feed['admitted_count']),
            error,
        )

    console.print(table)


@click.command()
@click.option('--query', '-q', default=None, help='Query used for the search feed')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
def main(query: str | None, output_json: bool):
    """Check reachability of the search feed and every category feed."""
    query = query or get_settings().default_query
    try:
        report = asyncio.run(check_all_feeds(query))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)

    if output_json:
        click.echo(orjson.dumps(report, option=orjson.OPT_INDENT_2).decode('utf-8'))
    else:
        display_report(report)

    if report['summary']['unreachable']:
        sys.exit(1)


if __name__ == "__main__":
    main()
