"""
CLI interface for Cache Stats.

Provides command-line access to cache statistics reports.
"""

import logging
import sys
from typing import Dict, List, Mapping, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cache_stats.config.loader import ReportConfig, TimeUnit, load_report_config
from cache_stats.core.statistics import SourceStatistics, TotalStatistics, compute_statistics
from cache_stats.demo.sample_cache import build_demo_collector
from cache_stats.storage.event_log import load_event_log, save_event_log
from cache_stats.storage.models import CacheOperationEvent

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


def _configure_logging(verbose: bool) -> None:
    """Route debug logging through rich when verbose output is requested."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True
        )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Cache Stats CLI."""
    if ctx.invoked_subcommand is None:
        console.print("Cache Stats - Use --help to see available commands")


@app.command()
def report(
    events_file: str = typer.Argument(..., help="YAML event log to aggregate"),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML report configuration"
    ),
    source: Optional[List[str]] = typer.Option(
        None,
        "--source",
        "-s",
        help="Only report this cache source (repeatable)"
    ),
    enforced: bool = typer.Option(
        False,
        "--enforced",
        "-e",
        help="Exit with error code if the total hit ratio is below min_hit_ratio"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """
    Report cache usage statistics from a recorded event log.

    Prints calls, time, reads, hits, misses, writes, deletes and hit ratio
    for every cache source plus the total across all sources.
    """
    _configure_logging(verbose)
    try:
        config = load_report_config(config_path) if config_path else ReportConfig()
        events_by_source = load_event_log(events_file)

        selected = tuple(source) if source else config.sources
        if selected is not None:
            events_by_source = _select_sources(events_by_source, selected)

        per_source, total = compute_statistics(events_by_source)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if not per_source:
        console.print("\n[bold yellow]No cache sources found in event log[/]\n")
        sys.exit(EXIT_CODE_PASS)

    _display_statistics(per_source, total, config.time_unit)

    if enforced and _below_min_hit_ratio(total, config.min_hit_ratio):
        console.print(
            f"\n[bold red]Hit ratio {total.hit_ratio} is below "
            f"minimum {config.min_hit_ratio:g}%[/]"
        )
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def demo(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save the recorded demo events to this YAML file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """Run a sample workload through traced caches and report it."""
    _configure_logging(verbose)
    collector = build_demo_collector()
    _display_statistics(collector.get_statistics(), collector.get_totals(), TimeUnit.MILLISECONDS)

    if output:
        try:
            save_event_log(collector.get_calls(), output)
        except OSError as e:
            console.print(f"[red]Error writing event log:[/] {str(e)}")
            sys.exit(EXIT_CODE_FAIL)
        console.print(f"[green]✓[/] Demo events saved to {output}")
    sys.exit(EXIT_CODE_PASS)


def _select_sources(
    events_by_source: Mapping[str, List[CacheOperationEvent]],
    selected: Sequence[str]
) -> Dict[str, List[CacheOperationEvent]]:
    """Keep only the selected sources, warning about names not in the log.

    Raises:
        ValueError: If none of the selected sources is in the log
    """
    unknown = [name for name in selected if name not in events_by_source]
    for name in unknown:
        console.print(f"[yellow]Warning:[/] cache source '{name}' not found in event log")

    if len(unknown) == len(selected):
        raise ValueError(f"None of the selected cache sources were found: {', '.join(selected)}")

    return {
        name: events
        for name, events in events_by_source.items()
        if name in selected
    }


def _below_min_hit_ratio(total: TotalStatistics, min_hit_ratio: Optional[float]) -> bool:
    """Whether the total ratio fails the threshold; N/A never fails."""
    percent = total.hit_ratio_percent
    if min_hit_ratio is None or percent is None:
        return False
    return percent < min_hit_ratio


def _format_time(seconds: float, unit: TimeUnit) -> str:
    """Format cumulative time in the configured unit."""
    return f"{unit.convert(seconds):,.2f} {unit.value}"


def _statistics_row(name: str, statistics: SourceStatistics, unit: TimeUnit) -> List[str]:
    return [
        name,
        f"{statistics.calls:,}",
        _format_time(statistics.total_time, unit),
        f"{statistics.reads:,}",
        f"{statistics.hits:,}",
        f"{statistics.misses:,}",
        f"{statistics.writes:,}",
        f"{statistics.deletes:,}",
        statistics.hit_ratio,
    ]


def _display_statistics(
    per_source: Mapping[str, SourceStatistics],
    total: TotalStatistics,
    unit: TimeUnit
) -> None:
    """Display statistics as a table with one row per source and a total."""
    table = Table(title="Cache Statistics")
    table.add_column("Source", style="bold")
    for column in ("Calls", "Time", "Reads", "Hits", "Misses", "Writes", "Deletes", "Hits/Reads"):
        table.add_column(column, justify="right")

    for name, statistics in per_source.items():
        table.add_row(*_statistics_row(name, statistics, unit))
    table.add_section()
    table.add_row(*_statistics_row("Total", total, unit), style="bold")

    console.print(table)


if __name__ == "__main__":
    app()
