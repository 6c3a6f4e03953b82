"""CLI entry point for the HTML capture tool."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from qa_html_capture.comparator.line_diff import diff_lines, diff_stats, split_lines
from qa_html_capture.models.comparison import ComparisonResult
from qa_html_capture.models.config import CaptureConfig, EnvironmentConfig
from qa_html_capture.orchestrator import Orchestrator
from qa_html_capture.store.baseline_store import BaselineNotFoundError, BaselineReadError

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "qa-capture.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_config(path: str) -> CaptureConfig:
    """Load the config file, falling back to defaults when it does not exist."""
    try:
        return CaptureConfig.load(path)
    except FileNotFoundError:
        logger.debug("No config at %s, using defaults", path)
        return CaptureConfig()


def _read_html(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _print_summary(result: ComparisonResult) -> None:
    summary = result.summary
    table = Table(title=f"Comparison with '{escape(result.baseline_name)}'")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Elements", str(summary.total_elements))
    table.add_row("Differences", str(summary.total))
    table.add_row("Added", f"[green]{summary.added}[/green]")
    table.add_row("Removed", f"[red]{summary.removed}[/red]")
    table.add_row("Modified", f"[yellow]{summary.modified}[/yellow]")
    table.add_row("Moved", f"[cyan]{summary.moved}[/cyan]")
    table.add_row("Locator changes", str(summary.locator_changes))
    console.print(table)


def _print_differences(result: ComparisonResult) -> None:
    table = Table(title="Differences")
    table.add_column("Kind", style="bold")
    table.add_column("Element")
    table.add_column("Description")
    for diff in result.differences:
        table.add_row(diff.kind, escape(diff.element_key), escape(diff.description))
    console.print(table)

    if result.recommendations:
        rec_table = Table(title="Recommended locators")
        rec_table.add_column("Element")
        rec_table.add_column("Locator")
        rec_table.add_column("Reliability")
        rec_table.add_column("Action")
        for rec in result.recommendations:
            rec_table.add_row(escape(rec.element_key), escape(rec.best_locator), rec.reliability, rec.prior_action)
        console.print(rec_table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Capture HTML baselines and keep test locators in sync."""
    setup_logging(verbose)


@cli.command()
@click.option("--project", "-p", prompt="Project name", help="Project name")
@click.option("--url", "-u", default="", help="Default environment URL")
def init(project: str, url: str) -> None:
    """Create a default configuration file."""
    config_path = Path(DEFAULT_CONFIG)
    if config_path.exists():
        if not click.confirm(f"{DEFAULT_CONFIG} already exists. Overwrite?"):
            return

    cfg = CaptureConfig(project_name=project)
    if url:
        cfg.environments.append(EnvironmentConfig(name="default", url=url, is_default=True))
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nCapture a baseline with:")
    console.print('  [blue]qa-capture capture page.html --name "Homepage v1"[/blue]')


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", "-n", prompt="Baseline name", help="Name for this baseline")
@click.option("--url", "-u", default="", help="Source URL recorded with the baseline")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def capture(html_file: str, name: str, url: str, config: str) -> None:
    """Capture HTML_FILE as a new baseline."""
    cfg = load_config(config)
    orchestrator = Orchestrator(cfg)
    baseline = orchestrator.capture_baseline(_read_html(html_file), name, url or html_file)
    console.print(
        f"[green]Baseline \"{escape(baseline.name)}\" captured:[/green] "
        f"{baseline.element_count} elements (id {baseline.id})"
    )


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--baseline", "-b", "baseline_id", default=None, help="Baseline id to compare against")
@click.option("--report", "-r", is_flag=True, help="Write a JSON report")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def compare(html_file: str, baseline_id: str | None, report: bool, config: str) -> None:
    """Compare HTML_FILE against a captured baseline."""
    cfg = load_config(config)
    orchestrator = Orchestrator(cfg)

    if baseline_id is None:
        baselines = orchestrator.store.list_baselines()
        if len(baselines) != 1:
            if not baselines:
                console.print("[yellow]No baselines captured yet. Run 'qa-capture capture' first.[/yellow]")
            else:
                console.print("[yellow]No baseline selected. Pass --baseline with one of:[/yellow]")
                for b in baselines:
                    console.print(f"  {b.id}  {escape(b.name)}")
            sys.exit(1)
        baseline_id = baselines[0].id

    try:
        result = orchestrator.compare_with_baseline(baseline_id, _read_html(html_file), html_file)
    except BaselineNotFoundError:
        console.print(f"[yellow]No baseline selected: '{baseline_id}' does not exist.[/yellow]")
        sys.exit(1)
    except BaselineReadError as e:
        console.print(f"[red]Baseline unreadable:[/red] {escape(str(e))}")
        sys.exit(1)

    if not result.summary.has_changes:
        console.print(f"[green]No differences found against '{escape(result.baseline_name)}'.[/green]")
        return

    _print_summary(result)
    _print_differences(result)

    if report:
        path = orchestrator.write_comparison_report(result)
        console.print(f"  JSON report: [blue]{path}[/blue]")


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the locator report to this path")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def locators(html_file: str, output: str | None, config: str) -> None:
    """Rank locators for every element of HTML_FILE."""
    cfg = load_config(config)
    orchestrator = Orchestrator(cfg)
    report = orchestrator.generate_locators(_read_html(html_file))

    table = Table(title=f"Locators ({report.total_elements} elements)")
    table.add_column("Element")
    table.add_column("Tag")
    table.add_column("Recommended")
    table.add_column("Reliability")
    for el in report.elements:
        reliability = el.candidates[0].reliability if el.candidates else ""
        table.add_row(escape(el.element_key), el.tag_name, escape(el.recommended_locator or ""), reliability)
    console.print(table)

    if output:
        path = orchestrator.write_locator_report(report, Path(output))
        console.print(f"  Locator report: [blue]{path}[/blue]")


@cli.command()
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False))
def diff(old_file: str, new_file: str) -> None:
    """Show a line diff between OLD_FILE and NEW_FILE."""
    blocks = diff_lines(split_lines(_read_html(old_file)), split_lines(_read_html(new_file)))
    for block in blocks:
        if block.kind == "equal":
            continue
        if block.kind == "delete":
            for line in block.lines:
                console.print(f"[red]- {escape(line)}[/red]", highlight=False)
        elif block.kind == "insert":
            for line in block.lines:
                console.print(f"[green]+ {escape(line)}[/green]", highlight=False)
        else:
            for before, after in zip(block.before_lines, block.after_lines):
                console.print(f"[yellow]~ {escape(before)}[/yellow]", highlight=False)
                console.print(f"[yellow]  {escape(after)}[/yellow]", highlight=False)

    stats = diff_stats(blocks)
    console.print(
        f"{stats['equal']} unchanged, {stats['delete']} deleted, "
        f"{stats['insert']} inserted, {stats['replace']} replaced lines"
    )


@cli.group()
def baselines() -> None:
    """Manage captured baselines."""
    pass


@baselines.command("list")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def baselines_list(config: str) -> None:
    """List all baselines."""
    orchestrator = Orchestrator(load_config(config))
    items = orchestrator.store.list_baselines()
    if not items:
        console.print("[yellow]No baselines captured[/yellow]")
        return
    table = Table(title="Baselines")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("URL")
    table.add_column("Captured")
    table.add_column("Elements", justify="right")
    for b in items:
        table.add_row(b.id, escape(b.name), escape(b.source_url), b.captured_at, str(b.element_count))
    console.print(table)


@baselines.command("show")
@click.argument("baseline_id")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def baselines_show(baseline_id: str, config: str) -> None:
    """Show details of one baseline."""
    orchestrator = Orchestrator(load_config(config))
    try:
        baseline = orchestrator.store.get(baseline_id)
    except BaselineNotFoundError:
        console.print(f"[yellow]No baseline with id {baseline_id}[/yellow]")
        sys.exit(1)
    except BaselineReadError as e:
        console.print(f"[red]Baseline unreadable:[/red] {escape(str(e))}")
        sys.exit(1)
    console.print(f"[bold]{escape(baseline.name)}[/bold] ({baseline.id})")
    console.print(f"  URL: {escape(baseline.source_url)}")
    console.print(f"  Captured: {baseline.captured_at}")
    console.print(f"  Elements: {baseline.element_count}")
    console.print(f"  File: {orchestrator.store.path_for(baseline.id)}")


@baselines.command("delete")
@click.argument("baseline_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def baselines_delete(baseline_id: str, yes: bool, config: str) -> None:
    """Delete one baseline."""
    orchestrator = Orchestrator(load_config(config))
    if not yes and not click.confirm(f"Delete baseline {baseline_id}? This cannot be undone."):
        return
    if orchestrator.store.delete(baseline_id):
        console.print(f"[green]Deleted baseline {baseline_id}[/green]")
    else:
        console.print(f"[yellow]No baseline with id {baseline_id}[/yellow]")
        sys.exit(1)


@baselines.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def baselines_clear(yes: bool, config: str) -> None:
    """Delete all baselines."""
    orchestrator = Orchestrator(load_config(config))
    if not yes and not click.confirm("Clear all baselines? This cannot be undone."):
        return
    removed = orchestrator.store.clear()
    console.print(f"[green]Cleared {removed} baselines[/green]")


if __name__ == "__main__":
    cli()
