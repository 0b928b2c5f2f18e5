"""
Command-line interface for export-diff.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import ExportDiffConfig, load_config
from .differ import ChangeType, format_side_by_side, format_unified, line_diff
from .exceptions import ExportDiffError
from .loader import fetch_snapshot
from .logging_utils import CLI, configure_logging, get_logger
from .models import ComparisonResult
from .reconciler import reconcile
from .stats import collection_stats, record_stats
from .store import ExportDiffService, VersionStore

console = Console()
logger = get_logger(__name__)


CHANGE_COLORS = {
    ChangeType.ADDED: "green",
    ChangeType.REMOVED: "red",
    ChangeType.MODIFIED: "yellow",
    ChangeType.UNCHANGED: "dim",
}

CHANGE_SYMBOLS = {
    ChangeType.ADDED: "+",
    ChangeType.REMOVED: "-",
    ChangeType.MODIFIED: "~",
    ChangeType.UNCHANGED: " ",
}


def format_change_type(ctype: ChangeType) -> str:
    """Format change type for display."""
    color = CHANGE_COLORS.get(ctype, 'white')
    return f"[{color}]{escape(CHANGE_SYMBOLS[ctype])}[/]"


def _preview(text: str, max_lines: int) -> list[str]:
    lines = text.split('\n')
    shown = [escape(line) for line in lines[:max_lines]]
    if len(lines) > max_lines:
        shown.append(f"[dim]... ({len(lines) - max_lines} more lines)[/dim]")
    return shown


def _fail(error: Exception):
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


def print_comparison(
    result: ComparisonResult,
    old_label: str,
    new_label: str,
    show_unchanged: bool = False,
    max_preview_lines: int = 5,
):
    """Print a reconciliation with rich formatting."""
    summary = result.summary
    console.print(Panel(
        f"[bold]Comparing:[/bold]\n"
        f"  [red]- {escape(old_label)}[/red]\n"
        f"  [green]+ {escape(new_label)}[/green]\n\n"
        f"Prompts: [cyan]{summary.total}[/cyan]",
        title="Export Diff",
        border_style="blue",
    ))

    for diff in result.records:
        if diff.status == ChangeType.UNCHANGED and not show_unchanged:
            continue

        marker = format_change_type(diff.status)
        stats = record_stats(diff)
        console.print(
            f"\n{marker} [bold]{escape(diff.name or diff.id)}[/bold] "
            f"[dim]({escape(diff.id)})[/dim] {diff.status.value} "
            f"[green]+{stats.lines_added}[/green] [red]-{stats.lines_removed}[/red]"
        )

        if diff.status == ChangeType.ADDED:
            for line in _preview(diff.new_value.content, max_preview_lines):
                console.print(f"  [green]{line}[/green]")

        elif diff.status == ChangeType.REMOVED:
            for line in _preview(diff.old_value.content, max_preview_lines):
                console.print(f"  [red]{line}[/red]")

        elif diff.status == ChangeType.MODIFIED:
            for change in diff.changes:
                console.print(f"  [yellow]{escape(change.field)}[/yellow]")
                if change.field == 'content':
                    ops = [op for op in line_diff(change.old_value, change.new_value)
                           if op.type != ChangeType.UNCHANGED]
                    for op in ops[:max_preview_lines]:
                        color = CHANGE_COLORS[op.type]
                        console.print(f"    [{color}]{escape(CHANGE_SYMBOLS[op.type])} {escape(op.text)}[/]")
                    if len(ops) > max_preview_lines:
                        console.print(f"    [dim]...[/dim]")
                else:
                    console.print(f"    [red]- {escape(change.old_value)}[/red]")
                    console.print(f"    [green]+ {escape(change.new_value)}[/green]")

    totals = collection_stats(result.records)
    console.print(f"\n[bold]Summary:[/bold] "
                  f"[green]+{summary.added}[/green] "
                  f"[red]-{summary.removed}[/red] "
                  f"[yellow]~{summary.modified}[/yellow] "
                  f"[dim]={summary.unchanged}[/dim] "
                  f"(lines [green]+{totals.lines_added}[/green] [red]-{totals.lines_removed}[/red], "
                  f"fields changed {totals.fields_changed})")


def comparison_to_json(result: ComparisonResult, show_unchanged: bool) -> dict:
    output = result.to_dict()
    output['prompts'] = [
        dict(record.to_dict(), stats=record_stats(record).to_dict())
        for record in result.records
        if record.status != ChangeType.UNCHANGED or show_unchanged
    ]
    output['stats'] = collection_stats(result.records).to_dict()
    return output


def _emit(result: ComparisonResult, output_format: str, show_unchanged: bool,
          config: ExportDiffConfig, old_label: str, new_label: str):
    if output_format == "json":
        click.echo(json.dumps(comparison_to_json(result, show_unchanged), indent=2))
    elif output_format == "summary":
        s = result.summary
        click.echo(f"added={s.added} removed={s.removed} modified={s.modified} "
                   f"unchanged={s.unchanged} total={s.total}")
    elif result.has_changes or show_unchanged:
        print_comparison(result, old_label, new_label, show_unchanged,
                         config.display.max_preview_lines)
    else:
        console.print("[dim]No differences[/dim]")


def _open_service(config: ExportDiffConfig, manifest: Optional[str]) -> ExportDiffService:
    manifest = manifest or config.store.manifest
    if not manifest:
        raise click.UsageError("No version manifest given (use --manifest or store.manifest in config)")
    timeout = config.fetch.timeout
    return ExportDiffService(
        VersionStore.from_manifest(manifest),
        fetcher=lambda url: fetch_snapshot(url, timeout=timeout),
        status_order=config.status_order,
    )


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML config file (defaults to $EXPORT_DIFF_CONFIG)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """
    Compare versions of exported prompt collections.

    Classifies every prompt as added, removed, modified or unchanged,
    with field-level detail and line diffs for modified prompts.

    Examples:

        export-diff compare exports/v1.json.gz exports/v2.json.gz

        export-diff inline old_prompt.txt new_prompt.txt

        export-diff versions --user alice --manifest versions.yaml

        export-diff compare-versions v1 v2 --user alice --manifest versions.yaml
    """
    try:
        config = load_config(config_path)
    except ExportDiffError as e:
        _fail(e)

    configure_logging("DEBUG" if verbose else config.logging.level)
    logger.debug(f"{CLI} config loaded from {config_path or 'defaults'}")
    ctx.obj = config


@main.command()
@click.argument("old_file")
@click.argument("new_file")
@click.option("--format", "-f", "output_format",
              type=click.Choice(["semantic", "json", "summary"]),
              default="semantic", help="Output format")
@click.option("--show-unchanged", "-u", is_flag=True, help="Show unchanged prompts")
@click.pass_obj
def compare(config: ExportDiffConfig, old_file: str, new_file: str, output_format: str,
            show_unchanged: bool):
    """
    Compare two export snapshots (paths or URLs, optionally gzipped).
    """
    show_unchanged = show_unchanged or config.display.show_unchanged

    try:
        old_snapshot = fetch_snapshot(old_file, timeout=config.fetch.timeout)
        new_snapshot = fetch_snapshot(new_file, timeout=config.fetch.timeout)
    except ExportDiffError as e:
        _fail(e)

    result = reconcile(old_snapshot, new_snapshot, config.status_order)
    _emit(result, output_format, show_unchanged, config, old_file, new_file)


@main.command()
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "-f", "output_format",
              type=click.Choice(["unified", "side-by-side", "json"]),
              default="unified", help="Output format")
def inline(old_file: str, new_file: str, output_format: str):
    """
    Line diff of two text files (e.g. one prompt's content before and after).
    """
    old_text = Path(old_file).read_text(encoding="utf-8")
    new_text = Path(new_file).read_text(encoding="utf-8")
    lines = line_diff(old_text, new_text)

    if output_format == "json":
        click.echo(json.dumps([line.to_dict() for line in lines], indent=2))

    elif output_format == "side-by-side":
        table = Table(show_header=True, header_style="bold")
        table.add_column("", width=1)
        table.add_column(escape(old_file), style="red")
        table.add_column(escape(new_file), style="green")
        for marker, old_line, new_line in format_side_by_side(lines):
            old_line, new_line = escape(old_line), escape(new_line)
            if marker == ' ':
                table.add_row(marker, old_line, new_line)
            elif marker == '<':
                table.add_row("[red]<[/red]", f"[red]{old_line}[/red]", "")
            elif marker == '>':
                table.add_row("[green]>[/green]", "", f"[green]{new_line}[/green]")
            else:
                table.add_row("[yellow]|[/yellow]", f"[red]{old_line}[/red]", f"[green]{new_line}[/green]")
        console.print(table)

    else:
        if all(line.type == ChangeType.UNCHANGED for line in lines):
            console.print("[dim]No differences[/dim]")
        else:
            click.echo(format_unified(lines))


@main.command()
@click.option("--user", "-U", "user_id", required=True, help="Owning user id")
@click.option("--manifest", "-m", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Version manifest (defaults to store.manifest in config)")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_obj
def versions(config: ExportDiffConfig, user_id: str, manifest: Optional[str], json_output: bool):
    """
    List export versions available for comparison.
    """
    try:
        service = _open_service(config, manifest)
    except ExportDiffError as e:
        _fail(e)

    found = service.list_comparable_versions(user_id)

    if json_output:
        click.echo(json.dumps([v.to_listing() for v in found], indent=2))
        return

    if not found:
        console.print("[dim]No versions found[/dim]")
        return

    table = Table(title=f"Export versions: {escape(user_id)}")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Id")
    table.add_column("Created", style="dim")
    table.add_column("Prompts", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Description")

    for v in found:
        table.add_row(
            str(v.version_number),
            escape(v.id),
            v.created_at.isoformat(timespec="seconds") if v.created_at else "-",
            str(v.prompt_count) if v.prompt_count is not None else "-",
            str(v.file_size) if v.file_size is not None else "-",
            escape(v.description or "-"),
        )

    console.print(table)


@main.command("compare-versions")
@click.argument("version1_id")
@click.argument("version2_id")
@click.option("--user", "-U", "user_id", required=True, help="Owning user id")
@click.option("--manifest", "-m", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Version manifest (defaults to store.manifest in config)")
@click.option("--format", "-f", "output_format",
              type=click.Choice(["semantic", "json", "summary"]),
              default="semantic", help="Output format")
@click.option("--show-unchanged", "-u", is_flag=True, help="Show unchanged prompts")
@click.pass_obj
def compare_versions(config: ExportDiffConfig, version1_id: str, version2_id: str, user_id: str,
                     manifest: Optional[str], output_format: str, show_unchanged: bool):
    """
    Compare two stored export versions by id.
    """
    show_unchanged = show_unchanged or config.display.show_unchanged

    try:
        service = _open_service(config, manifest)
        result = service.compare(user_id, version1_id, version2_id)
    except ExportDiffError as e:
        _fail(e)

    old_label = f"{version1_id} (v{result.version1.version_number})"
    new_label = f"{version2_id} (v{result.version2.version_number})"
    _emit(result, output_format, show_unchanged, config, old_label, new_label)


if __name__ == "__main__":
    main()
