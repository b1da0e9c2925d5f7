from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from stats_exporter.orchestrator import ExportReport


def _format_bytes(value: Optional[int]) -> str:
    if value is None:
        return "-"
    return f"{value / (1024**2):.1f} MB"


def build_report_table(report: ExportReport) -> Table:
    """
    Build a table with one row per executed stage.

    The caption names the window, the artifact and the number of records.
    """
    title = "Issuance export"
    if report.window is not None:
        title = f"Issuance export {report.window.start_tag} .. {report.window.end_tag}"

    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Stage", style="cyan")
    table.add_column("Status")
    table.add_column("Duration (s)", justify="right")
    table.add_column("RSS", justify="right")

    for timing in report.timings:
        status_style = "green" if timing.status == "ok" else "red"
        table.add_row(
            timing.label,
            f"[{status_style}]{timing.status}[/{status_style}]",
            f"{timing.duration_seconds:.3f}",
            _format_bytes(timing.rss_bytes),
        )

    artifact = report.archive_path or report.output_path
    table.caption = (
        f"{report.rows:,} records | {artifact or '-'} -> {report.destination} | {report.state.value}"
    )
    return table


def print_report(report: ExportReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(build_report_table(report))


__all__ = ["build_report_table", "print_report"]
