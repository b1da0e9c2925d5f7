from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from stats_exporter.config import Settings, get_settings
from stats_exporter.errors import ExportError
from stats_exporter.orchestrator import ExportPipeline
from stats_exporter.reporter import print_report
from stats_exporter.utils.logging import configure_logging

app = typer.Typer(help="Export a day of issued names to TSV, gzip it and scp it to a remote host.")


def _effective_settings(overrides: Dict[str, Any]) -> Settings:
    update = {name: value for name, value in overrides.items() if value is not None}
    return get_settings().model_copy(update=update)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"dbConnect={settings.db_connect or '-'} | table={settings.table_name} | "
        f"latestdate={settings.latest_date or 'now'} | output_dir={settings.output_dir} | "
        f"destination={settings.destination} key={settings.key}"
    )


@app.command()
def run(
    db_connect: Optional[Path] = typer.Option(
        None,
        "--dbConnect",
        "--db-connect",
        help="Path to the file holding the database connection string.",
    ),
    destination: Optional[str] = typer.Option(
        None,
        "--destination",
        help="Location to scp the gzipped TSV result file to (default localhost:/tmp).",
    ),
    key: Optional[str] = typer.Option(
        None,
        "--key",
        help="Identity key for scp (default id_rsa).",
    ),
    latest_date: Optional[str] = typer.Option(
        None,
        "--latestdate",
        "--latest-date",
        help=(
            "Latest date at which to export data for. Exports the full day prior to it. "
            "Formatted as YYYY-MM-DD. Defaults to now."
        ),
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        help="Directory the results file is written to (default: current directory).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON.",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Print a per-stage summary table after a successful export.",
    ),
) -> None:
    """
    Run the export pipeline once.
    """
    settings = _effective_settings(
        {
            "db_connect": db_connect,
            "destination": destination,
            "key": key,
            "latest_date": latest_date,
            "output_dir": output_dir,
            "json_logs": json_logs or None,
        }
    )
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    if settings.db_connect is None:
        typer.echo("Missing --dbConnect (or DB_CONNECT env var).", err=True)
        raise typer.Exit(code=2)

    try:
        report = ExportPipeline(settings).run()
    except ExportError:
        # Already logged by the pipeline with its stage and cause.
        raise typer.Exit(code=1)

    if summary:
        print_report(report)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
