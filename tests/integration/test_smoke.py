"""
End-to-end export against a real PostgreSQL instance.

Skipped when the database is unreachable. Uses the real gzip when it is on
PATH; scp is always faked.
"""

from __future__ import annotations

import gzip
import shutil
from datetime import datetime
from pathlib import Path
from typing import Generator, Sequence

import psycopg
import pytest
from psycopg import sql

from scripts.seed_issued_names import _copy_into_db, _generate_rows
from stats_exporter.config import Settings
from stats_exporter.errors import NoResultsError, QueryError
from stats_exporter.infrastructure.process_runner import CommandResult, run_command
from stats_exporter.orchestrator import ExportPipeline, Stage

pytestmark = pytest.mark.integration

TABLE = "issuedNames_smoke"
SEEDED_ROWS = 25


class _GzipOnlyRunner:
    """Runs gzip for real and records scp without executing it."""

    def __init__(self) -> None:
        self.scp_calls: list[list[str]] = []

    def __call__(self, args: Sequence[str]) -> CommandResult:
        argv = [str(arg) for arg in args]
        if argv[0] == "scp":
            self.scp_calls.append(argv)
            return CommandResult(args=tuple(argv), returncode=0)
        return run_command(argv)


@pytest.fixture
def seeded_table(db_connection: psycopg.Connection, test_dsn: str) -> Generator[str, None, None]:
    """
    Seed one day of rows plus rows sitting exactly on both window boundaries.
    """
    drop = sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(TABLE))
    with db_connection.cursor() as cur:
        cur.execute(drop)
    db_connection.commit()

    rows = _generate_rows(datetime(2020, 8, 20), rows=SEEDED_ROWS, seed=42)
    rows.append(("com.boundary.start", datetime(2020, 8, 20, 0, 0, 0), "aa" * 18))
    rows.append(("com.boundary.end", datetime(2020, 8, 21, 0, 0, 0), "bb" * 18))
    _copy_into_db(test_dsn, TABLE, rows)

    yield TABLE

    with db_connection.cursor() as cur:
        cur.execute(drop)
    db_connection.commit()


@pytest.fixture
def smoke_settings(tmp_path: Path, test_dsn: str) -> Settings:
    credential = tmp_path / "db-connect"
    credential.write_text(test_dsn + "\n", encoding="utf-8")
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    return Settings(
        db_connect=credential,
        output_dir=output_dir,
        table_name=TABLE,
        latest_date="2020-08-21",
        destination="stats.example.net:/srv/exports",
    )


@pytest.mark.skipif(shutil.which("gzip") is None, reason="gzip not installed")
def test_export_day_end_to_end(seeded_table: str, smoke_settings: Settings) -> None:
    proc = _GzipOnlyRunner()

    report = ExportPipeline(smoke_settings, runner=proc).run()

    assert report.state is Stage.DONE
    # the row at 2020-08-21 00:00 belongs to the next day's export
    assert report.rows == SEEDED_ROWS + 1
    archive = Path(smoke_settings.output_dir) / "results-2020-08-20.tsv.gz"
    assert report.archive_path == archive
    assert not (Path(smoke_settings.output_dir) / "results-2020-08-20.tsv").exists()

    with gzip.open(archive, "rt", encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert len(lines) == SEEDED_ROWS + 1
    assert all(len(line.split("\t")) == 4 for line in lines)
    names = {line.split("\t")[1] for line in lines}
    assert "com.boundary.start" in names
    assert "com.boundary.end" not in names

    assert proc.scp_calls == [
        ["scp", "-i", "id_rsa", str(archive), "stats.example.net:/srv/exports"]
    ]


def test_empty_day_is_an_error(seeded_table: str, smoke_settings: Settings) -> None:
    settings = smoke_settings.model_copy(update={"latest_date": "2019-01-01"})

    with pytest.raises(NoResultsError):
        ExportPipeline(settings, runner=_GzipOnlyRunner()).run()

    assert (Path(settings.output_dir) / "results-2018-12-31.tsv").read_text() == ""


def test_missing_table_is_a_query_error(db_connection: psycopg.Connection, smoke_settings: Settings) -> None:
    settings = smoke_settings.model_copy(update={"table_name": "no_such_table"})

    with pytest.raises(QueryError) as excinfo:
        ExportPipeline(settings, runner=_GzipOnlyRunner()).run()

    assert excinfo.value.stage == "query"
