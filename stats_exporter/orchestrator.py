"""
Orchestrator for the daily issuance export.

Runs the stages strictly in order:

    compute_window -> open_output -> query -> write -> compress -> deliver -> done

Any stage failure moves the pipeline to `fatal`: the error is tagged with the
stage name, logged once with its traceback and re-raised. Nothing is retried,
later stages never run, and artifacts already produced are left on disk.

Usage (example from CLI):
    from stats_exporter.orchestrator import ExportPipeline

    report = ExportPipeline(get_settings()).run()
    print(report.rows, report.archive_path)

The store connector, process runner and clock are constructor arguments so
tests can run the whole pipeline without a database, gzip or scp.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Generator, List, Optional

from stats_exporter.config import Settings
from stats_exporter.domain.models import ExportWindow
from stats_exporter.domain.window import compute_window
from stats_exporter.errors import ConfigError, ExportError
from stats_exporter.infrastructure.db_factory import StoreConnector, connect_store
from stats_exporter.infrastructure.process_runner import ProcessRunner, run_command
from stats_exporter.stages.compressor import compress
from stats_exporter.stages.delivery import deliver
from stats_exporter.stages.query_source import RecordCursor, RecordQuerySource
from stats_exporter.stages.tsv_writer import close_output, open_output, write_tsv
from stats_exporter.utils.logging import get_logger
from stats_exporter.utils.profiler import StageTiming, profile_block

log = get_logger(__name__)


class Stage(str, Enum):
    COMPUTE_WINDOW = "compute_window"
    OPEN_OUTPUT = "open_output"
    QUERY = "query"
    WRITE = "write"
    COMPRESS = "compress"
    DELIVER = "deliver"
    DONE = "done"
    FATAL = "fatal"


@dataclass
class ExportReport:
    """
    What a run did, filled in stage by stage.
    """

    destination: str
    state: Stage = Stage.COMPUTE_WINDOW
    window: Optional[ExportWindow] = None
    output_path: Optional[Path] = None
    archive_path: Optional[Path] = None
    rows: int = 0
    timings: List[StageTiming] = field(default_factory=list)


class ExportPipeline:
    """
    Single-pass export of one day of issuance records.

    Parameters
    ----------
    settings : Settings
        Effective configuration; `db_connect` must be set.
    connector : StoreConnector
        Opens store connections. Defaults to psycopg.
    runner : ProcessRunner
        Runs gzip and scp. Defaults to a subprocess runner.
    clock : Callable[[], datetime]
        Current time, used when no reference date is configured.
    """

    def __init__(
        self,
        settings: Settings,
        connector: StoreConnector = connect_store,
        runner: ProcessRunner = run_command,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self._connector = connector
        self._runner = runner
        self._clock = clock
        self.state = Stage.COMPUTE_WINDOW

    @contextlib.contextmanager
    def _stage(self, stage: Stage, report: ExportReport) -> Generator[StageTiming, None, None]:
        self.state = report.state = stage
        log.info(f"[STAGE START] {stage.value}", extra={"stage": stage.value})
        with profile_block(stage.value) as timing:
            report.timings.append(timing)
            try:
                yield timing
            except ExportError as exc:
                exc.stage = stage.value
                self.state = report.state = Stage.FATAL
                log.exception(
                    f"[STAGE FAILED] {stage.value}: {exc}",
                    extra={"stage": stage.value, "error": type(exc).__name__},
                )
                raise
            except Exception:
                self.state = report.state = Stage.FATAL
                log.exception(
                    f"[STAGE FAILED] {stage.value}: unexpected error",
                    extra={"stage": stage.value},
                )
                raise
        log.info(
            f"[STAGE SUCCESS] {stage.value}",
            extra={"stage": stage.value, "duration": round(timing.duration_seconds, 3)},
        )

    def run(self) -> ExportReport:
        """
        Execute the export end to end.

        Returns
        -------
        ExportReport
            Window, artifact paths, row count and per-stage timings.

        Raises
        ------
        ExportError
            The first stage failure, with `stage` set.
        """
        settings = self.settings
        report = ExportReport(destination=settings.destination)

        with self._stage(Stage.COMPUTE_WINDOW, report):
            window = compute_window(settings.latest_date, now=self._clock())
            report.window = window
        log.info(
            f"Exporting window {window.start_tag} .. {window.end_tag}",
            extra={"start": window.start_tag, "end": window.end_tag},
        )

        output_path = Path(settings.output_dir) / window.output_file_name
        report.output_path = output_path

        with self._stage(Stage.OPEN_OUTPUT, report):
            sink = open_output(output_path)

        try:
            with self._stage(Stage.QUERY, report):
                if settings.db_connect is None:
                    raise ConfigError("No database connection file configured (--dbConnect)")
                source = RecordQuerySource(
                    settings.db_connect,
                    connector=self._connector,
                    table=settings.table_name,
                )
                cursor: RecordCursor = source.query(window)

            with self._stage(Stage.WRITE, report) as timing:
                report.rows = write_tsv(cursor, sink)
                close_output(sink, output_path)
                timing.extra["rows"] = report.rows
        finally:
            if not sink.closed:
                sink.close()

        with self._stage(Stage.COMPRESS, report):
            report.archive_path = compress(
                output_path, runner=self._runner, gzip_binary=settings.gzip_binary
            )

        with self._stage(Stage.DELIVER, report):
            deliver(
                output_path,
                settings.destination,
                settings.key,
                runner=self._runner,
                scp_binary=settings.scp_binary,
            )

        self.state = report.state = Stage.DONE
        log.info(
            f"[EXPORT COMPLETE] {report.rows} records delivered to {settings.destination}",
            extra={
                "rows": report.rows,
                "artifact": str(report.archive_path),
                "destination": settings.destination,
            },
        )
        return report


def run_export(
    settings: Settings,
    connector: StoreConnector = connect_store,
    runner: ProcessRunner = run_command,
) -> ExportReport:
    """Convenience wrapper building and running an `ExportPipeline`."""
    return ExportPipeline(settings, connector=connector, runner=runner).run()


__all__ = [
    "ExportPipeline",
    "ExportReport",
    "Stage",
    "run_export",
]
