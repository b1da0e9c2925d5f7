"""
Query stage: fetch one window of issuance records from the store.

The connection is held only for the duration of the query. Results are buffered
client-side, so the returned `RecordCursor` stays iterable after the connection
has been closed.

An empty result is an error. A day with no issuances means something upstream
is broken, and the operator should hear about it rather than receive an empty
file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence

import psycopg
from psycopg import sql

from stats_exporter.domain.models import ExportWindow
from stats_exporter.errors import NoResultsError, QueryError
from stats_exporter.infrastructure.db_factory import (
    StoreConnection,
    StoreConnector,
    connect_store,
    read_dsn,
)
from stats_exporter.utils.logging import get_logger

log = get_logger(__name__)

COLUMNS = ("id", "reversedName", "notBefore", "serial")
TIMESTAMP_COLUMN = "notBefore"
DEFAULT_TABLE = "issuedNames"


def build_query(table: str = DEFAULT_TABLE) -> sql.Composed:
    """
    Compose the window query for `table`.

    Bounds are bound as `YYYY-MM-DD` strings; the half-open comparison puts a
    row stamped exactly at midnight in the later day only.
    """
    return sql.SQL(
        "SELECT {columns} FROM {table} WHERE {ts} >= %s AND {ts} < %s"
    ).format(
        columns=sql.SQL(", ").join(sql.Identifier(col) for col in COLUMNS),
        table=sql.Identifier(table),
        ts=sql.Identifier(TIMESTAMP_COLUMN),
    )


class RecordCursor:
    """
    Forward-only cursor over buffered result rows.

    Iterates once; `close()` releases the buffer and is safe to call repeatedly.
    """

    def __init__(self, rows: Sequence[Sequence[Any]]) -> None:
        self._rows: Optional[List[Sequence[Any]]] = list(rows)
        self._consumed = False

    def __len__(self) -> int:
        return len(self._rows) if self._rows is not None else 0

    def __iter__(self) -> Iterator[Sequence[Any]]:
        if self._rows is None:
            raise RuntimeError("cursor is closed")
        if self._consumed:
            raise RuntimeError("cursor has already been iterated")
        self._consumed = True
        return iter(self._rows)

    @property
    def closed(self) -> bool:
        return self._rows is None

    def close(self) -> None:
        self._rows = None

    def __enter__(self) -> "RecordCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class RecordQuerySource:
    """
    Runs the export query for a window against the store.

    Parameters
    ----------
    credential_path : Path | str
        File holding the connection string.
    connector : StoreConnector
        Callable turning a connection string into a connection. Defaults to psycopg.
    table : str
        Table holding the issuance records.
    """

    def __init__(
        self,
        credential_path: Path | str,
        connector: StoreConnector = connect_store,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self.credential_path = Path(credential_path)
        self._connector = connector
        self.table = table

    def open(self) -> StoreConnection:
        """Read the credential file and connect."""
        dsn = read_dsn(self.credential_path)
        return self._connector(dsn)

    def query(self, window: ExportWindow) -> RecordCursor:
        """
        Fetch every record in `window`.

        Raises
        ------
        QueryError
            If the query fails to execute.
        NoResultsError
            If no record falls inside the window.
        """
        conn = self.open()
        try:
            with conn.cursor() as cur:
                cur.execute(build_query(self.table), (window.start_tag, window.end_tag))
                rows = cur.fetchall()
        except psycopg.Error as exc:
            raise QueryError(f"Could not complete database query: {exc}") from exc
        finally:
            try:
                conn.close()
            except psycopg.Error as exc:
                log.warning(
                    f"Could not close database connection: {exc}",
                    extra={"error": str(exc)},
                )

        if not rows:
            raise NoResultsError(
                f"No results match query for {window.start_tag} <= notBefore < {window.end_tag}"
            )
        log.info(
            f"Fetched {len(rows)} records",
            extra={"rows": len(rows), "start": window.start_tag, "end": window.end_tag},
        )
        return RecordCursor(rows)


__all__ = ["COLUMNS", "RecordCursor", "RecordQuerySource", "build_query"]
