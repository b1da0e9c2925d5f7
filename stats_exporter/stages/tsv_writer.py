"""
Write stage: serialize issuance records as tab-separated lines.

No header, no quoting, one record per line in the column order
id, reversedName, notBefore, serial. A row that cannot be decoded stops the
write before anything of it reaches the sink; lines already written stay.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Iterable, Sequence

from stats_exporter.domain.models import IssuedNameRecord
from stats_exporter.errors import ScanError, WriteError
from stats_exporter.stages.query_source import COLUMNS
from stats_exporter.utils.logging import get_logger

log = get_logger(__name__)


def _decode_field(name: str, value: Any) -> str:
    if value is None:
        raise ScanError(f"column {name!r} is NULL")
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ScanError(f"column {name!r} is not valid UTF-8: {exc}") from exc
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    # bool is an int subclass but never a valid column value here
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return str(value)
    raise ScanError(f"column {name!r} has unsupported type {type(value).__name__}")


def decode_row(row: Sequence[Any]) -> IssuedNameRecord:
    """
    Decode one result row into an `IssuedNameRecord`.

    Raises
    ------
    ScanError
        If the row does not have exactly four decodable fields.
    """
    if len(row) != len(COLUMNS):
        raise ScanError(f"expected {len(COLUMNS)} columns, got {len(row)}")
    id_, reversed_name, not_before, serial = (
        _decode_field(name, value) for name, value in zip(COLUMNS, row)
    )
    return IssuedNameRecord(
        id=id_,
        reversed_name=reversed_name,
        not_before=not_before,
        serial=serial,
    )


def write_tsv(cursor: Iterable[Sequence[Any]], sink: IO[str]) -> int:
    """
    Write every row of `cursor` to `sink` and return the number of lines.

    The cursor is closed on every exit path when it supports `close()`.

    Raises
    ------
    ScanError
        If a row cannot be decoded.
    WriteError
        If the sink rejects a write.
    """
    written = 0
    try:
        for row in cursor:
            try:
                record = decode_row(row)
            except ScanError as exc:
                raise ScanError(f"Could not decode row {written + 1}: {exc}") from exc
            try:
                sink.write(record.to_tsv_line())
            except OSError as exc:
                raise WriteError(f"Could not write row {written + 1}: {exc}") from exc
            written += 1
    finally:
        close = getattr(cursor, "close", None)
        if close is not None:
            close()
    log.debug(f"Wrote {written} lines", extra={"rows": written})
    return written


def open_output(path: Path | str) -> IO[str]:
    """
    Create or truncate the output file for writing.

    Raises
    ------
    WriteError
        If the file cannot be opened.
    """
    try:
        return open(path, "w", encoding="utf-8", newline="")
    except OSError as exc:
        raise WriteError(f"Could not create results file {str(path)!r}: {exc}") from exc


def close_output(sink: IO[str], path: Path | str) -> None:
    """Flush and close the output file."""
    try:
        sink.close()
    except OSError as exc:
        raise WriteError(f"Could not close output file {str(path)!r}: {exc}") from exc


__all__ = ["close_output", "decode_row", "open_output", "write_tsv"]
