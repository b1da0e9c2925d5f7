"""
Export window calculation.

The exporter runs shortly after midnight and ships the previous day, so the
window is the 24 hours ending at the reference point: either a `--latestdate`
supplied by the operator or the current wall-clock time.

Example: latest date 2020-08-21 gives start=2020-08-20, end=2020-08-21 and the
file `results-2020-08-20.tsv`.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

from stats_exporter.domain.models import DATE_FORMAT, ExportWindow
from stats_exporter.errors import DateParseError

WINDOW_LENGTH = timedelta(hours=24)

# Exactly YYYY-MM-DD; strptime alone would accept single-digit months and days.
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_reference_date(value: str) -> datetime:
    """
    Parse a strict `YYYY-MM-DD` date into midnight of that day.

    Raises
    ------
    DateParseError
        If the value is not exactly a calendar date in that form.
    """
    if not _DATE_RE.match(value):
        raise DateParseError(f"value of --latestdate could not be parsed as date: {value!r}")
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise DateParseError(
            f"value of --latestdate could not be parsed as date: {value!r} ({exc})"
        ) from exc


def compute_window(latest_date: Optional[str], now: Optional[datetime] = None) -> ExportWindow:
    """
    Build the export window ending at `latest_date` (or `now` when absent).

    Parameters
    ----------
    latest_date : str | None
        Optional `YYYY-MM-DD` reference date; its midnight becomes the exclusive end.
    now : datetime | None
        Current time, injectable for tests. Defaults to `datetime.now()`.
    """
    if latest_date:
        end = parse_reference_date(latest_date)
    else:
        end = now if now is not None else datetime.now()
    try:
        start = end - WINDOW_LENGTH
    except OverflowError as exc:
        raise DateParseError(
            f"value of --latestdate leaves no full day before it: {latest_date!r}"
        ) from exc
    return ExportWindow(start=start, end=end)


__all__ = ["WINDOW_LENGTH", "compute_window", "parse_reference_date"]
