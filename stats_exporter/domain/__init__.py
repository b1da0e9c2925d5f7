"""
Domain package for the stats exporter.

Exports the export window and issuance record models plus the window
calculation. Keep this package free of I/O.
"""

from stats_exporter.domain.models import ExportWindow, IssuedNameRecord
from stats_exporter.domain.window import compute_window, parse_reference_date

__all__ = [
    "ExportWindow",
    "IssuedNameRecord",
    "compute_window",
    "parse_reference_date",
]
