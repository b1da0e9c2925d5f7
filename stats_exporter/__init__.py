"""
Stats Exporter - daily export of certificate issuance records.

Pulls one day of `issuedNames` rows from the relational store, writes them as a
tab-separated file, compresses it with gzip and ships it to a remote host with
scp. The pipeline is a single pass with no retries:

- Time window computation (previous 24 hours, or the day before --latestdate)
- Query with buffered results and an immediately released connection
- TSV serialization
- gzip compression
- scp delivery

Any failure stops the run with a non-zero exit status.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from stats_exporter.config import Settings, get_settings
from stats_exporter.domain import ExportWindow, IssuedNameRecord, compute_window
from stats_exporter.errors import (
    CompressionError,
    ConfigError,
    DeliveryError,
    ExportError,
    NoResultsError,
    QueryError,
    ScanError,
    StoreConnectionError,
    WriteError,
)
from stats_exporter.orchestrator import ExportPipeline, ExportReport, Stage, run_export
from stats_exporter.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ExportWindow",
    "IssuedNameRecord",
    "compute_window",
    # Orchestration
    "ExportPipeline",
    "ExportReport",
    "Stage",
    "run_export",
    # Errors
    "ExportError",
    "ConfigError",
    "StoreConnectionError",
    "QueryError",
    "NoResultsError",
    "ScanError",
    "WriteError",
    "CompressionError",
    "DeliveryError",
    # Logging
    "configure_logging",
    "get_logger",
]
