"""
Utilities package for the stats exporter.

Exports shared helpers for logging and stage timing. Keep this package
lightweight and free of export-specific logic.
"""

from stats_exporter.utils.logging import configure_logging, get_logger
from stats_exporter.utils.profiler import StageTiming, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "StageTiming",
    "profile_block",
]
