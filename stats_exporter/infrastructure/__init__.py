"""
Infrastructure package for the stats exporter.

Centralizes I/O with the outside world: the relational store and the external
gzip/scp processes. Keep this layer free of pipeline sequencing logic.
"""

from stats_exporter.infrastructure.db_factory import (
    StoreConnection,
    StoreConnector,
    connect_store,
    read_dsn,
)
from stats_exporter.infrastructure.process_runner import (
    CommandResult,
    ProcessRunner,
    run_command,
)

__all__ = [
    "CommandResult",
    "ProcessRunner",
    "StoreConnection",
    "StoreConnector",
    "connect_store",
    "read_dsn",
    "run_command",
]
