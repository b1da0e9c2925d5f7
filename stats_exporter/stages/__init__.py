"""
Stages package for the stats exporter.

Re-exports the query, write, compress and deliver stages so the orchestrator
can import from `stats_exporter.stages` directly.
"""

from stats_exporter.stages.compressor import compress
from stats_exporter.stages.delivery import archive_path, deliver
from stats_exporter.stages.query_source import RecordCursor, RecordQuerySource, build_query
from stats_exporter.stages.tsv_writer import close_output, decode_row, open_output, write_tsv

__all__ = [
    # Query
    "RecordCursor",
    "RecordQuerySource",
    "build_query",
    # Write
    "close_output",
    "decode_row",
    "open_output",
    "write_tsv",
    # Compress / deliver
    "archive_path",
    "compress",
    "deliver",
]
