"""
Compress stage: gzip the finished TSV file in place.

`gzip -f` replaces `<file>` with `<file>.gz` and overwrites a `.gz` left by an
earlier run for the same day.
"""

from __future__ import annotations

from pathlib import Path

from stats_exporter.errors import CompressionError
from stats_exporter.infrastructure.process_runner import ProcessRunner, run_command
from stats_exporter.stages.delivery import archive_path


def compress(
    path: Path | str,
    runner: ProcessRunner = run_command,
    gzip_binary: str = "gzip",
) -> Path:
    """
    Compress `path` and return the archive path.

    Raises
    ------
    CompressionError
        If gzip cannot be started or exits non-zero; carries its output.
    """
    try:
        result = runner([gzip_binary, "-f", str(path)])
    except OSError as exc:
        raise CompressionError(f"Could not gzip result file: {exc}") from exc
    if not result.ok:
        raise CompressionError(
            f"Could not gzip result file: exit status {result.returncode}. output: {result.output}",
            output=result.output,
        )
    return archive_path(path)


__all__ = ["compress"]
