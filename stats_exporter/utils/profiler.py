"""
Stage timing utilities for the stats exporter.

`profile_block` wraps one pipeline stage and records its wall-clock duration and
the process RSS once the stage finishes. The orchestrator keeps one
`StageTiming` per executed stage and the reporter renders them.

Usage example:
    from stats_exporter.utils.profiler import profile_block

    with profile_block("write") as timing:
        write_rows()

    print(timing.duration_seconds, timing.rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class StageTiming:
    """
    Measurements for a single stage.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rss_bytes: Optional[int] = field(default=None)
    status: str = field(default="running")
    extra: dict[str, Any] = field(default_factory=dict)


@contextlib.contextmanager
def profile_block(label: str) -> Generator[StageTiming, None, None]:
    """
    Time a block of code.

    The timing is completed on every exit path; `status` is set to "ok" when the
    block finishes normally and "failed" when it raises.

    Parameters
    ----------
    label : str
        Stage name recorded on the timing.
    """
    timing = StageTiming(label=label)
    timing.start_ts = time.perf_counter()
    try:
        yield timing
        timing.status = "ok"
    except BaseException:
        timing.status = "failed"
        raise
    finally:
        timing.end_ts = time.perf_counter()
        timing.duration_seconds = timing.end_ts - timing.start_ts
        try:
            timing.rss_bytes = psutil.Process().memory_info().rss
        except psutil.Error:
            timing.rss_bytes = None


__all__ = ["StageTiming", "profile_block"]
