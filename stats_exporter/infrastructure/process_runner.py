"""
External process execution for the stats exporter.

gzip and scp are run synchronously to completion with stdout and stderr merged,
so a failure can be reported with everything the tool printed. The runner is
injected into the compress and deliver stages; tests pass a recorder instead.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple

from stats_exporter.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one external command.
    """

    args: Tuple[str, ...]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    def __call__(self, args: Sequence[str]) -> CommandResult:
        ...


def run_command(args: Sequence[str]) -> CommandResult:
    """
    Run `args` and capture combined output.

    A missing or unspawnable binary raises OSError; a non-zero exit does not
    raise and is reported through `CommandResult.returncode`.
    """
    argv = tuple(str(arg) for arg in args)
    log.debug("Running command", extra={"argv": list(argv)})
    completed = subprocess.run(
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )
    output = completed.stdout.decode("utf-8", errors="replace") if completed.stdout else ""
    return CommandResult(args=argv, returncode=completed.returncode, output=output)


__all__ = ["CommandResult", "ProcessRunner", "run_command"]
