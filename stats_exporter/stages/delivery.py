"""
Deliver stage: copy the compressed artifact to the remote host with scp.

An explicit identity file lets an unprivileged account without a home directory
or SSH config push to a host that trusts that key. The destination is passed
through untouched.
"""

from __future__ import annotations

from pathlib import Path

from stats_exporter.errors import DeliveryError
from stats_exporter.infrastructure.process_runner import ProcessRunner, run_command

ARCHIVE_SUFFIX = ".gz"


def archive_path(path: Path | str) -> Path:
    """Name of the compressed artifact for the uncompressed `path`."""
    return Path(f"{path}{ARCHIVE_SUFFIX}")


def deliver(
    path: Path | str,
    destination: str,
    key: str,
    runner: ProcessRunner = run_command,
    scp_binary: str = "scp",
) -> None:
    """
    Send `<path>.gz` to `destination` using identity file `key`.

    Parameters
    ----------
    path : Path | str
        The uncompressed output path; the suffix is added here.
    destination : str
        scp target, typically `host:/dir`.
    key : str
        Identity file passed to `scp -i`.

    Raises
    ------
    DeliveryError
        If scp cannot be started or exits non-zero; carries its output.
    """
    artifact = archive_path(path)
    try:
        result = runner([scp_binary, "-i", key, str(artifact), destination])
    except OSError as exc:
        raise DeliveryError(
            f"Could not scp result file {str(path)!r} to {destination!r}: {exc}"
        ) from exc
    if not result.ok:
        raise DeliveryError(
            f"Could not scp result file {str(path)!r} to {destination!r}: "
            f"exit status {result.returncode}. output: {result.output}",
            output=result.output,
        )


__all__ = ["ARCHIVE_SUFFIX", "archive_path", "deliver"]
