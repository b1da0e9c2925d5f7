"""
Error taxonomy for the stats exporter.

Every failure the pipeline can hit is an ``ExportError``. Lower layers translate
library exceptions (psycopg, OSError) into one of these types; the orchestrator
tags the failing stage and re-raises, and the CLI turns it into an exit status.
Nothing here is retried.
"""

from __future__ import annotations

from typing import Optional


class ExportError(Exception):
    """
    Base class for all export failures.

    Attributes
    ----------
    stage : str | None
        Pipeline stage that raised the error. Filled in by the orchestrator.
    """

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class ConfigError(ExportError):
    """Bad or missing configuration (credential file, date flag)."""


class DateParseError(ConfigError):
    """The reference date is not a strict YYYY-MM-DD calendar date."""


class CredentialError(ConfigError):
    """The credential file could not be read or holds no connection string."""


class StoreConnectionError(ExportError):
    """The relational store could not be reached."""


class QueryError(ExportError):
    """The export query failed to execute."""


class NoResultsError(ExportError):
    """The export query succeeded but matched no rows."""


class ScanError(ExportError):
    """A result row could not be decoded into an issuance record."""


class WriteError(ExportError):
    """The output file could not be opened, written or closed."""


class CommandError(ExportError):
    """
    An external tool failed to run or exited non-zero.

    Attributes
    ----------
    output : str
        Combined stdout/stderr of the tool, empty when it never started.
    """

    def __init__(self, message: str, *, output: str = "", stage: Optional[str] = None) -> None:
        super().__init__(message, stage=stage)
        self.output = output


class CompressionError(CommandError):
    """gzip failed."""


class DeliveryError(CommandError):
    """scp failed."""


__all__ = [
    "ExportError",
    "ConfigError",
    "DateParseError",
    "CredentialError",
    "StoreConnectionError",
    "QueryError",
    "NoResultsError",
    "ScanError",
    "WriteError",
    "CommandError",
    "CompressionError",
    "DeliveryError",
]
