"""
Database connection utilities for the stats exporter.

The connection string lives in a credential file maintained outside this
program; it is read whole on every run and handed to psycopg. There is no pool
and no retry: one connection per run, opened for the query and closed right
after it.

`StoreConnector` is the seam tests use to substitute a fake store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Protocol

import psycopg

from stats_exporter.errors import CredentialError, StoreConnectionError


class StoreConnection(Protocol):
    """
    The subset of a DB-API connection the query source relies on.
    """

    def cursor(self) -> Any:
        ...

    def close(self) -> None:
        ...


StoreConnector = Callable[[str], StoreConnection]


def read_dsn(credential_path: Path | str) -> str:
    """
    Read the connection string from `credential_path`.

    The file is read whole and stripped of surrounding whitespace.

    Raises
    ------
    CredentialError
        If the file cannot be read or contains nothing but whitespace.
    """
    path = Path(credential_path)
    try:
        dsn = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise CredentialError(f"Could not open database connection file {str(path)!r}: {exc}") from exc
    if not dsn:
        raise CredentialError(f"Database connection file {str(path)!r} is empty")
    return dsn


def connect_store(dsn: str) -> psycopg.Connection:
    """
    Open a dedicated psycopg connection.

    Raises
    ------
    StoreConnectionError
        If psycopg cannot establish the connection.
    """
    try:
        return psycopg.connect(dsn)
    except psycopg.Error as exc:
        raise StoreConnectionError(f"Could not establish database connection: {exc}") from exc


__all__ = [
    "StoreConnection",
    "StoreConnector",
    "connect_store",
    "read_dsn",
]
