"""
Seed script for local runs and integration tests of the stats exporter.

Creates the `issuedNames` table when it is missing and loads deterministic
pseudo-random issuance rows for one day with Postgres COPY.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path

import psycopg
import typer
from psycopg import sql

from stats_exporter.infrastructure.db_factory import read_dsn

app = typer.Typer(help="Create the issuedNames table and load synthetic rows (COPY).")

_TLDS = ["com", "org", "net", "io", "dev"]
_WORDS = ["alpha", "beta", "gamma", "delta", "example", "shop", "mail", "api"]


def _create_table(conn: psycopg.Connection, table: str) -> None:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {table} (
                    id BIGSERIAL PRIMARY KEY,
                    "reversedName" VARCHAR(640) NOT NULL,
                    "notBefore" TIMESTAMP NOT NULL,
                    serial VARCHAR(255) NOT NULL
                )
                """
            ).format(table=sql.Identifier(table))
        )
    conn.commit()


def _generate_rows(day: datetime, rows: int, seed: int) -> list[tuple[str, datetime, str]]:
    """
    Build `rows` issuance tuples spread over the 24 hours starting at `day`.
    """
    rng = random.Random(seed)
    generated: list[tuple[str, datetime, str]] = []
    for _ in range(rows):
        labels = [rng.choice(_TLDS), rng.choice(_WORDS)]
        if rng.random() < 0.5:
            labels.append(rng.choice(_WORDS))
        not_before = day + timedelta(seconds=rng.randrange(24 * 60 * 60))
        serial = f"{rng.getrandbits(144):036x}"
        generated.append((".".join(labels), not_before, serial))
    return generated


def _copy_into_db(dsn: str, table: str, rows: list[tuple[str, datetime, str]]) -> int:
    with psycopg.connect(dsn) as conn:
        _create_table(conn, table)
        with conn.cursor() as cur:
            statement = sql.SQL('COPY {table} ("reversedName", "notBefore", serial) FROM STDIN').format(
                table=sql.Identifier(table)
            )
            with cur.copy(statement) as copy:
                for row in rows:
                    copy.write_row(row)
        conn.commit()
    return len(rows)


@app.command()
def main(
    day: str = typer.Option(
        ...,
        "--day",
        "-d",
        help="Day to populate, YYYY-MM-DD.",
    ),
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of rows to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    table: str = typer.Option(
        "issuedNames",
        "--table",
        help="Target table.",
    ),
    db_connect: Path = typer.Option(
        ...,
        "--dbConnect",
        "--db-connect",
        help="Path to the file holding the connection string.",
    ),
) -> None:
    """
    Generate synthetic issuance rows for one day and load them into Postgres.
    """
    start = time.perf_counter()
    day_start = datetime.strptime(day, "%Y-%m-%d")
    generated = _generate_rows(day_start, rows=rows, seed=seed)

    typer.echo(f"Loading {rows:,} rows for {day} into {table} (seed={seed})")
    _copy_into_db(read_dsn(db_connect), table, generated)

    duration = time.perf_counter() - start
    typer.echo(f"Load completed in {duration:.2f}s ({rows / duration:,.0f} rows/s).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
