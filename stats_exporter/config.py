"""
Configuration settings for the stats exporter.

Uses Pydantic Settings to load environment variables (or a `.env` file) for the
credential file location, delivery target, and logging. CLI flags override
these values per run.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Store
    db_connect: Optional[Path] = Field(None, alias="DB_CONNECT")
    table_name: str = Field("issuedNames", alias="EXPORT_TABLE")

    # Export window
    latest_date: Optional[str] = Field(None, alias="EXPORT_LATEST_DATE")

    # Artifact and delivery
    output_dir: Path = Field(Path("."), alias="EXPORT_OUTPUT_DIR")
    destination: str = Field("localhost:/tmp", alias="EXPORT_DESTINATION")
    key: str = Field("id_rsa", alias="EXPORT_KEY")
    gzip_binary: str = Field("gzip", alias="GZIP_BINARY")
    scp_binary: str = Field("scp", alias="SCP_BINARY")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
