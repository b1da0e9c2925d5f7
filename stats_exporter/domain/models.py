"""
Domain models for the stats exporter.

`ExportWindow` is the half-open day being exported and `IssuedNameRecord` is one
row of the `issuedNames` table, already decoded to strings and ready to be
written as a TSV line.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

DATE_FORMAT = "%Y-%m-%d"


class ExportWindow(BaseModel):
    """
    Half-open `[start, end)` range of issuance timestamps to export.
    """

    start: datetime = Field(..., description="Inclusive lower bound.")
    end: datetime = Field(..., description="Exclusive upper bound.")

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_order(self) -> "ExportWindow":
        if self.start >= self.end:
            raise ValueError(f"window start {self.start} is not before end {self.end}")
        return self

    @property
    def start_tag(self) -> str:
        return self.start.strftime(DATE_FORMAT)

    @property
    def end_tag(self) -> str:
        return self.end.strftime(DATE_FORMAT)

    @property
    def output_file_name(self) -> str:
        """File name for this window's export, tagged with the start date."""
        return f"results-{self.start_tag}.tsv"


class IssuedNameRecord(BaseModel):
    """
    A single certificate issuance, as exported.
    """

    id: str = Field(..., description="Row identifier.")
    reversed_name: str = Field(..., description="Domain name with labels reversed.")
    not_before: str = Field(..., description="Validity start as rendered by the store.")
    serial: str = Field(..., description="Certificate serial number.")

    model_config = {
        "frozen": True,
    }

    def to_tsv_line(self) -> str:
        return f"{self.id}\t{self.reversed_name}\t{self.not_before}\t{self.serial}\n"


__all__ = ["DATE_FORMAT", "ExportWindow", "IssuedNameRecord"]
