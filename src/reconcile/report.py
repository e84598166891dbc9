"""JSON report of an import run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import orjson
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from pathlib import Path

    from reconcile.importer import ImportResult

# Schema version constant
SCHEMA_VERSION = 1


class ReportEntry(BaseModel):
    """One merged symbol."""

    key: str
    name: str
    action: Literal["added", "updated"]
    page: str
    relinked: int = 0


class ImportReport(BaseModel):
    """Summary of an import run."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    source: str
    target: str
    match_by: Literal["id", "name"]
    added: int
    updated: int
    message: str
    symbols: list[ReportEntry] = Field(default_factory=list)


def build_report(result: ImportResult, *, source: Path, target: Path) -> ImportReport:
    return ImportReport(
        source=str(source),
        target=str(target),
        match_by=result.mode.value,
        added=result.added,
        updated=result.updated,
        message=result.message,
        symbols=[
            ReportEntry(
                key=entry.key,
                name=entry.name,
                action=entry.action,
                page=entry.page,
                relinked=entry.relinked,
            )
            for entry in result.entries
        ],
    )


def write_report(path: Path, report: ImportReport) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(report.model_dump(), option=opts))


__all__ = ["SCHEMA_VERSION", "ImportReport", "ReportEntry", "build_report", "write_report"]
