"""Record models for the JSON files inside a Sketch archive.

Only the keys the importer interprets are declared; everything else is
kept in ``model_extra`` and written back unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DOCUMENT_JSON = "document.json"
META_JSON = "meta.json"
PAGES_DIR = "pages"


class FrameRecord(BaseModel):
    """Layer bounding rectangle."""

    model_config = ConfigDict(extra="allow")

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class LayerRecord(BaseModel):
    """A single layer as stored in a page file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_name: str = Field(alias="_class")
    object_id: str = Field(alias="do_objectID")
    name: str = ""
    frame: FrameRecord = Field(default_factory=FrameRecord)
    layers: list[dict[str, Any]] = Field(default_factory=list)
    user_info: dict[str, dict[str, Any]] = Field(
        default_factory=dict, alias="userInfo"
    )
    symbol_id: str | None = Field(default=None, alias="symbolID")


class PageReference(BaseModel):
    """Reference from ``document.json`` to a page file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    ref: str = Field(alias="_ref")


class DocumentRecord(BaseModel):
    """Top-level ``document.json`` record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    pages: list[PageReference] = Field(default_factory=list)
    current_page_index: int = Field(default=0, alias="currentPageIndex")


__all__ = [
    "DOCUMENT_JSON",
    "META_JSON",
    "PAGES_DIR",
    "DocumentRecord",
    "FrameRecord",
    "LayerRecord",
    "PageReference",
]
