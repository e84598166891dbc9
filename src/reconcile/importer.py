"""Symbol import pipeline: map, sort, merge."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from document.metadata import MetadataStore
from document.sketch_file import (
    FILE_SELECTION_ERROR,
    close_document,
    has_sketch_extension,
    open_document,
    save_document,
)
from reconcile.errors import ImportFileError
from reconcile.keys import MatchMode
from reconcile.merge import MergeAction, MergeEntry, add_symbols, find_existing_symbol
from reconcile.ordering import sort_symbols
from reconcile.tree import map_symbols
from settings.config import ImporterConfig
from utils import format_status_message

if TYPE_CHECKING:
    from pathlib import Path

    from document.models import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import run."""

    added: int
    updated: int
    mode: MatchMode
    entries: tuple[MergeEntry, ...] = ()

    @property
    def message(self) -> str:
        return format_status_message(self.added, self.updated)


@dataclass(frozen=True)
class PlannedMerge:
    """What an import would do with one symbol."""

    key: str
    name: str
    action: MergeAction
    page: str


def start_import(
    target: Document,
    source: Document,
    *,
    mode: MatchMode = MatchMode.ID,
    config: ImporterConfig | None = None,
    store: MetadataStore | None = None,
) -> ImportResult:
    """Merge every symbol of ``source`` into ``target``.

    Source symbols are moved, not copied: once this returns they belong to
    ``target`` and ``source`` must only be closed.
    """
    if config is None:
        config = ImporterConfig()
    if store is None:
        store = MetadataStore(config.plugin_identifier)

    nodes = sort_symbols(map_symbols(source.all_symbols(), mode))
    merged = add_symbols(target, nodes, mode=mode, store=store)

    if config.show_symbols_page:
        target.current_page = target.symbols_page_or_create(config.symbols_page_name)

    result = ImportResult(
        added=merged.added,
        updated=merged.updated,
        mode=mode,
        entries=tuple(merged.entries),
    )
    logger.info(result.message)
    return result


def plan_import(
    target: Document,
    source: Document,
    *,
    mode: MatchMode = MatchMode.ID,
    config: ImporterConfig | None = None,
) -> list[PlannedMerge]:
    """Report the merge order and add/update decision without changing anything."""
    if config is None:
        config = ImporterConfig()
    store = MetadataStore(config.plugin_identifier)

    existing = target.all_symbols()
    seen: set[str] = set()
    plan: list[PlannedMerge] = []
    for node in sort_symbols(map_symbols(source.all_symbols(), mode)):
        match = find_existing_symbol(existing, node.key, mode=mode, store=store)
        action: MergeAction = (
            "updated" if match is not None or node.key in seen else "added"
        )
        seen.add(node.key)
        page = node.symbol.parent_page()
        plan.append(
            PlannedMerge(
                key=node.key,
                name=node.name,
                action=action,
                page=page.name if page is not None else config.symbols_page_name,
            )
        )
    return plan


def import_symbols(
    target_path: Path,
    source_path: Path,
    *,
    mode: MatchMode | str | None = None,
    config: ImporterConfig | None = None,
    output_path: Path | None = None,
) -> ImportResult:
    """Import the symbols of the document at ``source_path`` into ``target_path``.

    The merged target is written to ``output_path`` (default: over the
    target). The source document is closed whether or not the import
    succeeds.

    Raises:
        ImportFileError: If either document cannot be opened; nothing has
            been changed at that point.
        SymbolCycleError: If the source symbols nest each other.
    """
    if config is None:
        config = ImporterConfig()
    match_mode = MatchMode(mode if mode is not None else config.match_by)

    source: Document | None = None
    target: Document | None = None
    try:
        if has_sketch_extension(source_path):
            source = open_document(source_path)
        if source is None:
            raise ImportFileError(FILE_SELECTION_ERROR)

        target = open_document(target_path)
        if target is None:
            msg = f"Could not open target document: {target_path}"
            raise ImportFileError(msg)

        result = start_import(target, source, mode=match_mode, config=config)
        save_document(target, output_path or target_path)
    finally:
        close_document(source)
        close_document(target)

    return result


def import_symbols_by_id(
    target_path: Path, source_path: Path, **kwargs: Any
) -> ImportResult:
    """Import symbols, matching existing ones by symbol identifier."""
    return import_symbols(target_path, source_path, mode=MatchMode.ID, **kwargs)


def import_symbols_by_name(
    target_path: Path, source_path: Path, **kwargs: Any
) -> ImportResult:
    """Import symbols, matching existing ones by display name."""
    return import_symbols(target_path, source_path, mode=MatchMode.NAME, **kwargs)


__all__ = [
    "ImportResult",
    "PlannedMerge",
    "import_symbols",
    "import_symbols_by_id",
    "import_symbols_by_name",
    "plan_import",
    "start_import",
]
