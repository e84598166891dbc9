"""Symbol graph reconciliation: discovery, ordering and merging of symbols."""

from reconcile.errors import ImportFileError, SymbolCycleError, SymbolImportError
from reconcile.importer import (
    ImportResult,
    PlannedMerge,
    import_symbols,
    import_symbols_by_id,
    import_symbols_by_name,
    plan_import,
    start_import,
)
from reconcile.keys import MatchMode, import_metadata_key, resolve_key
from reconcile.merge import MergeEntry, MergeResult, add_symbols
from reconcile.ordering import sort_symbols
from reconcile.tree import SymbolNode, contains_symbol, map_symbols

__all__ = [
    "ImportFileError",
    "ImportResult",
    "MatchMode",
    "MergeEntry",
    "MergeResult",
    "PlannedMerge",
    "SymbolCycleError",
    "SymbolImportError",
    "SymbolNode",
    "add_symbols",
    "contains_symbol",
    "import_metadata_key",
    "import_symbols",
    "import_symbols_by_id",
    "import_symbols_by_name",
    "map_symbols",
    "plan_import",
    "resolve_key",
    "sort_symbols",
    "start_import",
]
