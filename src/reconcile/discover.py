"""Discovery of symbol masters placed inside another symbol."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from document.models import Group, SymbolInstance

if TYPE_CHECKING:
    from document.models import Layer, SymbolMaster

logger = logging.getLogger(__name__)


def find_nested_symbols(container: Layer) -> list[SymbolMaster]:
    """Return the masters of every instance inside ``container``.

    An instance container is resolved to its master first. Groups are
    searched recursively and their findings flattened in place, so the
    result is in depth-first pre-order of the layer tree. Instances of
    masters that are not part of the document have nothing to scan and are
    skipped.
    """
    if isinstance(container, SymbolInstance):
        if container.master is None:
            logger.debug("Instance %r has no master to scan", container.name)
            return []
        container = container.master

    found: list[SymbolMaster] = []
    for child in container.layers:
        if isinstance(child, SymbolInstance):
            if child.master is None:
                logger.debug(
                    "Skipping instance %r of unknown symbol %s",
                    child.name,
                    child.symbol_id,
                )
                continue
            found.append(child.master)
        elif isinstance(child, Group):
            found.extend(find_nested_symbols(child))
    return found


__all__ = ["find_nested_symbols"]
