"""Repointing instances from a replaced symbol to its replacement."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from document.models import Document, SymbolMaster


def relink_instances(
    document: Document, old_symbol: SymbolMaster, new_symbol: SymbolMaster
) -> int:
    """Point every instance of ``old_symbol`` at ``new_symbol``.

    Instances are collected before any is changed. Frame, overrides and
    every other instance property stay as they are. Returns the number of
    instances relinked.
    """
    instances = document.all_instances(old_symbol)
    for instance in instances:
        instance.change_to_symbol(new_symbol)
    return len(instances)


__all__ = ["relink_instances"]
