"""Shared utilities for user-facing text."""

from __future__ import annotations


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return ``singular`` or ``plural`` to agree with ``count``.

    Examples:
        >>> pluralize(1, "symbol")
        'symbol'
        >>> pluralize(3, "symbol")
        'symbols'
    """
    if count == 1:
        return singular
    return plural if plural is not None else f"{singular}s"


def format_status_message(added: int, updated: int) -> str:
    """Format the end-of-import status line.

    Examples:
        >>> format_status_message(3, 1)
        '3 symbols added, 1 updated.'
        >>> format_status_message(1, 0)
        '1 symbol added, 0 updated.'
    """
    return f"{added} {pluralize(added, 'symbol')} added, {updated} updated."
