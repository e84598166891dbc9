"""Per-layer key/value metadata scoped to a plugin identifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from document.models import Layer


class MetadataStore:
    """Reads and writes string values in a layer's ``user_info`` namespace."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier

    def set_value(self, layer: Layer, key: str, value: str) -> None:
        layer.user_info.setdefault(self.identifier, {})[key] = value

    def get_value(self, layer: Layer, key: str) -> str:
        """Return the stored value, or an empty string when unset."""
        value = layer.user_info.get(self.identifier, {}).get(key)
        if value is None:
            return ""
        return str(value)


__all__ = ["MetadataStore"]
