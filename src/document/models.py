"""In-memory model of a design document.

A document owns pages; pages own a tree of layers. Symbol masters are
top-level layers of a page. Symbol instances hold a direct reference to
the master they place, so moving a master between documents keeps every
instance that points at it intact.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from document.errors import DocumentClosedError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

DEFAULT_SYMBOLS_PAGE_NAME = "Symbols"


def new_object_id() -> str:
    """Return a fresh object identifier in the upper-case UUID form documents use."""
    return str(uuid.uuid4()).upper()


@dataclass
class Rect:
    """Bounding rectangle of a layer."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def origin(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(eq=False)
class Layer:
    """A node of a page's layer tree.

    ``attributes`` carries on-disk keys the model does not interpret so they
    survive a load/save cycle unchanged.
    """

    CLASS_NAME: ClassVar[str | None] = None

    name: str = ""
    object_id: str = field(default_factory=new_object_id)
    frame: Rect = field(default_factory=Rect)
    layers: list[Layer] = field(default_factory=list)
    user_info: dict[str, dict[str, Any]] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict, repr=False)
    parent: Layer | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for child in self.layers:
            child.parent = self

    @property
    def class_name(self) -> str:
        if self.CLASS_NAME is not None:
            return self.CLASS_NAME
        return str(self.attributes.get("_class", "layer"))

    def add_layers(self, layers: Iterable[Layer]) -> None:
        """Append layers as children, detaching each from its current parent."""
        for layer in list(layers):
            if layer.parent is not None:
                layer.remove_from_parent()
            layer.parent = self
            self.layers.append(layer)

    def remove_from_parent(self) -> None:
        if self.parent is None:
            return
        self.parent.layers.remove(self)
        self.parent = None

    def parent_page(self) -> Page | None:
        node = self.parent
        while node is not None and not isinstance(node, Page):
            node = node.parent
        return node

    def walk(self) -> Iterator[Layer]:
        """Yield every descendant layer in depth-first pre-order."""
        for child in self.layers:
            yield child
            yield from child.walk()


@dataclass(eq=False)
class Group(Layer):
    """A container of layers with no semantics besides nesting."""

    CLASS_NAME: ClassVar[str | None] = "group"


@dataclass(eq=False)
class SymbolMaster(Layer):
    """A reusable component definition."""

    CLASS_NAME: ClassVar[str | None] = "symbolMaster"

    symbol_id: str = field(default_factory=new_object_id)


@dataclass(eq=False)
class SymbolInstance(Layer):
    """A placement of a symbol master.

    ``master`` is ``None`` when the referenced master is not part of the
    owning document; ``symbol_id`` still records which one it was.
    """

    CLASS_NAME: ClassVar[str | None] = "symbolInstance"

    symbol_id: str = ""
    master: SymbolMaster | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.master is not None:
            self.symbol_id = self.master.symbol_id

    def change_to_symbol(self, master: SymbolMaster) -> None:
        """Point this instance at another master, keeping every other property."""
        self.master = master
        self.symbol_id = master.symbol_id


@dataclass(eq=False)
class Page(Layer):
    """Top-level container of a document."""

    CLASS_NAME: ClassVar[str | None] = "page"


@dataclass(eq=False)
class Document:
    """A design document: an ordered list of pages plus archive passthrough data."""

    pages: list[Page] = field(default_factory=list)
    path: Path | None = None
    current_page_index: int = 0
    attributes: dict[str, Any] = field(default_factory=dict, repr=False)
    archive_entries: dict[str, bytes] = field(default_factory=dict, repr=False)
    closed: bool = False

    def _require_open(self) -> None:
        if self.closed:
            msg = f"Document {self.path or '<memory>'} is closed"
            raise DocumentClosedError(msg)

    @property
    def current_page(self) -> Page | None:
        if 0 <= self.current_page_index < len(self.pages):
            return self.pages[self.current_page_index]
        return None

    @current_page.setter
    def current_page(self, page: Page) -> None:
        for index, candidate in enumerate(self.pages):
            if candidate is page:
                self.current_page_index = index
                return
        msg = f"Page {page.name!r} does not belong to this document"
        raise ValueError(msg)

    def all_symbols(self) -> list[SymbolMaster]:
        """Top-level symbol masters of every page, in page then layer order."""
        self._require_open()
        return [
            layer
            for page in self.pages
            for layer in page.layers
            if isinstance(layer, SymbolMaster)
        ]

    def iter_layers(self) -> Iterator[Layer]:
        self._require_open()
        for page in self.pages:
            yield from page.walk()

    def all_instances(self, master: SymbolMaster) -> list[SymbolInstance]:
        """Snapshot of every instance in the document that references ``master``."""
        return [
            layer
            for layer in self.iter_layers()
            if isinstance(layer, SymbolInstance) and layer.master is master
        ]

    def find_page(self, name: str) -> Page | None:
        self._require_open()
        for page in self.pages:
            if page.name == name:
                return page
        return None

    def add_blank_page(self, name: str) -> Page:
        self._require_open()
        page = Page(name=name)
        self.pages.append(page)
        return page

    def symbols_page_or_create(
        self, name: str = DEFAULT_SYMBOLS_PAGE_NAME
    ) -> Page:
        return self.find_page(name) or self.add_blank_page(name)

    def resolve_instances(self) -> list[SymbolInstance]:
        """Bind every instance to the master with its ``symbol_id``.

        Returns the instances whose master is not part of the document.
        """
        masters = {symbol.symbol_id: symbol for symbol in self.all_symbols()}
        unresolved: list[SymbolInstance] = []
        for layer in self.iter_layers():
            if not isinstance(layer, SymbolInstance):
                continue
            layer.master = masters.get(layer.symbol_id)
            if layer.master is None:
                unresolved.append(layer)
        return unresolved

    def foreign_symbol_ids(self) -> set[str]:
        """Symbol ids of library masters embedded in the document header."""
        ids: set[str] = set()
        for foreign in self.attributes.get("foreignSymbols", []):
            master = foreign.get("symbolMaster") if isinstance(foreign, dict) else None
            if isinstance(master, dict) and master.get("symbolID"):
                ids.add(str(master["symbolID"]))
        return ids

    def close(self) -> None:
        self.closed = True
        self.pages = []


__all__ = [
    "DEFAULT_SYMBOLS_PAGE_NAME",
    "Document",
    "Group",
    "Layer",
    "Page",
    "Rect",
    "SymbolInstance",
    "SymbolMaster",
    "new_object_id",
]
