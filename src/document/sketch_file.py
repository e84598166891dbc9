"""Reading and writing ``.sketch`` archives.

A Sketch file is a zip archive holding ``document.json`` (which lists the
page files), one ``pages/<object id>.json`` per page and ``meta.json``.
Any other entry (previews, images, ``user.json``) is carried through
untouched.
"""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError

from document.errors import DocumentFormatError
from document.models import (
    Document,
    Group,
    Layer,
    Page,
    Rect,
    SymbolInstance,
    SymbolMaster,
    new_object_id,
)
from document.schema import (
    DOCUMENT_JSON,
    META_JSON,
    PAGES_DIR,
    DocumentRecord,
    LayerRecord,
)

logger = logging.getLogger(__name__)

FILE_TYPE = "com.bohemiancoding.sketch.drawing"
FILE_EXTENSIONS = ("sketch",)
FILE_SELECTION_TEXT = "Select a Sketch document to import symbols from."
FILE_SELECTION_ERROR = "Could not open file. Is it a Sketch file?"

_LAYER_CLASSES: dict[str, type[Layer]] = {
    "page": Page,
    "group": Group,
    "symbolMaster": SymbolMaster,
    "symbolInstance": SymbolInstance,
}

# Layer classes that always serialize a ``layers`` list, even when empty.
_CONTAINER_CLASSES = frozenset(
    {"page", "group", "symbolMaster", "artboard", "shapeGroup"}
)

_RECT_DEFAULTS: dict[str, Any] = {"_class": "rect", "constrainProportions": False}

_PAGE_DEFAULTS: dict[str, Any] = {
    "booleanOperation": -1,
    "exportOptions": {
        "_class": "exportOptions",
        "exportFormats": [],
        "includedLayerIds": [],
        "layerOptions": 0,
        "shouldTrim": False,
    },
    "hasClickThrough": True,
    "horizontalRulerData": {"_class": "rulerData", "base": 0, "guides": []},
    "isFixedToViewport": False,
    "isFlippedHorizontal": False,
    "isFlippedVertical": False,
    "isLocked": False,
    "isVisible": True,
    "layerListExpandedType": 0,
    "nameIsFixed": False,
    "resizingConstraint": 63,
    "resizingType": 0,
    "rotation": 0,
    "shouldBreakMaskChain": False,
    "verticalRulerData": {"_class": "rulerData", "base": 0, "guides": []},
}


def has_sketch_extension(path: Path) -> bool:
    return path.suffix.lower().lstrip(".") in FILE_EXTENSIONS


def _load_json(entries: dict[str, bytes], name: str) -> dict[str, Any]:
    if name not in entries:
        msg = f"Archive entry '{name}' is missing"
        raise DocumentFormatError(msg)
    try:
        data = orjson.loads(entries[name])
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in '{name}': {exc}"
        raise DocumentFormatError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Archive entry '{name}' is not a JSON object"
        raise DocumentFormatError(msg)
    return data


def _build_layer(raw: Any) -> Layer:
    if not isinstance(raw, dict):
        msg = f"Layer record must be a JSON object, got {type(raw).__name__}"
        raise DocumentFormatError(msg)
    try:
        record = LayerRecord.model_validate(raw)
    except ValidationError as exc:
        msg = f"Invalid layer record: {exc}"
        raise DocumentFormatError(msg) from exc

    attributes: dict[str, Any] = dict(record.model_extra or {})
    frame_extra = dict(record.frame.model_extra or {})
    if frame_extra:
        attributes["frame"] = frame_extra

    layer_cls = _LAYER_CLASSES.get(record.class_name, Layer)
    if layer_cls is Layer:
        attributes["_class"] = record.class_name

    kwargs: dict[str, Any] = {
        "name": record.name,
        "object_id": record.object_id,
        "frame": Rect(
            x=record.frame.x,
            y=record.frame.y,
            width=record.frame.width,
            height=record.frame.height,
        ),
        "layers": [_build_layer(child) for child in record.layers],
        "user_info": record.user_info,
        "attributes": attributes,
    }
    if layer_cls is SymbolMaster:
        kwargs["symbol_id"] = record.symbol_id or record.object_id
    elif layer_cls is SymbolInstance:
        kwargs["symbol_id"] = record.symbol_id or ""
    elif record.symbol_id is not None:
        attributes["symbolID"] = record.symbol_id

    return layer_cls(**kwargs)


def read_document(path: Path) -> Document:
    """Load a Sketch archive into a :class:`Document`.

    Raises:
        OSError: If the file cannot be read.
        DocumentFormatError: If the archive cannot be unpacked or its records
            are malformed.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            entries = {
                info.filename: archive.read(info)
                for info in archive.infolist()
                if not info.is_dir()
            }
    except (
        zipfile.BadZipFile,
        zlib.error,
        EOFError,
        RuntimeError,
        NotImplementedError,
    ) as exc:
        msg = f"Not a readable Sketch archive: {path}: {exc}"
        raise DocumentFormatError(msg) from exc

    try:
        record = DocumentRecord.model_validate(_load_json(entries, DOCUMENT_JSON))
    except ValidationError as exc:
        msg = f"Invalid {DOCUMENT_JSON}: {exc}"
        raise DocumentFormatError(msg) from exc

    consumed = {DOCUMENT_JSON}
    pages: list[Page] = []
    for reference in record.pages:
        entry_name = f"{reference.ref}.json"
        layer = _build_layer(_load_json(entries, entry_name))
        if not isinstance(layer, Page):
            msg = f"'{entry_name}' does not contain a page (found {layer.class_name})"
            raise DocumentFormatError(msg)
        pages.append(layer)
        consumed.add(entry_name)

    document = Document(
        pages=pages,
        path=path,
        current_page_index=record.current_page_index,
        attributes=dict(record.model_extra or {}),
        archive_entries={
            name: data for name, data in entries.items() if name not in consumed
        },
    )
    unresolved = document.resolve_instances()
    if unresolved:
        logger.debug(
            "%s: %d instance(s) reference symbols outside the document",
            path,
            len(unresolved),
        )
    return document


def open_document(path: Path) -> Document | None:
    """Open a Sketch document, returning ``None`` if it cannot be read."""
    try:
        return read_document(path)
    except (OSError, DocumentFormatError) as exc:
        logger.warning("Could not open %s: %s", path, exc)
        return None


def close_document(document: Document | None) -> None:
    if document is None:
        return
    document.close()


def _dump_layer(layer: Layer) -> dict[str, Any]:
    attributes = dict(layer.attributes)
    frame = {**_RECT_DEFAULTS, **attributes.pop("frame", {})}
    frame.update(
        x=layer.frame.x,
        y=layer.frame.y,
        width=layer.frame.width,
        height=layer.frame.height,
    )

    payload: dict[str, Any] = {
        **attributes,
        "_class": layer.class_name,
        "do_objectID": layer.object_id,
        "name": layer.name,
        "frame": frame,
    }
    if layer.layers or layer.class_name in _CONTAINER_CLASSES:
        payload["layers"] = [_dump_layer(child) for child in layer.layers]
    if isinstance(layer, (SymbolMaster, SymbolInstance)):
        payload["symbolID"] = layer.symbol_id
    if layer.user_info:
        payload["userInfo"] = layer.user_info
    if isinstance(layer, Page):
        for key, value in _PAGE_DEFAULTS.items():
            payload.setdefault(key, value)
    return payload


def _rebuild_meta(raw: bytes | None, pages: list[Page]) -> dict[str, Any]:
    meta: Any = {}
    if raw is not None:
        try:
            meta = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.debug("Discarding unreadable %s", META_JSON)
    if not isinstance(meta, dict):
        meta = {}

    meta["pagesAndArtboards"] = {
        page.object_id: {
            "name": page.name,
            "artboards": {
                layer.object_id: {"name": layer.name}
                for layer in page.layers
                if layer.class_name in {"artboard", "symbolMaster"}
            },
        }
        for page in pages
    }
    return meta


def save_document(document: Document, path: Path | None = None) -> Path:
    """Write ``document`` as a Sketch archive and return the written path.

    The archive is written to a temporary file beside the destination and
    moved into place, so a failed write leaves the destination untouched.
    """
    destination = path or document.path
    if destination is None:
        msg = "No destination path given for an in-memory document"
        raise ValueError(msg)

    entries = {
        name: data
        for name, data in document.archive_entries.items()
        if name != META_JSON
    }
    page_refs: list[dict[str, Any]] = []
    for page in document.pages:
        ref = f"{PAGES_DIR}/{page.object_id}"
        page_refs.append(
            {
                "_class": "MSJSONFileReference",
                "_ref_class": "MSImmutablePage",
                "_ref": ref,
            }
        )
        entries[f"{ref}.json"] = orjson.dumps(_dump_layer(page))

    header = {
        "_class": "document",
        "do_objectID": new_object_id(),
        **document.attributes,
        "pages": page_refs,
        "currentPageIndex": document.current_page_index,
    }
    entries[DOCUMENT_JSON] = orjson.dumps(header)
    entries[META_JSON] = orjson.dumps(
        _rebuild_meta(document.archive_entries.get(META_JSON), document.pages)
    )

    ordered = [DOCUMENT_JSON, META_JSON] + sorted(
        name for name in entries if name not in {DOCUMENT_JSON, META_JSON}
    )

    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=".", suffix=".sketch.tmp"
    )
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        with zipfile.ZipFile(temp_path, "w", compression=zipfile.ZIP_DEFLATED) as out:
            for name in ordered:
                out.writestr(name, entries[name])
        os.replace(temp_path, destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    document.path = destination
    return destination


__all__ = [
    "FILE_EXTENSIONS",
    "FILE_SELECTION_ERROR",
    "FILE_SELECTION_TEXT",
    "FILE_TYPE",
    "close_document",
    "has_sketch_extension",
    "open_document",
    "read_document",
    "save_document",
]
