from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

import reconcile.importer as importer_module
from document.models import Document, Page, Rect, SymbolInstance, SymbolMaster
from document.sketch_file import FILE_SELECTION_ERROR, read_document
from reconcile.errors import ImportFileError, SymbolCycleError
from reconcile.importer import (
    import_symbols,
    import_symbols_by_id,
    import_symbols_by_name,
    plan_import,
    start_import,
)
from reconcile.keys import MatchMode
from settings.config import ImporterConfig
from sketch_factory import instance_json, master_json, page_json, write_sketch

if TYPE_CHECKING:
    from pathlib import Path

PLUGIN = ImporterConfig().plugin_identifier


def _write_source(path: Path, *, a_id: str = "1", b_id: str = "2") -> Path:
    return write_sketch(
        path,
        [
            page_json(
                "Symbols",
                [
                    master_json("B", b_id, x=200, layers=[instance_json(a_id, "a")]),
                    master_json("A", a_id, x=10, y=20),
                ],
            )
        ],
    )


def _write_target(path: Path) -> Path:
    return write_sketch(path, [page_json("Page 1")])


def test_import_into_empty_target_adds_all_symbols(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.sketch")
    target = _write_target(tmp_path / "app.sketch")

    result = import_symbols_by_id(target, source)

    assert (result.added, result.updated) == (2, 0)
    assert result.message == "2 symbols added, 0 updated."
    assert [entry.name for entry in result.entries] == ["A", "B"]

    merged = read_document(target)
    assert [page.name for page in merged.pages] == ["Page 1", "Symbols"]
    assert merged.current_page is merged.pages[1]
    a, b = merged.all_symbols()
    assert (a.name, b.name) == ("A", "B")
    assert a.user_info[PLUGIN] == {"import_id": "1", "import_name": "A"}
    assert b.user_info[PLUGIN] == {"import_id": "2", "import_name": "B"}
    assert b.layers[0].master is a
    assert a.frame == Rect(10, 20, 100, 50)


def test_reimport_updates_every_symbol(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.sketch")
    target = _write_target(tmp_path / "app.sketch")
    import_symbols_by_id(target, source)

    result = import_symbols_by_id(target, source)

    assert (result.added, result.updated) == (0, 2)
    merged = read_document(target)
    assert [symbol.name for symbol in merged.all_symbols()] == ["A", "B"]


def test_reimport_relinks_target_instances(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.sketch")
    target = write_sketch(
        tmp_path / "app.sketch",
        [
            page_json(
                "Symbols",
                [master_json("B", "old-b", x=300, y=400, user_info={PLUGIN: {"import_id": "2"}})],
            ),
            page_json("Screens", [instance_json("old-b", "b on screen", x=7, y=8)]),
        ],
    )

    result = import_symbols_by_id(target, source)

    assert (result.added, result.updated) == (1, 1)
    merged = read_document(target)
    assert sorted(symbol.symbol_id for symbol in merged.all_symbols()) == ["1", "2"]
    new_b = next(s for s in merged.all_symbols() if s.symbol_id == "2")
    assert (new_b.frame.x, new_b.frame.y) == (300, 400)
    screens = merged.find_page("Screens")
    assert screens is not None
    (instance,) = screens.layers
    assert isinstance(instance, SymbolInstance)
    assert instance.master is new_b
    assert (instance.frame.x, instance.frame.y) == (7, 8)


def test_import_by_name_matches_symbols_with_new_ids(tmp_path: Path) -> None:
    target = _write_target(tmp_path / "app.sketch")
    import_symbols_by_id(target, _write_source(tmp_path / "v1.sketch"))

    v2 = _write_source(tmp_path / "v2.sketch", a_id="10", b_id="20")
    result = import_symbols_by_name(target, v2)

    assert (result.added, result.updated) == (0, 2)
    assert result.mode is MatchMode.NAME
    merged = read_document(target)
    assert [symbol.symbol_id for symbol in merged.all_symbols()] == ["10", "20"]


def test_import_uses_configured_match_mode(tmp_path: Path) -> None:
    target = _write_target(tmp_path / "app.sketch")
    import_symbols(target, _write_source(tmp_path / "v1.sketch"))

    v2 = _write_source(tmp_path / "v2.sketch", a_id="10", b_id="20")
    result = import_symbols(target, v2, config=ImporterConfig(match_by="name"))

    assert result.updated == 2


def test_import_writes_to_output_path(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.sketch")
    target = _write_target(tmp_path / "app.sketch")
    original = target.read_bytes()
    output = tmp_path / "out" / "merged.sketch"

    import_symbols(target, source, output_path=output)

    assert target.read_bytes() == original
    assert len(read_document(output).all_symbols()) == 2


def test_import_rejects_source_with_wrong_extension(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.zip")
    target = _write_target(tmp_path / "app.sketch")
    original = target.read_bytes()

    with pytest.raises(ImportFileError, match="Is it a Sketch file"):
        import_symbols(target, source)

    assert target.read_bytes() == original


def test_import_rejects_unreadable_source(tmp_path: Path) -> None:
    source = tmp_path / "library.sketch"
    source.write_text("plain text", encoding="utf-8")
    target = _write_target(tmp_path / "app.sketch")
    original = target.read_bytes()

    with pytest.raises(ImportFileError) as exc_info:
        import_symbols(target, source)

    assert str(exc_info.value) == FILE_SELECTION_ERROR
    assert target.read_bytes() == original


def test_import_reports_unreadable_target(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "library.sketch")

    with pytest.raises(ImportFileError, match="target document"):
        import_symbols(tmp_path / "missing.sketch", source)


def test_import_closes_source_when_merge_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = _write_source(tmp_path / "library.sketch")
    target = _write_target(tmp_path / "app.sketch")
    closed: list[Document | None] = []

    def _failing_start_import(*args: object, **kwargs: object) -> None:
        raise SymbolCycleError(["A", "B"])

    monkeypatch.setattr(importer_module, "start_import", _failing_start_import)
    monkeypatch.setattr(importer_module, "close_document", closed.append)

    with pytest.raises(SymbolCycleError):
        import_symbols(target, source)

    assert [doc.path for doc in closed if doc is not None] == [source, target]


def test_start_import_shows_symbols_page_and_formats_message() -> None:
    symbol = SymbolMaster(name="Icon", symbol_id="icon")
    source = Document(pages=[Page(name="Library", layers=[symbol])])
    target = Document(pages=[Page(name="Page 1")])

    result = start_import(target, source)

    assert result.message == "1 symbol added, 0 updated."
    assert target.current_page is target.find_page("Symbols")
    assert symbol.parent_page() is target.find_page("Library")


def test_start_import_can_leave_current_page_alone() -> None:
    source = Document(pages=[Page(name="Library", layers=[SymbolMaster(name="Icon")])])
    target = Document(pages=[Page(name="Page 1")])

    start_import(target, source, config=ImporterConfig(show_symbols_page=False))

    assert target.current_page is target.pages[0]
    assert target.find_page("Symbols") is None


def test_plan_import_reports_decisions_without_changes(tmp_path: Path) -> None:
    target = _write_target(tmp_path / "app.sketch")
    import_symbols_by_id(target, _write_source(tmp_path / "v1.sketch"))
    target_doc = read_document(target)
    source_doc = read_document(
        write_sketch(
            tmp_path / "v2.sketch",
            [
                page_json(
                    "Components",
                    [master_json("B", "2", layers=[instance_json("3")]), master_json("C", "3")],
                )
            ],
        )
    )

    plan = plan_import(target_doc, source_doc)

    assert [(entry.key, entry.action, entry.page) for entry in plan] == [
        ("3", "added", "Components"),
        ("2", "updated", "Components"),
    ]
    assert len(source_doc.all_symbols()) == 2
    assert len(target_doc.all_symbols()) == 2


def test_import_by_name_with_repeated_names_nested_through_another_symbol(
    tmp_path: Path,
) -> None:
    source = write_sketch(
        tmp_path / "library.sketch",
        [
            page_json(
                "Symbols",
                [
                    master_json("Icon", "icon-1", layers=[instance_json("foo")]),
                    master_json("Foo", "foo", layers=[instance_json("icon-2")]),
                    master_json("Icon", "icon-2"),
                ],
            )
        ],
    )
    target = _write_target(tmp_path / "app.sketch")

    result = import_symbols_by_name(target, source)

    assert (result.added, result.updated) == (2, 1)
    merged = read_document(target)
    foo, icon = merged.all_symbols()
    assert (foo.symbol_id, icon.symbol_id) == ("foo", "icon-1")
    assert foo.layers[0].master is icon
