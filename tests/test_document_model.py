from __future__ import annotations

import pytest

from document.errors import DocumentClosedError
from document.metadata import MetadataStore
from document.models import (
    Document,
    Group,
    Layer,
    Page,
    Rect,
    SymbolInstance,
    SymbolMaster,
)


def test_add_layers_detaches_layer_from_previous_parent() -> None:
    master = SymbolMaster(name="Button", symbol_id="1")
    source = Page(name="Symbols", layers=[master])
    target = Page(name="Symbols")

    target.add_layers([master])

    assert source.layers == []
    assert target.layers == [master]
    assert master.parent is target


def test_remove_from_parent_is_noop_for_detached_layer() -> None:
    layer = Layer(name="loose")

    layer.remove_from_parent()

    assert layer.parent is None


def test_parent_page_walks_up_through_groups() -> None:
    instance = SymbolInstance(name="icon", symbol_id="1")
    page = Page(name="Screens", layers=[Group(layers=[Group(layers=[instance])])])

    assert instance.parent_page() is page
    assert page.parent_page() is None


def test_all_symbols_lists_top_level_masters_in_page_order() -> None:
    first = SymbolMaster(name="A", symbol_id="1")
    second = SymbolMaster(name="B", symbol_id="2")
    buried = SymbolMaster(name="C", symbol_id="3")
    document = Document(
        pages=[
            Page(name="One", layers=[Group(layers=[buried]), first]),
            Page(name="Two", layers=[second]),
        ]
    )

    assert document.all_symbols() == [first, second]


def test_all_instances_returns_only_instances_of_the_master() -> None:
    master = SymbolMaster(name="A", symbol_id="1")
    other = SymbolMaster(name="B", symbol_id="2")
    mine = SymbolInstance(name="a", master=master)
    theirs = SymbolInstance(name="b", master=other)
    nested = SymbolInstance(name="a nested", master=master)
    document = Document(
        pages=[
            Page(name="Symbols", layers=[master, other]),
            Page(name="Screens", layers=[mine, theirs, Group(layers=[nested])]),
        ]
    )

    assert document.all_instances(master) == [mine, nested]


def test_instance_takes_symbol_id_from_master() -> None:
    master = SymbolMaster(name="A", symbol_id="abc")

    instance = SymbolInstance(master=master)

    assert instance.symbol_id == "abc"


def test_change_to_symbol_keeps_instance_frame() -> None:
    old = SymbolMaster(name="A", symbol_id="1")
    new = SymbolMaster(name="A2", symbol_id="2")
    instance = SymbolInstance(master=old, frame=Rect(5, 6, 7, 8))

    instance.change_to_symbol(new)

    assert instance.master is new
    assert instance.symbol_id == "2"
    assert instance.frame == Rect(5, 6, 7, 8)


def test_resolve_instances_binds_by_symbol_id_and_reports_unknown() -> None:
    master = SymbolMaster(name="A", symbol_id="1")
    known = SymbolInstance(symbol_id="1")
    unknown = SymbolInstance(symbol_id="library")
    document = Document(pages=[Page(name="Symbols", layers=[master, known, unknown])])

    unresolved = document.resolve_instances()

    assert known.master is master
    assert unresolved == [unknown]


def test_symbols_page_or_create_reuses_page_with_exact_name() -> None:
    page = Page(name="Symbols")
    document = Document(pages=[Page(name="symbols"), page])

    assert document.symbols_page_or_create() is page
    assert len(document.pages) == 2

    created = document.symbols_page_or_create("Library")
    assert created.name == "Library"
    assert document.pages[-1] is created


def test_current_page_setter_rejects_foreign_page() -> None:
    document = Document(pages=[Page(name="One")])

    with pytest.raises(ValueError, match="does not belong"):
        document.current_page = Page(name="Elsewhere")


def test_closed_document_refuses_symbol_access() -> None:
    document = Document(pages=[Page(name="Symbols")])

    document.close()
    document.close()

    with pytest.raises(DocumentClosedError):
        document.all_symbols()


def test_foreign_symbol_ids_read_from_document_header() -> None:
    document = Document(
        attributes={
            "foreignSymbols": [
                {"symbolMaster": {"symbolID": "lib-1"}},
                {"symbolMaster": {}},
                "garbage",
            ]
        }
    )

    assert document.foreign_symbol_ids() == {"lib-1"}


def test_metadata_store_scopes_values_by_identifier() -> None:
    layer = Layer(name="x")
    mine = MetadataStore("com.example.mine")
    theirs = MetadataStore("com.example.theirs")

    mine.set_value(layer, "import_id", "42")

    assert mine.get_value(layer, "import_id") == "42"
    assert theirs.get_value(layer, "import_id") == ""
    assert layer.user_info == {"com.example.mine": {"import_id": "42"}}
