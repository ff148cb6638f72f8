import json
import xml.etree.ElementTree as ET
import pytest
from pathlib import Path
from cppdoc.parsers.symbol_table import SymbolTable
from cppdoc.parsers.symbols import ClassSymbol, NamespaceSymbol, SymbolKind, VariableSymbol
from cppdoc.renderers.base_renderer import RenderOptions
from cppdoc.renderers.json_index_renderer import JsonIndexRenderer


def make_table() -> SymbolTable:
    table = SymbolTable()
    for symbol, name in ((NamespaceSymbol(), "geo"), (ClassSymbol(SymbolKind.CLASS), "geo::Shape"),
                         (VariableSymbol(), "geo::origin")):
        symbol.qualified_name = name
        symbol.scope, _, symbol.name = name.rpartition("::")
        table.add(symbol)
    return table


class TestJsonIndexRenderer:
    def test_get_name(self):
        assert JsonIndexRenderer.get_name() == "JSON index"

    def test_does_not_support_search_index(self):
        assert not JsonIndexRenderer().supports_search_index()

    def test_writes_index(self, tmp_path):
        JsonIndexRenderer(title="Geo").write(make_table(), tmp_path / "doc", RenderOptions())
        with open(tmp_path / "doc" / "index.json", encoding="utf-8") as f:
            index = json.load(f)
        assert index["title"] == "Geo"
        assert [s["qualified_name"] for s in index["symbols"]] == ["geo", "geo::Shape", "geo::origin"]

    def test_prettify_indents_output(self, tmp_path):
        JsonIndexRenderer().write(make_table(), tmp_path, RenderOptions(prettify=True))
        assert "\n  " in (tmp_path / "index.json").read_text(encoding="utf-8")

    def test_add_page_ignores_duplicates(self, tmp_path):
        renderer = JsonIndexRenderer()
        renderer.add_page(tmp_path / "intro.page")
        renderer.add_page(tmp_path / "intro.page")
        assert renderer.pages == [tmp_path / "intro.page"]

    def test_eclipse_toc_lists_namespaces_and_classes(self, tmp_path):
        renderer = JsonIndexRenderer()
        renderer.write(make_table(), tmp_path, RenderOptions(eclipse_toc=True))
        renderer.write_eclipse_toc()

        root = ET.parse(tmp_path / "toc.xml").getroot()
        assert root.tag == "toc"
        assert [t.get("label") for t in root.findall("topic")] == ["geo", "geo::Shape"]

    def test_eclipse_toc_before_write_raises(self):
        with pytest.raises(RuntimeError):
            JsonIndexRenderer().write_eclipse_toc()
