"""
Renderer producing a machine-readable index of the symbol table.
"""

import json
import shutil
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from .base_renderer import BaseRenderer, RenderOptions
from .. import logger
from ..parsers.symbol_table import SymbolTable
from ..parsers.symbols import SymbolKind

INDEX_FILENAME = 'index.json'
TOC_FILENAME = 'toc.xml'
PAGES_DIR = 'pages'


class JsonIndexRenderer(BaseRenderer):
    """
    Writes index.json (every symbol, ordered by qualified name), copies extra
    pages into pages/ and, on request, an Eclipse help toc.xml listing
    namespaces and classes.
    """

    def __init__(self, title: str = 'API Reference'):
        self.title = title
        self.pages: List[Path] = []
        self._table: Optional[SymbolTable] = None
        self._output_dir: Optional[Path] = None

    @staticmethod
    def get_name() -> str:
        return "JSON index"

    def add_page(self, page: Path):
        page = Path(page)
        if page not in self.pages:
            self.pages.append(page)

    def write(self, table: SymbolTable, output_dir: Path, options: RenderOptions):
        self._table = table
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)

        index = {
            'title': self.title,
            'options': {'prettify': options.prettify, 'eclipse_toc': options.eclipse_toc},
            'pages': [self._copy_page(p) for p in self.pages],
            'symbols': [s.to_dict() for s in table.get_all_symbols()],
        }

        index_path = self._output_dir / INDEX_FILENAME
        with open(index_path, 'w', encoding='utf-8') as f:
            json.dump(index, f, indent=2 if options.prettify else None)

        logger.info(f"Wrote {len(index['symbols'])} symbols to {index_path}")

    def _copy_page(self, page: Path) -> str:
        pages_dir = self._output_dir / PAGES_DIR
        pages_dir.mkdir(exist_ok=True)
        shutil.copyfile(page, pages_dir / page.name)
        return f"{PAGES_DIR}/{page.name}"

    def write_eclipse_toc(self):
        if self._table is None:
            raise RuntimeError("write() must be called before write_eclipse_toc()")

        root = ET.Element('toc', label=self.title, topic=INDEX_FILENAME)
        for symbol in self._table.get_all_symbols():
            if symbol.kind == SymbolKind.NAMESPACE or symbol.is_class_like():
                ET.SubElement(root, 'topic', label=symbol.qualified_name,
                              href=f"{INDEX_FILENAME}#{symbol.qualified_name}")

        toc_path = self._output_dir / TOC_FILENAME
        ET.ElementTree(root).write(toc_path, encoding='utf-8', xml_declaration=True)
        logger.info(f"Wrote Eclipse TOC to {toc_path}")
