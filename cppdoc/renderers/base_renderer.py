from abc import ABC, abstractmethod
from pathlib import Path

from ..parsers.symbol_table import SymbolTable


class RenderOptions:
    def __init__(self, prettify: bool = False, eclipse_toc: bool = False, search_index: bool = False):
        self.prettify = prettify
        self.eclipse_toc = eclipse_toc
        self.search_index = search_index

    def __repr__(self) -> str:
        return (f"RenderOptions(prettify={self.prettify}, eclipse_toc={self.eclipse_toc}, "
                f"search_index={self.search_index})")


class BaseRenderer(ABC):
    """Writes the finished symbol table to the output directory."""

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        pass

    @staticmethod
    def supports_search_index() -> bool:
        return False

    @abstractmethod
    def add_page(self, page: Path):
        pass

    @abstractmethod
    def write(self, table: SymbolTable, output_dir: Path, options: RenderOptions):
        pass

    @abstractmethod
    def write_eclipse_toc(self):
        pass
