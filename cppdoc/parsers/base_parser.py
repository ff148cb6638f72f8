from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from .symbol_table import SymbolTable


class BaseParser(ABC):
    """
    Turns one preprocessed translation unit into symbol table entries.

    Implementations merge what they find into the shared table and raise
    ParseError for input they cannot handle. Entries added before the error
    stay in the table.
    """

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        pass

    @abstractmethod
    def parse(self, table: SymbolTable, source_file_name: Path, stream: BinaryIO) -> None:
        pass
