"""
Base symbol class for representing C++ code entities.
"""

from abc import ABC
from typing import Any, Dict

from .symbol_kind import SymbolKind


class BaseSymbol(ABC):
    """
    Abstract base class for C++ symbols collected into the symbol table.

    qualified_name is the table key. scope is the qualified name of the
    enclosing namespace or class ('' at global scope).
    """

    def __init__(self, kind: SymbolKind):
        self.kind: SymbolKind = kind
        self.name: str = ''
        self.qualified_name: str = ''
        self.scope: str = ''
        self.file_path: str = ''
        self.line_start: int = 0
        self.doc: str = ''
        self.access: str = ''
        self.is_forward: bool = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.kind.value}: {self.qualified_name} at {self.file_path}:{self.line_start})"

    def is_class_like(self) -> bool:
        return self.kind.is_class_like

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'kind': self.kind.value,
            'name': self.name,
            'qualified_name': self.qualified_name,
            'file': self.file_path,
            'line': self.line_start,
        }
        if self.doc:
            data['doc'] = self.doc
        if self.access:
            data['access'] = self.access
        if self.is_forward:
            data['forward'] = True
        return data
