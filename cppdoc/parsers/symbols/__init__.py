"""
Symbol hierarchy for C++ code entities.

Every symbol carries an explicit SymbolKind; consumers branch on the kind
rather than on the Python class.
"""

from .symbol_kind import SymbolKind
from .base_symbol import BaseSymbol
from .function_symbol import FunctionSymbol
from .class_symbol import ClassSymbol
from .enum_symbol import EnumSymbol
from .namespace_symbol import NamespaceSymbol
from .typedef_symbol import TypedefSymbol
from .variable_symbol import VariableSymbol

__all__ = [
    'SymbolKind',
    'BaseSymbol',
    'FunctionSymbol',
    'ClassSymbol',
    'EnumSymbol',
    'NamespaceSymbol',
    'TypedefSymbol',
    'VariableSymbol',
]
