"""
Symbol table and the parsers that fill it.
"""

from .base_parser import BaseParser
from .declaration_parser import DeclarationParser
from .symbol_table import SymbolTable
from .symbols import (SymbolKind, BaseSymbol, FunctionSymbol, ClassSymbol, EnumSymbol,
                      NamespaceSymbol, TypedefSymbol, VariableSymbol)

__all__ = ['BaseParser', 'DeclarationParser', 'SymbolTable', 'SymbolKind', 'BaseSymbol',
           'FunctionSymbol', 'ClassSymbol', 'EnumSymbol', 'NamespaceSymbol', 'TypedefSymbol',
           'VariableSymbol']
