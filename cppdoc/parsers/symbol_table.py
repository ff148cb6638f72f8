"""
SymbolTable class holding every symbol collected during one documentation run.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .symbols import BaseSymbol, ClassSymbol, SymbolKind
from .. import logger


def strip_template_args(name: str) -> str:
    """'ns::Base<int, Foo<bar>>' -> 'ns::Base'"""
    result = []
    depth = 0
    for ch in name:
        if ch == '<':
            depth += 1
        elif ch == '>':
            depth = max(depth - 1, 0)
        elif depth == 0:
            result.append(ch)
    return ''.join(result).replace(' ', '')


def split_qualified(name: str) -> Tuple[str, str]:
    """'ns::f(std::string)' -> ('ns', 'f(std::string)'); '::' inside <> or () is not a separator."""
    depth = 0
    split_at = -1
    i = 0
    while i < len(name):
        ch = name[i]
        if ch in '<(':
            depth += 1
        elif ch in '>)':
            depth = max(depth - 1, 0)
        elif depth == 0 and name.startswith('::', i):
            split_at = i
            i += 2
            continue
        i += 1
    if split_at < 0:
        return '', name
    return name[:split_at], name[split_at + 2:]


class SymbolTable:
    """
    Symbols for one run, keyed by qualified name.

    During parsing the table only grows: a forward declaration is replaced
    when the full declaration arrives, and a second full declaration of the
    same name leaves the first one in place. Deciding between conflicting
    definitions is up to the parser.
    """

    def __init__(self):
        self._symbols: Dict[str, BaseSymbol] = {}

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._symbols

    def __iter__(self) -> Iterator[BaseSymbol]:
        return iter(self.get_all_symbols())

    def add(self, symbol: BaseSymbol) -> BaseSymbol:
        """
        Merge a symbol into the table.

        Returns:
            The entry stored under the symbol's qualified name afterwards
        """
        qualified_name = symbol.qualified_name
        existing = self._symbols.get(qualified_name)

        if existing is None:
            stored = symbol
        elif existing.is_forward and not symbol.is_forward:
            logger.debug(f"Full declaration replaces forward declaration: {qualified_name}")
            self._carry_over(existing, symbol)
            stored = symbol
        else:
            if not symbol.is_forward and symbol.kind != SymbolKind.NAMESPACE:
                logger.debug(f"Duplicate declaration of {qualified_name} at "
                             f"{symbol.file_path}:{symbol.line_start}, keeping "
                             f"{existing.file_path}:{existing.line_start}")
            if not existing.doc and symbol.doc:
                existing.doc = symbol.doc
            return existing

        self._symbols[qualified_name] = stored
        self._link_to_scope(stored)
        return stored

    @staticmethod
    def _carry_over(old: BaseSymbol, new: BaseSymbol):
        if not new.doc:
            new.doc = old.doc
        old_members = getattr(old, 'members', None)
        new_members = getattr(new, 'members', None)
        if old_members and new_members is not None:
            for member in old_members:
                if member not in new_members:
                    new_members.append(member)

    def _link_to_scope(self, symbol: BaseSymbol):
        if not symbol.scope:
            return
        owner = self._symbols.get(symbol.scope)
        members = getattr(owner, 'members', None)
        if members is not None and symbol.qualified_name not in members:
            members.append(symbol.qualified_name)

    def link_members(self):
        """Attach every symbol to its enclosing class or namespace entry."""
        for symbol in self._symbols.values():
            self._link_to_scope(symbol)

    def get_symbol(self, qualified_name: str) -> Optional[BaseSymbol]:
        return self._symbols.get(qualified_name)

    def get_all_symbols(self) -> List[BaseSymbol]:
        """All symbols, ordered by qualified name."""
        return [self._symbols[k] for k in sorted(self._symbols)]

    def get_symbols_by_kind(self, kind: SymbolKind) -> List[BaseSymbol]:
        return [s for s in self.get_all_symbols() if s.kind == kind]

    def get_class_symbols(self) -> List[ClassSymbol]:
        return [s for s in self.get_all_symbols() if s.is_class_like()]

    def resolve_name(self, name: str, scope: str = '') -> Optional[BaseSymbol]:
        """
        Look a (possibly partially qualified) name up the way C++ does for base
        classes: innermost enclosing scope first, then each outer scope, then
        global. A leading '::' makes the name absolute. Template arguments are
        ignored.
        """
        name = strip_template_args(name)
        if name.startswith('::'):
            return self._symbols.get(name[2:])

        parts = scope.split('::') if scope else []
        while True:
            candidate = '::'.join(parts + [name])
            symbol = self._symbols.get(candidate)
            if symbol is not None:
                return symbol
            if not parts:
                return None
            parts.pop()
