"""
Second pass over the finished symbol table: class hierarchy links.
"""

from typing import List, Optional, Set

from .. import logger
from ..parsers.symbol_table import SymbolTable, split_qualified
from ..parsers.symbols import ClassSymbol, SymbolKind

MAX_TYPEDEF_HOPS = 16


class HierarchyFixup:
    """
    Links derived classes to their bases once every file has been parsed.

    A base class may be declared in a file that is parsed after the derived
    class, so this cannot happen during parsing. For every class the declared
    base names are resolved against the complete table; unresolved bases are
    recorded as None and are not an error. Running the fixup again on an
    unchanged table produces the same links.
    """

    def __init__(self, table: SymbolTable):
        self.table = table

    def run(self):
        logger.info("Fixing-up class hierarchies")
        self.table.link_members()
        self._mark_member_functions()

        classes = self.table.get_class_symbols()
        for cls in classes:
            cls.derived_classes = []

        unresolved = 0
        for cls in classes:
            cls.base_links = {}
            for base_name in cls.base_classes:
                base = self.resolve_base(cls, base_name)
                cls.base_links[base_name] = base.qualified_name if base else None
                if base is None:
                    unresolved += 1
                    logger.debug(f"{cls.qualified_name}: base class '{base_name}' not found")
                elif cls.qualified_name not in base.derived_classes:
                    base.derived_classes.append(cls.qualified_name)

        for cls in classes:
            cls.derived_classes.sort()
            cls.inherited_members = self.collect_inherited_members(cls)

        logger.debug(f"Hierarchy fixup: {len(classes)} classes, {unresolved} unresolved base references")

    def resolve_base(self, cls: ClassSymbol, base_name: str) -> Optional[ClassSymbol]:
        symbol = self.table.resolve_name(base_name, cls.scope)
        hops = 0
        # follow 'typedef Impl Base;' and 'using Base = Impl;'
        while symbol is not None and symbol.kind == SymbolKind.TYPEDEF and hops < MAX_TYPEDEF_HOPS:
            symbol = self.table.resolve_name(symbol.aliased_type, symbol.scope)
            hops += 1
        if symbol is None or not symbol.is_class_like() or symbol is cls:
            return None
        return symbol

    def collect_inherited_members(self, cls: ClassSymbol) -> List[str]:
        """Members of all (transitive) bases not hidden by a member of the same name."""
        own_names = {self._member_name(m) for m in cls.members}
        inherited = []
        seen: Set[str] = {cls.qualified_name}
        queue = cls.resolved_bases()
        while queue:
            base_name = queue.pop(0)
            if base_name in seen:
                continue
            seen.add(base_name)
            base = self.table.get_symbol(base_name)
            if base is None:
                continue
            for member in base.members:
                name = self._member_name(member)
                if name in own_names or name == base.name or name == f'~{base.name}':
                    continue
                if member not in inherited:
                    inherited.append(member)
            queue.extend(base.resolved_bases())
        return inherited

    def _member_name(self, qualified: str) -> str:
        symbol = self.table.get_symbol(qualified)
        if symbol is not None:
            return symbol.name
        return split_qualified(qualified)[1]

    def _mark_member_functions(self):
        # out-of-line definitions parsed before their class was known
        for symbol in self.table.get_symbols_by_kind(SymbolKind.FUNCTION):
            owner = self.table.get_symbol(symbol.scope)
            if owner is not None and owner.is_class_like():
                symbol.is_member = True
                symbol.class_name = owner.qualified_name


def fixup(table: SymbolTable):
    HierarchyFixup(table).run()
