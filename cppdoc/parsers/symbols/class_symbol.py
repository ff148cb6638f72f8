"""
Class, struct and union symbol representation.
"""

from typing import Any, Dict, List, Optional

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class ClassSymbol(BaseSymbol):
    """
    Represents a C++ class, struct or union.

    Attributes:
        members: Qualified names of member symbols (resolved through the table)
        base_classes: Base class names as declared, e.g. 'Base' or 'ns::Base<int>'
        base_links: Declared base name -> resolved qualified name, None if unresolved.
                    Filled in by the hierarchy fixup.
        derived_classes: Qualified names of classes deriving from this one
        inherited_members: Qualified names of members reachable through base classes
    """

    def __init__(self, kind: SymbolKind = SymbolKind.CLASS):
        if not kind.is_class_like:
            raise ValueError(f"ClassSymbol requires CLASS, STRUCT or UNION kind, got {kind}")
        super().__init__(kind)
        self.members: List[str] = []
        self.base_classes: List[str] = []
        self.base_links: Dict[str, Optional[str]] = {}
        self.derived_classes: List[str] = []
        self.inherited_members: List[str] = []

    def resolved_bases(self) -> List[str]:
        return [q for q in self.base_links.values() if q is not None]

    def unresolved_bases(self) -> List[str]:
        return [name for name, q in self.base_links.items() if q is None]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['members'] = list(self.members)
        if self.base_classes:
            data['bases'] = [
                {'name': name, 'resolved': self.base_links.get(name)}
                for name in self.base_classes
            ]
        if self.derived_classes:
            data['derived'] = list(self.derived_classes)
        if self.inherited_members:
            data['inherited_members'] = list(self.inherited_members)
        return data
