from typing import Any, Dict, List

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class NamespaceSymbol(BaseSymbol):
    def __init__(self):
        super().__init__(SymbolKind.NAMESPACE)
        self.members: List[str] = []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['members'] = list(self.members)
        return data
