from typing import Any, Dict

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class TypedefSymbol(BaseSymbol):
    """typedef or alias declaration ('using Name = Type;')."""

    def __init__(self):
        super().__init__(SymbolKind.TYPEDEF)
        self.aliased_type: str = ''

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['type'] = self.aliased_type
        return data
