from typing import Any, Dict

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class VariableSymbol(BaseSymbol):
    def __init__(self):
        super().__init__(SymbolKind.VARIABLE)
        self.var_type: str = ''

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['type'] = self.var_type
        return data
