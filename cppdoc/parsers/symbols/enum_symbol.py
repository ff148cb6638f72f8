"""
Enum symbol representation.
"""

from typing import Any, Dict, List

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class EnumSymbol(BaseSymbol):
    """
    Represents a C++ enum symbol.

    Attributes:
        enum_values: List of (name, value_string) tuples for enum values
        is_scoped: True for 'enum class' / 'enum struct'
    """

    def __init__(self):
        super().__init__(SymbolKind.ENUM)
        self.enum_values: List[tuple] = []
        self.is_scoped: bool = False

    def get_value_names(self) -> List[str]:
        """Get list of enum value names."""
        return [name for name, _ in self.enum_values]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['values'] = [{'name': n, 'value': v} for n, v in self.enum_values]
        return data
