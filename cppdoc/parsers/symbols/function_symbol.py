"""
Function symbol representation.
"""

from typing import Any, Dict, List

from .base_symbol import BaseSymbol
from .symbol_kind import SymbolKind


class FunctionSymbol(BaseSymbol):
    """
    Represents a C++ function symbol.

    The qualified name carries the parameter types, so overloads are distinct
    table entries: 'ns::Widget::resize(int, int)'.

    Attributes:
        return_type: Return type as written (empty for constructors/destructors)
        parameters: List of (type, name) tuples
        qualifiers: Trailing qualifiers such as 'const' or 'override'
        is_member: True if this is a class member function
        class_name: Qualified name of the class (if member function)
        is_definition: True if a body was seen
    """

    def __init__(self):
        super().__init__(SymbolKind.FUNCTION)
        self.return_type: str = ''
        self.parameters: List[tuple] = []
        self.qualifiers: List[str] = []
        self.is_member: bool = False
        self.class_name: str = ''
        self.is_definition: bool = False

    def get_parameter_types(self) -> str:
        return ', '.join(ptype for ptype, _ in self.parameters)

    def get_signature(self) -> str:
        """Return the function signature as a string."""
        params_str = ', '.join(f'{ptype} {pname}'.strip() for ptype, pname in self.parameters)
        prefix = f'{self.return_type} ' if self.return_type else ''
        suffix = ''.join(f' {q}' for q in self.qualifiers)
        return f'{prefix}{self.scoped_name()}({params_str}){suffix}'

    def scoped_name(self) -> str:
        return f'{self.scope}::{self.name}' if self.scope else self.name

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['signature'] = self.get_signature()
        if self.is_member:
            data['class'] = self.class_name
        return data
