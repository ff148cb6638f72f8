"""
Symbol kind enumeration for type-safe symbol classification.
"""

from enum import Enum


class SymbolKind(Enum):
    """Type-safe enumeration of C++ symbol kinds."""
    FUNCTION = "function"
    CLASS = "class"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"
    TYPEDEF = "typedef"
    VARIABLE = "variable"
    NAMESPACE = "namespace"

    @property
    def is_class_like(self) -> bool:
        return self in (SymbolKind.CLASS, SymbolKind.STRUCT, SymbolKind.UNION)
