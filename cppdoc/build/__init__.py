"""
Build pipeline: parse coordination, hierarchy fixup and the DocBuilder driving them.
"""

from .parse_coordinator import ParseCoordinator
from .hierarchy_fixup import HierarchyFixup, fixup
from .doc_builder import DocBuilder

__all__ = ['ParseCoordinator', 'HierarchyFixup', 'fixup', 'DocBuilder']
