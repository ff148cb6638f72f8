"""
Output writers for the finished symbol table.
"""

from .base_renderer import BaseRenderer, RenderOptions
from .json_index_renderer import JsonIndexRenderer

__all__ = ['BaseRenderer', 'RenderOptions', 'JsonIndexRenderer']
