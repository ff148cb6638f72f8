"""
Source file selection.
"""

from .glob_file_set import GlobFileSet, FilePattern, PatternRole, resolve

__all__ = ['GlobFileSet', 'FilePattern', 'PatternRole', 'resolve']
