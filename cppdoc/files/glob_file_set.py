"""
Resolution of include/exclude glob patterns into the set of files to document.
"""

import fnmatch
import glob
import os
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Union

from .. import logger
from ..doc_config import split_list


class PatternRole(Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class FilePattern:
    def __init__(self, pattern: str, role: PatternRole):
        self.pattern = pattern
        self.role = role

    def matches(self, path: Path) -> bool:
        """Exclude test: match against the base file name or the full normalized path."""
        if fnmatch.fnmatch(path.name, self.pattern):
            return True

        pattern = os.path.normpath(self.pattern)
        if os.path.isabs(pattern):
            return fnmatch.fnmatch(str(path), pattern)
        try:
            relative = os.path.relpath(path)
        except ValueError:
            # different drive on Windows
            relative = str(path)
        return fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(str(path), pattern)

    def expand(self) -> List[Path]:
        return [Path(p) for p in glob.glob(self.pattern, recursive=True)]

    def __repr__(self) -> str:
        return f"FilePattern({self.role.value}: {self.pattern})"


Patterns = Union[str, Iterable[str], None]


def _to_patterns(patterns: Patterns, role: PatternRole) -> List[FilePattern]:
    if patterns is None:
        return []
    if isinstance(patterns, str):
        patterns = split_list(patterns)
    return [FilePattern(p, role) for p in patterns if p.strip()]


class GlobFileSet:
    """
    Ordered, duplicate-free set of absolute file paths selected by glob patterns.

    Exclude patterns always win over include patterns, regardless of the order
    in which they are given. Patterns matching nothing are not an error.
    """

    def __init__(self, includes: Patterns, excludes: Patterns = None):
        self.includes = _to_patterns(includes, PatternRole.INCLUDE)
        self.excludes = _to_patterns(excludes, PatternRole.EXCLUDE)

    def resolve(self) -> List[Path]:
        candidates = set()
        for pattern in self.includes:
            matched = [p for p in pattern.expand() if p.is_file()]
            if not matched:
                logger.debug(f"Include pattern matched no files: {pattern.pattern}")
            for path in matched:
                # symlinks stay unresolved; excludes match the globbed path
                candidates.add(Path(os.path.abspath(path)))

        files = []
        for path in candidates:
            excluded_by = next((e for e in self.excludes if e.matches(path)), None)
            if excluded_by:
                logger.debug(f"Excluding {path} (matches {excluded_by.pattern})")
                continue
            files.append(path)

        files.sort()
        logger.info(f"Resolved {len(files)} files from {len(self.includes)} include patterns")
        return files


def resolve(includes: Patterns, excludes: Patterns = None) -> List[Path]:
    return GlobFileSet(includes, excludes).resolve()
