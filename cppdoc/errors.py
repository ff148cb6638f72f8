"""
Exception types raised by the documentation build.

Per-file errors (FileProcessingError and subclasses) are caught and counted by
the ParseCoordinator. ConfigurationError is fatal and stops the run before any
file is processed.
"""

from pathlib import Path
from typing import Optional


class DocBuildError(Exception):
    pass


class ConfigurationError(DocBuildError):
    pass


class FileProcessingError(DocBuildError):
    """Failure tied to one source file. Never aborts the whole build."""

    kind = "error"

    def __init__(self, message: str, source_file: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.source_file = Path(source_file) if source_file else None

    def __str__(self) -> str:
        if self.source_file:
            return f"{self.source_file}: {self.message}"
        return self.message


class LaunchError(FileProcessingError):
    """The preprocessing tool could not be started."""

    kind = "launch"


class OpenFileError(FileProcessingError):
    """The preprocessor produced no readable output."""

    kind = "open"


class ParseError(FileProcessingError):
    kind = "parse"

    def __init__(self, message: str, source_file: Optional[Path] = None, line: int = 0):
        super().__init__(message, source_file)
        self.line = line

    def __str__(self) -> str:
        if self.source_file and self.line:
            return f"{self.source_file}({self.line}): {self.message}"
        return super().__str__()
