from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict


class FileStatus(Enum):
    PARSED = "parsed"
    FAILED = "failed"


class FileResult:
    def __init__(
        self,
        source_file: Path,
        status: FileStatus,
        error_kind: Optional[str] = None,
        message: str = ''
    ):
        if not isinstance(status, FileStatus):
            raise TypeError(f"status must be FileStatus enum, got {type(status)}")

        self.source_file = Path(source_file)
        self.status = status
        self.error_kind = error_kind
        self.message = message

    @property
    def failed(self) -> bool:
        return self.status == FileStatus.FAILED

    def __repr__(self) -> str:
        return f"FileResult({self.source_file.name}: {self.status.value})"


class BuildStats:
    """Outcome of one parse run: every attempted file and the error tally."""

    def __init__(self):
        self.file_results: List[FileResult] = []
        self.elapsed: float = 0.0

    def record(self, file_result: FileResult):
        self.file_results.append(file_result)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.file_results if r.failed)

    @property
    def files_attempted(self) -> int:
        return len(self.file_results)

    def failed_files(self) -> List[Path]:
        return [r.source_file for r in self.file_results if r.failed]

    def errors_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for r in self.file_results:
            if r.failed:
                counts[r.error_kind] = counts.get(r.error_kind, 0) + 1
        return counts

    def __repr__(self) -> str:
        return f"BuildStats(files={self.files_attempted}, errors={self.error_count})"
