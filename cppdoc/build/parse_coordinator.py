"""
ParseCoordinator - preprocesses and parses every resolved file into one symbol table.
"""

from pathlib import Path
from typing import Iterable

from ..build_stats import BuildStats, FileResult, FileStatus
from ..errors import FileProcessingError, OpenFileError
from ..parsers.base_parser import BaseParser
from ..parsers.symbol_table import SymbolTable
from ..preprocessors.process_preprocessor import ProcessPreprocessor
from .. import logger


class ParseCoordinator:
    """
    Runs preprocessor and parser over each file in turn.

    A failure in one file is logged, recorded as a failed FileResult and
    counted; the remaining files are still processed. Files are handled in
    sorted order, one at a time, so the table always has a single writer and
    diagnostics come out in the same order on every run.
    """

    def __init__(self, preprocessor: ProcessPreprocessor, parser: BaseParser, table: SymbolTable):
        self.preprocessor = preprocessor
        self.parser = parser
        self.table = table

    def run(self, files: Iterable[Path]) -> BuildStats:
        stats = BuildStats()
        for source_file in sorted(Path(f) for f in files):
            file_result = self.parse_file(source_file)
            stats.record(file_result)
        logger.debug(f"Parsed {stats.files_attempted} files, {len(self.table)} symbols in table")
        return stats

    def parse_file(self, source_file: Path) -> FileResult:
        try:
            self._parse(source_file)
        except FileProcessingError as e:
            logger.error(str(e) if e.source_file else f"{source_file}: {e.message}")
            return FileResult(source_file, FileStatus.FAILED, e.kind, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error while processing {source_file}")
            return FileResult(source_file, FileStatus.FAILED, "unexpected", str(e))
        return FileResult(source_file, FileStatus.PARSED)

    def _parse(self, source_file: Path):
        logger.info(f"Preprocessing {source_file}")
        with self.preprocessor.run(source_file) as job:
            logger.info(f"Parsing {source_file}")
            if not job.is_readable():
                raise OpenFileError("cannot read from preprocessor", source_file)
            self.parser.parse(self.table, source_file, job.stream)
