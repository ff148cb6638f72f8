"""
DocBuilder - runs a complete documentation build from a configuration.
"""

import glob
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from .hierarchy_fixup import HierarchyFixup
from .parse_coordinator import ParseCoordinator
from ..build_stats import BuildStats
from ..doc_config import DocConfig
from ..errors import ConfigurationError, DocBuildError
from ..files.glob_file_set import GlobFileSet
from ..parsers.base_parser import BaseParser
from ..parsers.declaration_parser import DeclarationParser
from ..parsers.symbol_table import SymbolTable
from ..preprocessors.process_preprocessor import ProcessPreprocessor
from ..renderers.base_renderer import BaseRenderer, RenderOptions
from ..renderers.json_index_renderer import JsonIndexRenderer
from .. import logger

DEFAULT_OUTPUT_DIR = 'doc'


class DocBuilder:
    """
    Runs the build phases in order:
    1. Resolve the file set from cppdoc.files.include / cppdoc.files.exclude
    2. Preprocess and parse every file into one symbol table
    3. Fix up class hierarchies
    4. Hand the table to the renderer

    Configuration problems surface as ConfigurationError before any file is
    touched. Per-file errors are only counted.
    """

    def __init__(
        self,
        config: DocConfig,
        renderer: Optional[BaseRenderer] = None,
        parser: Optional[BaseParser] = None,
        preprocessor: Optional[ProcessPreprocessor] = None,
        eclipse_toc: bool = False,
        search_index: bool = False
    ):
        self.config = config
        self.renderer = renderer or JsonIndexRenderer()
        self.parser = parser or DeclarationParser()
        self.preprocessor = preprocessor
        self.eclipse_toc = eclipse_toc
        self.search_index = search_index
        self.table = SymbolTable()
        self.stats: Optional[BuildStats] = None
        self.output_dir = Path(DEFAULT_OUTPUT_DIR)
        self.options = RenderOptions(eclipse_toc=eclipse_toc, search_index=search_index)

    def prepare(self):
        """Validate configuration; raises ConfigurationError."""
        now = datetime.now()
        self.config.set('cppdoc.date', now.strftime('%Y-%m-%d'))
        self.config.set('cppdoc.year', now.strftime('%Y'))

        if not self.config.get_list('cppdoc.files.include'):
            raise ConfigurationError("cppdoc.files.include does not list any patterns")
        self.output_dir = Path(self.config.get_string('cppdoc.output', DEFAULT_OUTPUT_DIR))
        self.options = RenderOptions(
            prettify=self.config.get_bool('cppdoc.prettifyCode', False),
            eclipse_toc=self.eclipse_toc,
            search_index=self.search_index or self.config.get_bool('cppdoc.searchIndex', False)
        )
        if self.preprocessor is None:
            self.preprocessor = ProcessPreprocessor.from_config(self.config)

    def build_file_list(self) -> List[Path]:
        file_set = GlobFileSet(
            self.config.get_list('cppdoc.files.include'),
            self.config.get_list('cppdoc.files.exclude', [])
        )
        return file_set.resolve()

    def parse_all(self) -> BuildStats:
        coordinator = ParseCoordinator(self.preprocessor, self.parser, self.table)
        self.stats = coordinator.run(self.build_file_list())
        return self.stats

    def fixup(self):
        logger.assert_true(self.stats is not None,
                           "Class hierarchies can only be fixed up after all files were parsed")
        HierarchyFixup(self.table).run()

    def write_doc(self):
        logger.info("Generating documentation")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        if self.options.search_index and not self.renderer.supports_search_index():
            logger.error(f"Search index is not supported by the {self.renderer.get_name()} renderer, "
                         "search is disabled")
            self.options.search_index = False

        for page in self._resolve_pages():
            self.renderer.add_page(page)

        self.renderer.write(self.table, self.output_dir, self.options)
        if self.eclipse_toc:
            self.renderer.write_eclipse_toc()

    def _resolve_pages(self) -> List[Path]:
        pages = set()
        for pattern in self.config.get_list('cppdoc.pages', []):
            pages.update(Path(p) for p in glob.glob(pattern, recursive=True))
        return sorted(pages)

    def run(self) -> BuildStats:
        self.prepare()

        start = time.perf_counter()
        try:
            self.parse_all()
            self.fixup()
            self.write_doc()
        except ConfigurationError:
            raise
        except (DocBuildError, OSError) as e:
            print(e, file=sys.stderr)
            logger.error(f"Documentation build failed: {e}")

        stats = self.stats or BuildStats()
        stats.elapsed = time.perf_counter() - start
        logger.info(f"{stats.error_count} errors.")
        if stats.error_count:
            kinds = ', '.join(f"{kind}: {count}" for kind, count in sorted(stats.errors_by_kind().items()))
            logger.info(f"Errors by kind: {kinds}")
            for failed in stats.failed_files():
                logger.debug(f"Failed: {failed}")
        logger.info(f"Time: {timedelta(seconds=stats.elapsed)}")
        return stats
