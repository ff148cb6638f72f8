from pathlib import Path

from .preprocess_job import PreprocessJob
from .tool_settings import ToolSettings
from .transport_factory import TransportFactory
from .. import logger
from ..doc_config import DocConfig
from ..errors import OpenFileError


class ProcessPreprocessor:
    """
    Runs the configured external preprocessor on one file at a time.

    The transport (pipe or temp file) is fixed by the settings' use_pipe flag.
    Callers must use the returned job as a context manager so the process and
    any temp file are released.
    """

    def __init__(self, settings: ToolSettings):
        self.settings = settings
        self.transport = TransportFactory.for_settings(settings)
        logger.debug(f"Preprocessor: {settings.exec_name} via {self.transport.get_name()}")

    @classmethod
    def from_config(cls, config: DocConfig) -> 'ProcessPreprocessor':
        return cls(ToolSettings.from_config(config))

    def run(self, source_file: Path) -> PreprocessJob:
        source_file = Path(source_file)
        job = self.transport.open(source_file, self.settings)
        if not job.is_readable():
            job.close()
            raise OpenFileError("cannot read from preprocessor", source_file)
        return job
