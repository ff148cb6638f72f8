import subprocess
from pathlib import Path

from .base_transport import BaseTransport
from .preprocess_job import PreprocessJob
from .tool_settings import ToolSettings
from .transport_type import TransportType


class PipeTransport(BaseTransport):
    """Reads the tool's standard output directly while it runs."""

    @staticmethod
    def get_id() -> TransportType:
        """IMPORTANT: Stable identifier used in configuration. Do not change once set."""
        return TransportType.PIPE

    @staticmethod
    def get_name() -> str:
        return "Streaming pipe"

    def open(self, source_file: Path, settings: ToolSettings) -> PreprocessJob:
        process = self._launch(source_file, settings, stdout=subprocess.PIPE)
        return PreprocessJob(
            source_file=source_file,
            process=process,
            stream=process.stdout,
            transport=self.get_id()
        )
