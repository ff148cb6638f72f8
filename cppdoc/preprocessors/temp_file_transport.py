from pathlib import Path

from .base_transport import BaseTransport
from .preprocess_job import PreprocessJob
from .tool_settings import ToolSettings
from .transport_type import TransportType
from .. import logger
from ..errors import OpenFileError


class TempFileTransport(BaseTransport):
    """
    Runs the tool to completion, then reads the '<base name>.i' file it wrote
    into the work directory. The file is removed when the job is closed.
    """

    @staticmethod
    def get_id() -> TransportType:
        """IMPORTANT: Stable identifier used in configuration. Do not change once set."""
        return TransportType.TEMP_FILE

    @staticmethod
    def get_name() -> str:
        return "Temporary file"

    def open(self, source_file: Path, settings: ToolSettings) -> PreprocessJob:
        output_file = settings.output_path(source_file)
        process = self._launch(source_file, settings)
        returncode = process.wait()
        if returncode != 0:
            logger.warning(f"Preprocessor returned {returncode} for {source_file}")

        try:
            stream = open(output_file, 'rb')
        except OSError as e:
            try:
                output_file.unlink()
            except OSError:
                pass
            raise OpenFileError(f"Cannot open preprocessor output {output_file}: {e}", source_file) from e

        return PreprocessJob(
            source_file=source_file,
            process=process,
            stream=stream,
            transport=self.get_id(),
            temp_file=output_file
        )
