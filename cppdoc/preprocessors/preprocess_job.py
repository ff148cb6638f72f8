import subprocess
from pathlib import Path
from typing import BinaryIO, Optional

from .transport_type import TransportType
from .. import logger


class PreprocessJob:
    """
    Preprocessor output for one source file.

    Owns the tool process, the output stream and, for the temp-file transport,
    the intermediate file. close() (or leaving the with-block) drains the
    stream, waits for the process and deletes the temp file, whatever the
    outcome of the parse.
    """

    def __init__(
        self,
        source_file: Path,
        process: subprocess.Popen,
        stream: BinaryIO,
        transport: TransportType,
        temp_file: Optional[Path] = None
    ):
        self.source_file = Path(source_file)
        self.process = process
        self.stream = stream
        self.transport = transport
        self.temp_file = Path(temp_file) if temp_file else None
        self.closed = False

    def __enter__(self) -> 'PreprocessJob':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def is_readable(self) -> bool:
        return self.stream is not None and not self.stream.closed and self.stream.readable()

    def close(self):
        if self.closed:
            return
        self.closed = True

        try:
            if self.stream is not None and not self.stream.closed:
                if self.transport == TransportType.PIPE:
                    # unread output would leave the child blocked on a full pipe
                    while self.stream.read(65536):
                        pass
                self.stream.close()
        finally:
            returncode = self.process.wait()
            if returncode != 0:
                logger.warning(f"Preprocessor exited with code {returncode} for {self.source_file}")
            self._remove_temp_file()

    def _remove_temp_file(self):
        if self.temp_file is None:
            return
        try:
            self.temp_file.unlink()
            logger.debug(f"Removed {self.temp_file}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Could not remove {self.temp_file}: {e}")

    def __repr__(self) -> str:
        return f"PreprocessJob({self.source_file.name}, {self.transport.value})"
