import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from .preprocess_job import PreprocessJob
from .tool_settings import ToolSettings
from .transport_type import TransportType
from .. import logger
from ..errors import LaunchError


class BaseTransport(ABC):
    @staticmethod
    @abstractmethod
    def get_id() -> TransportType:
        """IMPORTANT: Stable identifier used in configuration. Do not change once set."""
        pass

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        pass

    @abstractmethod
    def open(self, source_file: Path, settings: ToolSettings) -> PreprocessJob:
        pass

    def _launch(self, source_file: Path, settings: ToolSettings, stdout=None) -> subprocess.Popen:
        env = settings.build_environment()
        executable = settings.resolve_executable(env, source_file)
        cmd = [executable] + settings.build_args(source_file)
        logger.debug(f"Running preprocessor: {' '.join(cmd)}")

        try:
            return subprocess.Popen(
                cmd,
                cwd=str(settings.work_dir),
                stdout=stdout,
                env=env
            )
        except OSError as e:
            raise LaunchError(f"Cannot launch preprocessor '{executable}': {e}", source_file) from e
