from .base_transport import BaseTransport
from .pipe_transport import PipeTransport
from .temp_file_transport import TempFileTransport
from .tool_settings import ToolSettings
from .transport_type import TransportType


class TransportFactory:
    @staticmethod
    def create(transport_type: TransportType) -> BaseTransport:
        """The ONLY place in the codebase that branches on transport type."""
        if transport_type == TransportType.PIPE:
            return PipeTransport()
        elif transport_type == TransportType.TEMP_FILE:
            return TempFileTransport()
        raise ValueError(f"Unsupported transport type: {transport_type}")

    @staticmethod
    def for_settings(settings: ToolSettings) -> BaseTransport:
        return TransportFactory.create(TransportType.PIPE if settings.use_pipe else TransportType.TEMP_FILE)
