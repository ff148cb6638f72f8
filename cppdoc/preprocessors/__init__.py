"""
External preprocessor invocation and its two output transports
"""
from .transport_type import TransportType
from .tool_settings import ToolSettings
from .preprocess_job import PreprocessJob
from .base_transport import BaseTransport
from .pipe_transport import PipeTransport
from .temp_file_transport import TempFileTransport
from .transport_factory import TransportFactory
from .process_preprocessor import ProcessPreprocessor
