from enum import Enum


class TransportType(Enum):
    PIPE = 'pipe'
    TEMP_FILE = 'temp_file'
