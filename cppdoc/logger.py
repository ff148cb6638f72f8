"""
cppdoc logging module - build log on disk plus console progress
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FILENAME = "cppdoc.log"
_logger_initialized = False
_logger = None
_console_handler = None


class _ConsoleHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stderr"""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def _get_log_path() -> Path:
    """Get the log file path in the working directory"""
    return Path.cwd() / LOG_FILENAME


def _rotate_existing_log():
    """Rename existing log file with timestamp"""
    log_path = _get_log_path()
    if log_path.exists():
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        new_name = log_path.parent / f"cppdoc_{timestamp}.log"
        try:
            log_path.rename(new_name)
        except OSError:
            # If rename fails, just overwrite
            pass


def _initialize_logger():
    """Initialize the logger with file and console handlers"""
    global _logger_initialized, _logger, _console_handler

    if _logger_initialized:
        return _logger

    _rotate_existing_log()

    _logger = logging.getLogger("cppdoc")
    _logger.setLevel(logging.DEBUG)
    _logger.propagate = False
    _logger.handlers.clear()

    # Format: [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE
    log_path = _get_log_path()
    file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)-8s] [%(module)s:%(funcName)s:%(lineno)d] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    file_handler.setLevel(logging.DEBUG)

    _console_handler = _ConsoleHandler()
    _console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    _console_handler.setLevel(logging.INFO)

    _logger.addHandler(file_handler)
    _logger.addHandler(_console_handler)
    _logger_initialized = True

    _logger.debug("=" * 60)
    _logger.debug("cppdoc Logger Started")
    _logger.debug(f"Log File: {log_path}")
    _logger.debug("=" * 60)

    return _logger


def get_logger():
    """Get the cppdoc logger instance"""
    if not _logger_initialized:
        _initialize_logger()
    return _logger


def set_verbose(verbose: bool):
    """Show debug messages on the console as well as in the log file"""
    get_logger()
    _console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)


def debug(msg: str, *args, **kwargs):
    """Log debug message"""
    get_logger().debug(msg, *args, **kwargs)


def info(msg: str, *args, **kwargs):
    """Log info message"""
    get_logger().info(msg, *args, **kwargs)


def warning(msg: str, *args, **kwargs):
    """Log warning message"""
    get_logger().warning(msg, *args, **kwargs)


def error(msg: str, *args, **kwargs):
    """Log error message"""
    get_logger().error(msg, *args, **kwargs)


def exception(msg: str, *args, **kwargs):
    """Log exception with traceback"""
    get_logger().exception(msg, *args, **kwargs)


def assert_true(condition, msg: str):
    """Log error and raise RuntimeError if condition is false"""
    if not condition:
        get_logger().error(msg)
        raise RuntimeError(msg)
