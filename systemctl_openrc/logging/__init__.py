"""Module de logging."""

from systemctl_openrc.logging.base import Logger, NullLogger
from systemctl_openrc.logging.file_logger import FileLogger

__all__ = [
    "Logger",
    "NullLogger",
    "FileLogger",
]
