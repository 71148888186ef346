"""Error types raised while generating performance reports."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ErrorKind(str, Enum):
    """Fatal error categories. A missing source is not one of them."""

    MALFORMED_SOURCE = "malformed_source"
    WRITE_FAILURE = "write_failure"
    CONFIGURATION = "configuration"


class ReportError(Exception):
    """Base class for fatal report generation errors."""

    kind: ErrorKind
    exit_code = 1

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class MalformedSourceError(ReportError):
    """A results document exists but cannot be read or parsed."""

    kind = ErrorKind.MALFORMED_SOURCE


class WriteFailureError(ReportError):
    """An output artifact could not be persisted."""

    kind = ErrorKind.WRITE_FAILURE


class ConfigurationError(ReportError):
    """The report configuration is invalid."""

    kind = ErrorKind.CONFIGURATION
    exit_code = 2
