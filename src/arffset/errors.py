"""Exception hierarchy shared by the parser, builder and dataset."""

from __future__ import annotations

from typing import Optional


class ArffError(Exception):
    """Base class for all errors raised by ``arffset``."""


class ConfigurationError(ArffError, ValueError):
    """Raised for bad sources, unresolved class columns or unknown column names."""


class FormatError(ArffError, ValueError):
    """Raised when the ARFF text itself cannot be interpreted."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"{message} (line #{line_number})"
        super().__init__(message)
        self.line_number = line_number


class UnsupportedAttributeTypeError(FormatError):
    """Raised when an ``@attribute`` declaration uses an unknown type token."""


class InvalidDateFormatError(FormatError):
    """Raised when a DATE attribute declares a pattern that cannot be compiled."""


class MalformedRowError(FormatError):
    """Raised when a data cell cannot be coerced to its attribute's type."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(message, line_number)


class ArffReadError(ArffError, OSError):
    """Raised when the underlying stream fails while a parse is in progress."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"{message} (line #{line_number})"
        super().__init__(message)
        self.line_number = line_number
