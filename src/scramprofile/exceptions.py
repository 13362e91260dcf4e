"""
Custom exception hierarchy for scramprofile.

Every error raised on purpose by the package derives from
ScramProfileException, so callers (and the CLI) can catch one type and
still tell I/O problems apart from bad parameters or numeric failures.
"""

from typing import Any, Dict, Optional


class ScramProfileException(Exception):
    """Base exception for all scramprofile errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __reduce__(self):
        # Errors raised in pool workers are pickled back to the parent process.
        return (self.__class__, (self.message, self.details))

    def __str__(self):
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# Input file exceptions
class InputFileException(ScramProfileException):
    """Base exception for input files that cannot be used."""
    pass


class ReadFileError(InputFileException):
    """Read file is missing or cannot be opened."""
    pass


class DecompressionError(InputFileException):
    """Gzip-compressed file could not be decompressed."""
    pass


class ReferenceFileError(InputFileException):
    """Reference FASTA file is missing or cannot be opened."""
    pass


# Validation exceptions
class ValidationException(ScramProfileException):
    """Base exception for validation errors."""
    pass


class InvalidParameterError(ValidationException):
    """Parameter value is invalid or out of range."""
    pass


class InvalidBaseError(ValidationException):
    """Reference sequence holds a base outside A, C, G, T, N."""
    pass


# Processing exceptions
class ProcessingException(ScramProfileException):
    """Base exception for processing errors."""
    pass


class NormalizationError(ProcessingException):
    """RPMR normalization was requested with a zero read total."""
    pass


class AggregationError(ProcessingException):
    """Per-file results could not be merged into the count table."""
    pass


class OutputWriteError(ScramProfileException):
    """Error writing output files."""
    pass
