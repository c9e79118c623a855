"""Error types and error codes.

This module defines the error hierarchy for lazymake, providing specific
error codes for the different ways reading a Makefile, loading configuration,
or compiling a safety rule can fail.

Classes:
    - ErrorCode: Enum of error codes for categorizing errors
    - LazymakeError: Base exception for all lazymake errors
    - FileError: The Makefile could not be opened
    - ScanError: Reading the Makefile failed part way through
    - ConfigError: A configuration file is missing, malformed or invalid
    - RuleCompileError: A safety rule contains an invalid regular expression
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for lazymake operations.

    Used to categorize errors for logging and for choosing CLI exit codes.
    """

    # Makefile input errors
    FILE_ERROR = "FILE_ERROR"
    SCAN_ERROR = "SCAN_ERROR"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Safety rule errors
    RULE_INVALID = "RULE_INVALID"


class LazymakeError(Exception):
    """Base exception for lazymake errors.

    Attributes:
        code: The error code categorizing this error.
        message: Human-readable error message.
        path: The file involved in the error (if applicable).
        cause: The underlying exception that caused this error (if any).

    Example:
        raise LazymakeError(
            code=ErrorCode.FILE_ERROR,
            message="failed to open Makefile",
            path="./Makefile",
            cause=original_exception,
        )
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        path: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: The error code for this error.
            message: Human-readable error message.
            path: Path of the file involved (optional).
            cause: The underlying exception (optional).
        """
        self.code = code
        self.message = message
        self.path = path
        self.cause = cause

        full_message = f"[{code.value}] {message}"
        if path:
            full_message = f"[{path}] {full_message}"

        super().__init__(full_message)


class FileError(LazymakeError):
    """Raised when a Makefile cannot be opened."""

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(
            ErrorCode.FILE_ERROR,
            f"failed to open Makefile{detail}",
            path=path,
            cause=cause,
        )


class ScanError(LazymakeError):
    """Raised when reading a Makefile fails after it was opened."""

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(
            ErrorCode.SCAN_ERROR,
            f"error reading Makefile{detail}",
            path=path,
            cause=cause,
        )


class ConfigError(LazymakeError):
    """Raised when a configuration file cannot be loaded or validated."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        cause: Exception | None = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ) -> None:
        super().__init__(code, message, path=path, cause=cause)


class RuleCompileError(LazymakeError):
    """Raised when a safety rule pattern is not a valid regular expression.

    Attributes:
        rule_id: ID of the offending rule.
        pattern: The pattern that failed to compile.
    """

    def __init__(self, rule_id: str, pattern: str, cause: Exception | None = None) -> None:
        self.rule_id = rule_id
        self.pattern = pattern
        super().__init__(
            ErrorCode.RULE_INVALID,
            f"rule {rule_id}: invalid pattern {pattern!r}: {cause}",
            cause=cause,
        )
