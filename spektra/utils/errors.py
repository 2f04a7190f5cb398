# Error types and reporting helpers
"""
Exceptions raised by the adjustment pipeline and the helpers that turn
them into log lines and short messages for the person editing.

Every exception derives from AppError and carries an ErrorCategory, so a
caller can decide how to react (reject the input, report a file problem,
abort the render) without matching on exception classes.
"""

from typing import Any, Optional, Tuple, Union
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Categories of errors for consistent handling."""
    RECOVERABLE = "recoverable"      # Can continue with fallback
    USER_INPUT = "user_input"        # Slider or argument out of range
    FILE_IO = "file_io"              # Decode/encode or file system errors
    PROCESSING = "processing"        # Pixel buffer or pipeline errors
    CONFIGURATION = "configuration"  # Bad values in settings
    FATAL = "fatal"                  # Unrecoverable errors


class AppError(Exception):
    """Base exception; `user_message` is what an editor UI should display."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.RECOVERABLE,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.original_error = original_error
        self.user_message = user_message or message

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]} (caused by: {type(self.original_error).__name__})"
        return self.args[0]


class FileIOError(AppError):
    """An image could not be read or written."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.FILE_IO, **kwargs)
        self.file_path = file_path


class ProcessingError(AppError):
    """The pipeline was handed something it cannot process."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.PROCESSING, **kwargs)
        self.step = step


class DimensionMismatchError(ProcessingError):
    """Pixel data does not match the declared raster dimensions."""

    def __init__(
        self,
        message: str,
        expected: Optional[Tuple[int, ...]] = None,
        actual: Optional[Tuple[int, ...]] = None,
        **kwargs,
    ):
        super().__init__(message, step="buffer", **kwargs)
        self.expected = expected
        self.actual = actual


class InvalidAdjustmentError(AppError):
    """An adjustment value is outside its allowed range or not a number."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        kwargs.setdefault(
            "user_message",
            f"'{field}' must be between -100 and 100." if field else None,
        )
        super().__init__(message, category=ErrorCategory.USER_INPUT, **kwargs)
        self.field = field
        self.value = value


class ConfigurationError(AppError):
    """A settings value names an option that does not exist."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        kwargs.setdefault(
            "user_message",
            f"Setting '{setting_name}' has an unsupported value." if setting_name else None,
        )
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.setting_name = setting_name


def safe_operation(
    operation_name: str,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
):
    """
    Context manager that logs and suppresses an exception raised in its body.

    Used around listener callbacks so a failing listener cannot stop the
    code that notifies it.

    Example:
        with safe_operation("delivering render result"):
            callback(seq, image)
    """
    class SafeOperationContext:
        def __init__(self):
            self.error: Optional[Exception] = None
            self.success = False

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is not None:
                self.error = exc_val
                logger.warning(
                    "%s error during %s: %s",
                    category.value,
                    operation_name,
                    str(exc_val),
                )
                return True
            self.success = True
            return False

    return SafeOperationContext()


def log_and_continue(
    message: str,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    level: str = "warning",
) -> None:
    """Log a non-fatal error tagged with its category."""
    log_func = getattr(logger, level, logger.warning)
    log_func("[%s] %s", category.value, message)


def format_user_error(error: Union[Exception, str], context: Optional[str] = None) -> str:
    """
    Short message for display.

    AppErrors supply their own `user_message`; other errors are matched
    against a few well-known OS messages, then fall back to the raw text
    prefixed with `context` (e.g. "rendering").
    """
    if isinstance(error, AppError):
        return error.user_message

    error_str = str(error)

    if "No such file or directory" in error_str:
        return f"File not found{f' while {context}' if context else ''}"
    if "Permission denied" in error_str:
        return f"Permission denied{f' while {context}' if context else ''}"
    if "out of memory" in error_str.lower():
        return "Not enough memory to complete this operation. Try with a smaller image."

    if context:
        return f"Error {context}: {error_str}"
    return f"An error occurred: {error_str}"
