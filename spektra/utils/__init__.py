# This file makes the 'utils' directory a Python package.

from .errors import (
    AppError,
    FileIOError,
    ProcessingError,
    DimensionMismatchError,
    InvalidAdjustmentError,
    ConfigurationError,
    ErrorCategory,
    safe_operation,
    log_and_continue,
    format_user_error,
)

from .history import HistoryStack, HistoryEntry, AdjustmentHistory
from .preview import PreviewInfo, fit_scale, create_preview

__all__ = [
    # Errors
    'AppError',
    'FileIOError',
    'ProcessingError',
    'DimensionMismatchError',
    'InvalidAdjustmentError',
    'ConfigurationError',
    'ErrorCategory',
    'safe_operation',
    'log_and_continue',
    'format_user_error',
    # History
    'HistoryStack',
    'HistoryEntry',
    'AdjustmentHistory',
    # Preview
    'PreviewInfo',
    'fit_scale',
    'create_preview',
]
