"""Utility modules for LucSmith."""

from lucsmith.utils.errors import (
    DataValidationError,
    DateNotFoundError,
    InvalidIntervalError,
    LucSmithError,
    OverlapError,
    ParameterError,
    format_parameter_error,
    format_validation_error,
    raise_parameter_error,
    raise_validation_error,
)

__all__ = [
    "LucSmithError",
    "DataValidationError",
    "ParameterError",
    "InvalidIntervalError",
    "OverlapError",
    "DateNotFoundError",
    "format_validation_error",
    "format_parameter_error",
    "raise_validation_error",
    "raise_parameter_error",
]
