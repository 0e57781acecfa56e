"""공통 유틸리티 모음."""

from .converters import compact_params, format_param_value
from .exceptions import (
    AppError,
    ConfigurationError,
    DataValidationError,
    ExchangeError,
    OrderValidationError,
)

__all__ = [
    "AppError",
    "ConfigurationError",
    "DataValidationError",
    "ExchangeError",
    "OrderValidationError",
    "compact_params",
    "format_param_value",
]
