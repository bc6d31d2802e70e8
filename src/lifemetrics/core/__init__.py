"""
Core infrastructure for LifeMetrics: exception hierarchy and configuration.
"""

from lifemetrics.core.exceptions import (
    ErrorCode,
    ErrorContext,
    RecoverySuggestion,
    LifeMetricsError,
    ConfigurationError,
    FilterValidationError,
    RecordLoadError,
)

__all__ = [
    "ErrorCode",
    "ErrorContext",
    "RecoverySuggestion",
    "LifeMetricsError",
    "ConfigurationError",
    "FilterValidationError",
    "RecordLoadError",
]
