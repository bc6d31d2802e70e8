"""
Core Exception Hierarchy for LifeMetrics

Provides error classification with error codes, recovery suggestions and
context information. The filter engine itself never raises: these errors are
used by the layers around it (configuration loading, strict filter
validation, record file loading and the CLI).
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Configuration errors (3000-3999)
    CONFIG_INVALID_FORMAT = 3001
    CONFIG_INVALID_VALUE = 3003
    CONFIG_FILE_NOT_FOUND = 3004
    CONFIG_SCHEMA_VALIDATION = 3006

    # Validation errors (5000-5999)
    VALIDATION_INVALID_INPUT = 5001
    VALIDATION_MISSING_FIELD = 5002
    VALIDATION_TYPE_MISMATCH = 5003
    VALIDATION_ILLEGAL_OPERATOR = 5007
    VALIDATION_UNKNOWN_OPERATOR = 5008

    # Record loading errors (6000-6999)
    RECORDS_FILE_NOT_FOUND = 6001
    RECORDS_INVALID_FORMAT = 6002
    RECORDS_NOT_A_COLLECTION = 6003

    # Generic/unknown errors (9000-9999)
    UNKNOWN_ERROR = 9000


@dataclass
class ErrorContext:
    """Contextual information about an error occurrence."""

    operation: str = ""
    file_path: Optional[str] = None
    property_name: Optional[str] = None
    group_index: Optional[int] = None
    filter_index: Optional[int] = None
    correlation_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    user_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            'operation': self.operation,
            'file_path': self.file_path,
            'property_name': self.property_name,
            'group_index': self.group_index,
            'filter_index': self.filter_index,
            'correlation_id': self.correlation_id,
            'timestamp': self.timestamp,
            'user_context': self.user_context
        }


@dataclass
class RecoverySuggestion:
    """Structured recovery suggestion for error resolution."""

    action: str  # Brief action description
    description: str  # Detailed explanation
    command: Optional[str] = None  # CLI command to resolve
    priority: int = 1  # Priority order (1=highest)

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary."""
        return {
            'action': self.action,
            'description': self.description,
            'command': self.command,
            'priority': self.priority
        }


class LifeMetricsError(Exception):
    """
    Base exception for all LifeMetrics errors.

    Carries an error code, recovery suggestions and context for debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        """
        Initialize LifeMetrics error.

        Args:
            message: Human-readable error description
            error_code: Standardized error code
            context: Contextual information about the error
            cause: Original exception that caused this error
            suggestions: List of recovery suggestions
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = suggestions or []

        if not self.context.correlation_id:
            self.context.correlation_id = str(uuid.uuid4())[:8]

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        """Add a recovery suggestion to the error."""
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get comprehensive debug information."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code.value,
            'context': self.context.to_dict(),
            'cause': {
                'type': type(self.cause).__name__ if self.cause else None,
                'message': str(self.cause) if self.cause else None
            },
            'suggestions': [s.to_dict() for s in self.suggestions]
        }


class ConfigurationError(LifeMetricsError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE,
        config_file: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if config_file:
            context.file_path = config_file

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.CONFIG_FILE_NOT_FOUND:
            self.add_suggestion(RecoverySuggestion(
                action="Create configuration file",
                description="Write a lifemetrics.yaml in the working directory or pass --config.",
                priority=1
            ))
        elif error_code in (ErrorCode.CONFIG_INVALID_FORMAT, ErrorCode.CONFIG_SCHEMA_VALIDATION):
            self.add_suggestion(RecoverySuggestion(
                action="Check configuration syntax",
                description="The file must be a YAML or JSON mapping matching the configuration schema.",
                priority=1
            ))


class FilterValidationError(LifeMetricsError):
    """Exception raised when a filter definition is rejected in strict mode."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_INVALID_INPUT,
        problems: Optional[List[str]] = None,
        **kwargs
    ):
        kwargs['error_code'] = error_code
        super().__init__(message, **kwargs)
        self.problems = problems or []

        if error_code == ErrorCode.VALIDATION_ILLEGAL_OPERATOR:
            self.add_suggestion(RecoverySuggestion(
                action="Use an operator legal for the property type",
                description="List the operators each property type accepts.",
                command="lifemetrics operators",
                priority=1
            ))


class RecordLoadError(LifeMetricsError):
    """Exception raised when a record file cannot be read."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.RECORDS_INVALID_FORMAT,
        file_path: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if file_path:
            context.file_path = file_path

        kwargs['context'] = context
        kwargs['error_code'] = error_code
        super().__init__(message, **kwargs)
