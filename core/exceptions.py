"""
Custom exception hierarchy for the affirmation reminder service.
Provides structured error handling with proper context.
"""

from typing import Optional, Dict, Any


class ReminderServiceException(Exception):
    """Base exception for all reminder service errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# ==================== Database Exceptions ====================


class DatabaseException(ReminderServiceException):
    """Base exception for database-related errors."""

    pass


class DatabaseConnectionError(DatabaseException):
    """Raised when a database connection cannot be opened."""

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            message="Failed to connect to database",
            error_code="DATABASE_CONNECTION_ERROR",
            context={"details": details} if details else {},
        )


# ==================== API/External Service Exceptions ====================


class ExternalServiceException(ReminderServiceException):
    """Base exception for external service errors."""

    pass


class OpenAIAPIError(ExternalServiceException):
    """Raised when the affirmation model call fails."""

    def __init__(self, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(
            message="OpenAI API request failed",
            error_code="OPENAI_API_ERROR",
            context={"status_code": status_code, "details": details},
        )


class SMSDeliveryError(ExternalServiceException):
    """Raised when an SMS could not be handed to the provider."""

    def __init__(self, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            message=details or "SMS delivery failed",
            error_code="SMS_DELIVERY_ERROR",
            context={"status_code": status_code, "details": details},
        )


# ==================== Validation Exceptions ====================


class ValidationException(ReminderServiceException):
    """Base exception for validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Raised when input validation fails."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid input: {field} - {reason}",
            error_code="INVALID_INPUT",
            context={"field": field, "reason": reason},
        )


class ConfigurationError(ValidationException):
    """Raised when configuration is invalid."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            message=f"Invalid configuration: {setting} - {reason}",
            error_code="CONFIGURATION_ERROR",
            context={"setting": setting, "reason": reason},
        )
