"""
Core utilities and infrastructure for the affirmation reminder service.
"""

from core.exceptions import (
    ReminderServiceException,
    DatabaseException,
    DatabaseConnectionError,
    ExternalServiceException,
    OpenAIAPIError,
    SMSDeliveryError,
    ValidationException,
    InvalidInputError,
    ConfigurationError,
)
from core.logging_config import configure_logging, get_logger, mask_phone_number

__all__ = [
    "ReminderServiceException",
    "DatabaseException",
    "DatabaseConnectionError",
    "ExternalServiceException",
    "OpenAIAPIError",
    "SMSDeliveryError",
    "ValidationException",
    "InvalidInputError",
    "ConfigurationError",
    "configure_logging",
    "get_logger",
    "mask_phone_number",
]
