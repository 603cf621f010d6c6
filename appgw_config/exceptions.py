"""
Custom exceptions for configuration building.
"""
from typing import Optional


class ConfigBuilderError(Exception):
    """Base exception for the configuration builder."""
    pass


class ValidationError(ConfigBuilderError):
    """Raised when a resource or model field fails validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
        """
        super().__init__(message)
        self.field = field
        self.message = message
