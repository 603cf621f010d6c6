"""
Custom exceptions for the policy store layer.
"""
from typing import Optional


class PolicyStoreError(Exception):
    """Base exception for failures to obtain a policy resource."""
    pass


class ResourceNotFoundError(PolicyStoreError):
    """Exception raised when the requested resource does not exist."""
    pass


class RetryableError(PolicyStoreError):
    """Exception raised for transient errors that can be retried."""
    pass


class InvalidPolicyError(PolicyStoreError):
    """Exception raised when a fetched resource cannot be parsed."""
    pass


class KubernetesAPIError(PolicyStoreError):
    """Exception raised for non-success responses from the API server."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize Kubernetes API error.

        Args:
            message: Error message
            status_code: HTTP status code returned by the API server
        """
        super().__init__(message)
        self.status_code = status_code
