"""
Custom exceptions for the Nutrient DWS client.
"""

from typing import Dict, Any, Optional


class NutrientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(NutrientError, ValueError):
    """Raised for bad caller input, before any request is sent."""

    pass


class ArgumentError(ValidationError):
    """Raised when a required argument or alternative is missing."""

    pass


class InvalidRangeError(ValidationError):
    """Raised when a page range string cannot be parsed."""

    pass


class UnsupportedFormatError(ValidationError):
    """Raised when a conversion target format is not supported."""

    pass


class InvalidRotationError(ValidationError):
    """Raised when a rotation angle is not 90, 180 or 270."""

    pass


class UnsupportedFileTypeError(ValidationError):
    """Raised when a file input is neither a path, a stream nor a URL."""

    pass


class AuthenticationError(NutrientError):
    """Raised for 401 responses: the API key is invalid or missing."""

    pass


class APIError(NutrientError):
    """
    Raised for any other non-2xx response.

    Carries the HTTP status code and the raw response body so callers can
    decide on retries or log the server's diagnostics.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body
