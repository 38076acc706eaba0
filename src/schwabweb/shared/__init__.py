"""Shared constants and exceptions for the Schwab web client."""

from .exceptions import (
    ConfigurationError,
    SchwabAPIError,
    SchwabAuthenticationError,
    SchwabClientError,
    SchwabDecodeError,
    SchwabError,
    SchwabTokenRefreshError,
    SchwabTransportError,
    SchwabValidationError,
)

__all__ = [
    "ConfigurationError",
    "SchwabAPIError",
    "SchwabAuthenticationError",
    "SchwabClientError",
    "SchwabDecodeError",
    "SchwabError",
    "SchwabTokenRefreshError",
    "SchwabTransportError",
    "SchwabValidationError",
]
