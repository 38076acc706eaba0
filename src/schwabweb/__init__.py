"""Unofficial client for the Charles Schwab web trading platform."""

from schwabweb.infrastructure.brokers.schwab import (
    CredentialBundle,
    SchwabClient,
    SchwabClientFacade,
)
from schwabweb.shared.exceptions import (
    SchwabAPIError,
    SchwabAuthenticationError,
    SchwabClientError,
    SchwabError,
    SchwabTransportError,
    SchwabValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "CredentialBundle",
    "SchwabAPIError",
    "SchwabAuthenticationError",
    "SchwabClient",
    "SchwabClientError",
    "SchwabClientFacade",
    "SchwabError",
    "SchwabTransportError",
    "SchwabValidationError",
]
