"""Consolidated exceptions for the Schwab web client.

All custom exceptions are defined here to provide a single source of truth
for error handling across the client.

Business-level order rejections are not exceptions: the trade engine
returns them as ``(messages, False)``.
"""


class SchwabError(Exception):
    """Base exception for schwabweb errors"""

    pass


class SchwabClientError(SchwabError):
    """Base exception for Schwab client errors"""

    pass


class SchwabValidationError(SchwabClientError):
    """Raised when caller input is invalid (no network activity happened)"""

    pass


class SchwabAuthenticationError(SchwabClientError):
    """Raised when the browser login or session capture fails"""

    pass


class SchwabTransportError(SchwabClientError):
    """Raised when a request fails at the network level"""

    pass


class SchwabAPIError(SchwabClientError):
    """Raised when the platform answers with a non-200 status"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body_excerpt: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class SchwabTokenRefreshError(SchwabAPIError):
    """Raised when a scoped bearer token refresh fails"""

    pass


class SchwabDecodeError(SchwabClientError):
    """Raised when a response body cannot be decoded"""

    pass


class ConfigurationError(SchwabError):
    """Raised when configuration is invalid or missing"""

    pass
