"""Schwab infrastructure module

SchwabAuthManager - Browser login and session capture
SchwabRequestClient - HTTP requests carrying the captured session
SchwabTokenRefresher - Scoped bearer token refresh
SchwabAccountReader - Positions and balances
SchwabTradeEngine - Verify/execute order placement
SchwabClientFacade - Single entry point over the components
"""

from schwabweb.shared.exceptions import (
    SchwabAPIError,
    SchwabAuthenticationError,
    SchwabClientError,
    SchwabDecodeError,
    SchwabTokenRefreshError,
    SchwabTransportError,
    SchwabValidationError,
)

from .accounts import SchwabAccountReader, to_account_info_compat
from .auth import SchwabAuthManager
from .capture import HeaderCapture
from .credentials import (
    CredentialBundle,
    build_credential_bundle,
    join_session_cookies,
)
from .facade import SchwabClient, SchwabClientFacade
from .orders import SchwabTradeEngine, TradeState
from .requests import SchwabRequestClient
from .tokens import SchwabTokenRefresher

__all__ = [
    "CredentialBundle",
    "HeaderCapture",
    "SchwabAPIError",
    "SchwabAccountReader",
    "SchwabAuthManager",
    "SchwabAuthenticationError",
    "SchwabClient",
    "SchwabClientError",
    "SchwabClientFacade",
    "SchwabDecodeError",
    "SchwabRequestClient",
    "SchwabTokenRefreshError",
    "SchwabTokenRefresher",
    "SchwabTradeEngine",
    "SchwabTransportError",
    "SchwabValidationError",
    "TradeState",
    "build_credential_bundle",
    "join_session_cookies",
    "to_account_info_compat",
]
