"""SchwabTokenRefresher - Scoped bearer token refresh"""

from loguru import logger

from schwabweb.shared.constants import TOKEN_AUTHORIZE_URL
from schwabweb.shared.exceptions import (
    SchwabClientError,
    SchwabTokenRefreshError,
)

from .credentials import CredentialBundle
from .requests import SchwabRequestClient


class SchwabTokenRefresher:
    """Refreshes the bearer token without a browser re-login

    Session bearer tokens expire well before the captured cookies and
    headers do. Asking the authorize endpoint for a token in a given scope
    (``api`` for reads, ``update`` for trading) renews it in place.
    """

    def __init__(
        self,
        credentials: CredentialBundle,
        request_client: SchwabRequestClient,
    ) -> None:
        self._credentials = credentials
        self._request_client = request_client

    async def refresh(self, scope: str) -> None:
        """Request a token for ``scope`` and store it in the bundle

        Raises:
            SchwabTokenRefreshError: On a non-200 answer or a body without a token
            SchwabTransportError: On network failure
        """
        url = TOKEN_AUTHORIZE_URL.format(scope=scope)
        response = await self._request_client.request("GET", url)

        if response.status_code != 200:
            raise SchwabTokenRefreshError(
                f"failed to update token, status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError) as e:
            raise SchwabTokenRefreshError(
                f"invalid token response: {e}", status_code=200
            ) from e
        if not isinstance(token, str) or not token:
            raise SchwabTokenRefreshError(
                "token missing from authorize response", status_code=200
            )

        self._credentials.update_bearer_token(f"Bearer {token}")
        logger.debug(f"Bearer token refreshed (scope={scope})")

    async def try_refresh(self, scope: str) -> bool:
        """Best-effort refresh; failures are logged, not raised

        The cached token may still be valid, so callers carry on and let the
        real API call surface an expired session.
        """
        try:
            await self.refresh(scope)
            return True
        except SchwabClientError as e:
            logger.warning(f"Token refresh ({scope}) failed: {e}")
            return False
