"""Schwab account and position reads"""

import re
from collections.abc import Mapping

from loguru import logger
from pydantic import ValidationError

from schwabweb.shared.constants import POSITIONS_V2_URL
from schwabweb.shared.exceptions import SchwabAPIError, SchwabDecodeError
from schwabweb.validation.accounts import (
    AccountInfoCompat,
    AccountInfoV2Response,
    AccountV2,
)

from .credentials import CredentialBundle
from .requests import SchwabRequestClient
from .tokens import SchwabTokenRefresher

ACCOUNT_HINT_HEADER = "Schwab-Client-Ids"
CAPTURED_ACCOUNT_HEADER = "schwab-client-account"
BODY_EXCERPT_LIMIT = 500
ACCOUNT_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def body_excerpt(text: str, limit: int = BODY_EXCERPT_LIMIT) -> str:
    """Truncate a response body for error messages"""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def to_account_info_compat(
    accounts: Mapping[int, AccountV2],
) -> dict[str, AccountInfoCompat]:
    """Project account snapshots into the legacy per-account shape"""
    return {
        str(account_id): account.to_compat()
        for account_id, account in accounts.items()
    }


class SchwabAccountReader:
    """Reads positions and balances from the HoldingV2 endpoint"""

    def __init__(
        self,
        credentials: CredentialBundle,
        request_client: SchwabRequestClient,
        token_refresher: SchwabTokenRefresher,
        account_ids: list[str] | None = None,
    ) -> None:
        """Initialize account reader

        Args:
            credentials: Session bundle (read for the captured account header)
            request_client: HTTP gateway
            token_refresher: Used for a best-effort ``api`` scope refresh
            account_ids: Configured account numbers; the first is sent as hint
        """
        self._credentials = credentials
        self._request_client = request_client
        self._token_refresher = token_refresher
        self._account_ids = list(account_ids or [])

    def account_hint(self) -> str | None:
        """Account id for the multi-account header, if one is known"""
        captured = self._credentials.get_header(CAPTURED_ACCOUNT_HEADER)
        if captured:
            return captured
        if self._account_ids:
            return self._account_ids[0]
        return None

    async def get_account_info(self) -> dict[int, AccountV2]:
        """Fetch every account's totals and grouped positions

        Returns:
            Account snapshots keyed by numeric account id

        Raises:
            SchwabAPIError: On a non-200 answer
            SchwabDecodeError: If the body is not a holdings payload
            SchwabTransportError: On network failure
        """
        await self._token_refresher.try_refresh("api")

        extra: dict[str, str] = {}
        hint = self.account_hint()
        if hint:
            extra[ACCOUNT_HINT_HEADER] = hint

        response = await self._request_client.request(
            "GET", POSITIONS_V2_URL, headers=extra
        )
        if response.status_code != 200:
            excerpt = body_excerpt(response.text)
            raise SchwabAPIError(
                f"API request failed with status: {response.status_code}: "
                f"{excerpt}",
                status_code=response.status_code,
                body_excerpt=excerpt,
            )

        try:
            data = AccountInfoV2Response.model_validate_json(response.content)
        except ValidationError as e:
            raise SchwabDecodeError(f"invalid positions response: {e}") from e

        accounts: dict[int, AccountV2] = {}
        for account in data.accounts:
            if not ACCOUNT_ID_PATTERN.fullmatch(account.account_id):
                logger.warning(
                    f"Skipping account with non-numeric id: {account.account_id!r}"
                )
                continue
            accounts[int(account.account_id)] = account

        logger.debug(f"Retrieved {len(accounts)} account(s)")
        return accounts

    async def get_account_info_v2(self) -> dict[str, AccountInfoCompat]:
        """Positions in the legacy ``account_value`` + ``positions`` shape"""
        return to_account_info_compat(await self.get_account_info())
