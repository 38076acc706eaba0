"""SchwabClientFacade - Single entry point over the Schwab components"""

from typing import TYPE_CHECKING

import httpx

from schwabweb.core.config import AuthTimeouts
from schwabweb.validation.accounts import AccountInfoCompat, AccountV2

from .accounts import SchwabAccountReader
from .auth import SchwabAuthManager
from .credentials import CredentialBundle
from .orders import SchwabTradeEngine
from .requests import SchwabRequestClient
from .tokens import SchwabTokenRefresher

if TYPE_CHECKING:
    from schwabweb.core.config import Config


class SchwabClientFacade:
    """Schwab web platform client (facade pattern)

    Owns one CredentialBundle and delegates to SchwabAuthManager,
    SchwabRequestClient, SchwabTokenRefresher, SchwabAccountReader and
    SchwabTradeEngine. The bundle lives in memory only, for the lifetime
    of this object.
    """

    def __init__(
        self,
        account_ids: list[str] | None = None,
        http_timeout: float = SchwabRequestClient.DEFAULT_TIMEOUT,
        headless: bool = False,
        auth_timeouts: AuthTimeouts | None = None,
    ) -> None:
        """Initialize the client

        Args:
            account_ids: Account numbers; the first is sent as positions hint
            http_timeout: Deadline in seconds for each API request
            headless: Run the login browser without a window
            auth_timeouts: Browser step timeouts
        """
        self._credentials = CredentialBundle()
        self._auth_manager = SchwabAuthManager(
            self._credentials, timeouts=auth_timeouts, headless=headless
        )
        self._request_client = SchwabRequestClient(
            self._credentials, timeout=http_timeout
        )
        self._token_refresher = SchwabTokenRefresher(
            self._credentials, self._request_client
        )
        self._account_reader = SchwabAccountReader(
            self._credentials,
            self._request_client,
            self._token_refresher,
            account_ids=account_ids,
        )
        self._trade_engine = SchwabTradeEngine(
            self._request_client, self._token_refresher
        )

    @classmethod
    def from_config(cls, config: "Config") -> "SchwabClientFacade":
        """Build a client from loaded configuration"""
        return cls(
            account_ids=config.account_numbers,
            http_timeout=config.http_timeout,
            headless=config.headless,
            auth_timeouts=config.auth_timeouts,
        )

    async def __aenter__(self) -> "SchwabClientFacade":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def credentials(self) -> CredentialBundle:
        return self._credentials

    @property
    def bearer_token(self) -> str:
        return self._credentials.bearer_token

    @property
    def headers(self) -> dict[str, str]:
        return self._credentials.headers

    def is_authenticated(self) -> bool:
        """Whether a login has populated the session"""
        return self._credentials.is_authenticated

    async def login(
        self, username: str, password: str, totp_secret: str = ""
    ) -> None:
        """Log in through the browser and capture the session"""
        await self._auth_manager.login(username, password, totp_secret)

    async def update_token(self, scope: str) -> None:
        """Refresh the bearer token for ``scope`` ("api" or "update")"""
        await self._token_refresher.refresh(scope)

    async def get_account_info(self) -> dict[int, AccountV2]:
        """Account snapshots keyed by numeric account id"""
        return await self._account_reader.get_account_info()

    async def get_account_info_v2(self) -> dict[str, AccountInfoCompat]:
        """Positions in the legacy ``account_value`` + ``positions`` shape"""
        return await self._account_reader.get_account_info_v2()

    async def trade(
        self,
        ticker: str,
        side: str,
        qty: float,
        account_id: str,
        dry_run: bool = True,
    ) -> tuple[list[str], bool]:
        """Verify and optionally execute a market order"""
        return await self._trade_engine.trade(
            ticker, side, qty, account_id, dry_run
        )

    async def trade_v2(
        self,
        ticker: str,
        side: str,
        qty: float,
        account_id: str,
        dry_run: bool = True,
    ) -> tuple[list[str], bool]:
        """Same as :meth:`trade`; kept for callers of the older client"""
        return await self._trade_engine.trade_v2(
            ticker, side, qty, account_id, dry_run
        )

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client for API requests"""
        self._request_client.set_http_client(client)

    async def close(self) -> None:
        """Release the HTTP connection pool"""
        await self._request_client.aclose()

    @property
    def auth_manager(self) -> SchwabAuthManager:
        """Access auth manager for testing"""
        return self._auth_manager

    @property
    def request_client(self) -> SchwabRequestClient:
        """Access request client for testing"""
        return self._request_client

    @property
    def token_refresher(self) -> SchwabTokenRefresher:
        """Access token refresher for testing"""
        return self._token_refresher

    @property
    def trade_engine(self) -> SchwabTradeEngine:
        """Access trade engine for testing"""
        return self._trade_engine


SchwabClient = SchwabClientFacade
