"""SchwabRequestClient - HTTP requests carrying the captured session"""

import asyncio
import logging
import random
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from schwabweb.shared.exceptions import SchwabClientError, SchwabTransportError

from .credentials import CredentialBundle

_MASKED_HEADERS = frozenset({"authorization", "cookie"})
_RETRYABLE_STATUS = frozenset({429, 502, 503})


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


class SchwabRequestClient:
    """Low-level HTTP client for the platform's private endpoints

    Responsibilities:
    - Injecting the credential bundle's headers into every request
    - Request/response logging with secrets masked
    - Mapping network failures to SchwabTransportError
    - Retrying idempotent GETs on network errors and 429/502/503

    Status codes are not interpreted here; callers decide what a non-200
    means for their operation. POSTs are never retried since a replayed
    execution could place the order twice.
    """

    DEFAULT_TIMEOUT = 30.0
    _logging_bridge_installed = False

    def __init__(
        self,
        credentials: CredentialBundle,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 2,
    ) -> None:
        """Initialize request client

        Args:
            credentials: Bundle whose headers are sent with each request
            timeout: Per-request deadline in seconds
            max_retries: Retry attempts for GET requests
        """
        self._credentials = credentials
        self._timeout = timeout
        self._max_retries = max_retries
        self._http_client: httpx.AsyncClient | None = None
        self.install_logging_bridge()

    @classmethod
    def install_logging_bridge(cls) -> None:
        """Bridge stdlib logging used by httpx into loguru once."""
        if cls._logging_bridge_installed:
            return

        std_logger = logging.getLogger("httpx")
        std_logger.setLevel(logging.DEBUG)
        std_logger.addHandler(_LoguruHandler())
        std_logger.propagate = False

        cls._logging_bridge_installed = True

    @property
    def timeout(self) -> float:
        return self._timeout

    def _build_http_client(
        self,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        """Create an AsyncClient with httpx request/response logging hooks."""
        self.install_logging_bridge()
        return httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            event_hooks={
                "request": [self._log_httpx_request],
                "response": [self._log_httpx_response],
            },
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound httpx requests with headers (auth and cookies masked)."""
        headers = {
            k: ("***" if k.lower() in _MASKED_HEADERS else v)
            for k, v in request.headers.items()
        }
        logger.debug(f"HTTPX request: {request.method} {request.url} {headers}")

    async def _log_httpx_response(self, response: httpx.Response) -> None:
        """Log httpx responses with status."""
        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url}"
        )

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client (for testing or external management)"""
        self._http_client = client

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = self._build_http_client(timeout=self._timeout)
        return self._http_client

    async def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request with the session headers attached

        Args:
            method: HTTP method (GET, POST)
            url: Absolute endpoint URL
            json: JSON body for POST requests
            headers: Extra headers for this request only

        Returns:
            The raw response, whatever its status

        Raises:
            SchwabTransportError: If the request fails at the network level
        """
        method = method.upper()
        if method not in ("GET", "POST"):
            raise SchwabClientError(f"Unsupported HTTP method: {method}")

        request_headers = self._credentials.request_headers(headers)
        max_retries = self._max_retries if method == "GET" else 0
        retry_count = 0
        delay = 1.0

        while True:
            logger.debug(f"{method} {url} (attempt {retry_count + 1})")
            try:
                response = await self._client().request(
                    method, url, headers=request_headers, json=json
                )
            except httpx.RequestError as e:
                logger.warning(f"Network error: {e}")
                if retry_count < max_retries:
                    await self._backoff(delay)
                    delay *= 2
                    retry_count += 1
                    continue
                raise SchwabTransportError(
                    f"{method} {url} failed: {e}"
                ) from e

            if response.status_code in _RETRYABLE_STATUS and retry_count < max_retries:
                logger.warning(
                    f"Retryable error {response.status_code} from {url}"
                )
                await self._backoff(delay)
                delay *= 2
                retry_count += 1
                continue

            return response

    async def _backoff(self, delay: float) -> None:
        jitter = delay * 0.1 * (random.random() * 2 - 1)
        sleep_time = delay + jitter
        logger.info(f"Retrying in {sleep_time:.2f}s...")
        await asyncio.sleep(sleep_time)

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
