"""HeaderCapture - One-shot handoff of intercepted request headers"""

import asyncio
from collections.abc import Mapping

from loguru import logger

from schwabweb.shared.exceptions import SchwabAuthenticationError


class HeaderCapture:
    """Single-slot delivery of the first authorized request's headers

    The route interceptor calls :meth:`offer` for every matching request;
    the login flow awaits :meth:`wait` once. The first header set carrying
    an ``authorization`` value is kept and every later offer is dropped
    without blocking, since the platform fires the matched request more
    than once.

    Both sides run on the Playwright event loop, so the check-and-set in
    :meth:`offer` cannot interleave.
    """

    def __init__(self) -> None:
        self._headers: dict[str, str] | None = None
        self._delivered = asyncio.Event()
        self._dropped = 0

    @property
    def captured(self) -> bool:
        return self._headers is not None

    @property
    def dropped(self) -> int:
        """Number of qualifying header sets discarded after the first"""
        return self._dropped

    def offer(self, headers: Mapping[str, str] | None) -> bool:
        """Deliver a header set if the slot is empty

        Returns:
            True if these headers were kept, False if ignored
        """
        if not headers or not _authorization(headers):
            return False
        if self._headers is not None:
            self._dropped += 1
            logger.debug("Authorization header already captured, dropping duplicate")
            return False
        self._headers = dict(headers)
        self._delivered.set()
        return True

    async def wait(self, timeout: float) -> dict[str, str]:
        """Wait for the first delivered header set

        Args:
            timeout: Wall-clock seconds to wait

        Raises:
            SchwabAuthenticationError: If nothing was delivered in time
        """
        try:
            await asyncio.wait_for(self._delivered.wait(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise SchwabAuthenticationError(
                "no authorization header captured"
            ) from e
        return dict(self._headers or {})


def _authorization(headers: Mapping[str, str]) -> str:
    for key, value in headers.items():
        if key.lower() == "authorization":
            return value or ""
    return ""
