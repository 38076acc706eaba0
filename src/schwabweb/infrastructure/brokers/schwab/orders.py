"""SchwabTradeEngine - Two-phase (verify, then execute) order placement"""

from enum import Enum

import httpx
from loguru import logger
from pydantic import ValidationError

from schwabweb.shared.constants import ORDER_VERIFICATION_V2_URL
from schwabweb.shared.exceptions import SchwabDecodeError, SchwabValidationError
from schwabweb.validation.orders import (
    INSTRUCTION_CODES,
    OrderRequest,
    OrderVerificationResponse,
)

from .requests import SchwabRequestClient
from .tokens import SchwabTokenRefresher

ORDER_HEADERS = {
    "schwab-resource-version": "1.0",
    "Content-Type": "application/json",
}


class TradeState(str, Enum):
    """Where a trade ended up"""

    BUILT = "built"
    VERIFYING = "verifying"
    VERIFY_REJECTED = "verify_rejected"
    VERIFIED = "verified"
    EXECUTING = "executing"
    EXECUTE_REJECTED = "execute_rejected"
    DONE = "done"


class SchwabTradeEngine:
    """Places equity market orders through the verify/execute protocol

    The order ticket is first submitted for verification. A verified ticket
    is re-submitted for execution as a clone carrying the server-assigned
    order id and security id. Rejections are ordinary results
    (``success=False``), not exceptions; callers must check the flag.
    """

    def __init__(
        self,
        request_client: SchwabRequestClient,
        token_refresher: SchwabTokenRefresher,
    ) -> None:
        self._request_client = request_client
        self._token_refresher = token_refresher
        self.last_state: TradeState | None = None

    async def trade(
        self,
        ticker: str,
        side: str,
        qty: float,
        account_id: str,
        dry_run: bool = True,
    ) -> tuple[list[str], bool]:
        """Verify and (unless ``dry_run``) execute a day market order

        Args:
            ticker: Symbol to trade
            side: "Buy" or "Sell"
            qty: Share quantity
            account_id: Account number to trade in
            dry_run: Stop after a successful verification

        Returns:
            (messages, success). Messages come from the last phase reached.

        Raises:
            SchwabValidationError: If ``side`` is not "Buy" or "Sell"
            SchwabDecodeError: If the verification answer cannot be decoded
            SchwabTransportError: On network failure
        """
        if side not in INSTRUCTION_CODES:
            raise SchwabValidationError("side must be 'Buy' or 'Sell'")

        await self._token_refresher.try_refresh("update")

        order = OrderRequest.market_order(ticker, side, qty, account_id)
        self.last_state = TradeState.BUILT

        logger.info(
            f"Verifying {side} {qty} {ticker} in account {account_id} (dry_run={dry_run})"
        )
        self.last_state = TradeState.VERIFYING
        response = await self._submit(order)
        logger.debug(f"Verification Response: {response.text}")

        if response.status_code != 200:
            logger.warning(f"Verification rejected with status {response.status_code}")
            self.last_state = TradeState.VERIFY_REJECTED
            return [response.text], False

        try:
            verification = OrderVerificationResponse.model_validate_json(
                response.content
            )
        except ValidationError as e:
            raise SchwabDecodeError(f"invalid verification response: {e}") from e

        messages = verification.messages
        if not verification.is_accepted:
            logger.warning(
                f"Verification rejected with return code {verification.return_code}: {messages}"
            )
            self.last_state = TradeState.VERIFY_REJECTED
            return messages, False

        self.last_state = TradeState.VERIFIED
        if dry_run:
            logger.info(f"Dry run verified {side} {qty} {ticker}")
            self.last_state = TradeState.DONE
            return messages, True

        security_ids = verification.leg_security_ids
        execution = order.for_execution(
            order_id=verification.order_strategy.order_id,
            security_id=security_ids[0] if security_ids else None,
        )

        # Verification round trip may have outlived the token
        await self._token_refresher.try_refresh("update")

        logger.info(
            f"Executing order {verification.order_strategy.order_id} for {side} {qty} {ticker}"
        )
        self.last_state = TradeState.EXECUTING
        exec_response = await self._submit(execution)
        logger.debug(f"Execution Response: {exec_response.text}")

        if exec_response.status_code != 200:
            logger.error(f"Execution rejected with status {exec_response.status_code}")
            self.last_state = TradeState.EXECUTE_REJECTED
            return [exec_response.text], False

        result = self._decode_execution(exec_response)
        if result.is_accepted:
            self.last_state = TradeState.DONE
            logger.info(f"Order {verification.order_strategy.order_id} executed")
            return result.messages, True

        logger.warning(
            f"Execution rejected with return code {result.return_code}: {result.messages}"
        )
        self.last_state = TradeState.EXECUTE_REJECTED
        return result.messages, False

    async def trade_v2(
        self,
        ticker: str,
        side: str,
        qty: float,
        account_id: str,
        dry_run: bool = True,
    ) -> tuple[list[str], bool]:
        """Same as :meth:`trade`; kept for callers of the older client"""
        return await self.trade(ticker, side, qty, account_id, dry_run)

    async def _submit(self, order: OrderRequest) -> httpx.Response:
        return await self._request_client.request(
            "POST",
            ORDER_VERIFICATION_V2_URL,
            json=order.to_payload(),
            headers=ORDER_HEADERS,
        )

    def _decode_execution(
        self, response: httpx.Response
    ) -> OrderVerificationResponse:
        """Decode the execution answer, falling back to an empty result

        The order is already placed at this point, so an unreadable body is
        logged instead of raised.
        """
        try:
            return OrderVerificationResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Could not decode execution response: {e}")
            return OrderVerificationResponse()
