"""Pydantic models for the Schwab order verify/execute protocol

Request models serialize to the platform's private order schema; field
aliases and numeric codes must match it exactly. Response models decode
the verification and execution answers.
"""

from typing import Any, Literal

from pydantic import Field

from schwabweb.shared.constants import ACCEPTED_RETURN_CODES

from .base import WireModel

OrderSide = Literal["Buy", "Sell"]

SECURITY_TYPE_EQUITY = 46
ORDER_TYPE_MARKET = "49"
DURATION_DAY = "48"
ORDER_STRATEGY_TYPE_SINGLE = 1
INSTRUCTION_CODES: dict[str, str] = {"Buy": "49", "Sell": "50"}

PROCESSING_CONTROL_VERIFY = 1
PROCESSING_CONTROL_EXECUTE = 2


def format_quantity(quantity: float) -> str:
    """Format a share quantity the way the order ticket does (six decimals)"""
    return f"{quantity:f}"


class Instrument(WireModel):
    symbol: str = Field(..., alias="Symbol")
    item_issue_id: int | None = Field(None, alias="ItemIssueId")


class OrderLegRequest(WireModel):
    quantity: str = Field(..., alias="Quantity")
    leaves_quantity: str = Field(..., alias="LeavesQuantity")
    instrument: Instrument = Field(..., alias="Instrument")
    security_type: int = Field(SECURITY_TYPE_EQUITY, alias="SecurityType")
    instruction: str = Field(..., alias="Instruction")


class CostBasisRequest(WireModel):
    cost_basis_method: str = Field("FIFO", alias="costBasisMethod")
    default_cost_basis_method: str = Field(
        "FIFO", alias="defaultCostBasisMethod"
    )


class OrderStrategyRequest(WireModel):
    primary_security_type: int = Field(
        SECURITY_TYPE_EQUITY, alias="PrimarySecurityType"
    )
    cost_basis_request: CostBasisRequest = Field(
        default_factory=CostBasisRequest, alias="CostBasisRequest"
    )
    order_type: str = Field(ORDER_TYPE_MARKET, alias="OrderType")
    limit_price: str = Field("0", alias="LimitPrice")
    stop_price: str = Field("0", alias="StopPrice")
    duration: str = Field(DURATION_DAY, alias="Duration")
    all_none_in: bool = Field(False, alias="AllNoneIn")
    do_not_reduce_in: bool = Field(False, alias="DoNotReduceIn")
    order_strategy_type: int = Field(
        ORDER_STRATEGY_TYPE_SINGLE, alias="OrderStrategyType"
    )
    order_legs: list[OrderLegRequest] = Field(..., alias="OrderLegs")
    order_id: int | None = Field(None, alias="OrderId")


class UserContext(WireModel):
    account_id: str = Field(..., alias="AccountId")
    account_color: int = Field(0, alias="AccountColor")
    customer_id: int | None = Field(None, alias="CustomerId")


class OrderRequest(WireModel):
    """Order ticket sent to the orders endpoint

    The same ticket is sent twice: first with the verification control
    flag, then, via :meth:`for_execution`, as a clone carrying the
    server-assigned identifiers and the execution flag.
    """

    user_context: UserContext = Field(..., alias="UserContext")
    order_strategy: OrderStrategyRequest = Field(..., alias="OrderStrategy")
    order_processing_control: int = Field(
        PROCESSING_CONTROL_VERIFY, alias="OrderProcessingControl"
    )

    @classmethod
    def market_order(
        cls,
        ticker: str,
        side: OrderSide,
        quantity: float,
        account_id: str,
    ) -> "OrderRequest":
        """Build a day market order ticket in verification mode"""
        qty = format_quantity(quantity)
        return cls(
            user_context=UserContext(account_id=account_id),
            order_strategy=OrderStrategyRequest(
                order_legs=[
                    OrderLegRequest(
                        quantity=qty,
                        leaves_quantity=qty,
                        instrument=Instrument(symbol=ticker),
                        instruction=INSTRUCTION_CODES[side],
                    )
                ]
            ),
        )

    @property
    def is_execution(self) -> bool:
        return self.order_processing_control == PROCESSING_CONTROL_EXECUTE

    def for_execution(
        self, order_id: int, security_id: int | None = None
    ) -> "OrderRequest":
        """Clone this ticket with the execution overrides applied

        Args:
            order_id: Order identifier returned by verification
            security_id: Verified security id for the first leg, if returned

        Returns:
            New ticket; this instance is left unchanged
        """
        strategy = self.order_strategy.model_copy(deep=True)
        strategy.order_id = order_id
        if security_id is not None and strategy.order_legs:
            strategy.order_legs[0].instrument.item_issue_id = security_id

        context = self.user_context.model_copy(update={"customer_id": 0})

        return self.model_copy(
            update={
                "user_context": context,
                "order_strategy": strategy,
                "order_processing_control": PROCESSING_CONTROL_EXECUTE,
            }
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body using the platform's field names"""
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderMessage(WireModel):
    message: str = Field("", alias="message")


class VerifiedOrderLeg(WireModel):
    schwab_security_id: int = Field(0, alias="schwabSecurityId")


class OrderStrategyResult(WireModel):
    order_id: int = Field(0, alias="orderId")
    order_messages: list[OrderMessage] = Field(
        default_factory=list, alias="orderMessages"
    )
    order_return_code: int = Field(0, alias="orderReturnCode")
    order_legs: list[VerifiedOrderLeg] = Field(
        default_factory=list, alias="orderLegs"
    )


class OrderVerificationResponse(WireModel):
    """Answer to both verification and execution submissions"""

    order_strategy: OrderStrategyResult = Field(
        default_factory=OrderStrategyResult, alias="orderStrategy"
    )

    @property
    def messages(self) -> list[str]:
        """Order messages in response order"""
        return [m.message for m in self.order_strategy.order_messages]

    @property
    def return_code(self) -> int:
        return self.order_strategy.order_return_code

    @property
    def is_accepted(self) -> bool:
        """Return code 0 (success) or 10 (warning) accepts the order"""
        return self.return_code in ACCEPTED_RETURN_CODES

    @property
    def leg_security_ids(self) -> list[int]:
        return [leg.schwab_security_id for leg in self.order_strategy.order_legs]
