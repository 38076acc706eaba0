"""Tests for order request/response models"""

import pytest

from schwabweb.validation.orders import (
    PROCESSING_CONTROL_EXECUTE,
    OrderRequest,
    OrderVerificationResponse,
    format_quantity,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "quantity, expected",
    [(1, "1.000000"), (2.5, "2.500000"), (0.001, "0.001000"), (100, "100.000000")],
)
def test_format_quantity(quantity, expected):
    assert format_quantity(quantity) == expected


@pytest.mark.unit
def test_market_order_defaults():
    order = OrderRequest.market_order("AAPL", "Buy", 3, "12345678")

    assert order.is_execution is False
    assert order.user_context.account_id == "12345678"
    assert order.user_context.customer_id is None
    assert order.order_strategy.order_id is None
    leg = order.order_strategy.order_legs[0]
    assert leg.quantity == leg.leaves_quantity == "3.000000"
    assert leg.instruction == "49"
    assert leg.instrument.item_issue_id is None


@pytest.mark.unit
def test_payload_omits_unset_identifiers():
    payload = OrderRequest.market_order("AAPL", "Sell", 1, "1").to_payload()

    assert "CustomerId" not in payload["UserContext"]
    assert "OrderId" not in payload["OrderStrategy"]
    assert "ItemIssueId" not in payload["OrderStrategy"]["OrderLegs"][0]["Instrument"]
    assert payload["OrderStrategy"]["OrderLegs"][0]["Instruction"] == "50"


@pytest.mark.unit
def test_for_execution_returns_new_ticket():
    order = OrderRequest.market_order("AAPL", "Buy", 1, "12345678")

    execution = order.for_execution(order_id=555, security_id=9)

    assert execution is not order
    assert execution.is_execution is True
    assert execution.order_processing_control == PROCESSING_CONTROL_EXECUTE
    assert execution.order_strategy.order_id == 555
    assert execution.order_strategy.order_legs[0].instrument.item_issue_id == 9
    assert execution.user_context.customer_id == 0
    assert execution.user_context.account_id == "12345678"

    # Source ticket is untouched
    assert order.is_execution is False
    assert order.order_strategy.order_id is None
    assert order.order_strategy.order_legs[0].instrument.item_issue_id is None
    assert order.user_context.customer_id is None


@pytest.mark.unit
def test_for_execution_without_security_id():
    execution = OrderRequest.market_order("AAPL", "Buy", 1, "1").for_execution(7)

    assert execution.order_strategy.order_legs[0].instrument.item_issue_id is None


@pytest.mark.unit
def test_verification_response(verification_payload):
    response = OrderVerificationResponse.model_validate(verification_payload)

    assert response.messages == ["OK"]
    assert response.return_code == 0
    assert response.is_accepted is True
    assert response.leg_security_ids == [9]
    assert response.order_strategy.order_id == 555


@pytest.mark.unit
@pytest.mark.parametrize(
    "code, accepted",
    [(0, True), (10, True), (1, False), (-1, False), (11, False), (20, False)],
)
def test_return_code_acceptance(code, accepted):
    response = OrderVerificationResponse.model_validate(
        {"orderStrategy": {"orderReturnCode": code}}
    )

    assert response.is_accepted is accepted


@pytest.mark.unit
def test_empty_response_defaults_to_success():
    response = OrderVerificationResponse.model_validate({})

    assert response.return_code == 0
    assert response.messages == []
    assert response.is_accepted is True
