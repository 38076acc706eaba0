"""Tests for holdings validation models"""

import pytest

from schwabweb.validation.accounts import (
    AccountInfoV2Response,
    AccountV2,
    HoldingRow,
    normalize_description,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Apple Inc", "Apple Inc"),
        ({"description": "Apple Inc"}, "Apple Inc"),
        ({"text": "Apple Inc"}, "Apple Inc"),
        ({"value": "Apple Inc"}, "Apple Inc"),
        ({"description": "first", "text": "second"}, "first"),
        ({"description": 5, "text": "fallback"}, "fallback"),
        ({"other": "x"}, ""),
        (None, ""),
        (42, ""),
        (["Apple"], ""),
    ],
)
def test_normalize_description(raw, expected):
    assert normalize_description(raw) == expected


@pytest.mark.unit
def test_holding_row_defaults_for_missing_fields():
    row = HoldingRow.model_validate({"symbol": {"symbol": "AAPL"}})

    assert row.symbol.symbol == "AAPL"
    assert row.symbol.ss_id == 0
    assert row.description == ""
    assert row.qty.qty == 0.0
    assert row.market_value.val == 0.0
    assert row.cost_basis.cost_basis == 0.0


@pytest.mark.unit
def test_null_fields_fall_back_to_defaults():
    account = AccountV2.model_validate(
        {"accountId": "1", "totals": None, "groupedPositions": None}
    )

    assert account.totals.account_value == 0.0
    assert account.grouped_positions == []


@pytest.mark.unit
def test_numeric_account_id_is_kept_as_string():
    response = AccountInfoV2Response.model_validate({"accounts": [{"accountId": 12345}]})

    assert response.accounts[0].account_id == "12345"


@pytest.mark.unit
def test_unknown_fields_are_ignored(holdings_payload):
    holdings_payload["accounts"][0]["somethingNew"] = {"x": 1}

    response = AccountInfoV2Response.model_validate(holdings_payload)

    assert len(response.accounts) == 1


@pytest.mark.unit
def test_iter_rows_preserves_group_then_row_order(holdings_payload):
    account = AccountInfoV2Response.model_validate(holdings_payload).accounts[0]

    assert [row.symbol.symbol for row in account.iter_rows()] == ["AAPL", "MSFT", "VTI"]


@pytest.mark.unit
def test_to_compat(holdings_payload):
    account = AccountInfoV2Response.model_validate(holdings_payload).accounts[0]

    compat = account.to_compat()

    assert compat.account_value == 17500.5
    assert compat.positions[2].symbol == "VTI"
    assert compat.positions[2].quantity == 40.5
    assert compat.positions[2].market_value == 10900.5


@pytest.mark.unit
def test_to_compat_without_positions():
    account = AccountV2.model_validate(
        {"accountId": "1", "totals": {"accountValue": 10.0}}
    )

    compat = account.to_compat()

    assert compat.account_value == 10.0
    assert compat.positions == []
