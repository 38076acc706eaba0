"""Pydantic models for Schwab holdings (positions) responses

This module decodes the HoldingV2 endpoint payload into account snapshots
and defines the legacy ``account_value`` + flat ``positions`` shape used by
older integrations.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .base import WireModel

DESCRIPTION_KEYS = ("description", "text", "value")


def normalize_description(value: Any) -> str:
    """Collapse the polymorphic ``description`` field into a plain string

    The platform sends either a bare string or an object. Objects yield the
    first string found under ``description``, ``text`` then ``value``.
    Anything else becomes an empty string.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for key in DESCRIPTION_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, str):
                return candidate
    return ""


class SymbolInfo(WireModel):
    symbol: str = Field("", alias="symbol")
    ss_id: int = Field(0, alias="ssId")


class QtyInfo(WireModel):
    qty: float = Field(0.0, alias="qty")


class CostBasisInfo(WireModel):
    cost_basis: float = Field(0.0, alias="cstBasis")


class MarketValueInfo(WireModel):
    val: float = Field(0.0, alias="val")


class HoldingRow(WireModel):
    """One position row inside a holdings group"""

    symbol: SymbolInfo = Field(default_factory=SymbolInfo, alias="symbol")
    description: str = Field("", alias="description")
    qty: QtyInfo = Field(default_factory=QtyInfo, alias="qty")
    cost_basis: CostBasisInfo = Field(
        default_factory=CostBasisInfo, alias="costBasis"
    )
    market_value: MarketValueInfo = Field(
        default_factory=MarketValueInfo, alias="marketValue"
    )

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v):
        """Accept string or object descriptions"""
        return normalize_description(v)


class GroupedPosition(WireModel):
    group_name: str = Field("", alias="groupName")
    holdings_rows: list[HoldingRow] = Field(
        default_factory=list, alias="holdingsRows"
    )


class AccountTotals(WireModel):
    market_value: float = Field(0.0, alias="marketValue")
    cash_investments: float = Field(0.0, alias="cashInvestments")
    account_value: float = Field(0.0, alias="accountValue")
    cost_basis: float = Field(0.0, alias="costBasis")


class PositionRow(BaseModel):
    """One entry in the legacy ``positions`` list"""

    symbol: str
    market_value: float
    quantity: float


class AccountInfoCompat(BaseModel):
    """Legacy account shape: account value plus a flat position list"""

    account_value: float
    positions: list[PositionRow] = Field(default_factory=list)


class AccountV2(WireModel):
    """Account snapshot from the HoldingV2 endpoint"""

    account_id: str = Field("", alias="accountId")
    totals: AccountTotals = Field(default_factory=AccountTotals, alias="totals")
    grouped_positions: list[GroupedPosition] = Field(
        default_factory=list, alias="groupedPositions"
    )

    def iter_rows(self):
        """Yield holdings rows across groups, in group then row order"""
        for group in self.grouped_positions:
            yield from group.holdings_rows

    def to_compat(self) -> AccountInfoCompat:
        """Project into the legacy shape"""
        return AccountInfoCompat(
            account_value=self.totals.account_value,
            positions=[
                PositionRow(
                    symbol=row.symbol.symbol,
                    market_value=row.market_value.val,
                    quantity=row.qty.qty,
                )
                for row in self.iter_rows()
            ],
        )


class AccountInfoV2Response(WireModel):
    """Top-level HoldingV2 payload"""

    accounts: list[AccountV2] = Field(default_factory=list, alias="accounts")
