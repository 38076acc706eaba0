"""Validation models for Schwab holdings and order payloads

This module provides pydantic models that decode the platform's private
JSON responses and build its order request bodies.
"""

from .accounts import (
    AccountInfoCompat,
    AccountInfoV2Response,
    AccountTotals,
    AccountV2,
    GroupedPosition,
    HoldingRow,
    PositionRow,
    normalize_description,
)
from .orders import (
    OrderRequest,
    OrderSide,
    OrderVerificationResponse,
)

__all__ = [
    # Holdings models
    "AccountInfoCompat",
    "AccountInfoV2Response",
    "AccountTotals",
    "AccountV2",
    "GroupedPosition",
    "HoldingRow",
    "PositionRow",
    "normalize_description",
    # Order models
    "OrderRequest",
    "OrderSide",
    "OrderVerificationResponse",
]
