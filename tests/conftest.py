"""Pytest fixtures for schwabweb tests"""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Load environment variables from .env file for all tests
# This makes SCHWAB credentials available to integration tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


@pytest.fixture
def captured_headers() -> dict[str, str]:
    """Headers as Playwright reports them on the intercepted balances request"""
    return {
        ":authority": "ausgateway.schwab.com",
        "accept": "application/json",
        "accept-encoding": "gzip, deflate, br, zstd",
        "authorization": "Bearer captured-token",
        "cookie": "browser=jar",
        "schwab-channelcode": "IO",
        "schwab-client-appid": "AD00008376",
        "schwab-client-channel": "IO",
        "user-agent": "Mozilla/5.0",
    }


@pytest.fixture
def holdings_payload() -> dict:
    """HoldingV2 response with two groups and mixed description shapes"""
    return {
        "accounts": [
            {
                "accountId": "12345",
                "totals": {
                    "marketValue": 15000.5,
                    "cashInvestments": 2500.0,
                    "accountValue": 17500.5,
                    "costBasis": 12000.0,
                },
                "groupedPositions": [
                    {
                        "groupName": "Equities",
                        "holdingsRows": [
                            {
                                "symbol": {"symbol": "AAPL", "ssId": 101},
                                "description": "AAPL Inc",
                                "qty": {"qty": 10},
                                "costBasis": {"cstBasis": 1500.0},
                                "marketValue": {"val": 2000.0},
                            },
                            {
                                "symbol": {"symbol": "MSFT", "ssId": 102},
                                "description": {"description": "Microsoft Corp"},
                                "qty": {"qty": 5},
                                "costBasis": {"cstBasis": 1800.0},
                                "marketValue": {"val": 2100.0},
                            },
                        ],
                    },
                    {
                        "groupName": "ETFs",
                        "holdingsRows": [
                            {
                                "symbol": {"symbol": "VTI", "ssId": 103},
                                "description": {"text": "Vanguard Total"},
                                "qty": {"qty": 40.5},
                                "costBasis": {"cstBasis": 8700.0},
                                "marketValue": {"val": 10900.5},
                            }
                        ],
                    },
                ],
            }
        ]
    }


@pytest.fixture
def verification_payload() -> dict:
    """Accepted verification answer"""
    return {
        "orderStrategy": {
            "orderId": 555,
            "orderReturnCode": 0,
            "orderMessages": [{"message": "OK"}],
            "orderLegs": [{"schwabSecurityId": 9}],
        }
    }
