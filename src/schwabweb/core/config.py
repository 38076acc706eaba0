"""Configuration management for the Schwab web client"""

import os
from dataclasses import dataclass, field

from loguru import logger

from schwabweb.shared.exceptions import ConfigurationError


@dataclass
class AuthTimeouts:
    """Timeouts for the browser login flow (seconds)"""

    navigation: float = 60.0
    login_iframe: float = 30.0
    # Settle pause after submitting credentials, before the forced reload
    post_submit_settle: float = 5.0
    reload: float = 30.0
    # Wall-clock wait for the intercepted authorization header
    header_capture: float = 60.0
    trade_url: float = 60.0
    trade_element: float = 30.0
    final_settle: float = 1.5


@dataclass
class AccountCredentials:
    """Login credentials for one Schwab account"""

    username: str
    password: str
    totp_secret: str = ""

    def __repr__(self) -> str:
        totp = "***" if self.totp_secret else ""
        return f"AccountCredentials(username={self.username!r}, password='***', totp_secret={totp!r})"


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ConfigurationError(f"{name} must be 'true' or 'false', got {raw!r}")


def parse_credentials(raw: str) -> list[AccountCredentials]:
    """Parse the SCHWAB credential string

    Format: ``username:password:totpSecret`` entries separated by commas.
    A totp secret of ``NA`` disables the one-time code.

    Raises:
        ConfigurationError: If an entry has fewer than three fields
    """
    accounts: list[AccountCredentials] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(":")
        if len(parts) < 3:
            raise ConfigurationError(
                "Invalid account format. Expected username:password:totpSecret"
            )
        username, password, totp_secret = parts[0], parts[1], parts[2]
        if totp_secret.upper() == "NA":
            totp_secret = ""
        accounts.append(
            AccountCredentials(
                username=username, password=password, totp_secret=totp_secret
            )
        )
    if not accounts:
        raise ConfigurationError("No accounts found in SCHWAB")
    return accounts


@dataclass
class Config:
    """Configuration for the Schwab web client loaded from environment variables"""

    accounts: list[AccountCredentials]
    account_numbers: list[str] = field(default_factory=list)
    headless: bool = False
    http_timeout: float = 30.0
    debug: bool = False
    auth_timeouts: AuthTimeouts = field(default_factory=AuthTimeouts)

    @property
    def primary_account(self) -> AccountCredentials:
        """First configured login"""
        return self.accounts[0]

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        raw_credentials = os.getenv("SCHWAB", "")
        if not raw_credentials.strip():
            raise ConfigurationError("SCHWAB environment variable not set")
        accounts = parse_credentials(raw_credentials)

        account_numbers = [
            number.strip()
            for number in os.getenv("SCHWAB_ACCOUNT_NUMBERS", "").split(":")
            if number.strip()
        ]

        raw_timeout = os.getenv("SCHWAB_HTTP_TIMEOUT", "30")
        try:
            http_timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"SCHWAB_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from e
        if http_timeout <= 0:
            raise ConfigurationError("SCHWAB_HTTP_TIMEOUT must be positive")

        config = cls(
            accounts=accounts,
            account_numbers=account_numbers,
            headless=_parse_bool("SCHWAB_HEADLESS", False),
            http_timeout=http_timeout,
            debug=_parse_bool("SCHWAB_DEBUG", False),
        )

        logger.info("Configuration loaded:")
        logger.info(f"  Logins: {[a.username for a in config.accounts]}")
        logger.info(
            f"  Account Numbers: {config.account_numbers or 'Not configured'}"
        )
        logger.info(f"  Headless: {config.headless}")
        logger.info(f"  HTTP Timeout: {config.http_timeout}s")
        logger.info(f"  Debug: {config.debug}")

        return config
