"""Infrastructure brokers module."""

from .schwab import SchwabClient, SchwabClientFacade

__all__ = ["SchwabClient", "SchwabClientFacade"]
