"""Core configuration for the Schwab web client."""
