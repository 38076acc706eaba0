"""Infrastructure layer for the Schwab web client."""
