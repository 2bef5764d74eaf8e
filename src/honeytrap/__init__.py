"""honeytrap: data-access layer and dashboard aggregation for scam detection records."""

__version__ = "0.1.0"
