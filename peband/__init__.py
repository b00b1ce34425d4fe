"""P/E band valuation engine."""

__version__ = "1.0.0"
