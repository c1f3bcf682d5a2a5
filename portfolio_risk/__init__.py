"""Portfolio risk engine for LP portfolios of fund commitments and direct holdings."""

__version__ = "0.1.0"
