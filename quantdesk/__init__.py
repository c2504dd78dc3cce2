"""Contract symbols, a simulated broker, return statistics, quote replay, signals and UTF conversions."""

__version__ = "0.1.0"