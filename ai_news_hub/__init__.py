"""AI News Hub: topic-based news and social post aggregation."""

__version__ = "0.1.0"
