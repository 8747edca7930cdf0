"""Domain services (pure, no I/O)."""

from .validation_aggregator import ValidationAggregator

__all__ = ["ValidationAggregator"]
