"""recentnotes services package.

- **Aggregator**: One-shot collection of the most recent notes from a fixed
  set of relays, with a per-relay deadline and cross-relay deduplication.

Example::

    from recentnotes.services import Aggregator

    aggregator = Aggregator.from_yaml("config/recentnotes.yaml")
    result = await aggregator.run()
"""

from .aggregator import (
    AggregationResult,
    Aggregator,
    AggregatorConfig,
)


__all__ = [
    "AggregationResult",
    "Aggregator",
    "AggregatorConfig",
]
