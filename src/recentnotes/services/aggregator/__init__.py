"""Aggregator service package.

Queries a fixed set of relays in parallel, merges what they return, and
selects the most recent live notes once every relay has finished.

See Also:
    [Aggregator][recentnotes.services.aggregator.service.Aggregator]: Main
        service class.
    [AggregatorConfig][recentnotes.services.aggregator.configs.AggregatorConfig]:
        Configuration model.
"""

from .configs import AggregatorConfig, FilterConfig, LabelsConfig
from .selector import select_recent
from .service import AggregationResult, AggregationState, Aggregator
from .session import SessionOutcome, SessionReport, SourceSession


__all__ = [
    "AggregationResult",
    "AggregationState",
    "Aggregator",
    "AggregatorConfig",
    "FilterConfig",
    "LabelsConfig",
    "SessionOutcome",
    "SessionReport",
    "SourceSession",
    "select_recent",
]
