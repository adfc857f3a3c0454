"""NIP-01 subscription filter sent to every relay of an aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nostr_sdk import Filter, Kind

from ._validation import validate_int
from .constants import EVENT_KIND_MAX


@dataclass(frozen=True, slots=True)
class RecordFilter:
    """Kinds and limit requested from each relay.

    Relays may ignore the filter or apply it loosely, so the aggregator
    re-checks every record's kind on arrival and never relies on ``limit``.

    Attributes:
        kinds: Event kinds to request, in request order.
        limit: Maximum number of stored events each relay should return.

    Examples:
        ```python
        RecordFilter(kinds=(30397, 10390), limit=200).to_dict()
        # {'kinds': [30397, 10390], 'limit': 200}
        ```
    """

    kinds: tuple[int, ...]
    limit: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kinds", tuple(self.kinds))
        if not self.kinds:
            raise ValueError("kinds must not be empty")
        for kind in self.kinds:
            validate_int(kind, "kinds", maximum=EVENT_KIND_MAX)
        validate_int(self.limit, "limit", minimum=1)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON filter object placed in a ``REQ`` message."""
        return {"kinds": list(self.kinds), "limit": self.limit}

    def to_nostr_filter(self) -> Filter:
        """Return the equivalent ``nostr_sdk.Filter``."""
        return Filter().kinds([Kind(kind) for kind in self.kinds]).limit(self.limit)
