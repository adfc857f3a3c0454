"""Pure frozen dataclasses with zero network I/O.

The models layer is the foundation of the package. Every model uses
``@dataclass(frozen=True, slots=True)`` and validates in ``__post_init__``
so invalid instances never escape the constructor.

Attributes:
    Relay: Validated relay URL with RFC 3986 parsing and automatic
        [NetworkType][recentnotes.models.constants.NetworkType] detection.
    Record: Immutable NIP-01 event wrapping a ``nostr_sdk.Event``.
    RecordFilter: Kinds and limit sent to every relay, as a ``nostr_sdk.Filter``.
    EventKind: Kinds requested by the recent notes box.
"""

from .constants import EVENT_KIND_MAX, EventKind, LabelNamespace, NetworkType, TagName
from .filter import RecordFilter
from .record import Record, Tag
from .relay import Relay


__all__ = [
    "EVENT_KIND_MAX",
    "EventKind",
    "LabelNamespace",
    "NetworkType",
    "Record",
    "RecordFilter",
    "Relay",
    "Tag",
    "TagName",
]
