"""
Immutable Nostr event received from a relay.

Wraps ``nostr_sdk.Event`` in a frozen dataclass. The fields the aggregator
reads (id, author, timestamp, kind, content, tags) are copied out of the
SDK object once at construction, so sorting, label lookup and rendering
never cross the FFI boundary again. Signature checking is delegated to
``nostr_sdk`` through [Record.verify()][recentnotes.models.record.Record.verify].

See Also:
    [recentnotes.services.aggregator.session][]: Wraps each event streamed
        by a relay in a ``Record``.
    [recentnotes.nips][]: Tag rules (expiration, labels) evaluated on
        ``Record.tags``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from nostr_sdk import Event as NostrEvent
from nostr_sdk import NostrSdkError

from ._validation import validate_instance


Tag = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Record:
    """Immutable NIP-01 event.

    Two records are equal when their ids are equal; the same note may
    arrive from several relays.

    Args:
        _nostr_event: The underlying ``nostr_sdk.Event`` instance.

    Attributes:
        id: 64-character hex event id.
        pubkey: 64-character hex public key of the author.
        created_at: Unix timestamp (seconds) chosen by the author.
        kind: Integer event kind.
        content: Raw content string.
        tags: Ordered tags; each tag is an ordered tuple of strings whose
            first element is the tag name.
        sig: 128-character hex Schnorr signature.

    Raises:
        TypeError: If *_nostr_event* is not a ``nostr_sdk.Event``.

    Examples:
        ```python
        record = Record(nostr_event)
        record.kind   # 30397
        Record.from_json(record.to_json()) == record   # True
        ```
    """

    _nostr_event: NostrEvent = field(repr=False, compare=False)

    id: str = field(init=False)
    pubkey: str = field(init=False, compare=False)
    created_at: int = field(init=False, compare=False)
    kind: int = field(init=False, compare=False)
    content: str = field(init=False, repr=False, compare=False)
    tags: tuple[Tag, ...] = field(init=False, repr=False, compare=False)
    sig: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        validate_instance(self._nostr_event, NostrEvent, "_nostr_event")
        inner = self._nostr_event
        object.__setattr__(self, "id", inner.id().to_hex())
        object.__setattr__(self, "pubkey", inner.author().to_hex())
        object.__setattr__(self, "created_at", inner.created_at().as_secs())
        object.__setattr__(self, "kind", inner.kind().as_u16())
        object.__setattr__(self, "content", inner.content())
        object.__setattr__(
            self, "tags", tuple(tuple(tag.as_vec()) for tag in inner.tags().to_vec())
        )
        object.__setattr__(self, "sig", inner.signature())

    @property
    def nostr_event(self) -> NostrEvent:
        """The wrapped ``nostr_sdk.Event``."""
        return self._nostr_event

    @classmethod
    def from_json(cls, data: str) -> Record:
        """Parse a NIP-01 JSON event string.

        Raises:
            ValueError: If ``nostr_sdk`` rejects the JSON.
        """
        validate_instance(data, str, "data")
        try:
            return cls(NostrEvent.from_json(data))
        except NostrSdkError as e:
            raise ValueError(f"Invalid event: {e}") from None

    @classmethod
    def from_dict(cls, data: Any) -> Record:
        """Parse a decoded NIP-01 event object.

        Raises:
            TypeError: If *data* is not a dict.
            ValueError: If ``nostr_sdk`` rejects the event.
        """
        validate_instance(data, dict, "event")
        return cls.from_json(json.dumps(data))

    def to_dict(self) -> dict[str, Any]:
        """Return the NIP-01 JSON object for this record."""
        return json.loads(self._nostr_event.as_json())

    def to_json(self) -> str:
        """Return the record serialized as a compact NIP-01 JSON string."""
        return self._nostr_event.as_json()

    def verify(self) -> bool:
        """Check the event id hash and Schnorr signature with ``nostr_sdk``."""
        return bool(self._nostr_event.verify())
