"""Plain-text rendering of aggregated notes.

Used by the CLI to print an
[AggregationResult][recentnotes.services.aggregator.service.AggregationResult].
Each note renders as a meta row (date, author, relative age, location code
or short id) followed by its content.

Examples:
    ```python
    print(render_notes(result.notes, result.identities))
    # 2024-05-01 12:30 @alice  3d  9F4MGC22+22
    # Nice spot for a tent
    ```
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import TYPE_CHECKING

from nostr_sdk import NostrSdkError, PublicKey

from recentnotes.models.constants import LabelNamespace
from recentnotes.nips.nip32 import get_location_code


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import tzinfo

    from recentnotes.models.record import Record


EMPTY_MESSAGE = "No notes yet."
MISSING = "—"

_MINUTE = 60
_HOUR = 3_600
_DAY = 86_400
_MONTH = 2_592_000
_YEAR = 31_536_000


def format_date(timestamp: int, tz: tzinfo | None = None) -> str:
    """Format a unix timestamp as ``YYYY-MM-DD HH:MM`` (local time unless *tz* is given)."""
    return datetime.fromtimestamp(timestamp, tz=tz).strftime("%Y-%m-%d %H:%M")


def format_relative_time(timestamp: int, now: int | None = None) -> str:
    """Format the age of *timestamp* compactly: ``now``, ``5m``, ``3h``, ``2d``, ``4mo``, ``1y``.

    Timestamps in the future render as ``now``.
    """
    if now is None:
        now = int(time.time())
    diff = now - timestamp
    if diff < _MINUTE:
        return "now"
    if diff < _HOUR:
        return f"{diff // _MINUTE}m"
    if diff < _DAY:
        return f"{diff // _HOUR}h"
    if diff < _MONTH:
        return f"{diff // _DAY}d"
    if diff < _YEAR:
        return f"{diff // _MONTH}mo"
    return f"{diff // _YEAR}y"


def short_note_id(note_id: str | None) -> str:
    """Return the first 8 characters of an event id followed by ``+``."""
    if not note_id:
        return MISSING
    return note_id[:8] + "+"


def author_display(pubkey: str | None, identities: Mapping[str, str] | None = None) -> str:
    """Return a short label for an author.

    Known authors render as ``@username``. Others render as the first 12
    characters of their ``npub`` encoding, or of the raw key when it cannot
    be encoded, followed by an ellipsis.
    """
    if not pubkey:
        return MISSING
    username = identities.get(pubkey) if identities else None
    if username:
        return "@" + username
    try:
        npub = PublicKey.parse(pubkey).to_bech32()
    except (NostrSdkError, ValueError, TypeError):
        return pubkey[:12] + "…"
    return npub[:12] + "…"


def render_note(
    record: Record,
    identities: Mapping[str, str] | None = None,
    *,
    now: int | None = None,
    tz: tzinfo | None = None,
    location_namespace: str = LabelNamespace.OPEN_LOCATION_CODE,
) -> str:
    """Render one note as a meta row followed by its content."""
    location = get_location_code(record, location_namespace)
    meta = " ".join(
        (
            format_date(record.created_at, tz),
            author_display(record.pubkey, identities),
            format_relative_time(record.created_at, now),
            location or short_note_id(record.id),
        )
    )
    return f"{meta}\n{record.content}"


def render_notes(
    records: Sequence[Record],
    identities: Mapping[str, str] | None = None,
    *,
    now: int | None = None,
    tz: tzinfo | None = None,
    location_namespace: str = LabelNamespace.OPEN_LOCATION_CODE,
) -> str:
    """Render notes in the given order, separated by blank lines."""
    if not records:
        return EMPTY_MESSAGE
    return "\n\n".join(
        render_note(
            record,
            identities,
            now=now,
            tz=tz,
            location_namespace=location_namespace,
        )
        for record in records
    )
