"""
NIP-40 expiration timestamps.

An event may carry ``["expiration", "<unix seconds>"]``. Clients must stop
showing the event once that moment has passed. Tag values come from
untrusted relays, so anything that does not parse is treated as "no
expiration" and never raises.

See Also:
    [select_recent()][recentnotes.services.aggregator.selector.select_recent]:
        Excludes records for which [is_expired()][recentnotes.nips.nip40.is_expired]
        is true.
"""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING

from recentnotes.models.constants import TagName


if TYPE_CHECKING:
    from collections.abc import Iterable

    from recentnotes.models.record import Record, Tag


# Leading integer, as accepted by JavaScript parseInt(value, 10)
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_timestamp(value: str) -> int | None:
    """Parse the leading base-10 integer of *value*.

    Leading whitespace and a sign are accepted and trailing characters are
    ignored, so ``"1700000000"``, ``" 1700000000"`` and ``"1700000000.5"``
    all yield ``1700000000``.

    Returns:
        The parsed integer, or ``None`` when *value* does not start with
        digits.
    """
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def get_expirations(tags: Iterable[Tag]) -> list[int]:
    """Return every parseable expiration timestamp found in *tags*, in tag order."""
    expirations = []
    for tag in tags:
        if len(tag) >= 2 and tag[0] == TagName.EXPIRATION:
            timestamp = parse_timestamp(tag[1])
            if timestamp is not None:
                expirations.append(timestamp)
    return expirations


def is_expired(record: Record, now: int | None = None) -> bool:
    """Check whether *record* has logically expired.

    Args:
        record: The record to check.
        now: Reference unix time in seconds; defaults to the current time.

    Returns:
        ``True`` if any expiration tag holds a timestamp ``<= now``.
        Missing or malformed expiration data means not expired.
    """
    if now is None:
        now = int(time.time())
    return any(timestamp <= now for timestamp in get_expirations(record.tags))
