"""Pick the K most recent live records from a deduplicated collection."""

from __future__ import annotations

from collections.abc import Mapping
from operator import attrgetter
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from recentnotes.models import Record


def select_recent(
    records: Mapping[str, Record] | Iterable[Record],
    count: int,
    is_expired: Callable[[Record], bool],
) -> list[Record]:
    """Return the *count* newest non-expired records, oldest first.

    Expired records are removed before ranking, so they never take a slot.
    The sort is stable: records sharing a ``created_at`` keep their input
    (insertion) order.

    Args:
        records: Records keyed by id, or any iterable of records.
        count: Number of records to keep. ``0`` or less yields ``[]``.
        is_expired: Predicate marking records to exclude.

    Examples:
        ```python
        select_recent(by_id, 3, lambda r: False)
        # created_at 100..500 -> [300, 400, 500]
        ```
    """
    if count <= 0:
        return []
    values = records.values() if isinstance(records, Mapping) else records
    live = sorted((r for r in values if not is_expired(r)), key=attrgetter("created_at"))
    return live[-count:]
