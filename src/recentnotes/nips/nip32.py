"""
NIP-32 labels.

Labels are ``["l", <value>, <namespace>]`` tags. Two namespaces matter
here: ``open-location-code`` carries the plus code of a map note, and
``org.trustroots:username`` carries the Trustroots username of a profile's
author.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recentnotes.models.constants import LabelNamespace, TagName


if TYPE_CHECKING:
    from collections.abc import Iterable

    from recentnotes.models.record import Record, Tag


def get_label(tags: Iterable[Tag], namespace: str) -> str | None:
    """Return the value of the first label tag in *namespace*.

    Tags are scanned in order; the first ``l`` tag with at least three
    elements whose third element equals *namespace* wins.

    Returns:
        The label value, or ``None`` if no tag matches or the matching tag
        has an empty value.
    """
    for tag in tags:
        if len(tag) >= 3 and tag[0] == TagName.LABEL and tag[2] == namespace:
            return tag[1] or None
    return None


def get_location_code(
    record: Record, namespace: str = LabelNamespace.OPEN_LOCATION_CODE
) -> str | None:
    """Return the open location code (plus code) a map note is pinned to."""
    return get_label(record.tags, namespace)


def get_identity_label(
    record: Record, namespace: str = LabelNamespace.TRUSTROOTS_USERNAME
) -> str | None:
    """Return the display name an identity-label record assigns to its author."""
    return get_label(record.tags, namespace)
