"""Pure tag rules from the Nostr Implementation Possibilities.

Attributes:
    nip32: Label extraction (location codes, identity labels).
    nip40: Expiration timestamps.
"""

from .nip32 import get_identity_label, get_label, get_location_code
from .nip40 import get_expirations, is_expired, parse_timestamp


__all__ = [
    "get_expirations",
    "get_identity_label",
    "get_label",
    "get_location_code",
    "is_expired",
    "parse_timestamp",
]
