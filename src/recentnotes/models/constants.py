"""Shared constants for the models layer.

Defines enumerations and other constants that are used across multiple
model modules. Placing them here avoids circular dependencies between
the models, nips and utils layers.

See Also:
    [recentnotes.models.relay][]: Uses [NetworkType][recentnotes.models.constants.NetworkType]
        to classify relay URLs during construction.
    [recentnotes.nips][]: Tag rules keyed on [TagName][recentnotes.models.constants.TagName].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class NetworkType(StrEnum):
    """Network type enum for relay classification.

    Each relay URL is classified into exactly one network type during
    [Relay][recentnotes.models.relay.Relay] construction; only ``CLEARNET``
    relays are accepted.

    Attributes:
        CLEARNET: Public internet relay using ``wss://`` (TLS required).
        OVERLAY: Tor, I2P or Lokinet hostname (``.onion``, ``.i2p``, ``.loki``).
            Reaching these needs a SOCKS proxy, so they are rejected.
        LOCAL: Private or reserved IP address (rejected during validation).
        UNKNOWN: Hostname that could not be classified (rejected during validation).
    """

    CLEARNET = "clearnet"
    OVERLAY = "overlay"
    LOCAL = "local"
    UNKNOWN = "unknown"


class EventKind(IntEnum):
    """Nostr event kinds requested from relays.

    Attributes:
        MAP_NOTE: Kind 30397 -- a note pinned to a map location. This is the
            content kind rendered in the recent notes box.
        TRUSTROOTS_PROFILE: Kind 10390 -- profile carrying a Trustroots
            username label for its author. Consumed as side-channel metadata,
            never rendered.
    """

    MAP_NOTE = 30_397
    TRUSTROOTS_PROFILE = 10_390


class TagName(StrEnum):
    """Tag names (``tag[0]``) interpreted by the tag rules in [recentnotes.nips][]."""

    EXPIRATION = "expiration"
    LABEL = "l"


class LabelNamespace(StrEnum):
    """NIP-32 label namespaces (``tag[2]`` of an ``l`` tag)."""

    OPEN_LOCATION_CODE = "open-location-code"
    TRUSTROOTS_USERNAME = "org.trustroots:username"


EVENT_KIND_MAX = 65_535
