"""
Relay addresses queried by an aggregation.

A [Relay][recentnotes.models.relay.Relay] is built from a configured URL
string. The URL is parsed with ``rfc3986``, reduced to a canonical form so
the same relay written two ways compares equal, and classified by network.
Only public clearnet relays are accepted: loopback, private ranges and bare
hostnames can never be reached from a public client, and overlay hosts
(Tor, I2P, Lokinet) would need a SOCKS proxy the client does not set up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import ip_address, ip_network
from typing import NamedTuple

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from .constants import NetworkType


_OVERLAY_SUFFIXES = (".onion", ".i2p", ".loki")

# IANA special-purpose ranges
_NON_PUBLIC_NETWORKS = tuple(
    ip_network(cidr)
    for cidr in (
        "0.0.0.0/8",
        "10.0.0.0/8",
        "100.64.0.0/10",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "224.0.0.0/4",
        "240.0.0.0/4",
        "::/128",
        "::1/128",
        "fc00::/7",
        "fe80::/10",
        "ff00::/8",
    )
)

_DEFAULT_WSS_PORT = 443

_VALIDATOR = (
    Validator()
    .require_presence_of("scheme", "host")
    .allow_schemes("ws", "wss")
    .check_validity_of("scheme", "host", "port", "path")
)


def classify_host(host: str) -> NetworkType:
    """Return the network a relay host belongs to.

    Overlay suffixes win over everything else; IP literals are ``LOCAL``
    when they fall in a non-public range; DNS names need at least one dot
    and well-formed labels.
    """
    name = host.lower().strip("[]")
    if not name:
        return NetworkType.UNKNOWN
    if name.endswith(_OVERLAY_SUFFIXES):
        return NetworkType.OVERLAY
    if name in ("localhost", "localhost.localdomain"):
        return NetworkType.LOCAL
    try:
        address = ip_address(name)
    except ValueError:
        labels = name.split(".")
        if len(labels) < 2 or any(not lb or lb[0] == "-" or lb[-1] == "-" for lb in labels):
            return NetworkType.UNKNOWN
        return NetworkType.CLEARNET
    if any(address in net for net in _NON_PUBLIC_NETWORKS):
        return NetworkType.LOCAL
    return NetworkType.CLEARNET


class _Parts(NamedTuple):
    url: str
    network: NetworkType
    host: str
    port: int | None
    path: str | None


def _split(raw: str) -> _Parts:
    uri = uri_reference(raw.strip()).normalize()
    try:
        _VALIDATOR.validate(uri)
    except UnpermittedComponentError:
        raise ValueError("Invalid scheme: must be ws or wss") from None
    except ValidationError as e:
        raise ValueError(f"Invalid URL: {e}") from None
    if uri.query:
        raise ValueError(f"Relay URL must not contain a query string: ?{uri.query}")
    if uri.fragment:
        raise ValueError(f"Relay URL must not contain a fragment: #{uri.fragment}")

    host = uri.host.strip("[]")
    port = int(uri.port) if uri.port else None

    segments = [segment for segment in (uri.path or "").split("/") if segment]
    path = "/" + "/".join(segments) if segments else None

    # TLS is mandatory, whatever scheme was configured
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_WSS_PORT:
        netloc = f"{netloc}:{port}"
    return _Parts(f"wss://{netloc}{path or ''}", classify_host(host), host, port, path)


@dataclass(frozen=True, slots=True)
class Relay:
    """One source of an aggregation.

    Two relays are equal when built from the same string; compare
    ``url`` to compare canonical addresses.

    Attributes:
        url: Canonical URL: always ``wss://``, default port and trailing
            slashes dropped.
        host: Hostname or IP address, without IPv6 brackets.
        port: Port given in the URL, or ``None``.
        path: Path without trailing slash, or ``None``.

    Raises:
        TypeError: If *raw_url* is not a string.
        ValueError: If the URL is malformed, not ``ws``/``wss``, carries a
            query or fragment, or points at a host that is not public
            clearnet (local, overlay or unclassifiable).

    Examples:
        ```python
        Relay("ws://relay.nomadwiki.org/").url   # 'wss://relay.nomadwiki.org'
        Relay("wss://relay.trustroots.org:443").url   # 'wss://relay.trustroots.org'
        ```
    """

    raw_url: str = field(repr=False)

    url: str = field(init=False)
    host: str = field(init=False)
    port: int | None = field(init=False)
    path: str | None = field(init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.raw_url, str):
            raise TypeError(f"raw_url must be a str, got {type(self.raw_url).__name__}")
        if "\x00" in self.raw_url:
            raise ValueError("Relay URL contains null bytes")

        parts = _split(self.raw_url)
        if parts.network == NetworkType.LOCAL:
            raise ValueError(f"Local addresses not allowed: {parts.host}")
        if parts.network == NetworkType.OVERLAY:
            raise ValueError(f"Overlay relays need a proxy and are not supported: {parts.host}")
        if parts.network == NetworkType.UNKNOWN:
            raise ValueError(f"Invalid host: '{parts.host}'")

        object.__setattr__(self, "url", parts.url)
        object.__setattr__(self, "host", parts.host)
        object.__setattr__(self, "port", parts.port)
        object.__setattr__(self, "path", parts.path)
