"""Nostr relay client operations built on ``nostr_sdk``.

Provides the opaque "connect / stream / tear down" capability consumed by
[SourceSession][recentnotes.services.aggregator.session.SourceSession]:

* [create_client()][recentnotes.utils.protocol.create_client] builds an
  unsigned ``nostr_sdk.Client``.
* [connect_relay()][recentnotes.utils.protocol.connect_relay] adds one relay
  to a fresh client and waits for the WebSocket handshake.
* ``Client.stream_events()`` sends the ``REQ``; the returned stream yields
  stored events and ends when the relay sends ``EOSE`` or ``CLOSED``.
* ``Client.unsubscribe_all()`` and ``Client.shutdown()`` send ``CLOSE`` and
  drop the socket.

The session layer depends only on the
[RelayClient][recentnotes.utils.protocol.RelayClient] and
[EventStream][recentnotes.utils.protocol.EventStream] protocols, so tests
can inject scripted relays through a
[Connector][recentnotes.utils.protocol.Connector].

Examples:
    ```python
    client = await connect_relay(Relay("wss://relay.trustroots.org"), timeout=5.0)
    stream = await client.stream_events(
        RecordFilter(kinds=(30397,), limit=10).to_nostr_filter(),
        timeout=timedelta(seconds=5),
    )
    while (event := await stream.next()) is not None:
        print(event.id().to_hex())
    await client.shutdown()
    ```
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Final, Protocol

from nostr_sdk import Client, ClientBuilder, RelayUrl

from recentnotes.core.exceptions import ConnectivityError


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from nostr_sdk import Event as NostrEvent
    from nostr_sdk import Filter

    from recentnotes.models import Relay


DEFAULT_TIMEOUT: Final[float] = 10.0

logger = logging.getLogger(__name__)


class EventStream(Protocol):
    """Events of one subscription; ``next()`` returns ``None`` at end of stream."""

    async def next(self) -> NostrEvent | None: ...


class RelayClient(Protocol):
    """The subset of ``nostr_sdk.Client`` a session uses."""

    async def stream_events(self, f: Filter, timeout: timedelta) -> EventStream: ...

    async def unsubscribe_all(self) -> None: ...

    async def shutdown(self) -> None: ...


if TYPE_CHECKING:
    Connector = Callable[[Relay], Awaitable[RelayClient]]


async def create_client() -> Client:
    """Create an unsigned ``nostr_sdk.Client``.

    Returns:
        Configured ``Client`` instance (call ``add_relay()`` before use).
    """
    return ClientBuilder().build()


async def connect_relay(
    relay: Relay,
    *,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
) -> Client:
    """Connect a fresh client to *relay*.

    Args:
        relay: [Relay][recentnotes.models.relay.Relay] to connect to.
        timeout: Handshake timeout in seconds.

    Returns:
        Connected ``Client`` with *relay* as its only relay.

    Raises:
        ConnectivityError: If the handshake fails or times out. The
            client is disconnected before raising.
    """
    relay_url = RelayUrl.parse(relay.url)
    logger.debug("connecting relay=%s timeout_s=%s", relay.url, timeout)

    client = await create_client()
    await client.add_relay(relay_url)
    output = await client.try_connect(timedelta(seconds=timeout))

    if relay_url in output.success:
        logger.debug("connected relay=%s", relay.url)
        return client

    await client.disconnect()
    error_message = output.failed.get(relay_url, "Unknown error")
    logger.debug("connect_failed relay=%s error=%s", relay.url, error_message)
    raise ConnectivityError(f"Connection failed: {relay.url} ({error_message})")
