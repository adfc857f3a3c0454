"""Shared fixtures and fakes for services.aggregator test package."""

import asyncio
from collections.abc import Sequence
from datetime import timedelta

import pytest
from nostr_sdk import Event as NostrEvent
from nostr_sdk import Filter

from recentnotes.models import Relay


class FakeStream:
    """Event stream handed out by ``FakeRelay.stream_events``.

    Yields the relay's events (each after ``interval`` seconds), then ends
    according to ``end``: ``"eose"`` returns ``None``, ``"error"`` raises
    ``OSError``, and ``None`` keeps the stream open forever.
    """

    def __init__(self, relay: "FakeRelay") -> None:
        self._relay = relay
        self._index = 0

    async def next(self) -> NostrEvent | None:
        relay = self._relay
        if self._index < len(relay.events):
            await asyncio.sleep(relay.interval)
            event = relay.events[self._index]
            self._index += 1
            relay.served_at.append(asyncio.get_running_loop().time())
            return event
        if relay.end == "eose":
            return None
        if relay.end == "error":
            raise OSError("connection reset by peer")
        await asyncio.Event().wait()
        return None


class FakeRelay:
    """Scripted in-memory relay standing in for a connected ``nostr_sdk.Client``."""

    def __init__(
        self,
        events: Sequence[NostrEvent] = (),
        *,
        end: str | None = "eose",
        interval: float = 0.0,
        connect_delay: float = 0.0,
        connect_error: Exception | None = None,
        subscribe_error: Exception | None = None,
        unsubscribe_error: Exception | None = None,
        shutdown_error: Exception | None = None,
    ) -> None:
        self.events = list(events)
        self.end = end
        self.interval = interval
        self.connect_delay = connect_delay
        self.connect_error = connect_error
        self.subscribe_error = subscribe_error
        self.unsubscribe_error = unsubscribe_error
        self.shutdown_error = shutdown_error
        self.connect_calls: list[str] = []
        self.filters: list[Filter] = []
        self.stream_timeout: timedelta | None = None
        self.served_at: list[float] = []
        self.unsubscribe_calls = 0
        self.shutdown_calls = 0

    async def connect(self, relay: Relay) -> "FakeRelay":
        self.connect_calls.append(relay.url)
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        return self

    async def stream_events(self, f: Filter, timeout: timedelta) -> FakeStream:
        self.filters.append(f)
        self.stream_timeout = timeout
        if self.subscribe_error is not None:
            raise self.subscribe_error
        return FakeStream(self)

    async def unsubscribe_all(self) -> None:
        self.unsubscribe_calls += 1
        if self.unsubscribe_error is not None:
            raise self.unsubscribe_error

    async def shutdown(self) -> None:
        self.shutdown_calls += 1
        if self.shutdown_error is not None:
            raise self.shutdown_error


class FakeNetwork:
    """Connector routing each relay URL to its FakeRelay."""

    def __init__(self, relays: dict[str, FakeRelay]) -> None:
        self.relays = relays

    async def __call__(self, relay: Relay) -> FakeRelay:
        return await self.relays[relay.url].connect(relay)


@pytest.fixture
def relay() -> Relay:
    """A valid clearnet relay."""
    return Relay("wss://relay.trustroots.org")


@pytest.fixture
def relays() -> list[Relay]:
    """Two valid clearnet relays."""
    return [Relay("wss://relay.trustroots.org"), Relay("wss://relay.nomadwiki.org")]


@pytest.fixture
def fake_relay() -> type[FakeRelay]:
    """The scripted relay class; call it to build one."""
    return FakeRelay


@pytest.fixture
def fake_network() -> type[FakeNetwork]:
    """The connector class routing URLs to scripted relays."""
    return FakeNetwork
