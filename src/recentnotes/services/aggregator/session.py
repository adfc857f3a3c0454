"""Single-use per-relay collection session.

A [SourceSession][recentnotes.services.aggregator.session.SourceSession]
connects to one relay, opens one ``nostr_sdk`` event stream, forwards every
accepted record to its consumer, and finishes when the first of these
happens:

* the stream ends because the relay sent ``EOSE`` or ``CLOSED``;
* the stream breaks off (socket dropped, SDK error);
* the deadline expires (measured from session start, connect included);
* connect or subscribe fails.

Whatever the path, the subscription and the client are torn down and
``on_done`` is called exactly once with a
[SessionReport][recentnotes.services.aggregator.session.SessionReport].
Nothing is pulled from the stream after end-of-stream or the deadline.

See Also:
    [Aggregator][recentnotes.services.aggregator.service.Aggregator]: Runs
        one session per configured relay and joins their results.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from nostr_sdk import NostrSdkError

from recentnotes.core.logger import Logger
from recentnotes.models import Record
from recentnotes.utils.protocol import connect_relay


if TYPE_CHECKING:
    from collections.abc import Callable

    from nostr_sdk import Event as NostrEvent

    from recentnotes.models import RecordFilter, Relay
    from recentnotes.utils.protocol import Connector, RelayClient


DEFAULT_SESSION_TIMEOUT: Final[float] = 8.0
_TEARDOWN_TIMEOUT: Final[float] = 5.0

_logger = Logger("session")


class SessionOutcome(StrEnum):
    """How a [SourceSession][recentnotes.services.aggregator.session.SourceSession] ended.

    ``EOSE`` covers both ``EOSE`` and ``CLOSED`` from the relay: the
    ``nostr_sdk`` stream ends the same way for either. ``CLOSED`` means the
    stream broke off with an error before the relay finished it.
    """

    EOSE = "eose"
    CLOSED = "closed"
    TIMEOUT = "timeout"
    CONNECT_FAILED = "connect_failed"
    SUBSCRIBE_FAILED = "subscribe_failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class SessionReport:
    """Summary of one finished session.

    Attributes:
        relay: The relay the session talked to.
        outcome: Why the session ended.
        records: Records forwarded to the consumer.
        rejected: Events dropped for a bad id or signature.
        elapsed: Wall-clock seconds from start to completion.
    """

    relay: Relay
    outcome: SessionOutcome
    records: int = 0
    rejected: int = 0
    elapsed: float = 0.0

    @property
    def reached_end(self) -> bool:
        """Whether the stream finished before the deadline, cleanly or not."""
        return self.outcome in (SessionOutcome.EOSE, SessionOutcome.CLOSED)


class SourceSession:
    """Collect stored records from one relay, then tear down.

    Args:
        relay: Relay to query.
        record_filter: Filter sent in the ``REQ``.
        timeout: Deadline in seconds from the start of
            [run()][recentnotes.services.aggregator.session.SourceSession.run].
            Incoming events never extend it.
        connect: Coroutine function returning a connected
            [RelayClient][recentnotes.utils.protocol.RelayClient]. Defaults to
            [connect_relay()][recentnotes.utils.protocol.connect_relay].
        verify_signatures: Drop events whose id or signature fails
            [Record.verify()][recentnotes.models.record.Record.verify].

    Examples:
        ```python
        session = SourceSession(Relay("wss://relay.trustroots.org"), record_filter)
        report = await session.run(on_record=records.append, on_done=print)
        ```
    """

    def __init__(
        self,
        relay: Relay,
        record_filter: RecordFilter,
        *,
        timeout: float = DEFAULT_SESSION_TIMEOUT,
        connect: Connector | None = None,
        verify_signatures: bool = True,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.relay = relay
        self._filter = record_filter
        self._timeout = timeout
        self._connect: Connector = connect or self._connect_relay
        self._verify = verify_signatures

        self._client: RelayClient | None = None
        self._subscribed = False
        self._started = False
        self._terminated = False
        self._reported = False
        self._records = 0
        self._rejected = 0

    @property
    def terminated(self) -> bool:
        """Whether the session has stopped accepting records."""
        return self._terminated

    async def run(
        self,
        on_record: Callable[[Record], None],
        on_done: Callable[[SessionReport], None],
    ) -> SessionReport:
        """Run the session to completion.

        Never raises for relay-side failures: they are reported through the
        returned (and ``on_done``-delivered) report.

        Args:
            on_record: Called synchronously with each accepted record.
            on_done: Called exactly once when the session finishes.

        Returns:
            The same report passed to ``on_done``.

        Raises:
            RuntimeError: If the session was already started.
        """
        if self._started:
            raise RuntimeError(f"session for {self.relay.url} already started")
        self._started = True

        started_at = time.monotonic()
        outcome = SessionOutcome.TIMEOUT
        _logger.debug("session_started", relay=self.relay.url, timeout=self._timeout)
        try:
            async with asyncio.timeout(self._timeout):
                outcome = await self._collect(on_record)
        except TimeoutError:
            outcome = SessionOutcome.TIMEOUT
        except asyncio.CancelledError:
            outcome = SessionOutcome.CANCELLED
            raise
        finally:
            self._terminated = True
            await self._teardown()
            report = SessionReport(
                relay=self.relay,
                outcome=outcome,
                records=self._records,
                rejected=self._rejected,
                elapsed=time.monotonic() - started_at,
            )
            _logger.debug(
                "session_finished",
                relay=self.relay.url,
                outcome=outcome,
                records=self._records,
                rejected=self._rejected,
                elapsed=f"{report.elapsed:.3f}",
            )
            self._report_once(on_done, report)
        return report

    async def _connect_relay(self, relay: Relay) -> RelayClient:
        return await connect_relay(relay, timeout=self._timeout)

    async def _collect(self, on_record: Callable[[Record], None]) -> SessionOutcome:
        try:
            self._client = await self._connect(self.relay)
        except Exception as e:  # Intentionally broad: a failed relay completes with no records
            _logger.warning(
                "session_connect_failed",
                relay=self.relay.url,
                error=str(e) or type(e).__name__,
            )
            return SessionOutcome.CONNECT_FAILED

        # The SDK timeout outlives the session deadline, so a stream that
        # ends on its own always means the relay finished it.
        try:
            stream = await self._client.stream_events(
                self._filter.to_nostr_filter(),
                timeout=timedelta(seconds=self._timeout + _TEARDOWN_TIMEOUT),
            )
        except Exception as e:  # Intentionally broad: a failed relay completes with no records
            _logger.warning(
                "session_subscribe_failed",
                relay=self.relay.url,
                error=str(e) or type(e).__name__,
            )
            return SessionOutcome.SUBSCRIBE_FAILED
        self._subscribed = True

        try:
            while (event := await stream.next()) is not None:
                self._handle_event(on_record, event)
        except (OSError, NostrSdkError) as e:
            _logger.debug("stream_closed", relay=self.relay.url, error=str(e) or type(e).__name__)
            return SessionOutcome.CLOSED
        return SessionOutcome.EOSE

    async def _teardown(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return

        if self._subscribed:
            try:
                await asyncio.wait_for(client.unsubscribe_all(), timeout=_TEARDOWN_TIMEOUT)
            except Exception as e:  # Intentionally broad: teardown never affects completion
                _logger.debug(
                    "session_teardown_failed",
                    relay=self.relay.url,
                    step="unsubscribe",
                    error=str(e) or type(e).__name__,
                )
        try:
            await asyncio.wait_for(client.shutdown(), timeout=_TEARDOWN_TIMEOUT)
        except Exception as e:  # Intentionally broad: teardown never affects completion
            _logger.debug(
                "session_teardown_failed",
                relay=self.relay.url,
                step="shutdown",
                error=str(e) or type(e).__name__,
            )

    def _report_once(self, on_done: Callable[[SessionReport], None], report: SessionReport) -> None:
        if self._reported:
            return
        self._reported = True
        on_done(report)

    def _handle_event(self, on_record: Callable[[Record], None], event: NostrEvent) -> None:
        record = Record(event)
        if self._verify and not record.verify():
            self._rejected += 1
            _logger.debug(
                "record_rejected", relay=self.relay.url, id=record.id, reason="invalid signature"
            )
            return
        self._records += 1
        on_record(record)
