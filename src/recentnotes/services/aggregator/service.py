"""Recent notes aggregation across a fixed set of relays.

Runs one [SourceSession][recentnotes.services.aggregator.session.SourceSession]
per relay in parallel and funnels every record and completion through a
single ``asyncio.Queue`` consumed by one loop, so the shared
[AggregationState][recentnotes.services.aggregator.service.AggregationState]
has exactly one writer. Once every relay has finished (by ``EOSE``,
``CLOSED``, timeout, or failure) the state is sealed and
[select_recent()][recentnotes.services.aggregator.selector.select_recent]
runs once to produce the final
[AggregationResult][recentnotes.services.aggregator.service.AggregationResult].

Records are merged as they arrive:

* content records are deduplicated by id, first occurrence wins;
* identity records update ``identity_by_author`` (last write wins) and
  never appear in the notes;
* records of any other kind are ignored.

See Also:
    [AggregatorConfig][recentnotes.services.aggregator.configs.AggregatorConfig]:
        Configuration model for this service.
    [render_notes()][recentnotes.utils.display.render_notes]: Turns the
        result into display text.

Examples:
    ```python
    from recentnotes.services.aggregator import Aggregator

    aggregator = Aggregator.from_yaml("config/recentnotes.yaml")
    result = await aggregator.run()
    for note in result.notes:
        print(note.created_at, note.content)
    ```
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

import yaml
from pydantic import ValidationError

from recentnotes.core.exceptions import ConfigurationError
from recentnotes.core.logger import Logger
from recentnotes.core.yaml import load_yaml
from recentnotes.nips import get_identity_label, is_expired

from .configs import AggregatorConfig
from .selector import select_recent
from .session import SessionOutcome, SessionReport, SourceSession


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from recentnotes.models import Record, RecordFilter, Relay
    from recentnotes.utils.protocol import Connector


@dataclass(slots=True)
class AggregationState:
    """Mutable merge state owned by the aggregation consumer loop.

    ``done`` flips to ``True`` exactly once, when ``completed_sources``
    reaches ``total_sources``; after that no method mutates the state.
    With zero sources the state starts done.
    """

    total_sources: int
    content_kind: int
    identity_label_kind: int
    identity_namespace: str
    records_by_id: dict[str, Record] = field(default_factory=dict)
    identity_by_author: dict[str, str] = field(default_factory=dict)
    completed_sources: int = 0
    done: bool = False
    received: int = 0
    duplicates: int = 0
    ignored: int = 0

    def __post_init__(self) -> None:
        if self.total_sources < 0:
            raise ValueError(f"total_sources must be >= 0, got {self.total_sources}")
        if self.total_sources == 0:
            self.done = True

    def add_record(self, record: Record) -> None:
        """Merge one record. No-op once done."""
        if self.done:
            return
        self.received += 1
        if record.kind == self.identity_label_kind:
            name = get_identity_label(record, self.identity_namespace)
            if name:
                self.identity_by_author[record.pubkey] = name
            return
        if record.kind != self.content_kind:
            self.ignored += 1
            return
        if record.id in self.records_by_id:
            self.duplicates += 1
            return
        self.records_by_id[record.id] = record

    def mark_source_done(self) -> bool:
        """Count one finished source.

        Returns:
            ``True`` only for the call that completes the last source.
        """
        if self.done:
            return False
        self.completed_sources += 1
        if self.completed_sources >= self.total_sources:
            self.done = True
            return True
        return False


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Final, immutable outcome of one aggregation.

    Attributes:
        notes: Selected content records, oldest first.
        identities: Author pubkey to display name, from identity records.
        reports: One [SessionReport][recentnotes.services.aggregator.session.SessionReport]
            per relay, in relay order.
        received: Records accepted from all relays, duplicates included.
        duplicates: Content records dropped because the id was already seen.
        expired: Unique content records excluded as expired.
    """

    notes: tuple[Record, ...] = ()
    identities: dict[str, str] = field(default_factory=dict)
    reports: tuple[SessionReport, ...] = ()
    received: int = 0
    duplicates: int = 0
    expired: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary."""
        return {
            "notes": [note.to_dict() for note in self.notes],
            "identities": dict(self.identities),
            "relays": [
                {
                    "url": report.relay.url,
                    "outcome": str(report.outcome),
                    "records": report.records,
                    "rejected": report.rejected,
                    "elapsed": round(report.elapsed, 3),
                }
                for report in self.reports
            ],
            "received": self.received,
            "duplicates": self.duplicates,
            "expired": self.expired,
        }


class Aggregator:
    """Collect and select the most recent notes from every configured relay.

    Args:
        config: Aggregation settings. Defaults to
            [AggregatorConfig()][recentnotes.services.aggregator.configs.AggregatorConfig].
        connect: Optional connector used by every session instead of
            [connect_relay()][recentnotes.utils.protocol.connect_relay].
    """

    SERVICE_NAME: ClassVar[str] = "aggregator"
    CONFIG_CLASS: ClassVar[type[AggregatorConfig]] = AggregatorConfig

    def __init__(
        self,
        config: AggregatorConfig | None = None,
        *,
        connect: Connector | None = None,
    ) -> None:
        self._config = config or AggregatorConfig()
        self._connect = connect
        self._logger = Logger(self.SERVICE_NAME)

    @property
    def config(self) -> AggregatorConfig:
        """The validated configuration (read-only)."""
        return self._config

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> Aggregator:
        """Create an aggregator from a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing, unparsable, or invalid.
        """
        try:
            data = load_yaml(config_path)
        except (OSError, TypeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load {config_path}: {e}") from e
        return cls.from_dict(data, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> Aggregator:
        """Create an aggregator from a configuration dictionary.

        Raises:
            ConfigurationError: If *data* fails validation.
        """
        try:
            config = cls.CONFIG_CLASS(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
        return cls(config=config, **kwargs)

    async def run(self) -> AggregationResult:
        """Aggregate from the configured relays with the configured filter."""
        return await self.aggregate(
            self._config.get_relays(),
            self._config.filter.to_record_filter(),
        )

    async def aggregate(
        self,
        relays: Sequence[Relay],
        record_filter: RecordFilter,
    ) -> AggregationResult:
        """Query *relays* in parallel and resolve once all of them finished.

        Never raises for relay failures: a relay that cannot be reached,
        times out, or closes early simply contributes what it sent.

        Args:
            relays: Relays to query; ``[]`` resolves immediately and empty.
            record_filter: Filter sent to every relay.
        """
        started_at = time.monotonic()
        state = AggregationState(
            total_sources=len(relays),
            content_kind=self._config.filter.content_kind,
            identity_label_kind=self._config.filter.identity_label_kind,
            identity_namespace=self._config.labels.identity_namespace,
        )
        reports: list[SessionReport] = []
        self._logger.info("aggregation_started", relays=len(relays), timeout=self._config.timeout)

        if not state.done:
            queue: asyncio.Queue[Record | SessionReport] = asyncio.Queue()
            async with asyncio.TaskGroup() as tg:
                for relay in relays:
                    session = SourceSession(
                        relay,
                        record_filter,
                        timeout=self._config.timeout,
                        connect=self._connect,
                        verify_signatures=self._config.verify_signatures,
                    )
                    tg.create_task(
                        session.run(on_record=queue.put_nowait, on_done=queue.put_nowait),
                        name=f"session {relay.url}",
                    )
                await self._consume(queue, state, reports)

        now = int(time.time())
        expired_at_now = functools.partial(is_expired, now=now)
        notes = select_recent(state.records_by_id, self._config.show_count, expired_at_now)
        expired = sum(1 for record in state.records_by_id.values() if expired_at_now(record))

        order: dict[str, int] = {}
        for index, relay in enumerate(relays):
            order.setdefault(relay.url, index)
        reports.sort(key=lambda report: order.get(report.relay.url, len(order)))

        result = AggregationResult(
            notes=tuple(notes),
            identities=dict(state.identity_by_author),
            reports=tuple(reports),
            received=state.received,
            duplicates=state.duplicates,
            expired=expired,
        )
        self._log_completed(result, time.monotonic() - started_at)
        return result

    @staticmethod
    async def _consume(
        queue: asyncio.Queue[Record | SessionReport],
        state: AggregationState,
        reports: list[SessionReport],
    ) -> None:
        while not state.done:
            message = await queue.get()
            if isinstance(message, SessionReport):
                reports.append(message)
                state.mark_source_done()
            else:
                state.add_record(message)

    def _log_completed(self, result: AggregationResult, elapsed: float) -> None:
        outcomes = [report.outcome for report in result.reports]
        self._logger.info(
            "aggregation_completed",
            relays=len(outcomes),
            reached_end=sum(1 for report in result.reports if report.reached_end),
            timeouts=outcomes.count(SessionOutcome.TIMEOUT),
            failed=outcomes.count(SessionOutcome.CONNECT_FAILED)
            + outcomes.count(SessionOutcome.SUBSCRIBE_FAILED),
            received=result.received,
            duplicates=result.duplicates,
            expired=result.expired,
            notes=len(result.notes),
            elapsed=f"{elapsed:.3f}",
        )
