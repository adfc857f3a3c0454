"""Aggregator configuration models.

Examples:
    ```yaml
    relays:
      - wss://relay.trustroots.org
      - wss://relay.nomadwiki.org
    filter:
      content_kind: 30397
      identity_label_kind: 10390
      limit: 200
    show_count: 7
    timeout: 8.0
    ```

See Also:
    [Aggregator][recentnotes.services.aggregator.service.Aggregator]: The
        class that consumes these configurations.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from recentnotes.models import EVENT_KIND_MAX, EventKind, LabelNamespace, RecordFilter, Relay


DEFAULT_RELAYS: tuple[str, ...] = (
    "wss://relay.trustroots.org",
    "wss://relay.nomadwiki.org",
)


class FilterConfig(BaseModel):
    """Kinds and limit requested from every relay.

    See Also:
        [RecordFilter][recentnotes.models.filter.RecordFilter]: The model
            built by [to_record_filter()][recentnotes.services.aggregator.configs.FilterConfig.to_record_filter].
    """

    content_kind: int = Field(
        default=EventKind.MAP_NOTE,
        ge=0,
        le=EVENT_KIND_MAX,
        description="Kind of the notes to show",
    )
    identity_label_kind: int = Field(
        default=EventKind.TRUSTROOTS_PROFILE,
        ge=0,
        le=EVENT_KIND_MAX,
        description="Kind of the records mapping authors to display names",
    )
    limit: int = Field(default=200, ge=1, le=5000, description="Per-relay REQ limit")

    @model_validator(mode="after")
    def _kinds_differ(self) -> FilterConfig:
        if self.content_kind == self.identity_label_kind:
            raise ValueError("content_kind and identity_label_kind must differ")
        return self

    def to_record_filter(self) -> RecordFilter:
        """Build the filter sent in each ``REQ``."""
        return RecordFilter(kinds=(self.content_kind, self.identity_label_kind), limit=self.limit)


class LabelsConfig(BaseModel):
    """NIP-32 label namespaces read from record tags."""

    identity_namespace: str = Field(
        default=LabelNamespace.TRUSTROOTS_USERNAME,
        min_length=1,
        description="Namespace of the display-name label on identity records",
    )
    location_namespace: str = Field(
        default=LabelNamespace.OPEN_LOCATION_CODE,
        min_length=1,
        description="Namespace of the location label on notes",
    )


class AggregatorConfig(BaseModel):
    """Recent notes aggregation configuration.

    ``relays`` are validated and normalized with
    [Relay][recentnotes.models.relay.Relay]; duplicates after normalization
    are dropped, keeping the first occurrence.
    """

    relays: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELAYS),
        description="Relay URLs queried in parallel",
    )
    filter: FilterConfig = Field(default_factory=FilterConfig)
    labels: LabelsConfig = Field(default_factory=LabelsConfig)
    show_count: int = Field(default=7, ge=1, le=500, description="Number of notes to show")
    timeout: float = Field(
        default=8.0,
        gt=0.0,
        le=300.0,
        description="Per-relay deadline in seconds, measured from session start",
    )
    verify_signatures: bool = Field(
        default=True,
        description="Drop events whose id or signature does not verify",
    )

    @field_validator("relays")
    @classmethod
    def _normalize_relays(cls, value: list[str]) -> list[str]:
        urls: list[str] = []
        for raw in value:
            url = Relay(raw).url
            if url not in urls:
                urls.append(url)
        return urls

    def get_relays(self) -> list[Relay]:
        """Return the configured relays as [Relay][recentnotes.models.relay.Relay] objects."""
        return [Relay(url) for url in self.relays]
