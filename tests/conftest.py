"""
Pytest configuration and shared fixtures for recentnotes tests.

Provides:
- Signed ``nostr_sdk.Event`` factories (events as a relay would stream them)
- Record factories wrapping those events
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import pytest
from nostr_sdk import Event as NostrEvent
from nostr_sdk import EventBuilder, Keys, Kind, Tag, Timestamp

from recentnotes.models import EventKind, LabelNamespace, Record


KEYS_A = Keys.parse("11" * 32)
KEYS_B = Keys.parse("22" * 32)
KEYS_C = Keys.parse("33" * 32)


def pubkey_of(keys: Keys) -> str:
    """Return the hex public key of *keys*."""
    return keys.public_key().to_hex()


def signed_event(
    n: int,
    created_at: int = 1_700_000_000,
    *,
    kind: int = EventKind.MAP_NOTE,
    keys: Keys = KEYS_A,
    content: str = "",
    tags: list[list[str]] | None = None,
) -> NostrEvent:
    """Build a signed event; the same arguments always give the same id."""
    builder = (
        EventBuilder(Kind(kind), content or f"note {n}")
        .tags([Tag.parse(tag) for tag in tags or []])
        .custom_created_at(Timestamp.from_secs(created_at))
    )
    return builder.sign_with_keys(keys)


def tampered_event(event: NostrEvent, **changes: Any) -> NostrEvent:
    """Return a copy of *event* with fields changed after signing."""
    data = {**json.loads(event.as_json()), **changes}
    return NostrEvent.from_json(json.dumps(data))


def identity_event(n: int, keys: Keys, username: str) -> NostrEvent:
    """Build an identity-label event assigning *username* to the author of *keys*."""
    return signed_event(
        n,
        kind=EventKind.TRUSTROOTS_PROFILE,
        keys=keys,
        content="{}",
        tags=[
            ["L", LabelNamespace.TRUSTROOTS_USERNAME],
            ["l", username, LabelNamespace.TRUSTROOTS_USERNAME],
        ],
    )


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture
def make_event() -> Callable[..., NostrEvent]:
    """Factory for signed relay events."""
    return signed_event


@pytest.fixture
def make_identity_event() -> Callable[..., NostrEvent]:
    """Factory for signed identity-label events."""
    return identity_event


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Factory for records wrapping signed events."""

    def _make(n: int, created_at: int = 1_700_000_000, **kwargs: Any) -> Record:
        return Record(signed_event(n, created_at, **kwargs))

    return _make
