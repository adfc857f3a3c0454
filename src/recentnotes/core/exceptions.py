"""recentnotes exception hierarchy.

Exception hierarchy:

```text
RecentNotesError (base -- never raised directly)
├── ConfigurationError      -- config validation, missing keys, bad YAML
└── ConnectivityError       -- relay unreachable or handshake rejected
```

None of these ever escape an aggregation: per-relay failures are recorded
in a [SessionReport][recentnotes.services.aggregator.session.SessionReport]
and the aggregation still resolves. Only the CLI surfaces
[ConfigurationError][recentnotes.core.exceptions.ConfigurationError] to the
user.
"""

from __future__ import annotations


class RecentNotesError(Exception):
    """Base exception for all recentnotes errors. Never raised directly."""


class ConfigurationError(RecentNotesError):
    """Invalid or missing configuration (YAML file, CLI flags).

    See Also:
        [Aggregator.from_dict()][recentnotes.services.aggregator.service.Aggregator.from_dict]:
            Wraps Pydantic validation errors in this exception.
    """


class ConnectivityError(RecentNotesError):
    """Relay unreachable, handshake rejected, or handshake timed out.

    See Also:
        [connect_relay()][recentnotes.utils.protocol.connect_relay]: Raises
            this when ``nostr_sdk`` reports the relay as failed.
    """
