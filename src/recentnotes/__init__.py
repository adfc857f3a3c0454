r"""recentnotes -- Recent notes box for Nostr relays.

Fetches the most recent map notes from a few relays at once, waits until
every relay has finished or timed out, and shows the newest ones.

Dependencies flow strictly downward:

```text
              services         Aggregation and per-relay sessions
             /   |   \
          core  nips  utils    Logging, config, tag rules, relay client
             \   |   /
              models           Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Pure frozen dataclasses. Zero I/O.
    core: Exceptions, structured logging, YAML loading.
    nips: NIP-32 labels and NIP-40 expiration.
    utils: Relay client and text presentation.
    services: The aggregator and its per-relay sessions.

Note:
    Top-level imports (``from recentnotes import Aggregator``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("recentnotes")

__all__ = [
    "AggregationResult",
    "Aggregator",
    "AggregatorConfig",
    "Logger",
    "Record",
    "RecordFilter",
    "Relay",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Logger": ("recentnotes.core", "Logger"),
    "Record": ("recentnotes.models", "Record"),
    "RecordFilter": ("recentnotes.models", "RecordFilter"),
    "Relay": ("recentnotes.models", "Relay"),
    "AggregationResult": ("recentnotes.services", "AggregationResult"),
    "Aggregator": ("recentnotes.services", "Aggregator"),
    "AggregatorConfig": ("recentnotes.services", "AggregatorConfig"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'recentnotes' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
