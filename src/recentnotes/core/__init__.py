"""Core layer: structured logging, exceptions and YAML configuration loading.

Depends only on the standard library and third-party packages; imported by
[recentnotes.services][recentnotes.services] and the CLI.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][recentnotes.core.logger.Logger].
    StructuredFormatter: Root handler formatter used by the CLI.
    load_yaml: Safe YAML loading. See [load_yaml()][recentnotes.core.yaml.load_yaml].
"""

from .exceptions import ConfigurationError, ConnectivityError, RecentNotesError
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "Logger",
    "RecentNotesError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
]
