"""Relay client operations and text rendering.

The utils layer depends on [recentnotes.models][recentnotes.models],
[recentnotes.nips][recentnotes.nips] and the exception types of
[recentnotes.core.exceptions][recentnotes.core.exceptions]; it never
imports from [recentnotes.services][recentnotes.services].

Attributes:
    protocol: ``nostr_sdk`` client factory and relay connection, plus the
        ``RelayClient``/``EventStream`` protocols sessions depend on.
    display: Plain-text rendering of notes for the CLI.
"""
