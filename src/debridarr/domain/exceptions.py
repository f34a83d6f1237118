"""Domain exceptions.

Adapters translate library errors (httpx, JSON decoding, ...) into these
so the application layer only ever handles domain types.
"""

from __future__ import annotations


class DebridarrError(Exception):
    """Base class for all debridarr errors."""


class SourceUnavailableError(DebridarrError):
    """A torrent source failed (network, HTTP status or markup change)."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class DebridProviderError(DebridarrError):
    """The debrid provider call failed."""


class DebridAuthError(DebridProviderError):
    """The debrid provider rejected the credential (HTTP 401/403)."""


class MissingCredentialError(DebridarrError):
    """No debrid API key was supplied with the request."""


class ConfigError(DebridarrError):
    """Configuration file has an invalid shape."""
