"""Debrid provider port - instant availability lookups."""

from __future__ import annotations

from typing import Protocol

from debridarr.domain.entities import AvailabilityInfo


class DebridProviderPort(Protocol):
    async def check_availability(
        self, info_hash: str, credential: str
    ) -> AvailabilityInfo:
        """Return the cache status of *info_hash* for the given account.

        Raises:
            DebridProviderError: call failed (network, HTTP, bad payload).
            DebridAuthError: credential rejected.
        """
        ...
