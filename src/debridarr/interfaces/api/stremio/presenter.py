"""Render domain streams as Stremio addon JSON."""

from __future__ import annotations

from typing import Any

from debridarr.domain.entities import Stream

ADDON_ID = "community.debridarr"
ADDON_VERSION = "0.1.0"

MISSING_KEY_NOTICE: dict[str, Any] = {
    "name": "⚠️ Real-Debrid API key required",
    "title": "Real-Debrid API key required",
    "description": "Configure the addon and add your Real-Debrid API key",
    "notFound": True,
}


def build_manifest(*, configured: bool) -> dict[str, Any]:
    """Stremio manifest. ``configured`` reflects a key in the install URL."""
    return {
        "id": ADDON_ID,
        "version": ADDON_VERSION,
        "name": "Debridarr",
        "description": (
            "Torrent streams from Jackett and Russian trackers, "
            "played through Real-Debrid's instant cache"
        ),
        "resources": ["stream"],
        "types": ["movie", "series"],
        "catalogs": [],
        "idPrefixes": ["tt"],
        "behaviorHints": {
            "configurable": True,
            "configurationRequired": not configured,
        },
        "config": [
            {
                "key": "rdApiKey",
                "type": "text",
                "title": "Real-Debrid API key",
                "required": True,
            }
        ],
    }


def present_stream(stream: Stream) -> dict[str, Any]:
    """Convert one domain Stream into the Stremio stream object."""
    payload: dict[str, Any] = {
        "name": stream.name,
        "title": stream.title,
        "infoHash": stream.info_hash.lower(),
        "description": stream.description,
        "sources": [f"dht:{stream.info_hash.lower()}"],
        "behaviorHints": {
            "bingeGroup": f"realdebrid-{stream.info_hash}",
            "notWebReady": True,
        },
    }
    if stream.file_idx is not None:
        payload["fileIdx"] = stream.file_idx
    return payload
