"""Stremio addon API endpoints (manifest, stream).

Install URLs carry the requester's Real-Debrid key in the first path
segment: ``/{config}/manifest.json``. The segment is either base64url
encoded JSON (``{"rdApiKey": "..."}``), URL-encoded JSON, or the raw key.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import cast
from urllib.parse import unquote

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from debridarr.domain.entities import MediaKind, StreamRequest
from debridarr.domain.exceptions import MissingCredentialError
from debridarr.interfaces.api.stremio.presenter import (
    MISSING_KEY_NOTICE,
    build_manifest,
    present_stream,
)
from debridarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

# Raw keys are accepted only when long enough to plausibly be a key.
_RAW_KEY_MIN_LENGTH = 21


def _decode_json_config(raw: str) -> dict | None:
    text = raw.strip()
    if not text.startswith("{"):
        padded = text + "=" * (-len(text) % 4)
        try:
            text = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            return None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def parse_config_segment(segment: str | None) -> str:
    """Extract the Real-Debrid key from the install-URL config segment.

    Raises:
        MissingCredentialError: no usable key in *segment*.
    """
    if not segment:
        raise MissingCredentialError("no config segment")

    raw = unquote(segment).strip()
    data = _decode_json_config(raw)
    if data is not None:
        key = str(data.get("rdApiKey") or "").strip()
        if key:
            return key
        raise MissingCredentialError("config has no rdApiKey")

    if len(raw) >= _RAW_KEY_MIN_LENGTH and not any(c in raw for c in "{}/ "):
        return raw
    raise MissingCredentialError("config segment is not a key")


def _parse_stream_id(
    content_type: str, raw_id: str, credential: str | None
) -> StreamRequest | None:
    """Parse a Stremio stream id.

    Movies: "tt1234567"
    Series: "tt1234567:1:5" (season 1, episode 5)
    """
    if content_type not in ("movie", "series"):
        return None

    kind = cast(MediaKind, content_type)
    parts = raw_id.split(":")
    media_id = parts[0]
    if not media_id.startswith("tt") or not media_id[2:].isdigit():
        return None

    season: int | None = None
    episode: int | None = None
    if kind == "series" and len(parts) == 3:
        try:
            season = int(parts[1])
            episode = int(parts[2])
        except ValueError:
            return None
    elif len(parts) != 1:
        return None

    return StreamRequest(
        kind=kind,
        media_id=media_id,
        season=season,
        episode=episode,
        credential=credential,
    )


@router.get("/manifest.json")
async def manifest() -> JSONResponse:
    """Unconfigured manifest (asks Stremio to open the configure page)."""
    return JSONResponse(build_manifest(configured=False), headers=_CORS_HEADERS)


@router.get("/{config}/manifest.json")
async def configured_manifest(config: str) -> JSONResponse:
    try:
        parse_config_segment(config)
        configured = True
    except MissingCredentialError:
        configured = False
    return JSONResponse(build_manifest(configured=configured), headers=_CORS_HEADERS)


async def _stream_response(
    request: Request,
    content_type: str,
    stream_id: str,
    config: str | None,
) -> JSONResponse:
    state = cast(AppState, request.app.state)

    try:
        credential: str | None = parse_config_segment(config)
    except MissingCredentialError:
        credential = None

    parsed = _parse_stream_id(content_type, stream_id, credential)
    if parsed is None:
        log.info("stremio_stream_id_invalid", content_type=content_type, id=stream_id)
        return JSONResponse({"streams": []}, headers=_CORS_HEADERS)

    log.info(
        "stremio_stream_request",
        media_id=parsed.media_id,
        kind=parsed.kind,
        season=parsed.season,
        episode=parsed.episode,
    )

    resolution = await state.resolve_streams_uc.execute(parsed)
    if resolution.configuration_required:
        return JSONResponse({"streams": [MISSING_KEY_NOTICE]}, headers=_CORS_HEADERS)

    return JSONResponse(
        {"streams": [present_stream(s) for s in resolution.streams]},
        headers=_CORS_HEADERS,
    )


@router.get("/stream/{content_type}/{stream_id}.json")
async def stream(request: Request, content_type: str, stream_id: str) -> JSONResponse:
    """Streams without a configured key: answers with the setup notice."""
    return await _stream_response(request, content_type, stream_id, None)


@router.get("/{config}/stream/{content_type}/{stream_id}.json")
async def configured_stream(
    request: Request, config: str, content_type: str, stream_id: str
) -> JSONResponse:
    return await _stream_response(request, content_type, stream_id, config)
