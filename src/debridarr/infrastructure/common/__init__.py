"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_int
from .parsers import extract_info_hash, format_bytes, parse_size_to_bytes

__all__ = [
    "extract_info_hash",
    "format_bytes",
    "parse_size_to_bytes",
    "to_int",
]
