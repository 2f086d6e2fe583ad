# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the request model and the transport cache."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

logger = logging.getLogger(__name__)

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def normalize_origin(base_url: str | None) -> str:
    """
    Return the base URL with an explicit protocol.

    Example:
      example.com/api -> http://example.com/api
    """
    raw = str(base_url or "").strip()
    if not raw:
        return ""
    if _PROTOCOL_RE.match(raw):
        return raw
    return f"http://{raw}"


def parse_query_string(query_string: str | None) -> dict[str, str]:
    """
    Split a raw ``k=v&k2=v2`` string into a dict.

    Pairs that do not contain exactly one ``=`` or that have an empty key are dropped.
    Values are kept as given; encoding happens on the wire.
    """
    params: dict[str, str] = {}
    if not query_string:
        return params
    for pair in str(query_string).lstrip("?").split("&"):
        if not pair:
            continue
        if pair.count("=") != 1:
            logger.debug("Dropping malformed query pair %r", pair)
            continue
        key, value = pair.split("=")
        if not key:
            logger.debug("Dropping query pair with empty key %r", pair)
            continue
        params[key] = value
    return params


def merge_query(query_params: Mapping[str, str] | None, query_string: str | None) -> dict[str, str]:
    """Merge explicit params with a raw query string; query string pairs win on collision."""
    merged = dict(query_params or {})
    merged.update(parse_query_string(query_string))
    return merged


def join_url(base_url: str, path: str) -> str:
    """Join origin and endpoint with exactly one slash between them."""
    base = normalize_origin(base_url)
    if not path:
        return base
    return f"{base.rstrip('/')}/{str(path).lstrip('/')}"


__all__ = ["is_blank", "join_url", "merge_query", "normalize_origin", "parse_query_string"]
