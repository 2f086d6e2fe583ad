# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON codec used to render envelope bodies and request payloads."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class JsonCodec:
    """Thin json wrapper that reports failures as ``None`` instead of raising."""

    def __init__(self, *, sort_keys: bool = False, ensure_ascii: bool = False):
        self.sort_keys = sort_keys
        self.ensure_ascii = ensure_ascii

    def to_json(self, value: Any) -> str | None:
        try:
            return json.dumps(value, sort_keys=self.sort_keys, ensure_ascii=self.ensure_ascii, default=_fallback)
        except (TypeError, ValueError) as exc:
            logger.error("Error converting value to json: %s", exc)
            return None

    def from_json(self, text: str | bytes | None) -> Any:
        if text is None:
            return None
        try:
            return json.loads(text)
        except (TypeError, ValueError) as exc:
            logger.error("Error reading json: %s", exc)
            return None


def _fallback(value: Any) -> Any:
    # Objects without a json form are rendered as empty objects, not errors.
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return {}


_default_codec: JsonCodec | None = None


def default_codec() -> JsonCodec:
    global _default_codec
    if _default_codec is None:
        _default_codec = JsonCodec()
    return _default_codec


__all__ = ["JsonCodec", "default_codec"]
