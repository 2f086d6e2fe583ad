# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed TransportClient implementation."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from ..config import CourierSettings, load_settings
from .codec import JsonCodec, default_codec
from .models import HttpMethod


class HttpxTransport:
    """Synchronous httpx client bound to one origin."""

    def __init__(
        self,
        base_url: str,
        codec: JsonCodec | None = None,
        settings: CourierSettings | None = None,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url
        self.codec = codec or default_codec()
        self.settings = settings or load_settings()
        self._client = client or httpx.Client(
            base_url=base_url,
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            headers={"User-Agent": self.settings.user_agent},
        )

    def call(
        self,
        method: HttpMethod,
        path: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str],
        body: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        content = None
        request_headers = dict(headers or {})
        if body is not None and method.sends_body:
            content = self.codec.to_json(dict(body))
            request_headers.setdefault("Content-Type", "application/json; charset=utf-8")
        return self._client.request(
            method.value,
            path,
            headers=request_headers,
            params=dict(params or {}),
            content=content,
        )

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"HttpxTransport(base_url={self.base_url!r})"
