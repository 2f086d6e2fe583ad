# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport client abstraction and factory."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Protocol

from ..config import CourierSettings, load_settings
from .codec import JsonCodec, default_codec

if TYPE_CHECKING:
    import httpx

    from .models import HttpMethod


class TransportClient(Protocol):
    """Per-origin client able to issue one HTTP call."""

    base_url: str

    def call(
        self,
        method: HttpMethod,
        path: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str],
        body: Mapping[str, str] | None = None,
    ) -> httpx.Response: ...

    def close(self) -> None:  # pragma: no cover - optional for stubs
        ...


TransportFactory = Callable[[str, JsonCodec], TransportClient]


def create_default_transport(
    base_url: str,
    codec: JsonCodec | None = None,
    settings: CourierSettings | None = None,
) -> TransportClient:
    """Factory for the default httpx-backed transport."""
    from .httpx_client import HttpxTransport

    return HttpxTransport(base_url, codec or default_codec(), settings or load_settings())


def transport_factory(settings: CourierSettings | None = None) -> TransportFactory:
    """Bind settings into a factory usable by TransportCache."""

    def factory(base_url: str, codec: JsonCodec) -> TransportClient:
        return create_default_transport(base_url, codec, settings)

    return factory


__all__ = ["TransportClient", "TransportFactory", "create_default_transport", "transport_factory"]
