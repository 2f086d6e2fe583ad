# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across restcourier."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..errors import InvalidRequestError
from .codec import JsonCodec, default_codec
from .url import is_blank, join_url, merge_query, normalize_origin

if TYPE_CHECKING:
    import httpx

    from ..config import CourierSettings

Headers = Mapping[str, str]

_EMPTY: Mapping[str, str] = MappingProxyType({})


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def sends_body(self) -> bool:
        return self is not HttpMethod.GET

    @classmethod
    def parse(cls, value: HttpMethod | str | None) -> HttpMethod:
        """Coerce a method name (any case) to HttpMethod; ``None`` means GET."""
        if value is None:
            return cls.GET
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidRequestError(f"Unsupported http method: {value!r}") from None


def _frozen_mapping(value: Mapping[str, str] | None) -> Mapping[str, str]:
    if not value:
        return _EMPTY
    return MappingProxyType({str(k): str(v) for k, v in value.items()})


@dataclass(frozen=True)
class RequestSpec:
    """Immutable description of one HTTP call."""

    base_url: str
    path: str
    method: HttpMethod = HttpMethod.GET
    headers: Headers = field(default_factory=lambda: _EMPTY)
    query_params: Headers = field(default_factory=lambda: _EMPTY)
    query_string: str | None = None
    body_params: Headers = field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        if is_blank(self.base_url):
            raise InvalidRequestError("RequestSpec.base_url must not be empty")
        if is_blank(self.path):
            raise InvalidRequestError("RequestSpec.path must not be empty")
        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        object.__setattr__(self, "headers", _frozen_mapping(self.headers))
        object.__setattr__(self, "query_params", _frozen_mapping(self.query_params))
        object.__setattr__(self, "body_params", _frozen_mapping(self.body_params))

    @classmethod
    def builder(cls, base_url: str, path: str) -> RequestSpecBuilder:
        return RequestSpecBuilder(base_url, path)

    @property
    def normalized_base_url(self) -> str:
        return normalize_origin(self.base_url)

    @property
    def url(self) -> str:
        return join_url(self.base_url, self.path)

    def resolved_query(self) -> dict[str, str]:
        """Query params merged with the raw query string (query string wins)."""
        return merge_query(self.query_params, self.query_string)

    def resolved_body(self) -> dict[str, str] | None:
        """Body payload for the wire; always ``None`` for GET."""
        if not self.method.sends_body or not self.body_params:
            return None
        return dict(self.body_params)

    def __str__(self) -> str:
        return (
            f"RequestSpec:\nUrl: {self.url}\nMethod: {self.method.value}\nHeaders: {dict(self.headers)}\n"
            f"Query params: {dict(self.query_params)}\nQuery string: {self.query_string}\n"
            f"Body params: {dict(self.body_params)}"
        )


class RequestSpecBuilder:
    """Fluent builder for RequestSpec; unset fields keep their defaults."""

    def __init__(self, base_url: str, path: str):
        self._base_url = base_url
        self._path = path
        self._method: HttpMethod | str | None = None
        self._headers: Mapping[str, str] | None = None
        self._query_params: Mapping[str, str] | None = None
        self._query_string: str | None = None
        self._body_params: Mapping[str, str] | None = None

    def method(self, method: HttpMethod | str | None) -> RequestSpecBuilder:
        self._method = method
        return self

    def headers(self, headers: Mapping[str, str] | None) -> RequestSpecBuilder:
        self._headers = headers
        return self

    def query_params(self, query_params: Mapping[str, str] | None) -> RequestSpecBuilder:
        self._query_params = query_params
        return self

    def query_string(self, query_string: str | None) -> RequestSpecBuilder:
        self._query_string = query_string
        return self

    def body_params(self, body_params: Mapping[str, str] | None) -> RequestSpecBuilder:
        self._body_params = body_params
        return self

    def build(self) -> RequestSpec:
        return RequestSpec(
            base_url=self._base_url,
            path=self._path,
            method=HttpMethod.parse(self._method),
            headers=self._headers or _EMPTY,
            query_params=self._query_params or _EMPTY,
            query_string=self._query_string,
            body_params=self._body_params or _EMPTY,
        )


@dataclass(frozen=True)
class ResponseEnvelope:
    """Uniform wrapper around one completed HTTP attempt."""

    called_url: str
    status_code: int
    status_message: str = ""
    successful: bool = False
    body: str = ""

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.status_message}".strip()

    def json(self, codec: JsonCodec | None = None) -> Any:
        """Decode the body; ``None`` when it is not valid JSON."""
        return (codec or default_codec()).from_json(self.body) if self.body else None

    @classmethod
    def from_httpx(cls, response: httpx.Response, codec: JsonCodec | None = None) -> ResponseEnvelope:
        codec = codec or default_codec()
        try:
            called_url = str(response.url)
        except RuntimeError:
            called_url = ""
        return cls(
            called_url=called_url,
            status_code=response.status_code,
            status_message=response.reason_phrase or "",
            successful=200 <= response.status_code < 300,
            body=_render_body(response, codec),
        )

    def __str__(self) -> str:
        return f"ResponseEnvelope:\nUrl: {self.called_url}\n{self.status}\n{self.body}"


def _render_body(response: httpx.Response, codec: JsonCodec) -> str:
    text = response.text or ""
    content_type = response.headers.get("content-type", "")
    if not text or "json" not in content_type.lower():
        return text
    decoded = codec.from_json(text)
    if decoded is None:
        return text
    rendered = codec.to_json(decoded)
    return rendered if rendered is not None else text


@dataclass
class RetryConfig:
    """Attempt budget and fixed inter-attempt delay."""

    max_attempts: int = 1
    delay: float = 2.0

    def __post_init__(self) -> None:
        self.max_attempts = max(1, int(self.max_attempts or 1))
        self.delay = max(0.0, float(self.delay))

    @classmethod
    def from_settings(cls, settings: CourierSettings, attempts: int | None = None) -> RetryConfig:
        """Build a retry config from CourierSettings, overriding the attempt budget when given."""
        return cls(
            max_attempts=attempts if attempts is not None else settings.default_attempts,
            delay=settings.retry_delay,
        )
