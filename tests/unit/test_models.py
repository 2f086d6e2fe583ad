# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import dataclasses

import httpx
import pytest

from restcourier.errors import InvalidRequestError
from restcourier.http.models import HttpMethod, RequestSpec, ResponseEnvelope, RetryConfig
from restcourier.http.url import join_url, merge_query, normalize_origin, parse_query_string
from restcourier.models.event import EventEnvelope


def test_request_spec_defaults():
    spec = RequestSpec("example.com/api/v2/", "getServices")
    assert spec.method is HttpMethod.GET
    assert dict(spec.headers) == {}
    assert dict(spec.query_params) == {}
    assert dict(spec.body_params) == {}
    assert spec.query_string is None
    assert spec.normalized_base_url == "http://example.com/api/v2/"
    assert spec.url == "http://example.com/api/v2/getServices"


def test_request_spec_keeps_https_prefix():
    spec = RequestSpec("HTTPS://secure.example", "/items")
    assert spec.normalized_base_url == "HTTPS://secure.example"
    assert spec.url == "HTTPS://secure.example/items"


@pytest.mark.parametrize("base_url,path", [("", "p"), ("   ", "p"), (None, "p"), ("http://x", ""), ("http://x", None)])
def test_request_spec_rejects_blank_origin_or_path(base_url, path):
    with pytest.raises(InvalidRequestError):
        RequestSpec(base_url, path)


def test_request_spec_builder_sets_every_field():
    spec = (
        RequestSpec.builder("https://www.example.com/api/v2/", "getServices")
        .method("post")
        .headers({"AUTH_TOKEN": "1234567"})
        .query_params({"sort": "desc"})
        .query_string("page=2")
        .body_params({"code": "first"})
        .build()
    )
    assert spec.method is HttpMethod.POST
    assert spec.headers["AUTH_TOKEN"] == "1234567"
    assert spec.resolved_query() == {"sort": "desc", "page": "2"}
    assert spec.resolved_body() == {"code": "first"}


def test_request_spec_builder_none_method_defaults_to_get():
    spec = RequestSpec.builder("http://x", "p").method(None).build()
    assert spec.method is HttpMethod.GET


def test_unknown_method_is_rejected():
    with pytest.raises(InvalidRequestError):
        RequestSpec("http://x", "p", method="PATCH")


def test_query_string_overrides_query_params():
    spec = RequestSpec("http://x", "p", query_params={"a": "9"}, query_string="a=1&b=2")
    assert spec.resolved_query() == {"a": "1", "b": "2"}


def test_malformed_query_pairs_are_dropped():
    assert parse_query_string("a=1&broken&c=3=4&=5&&d=") == {"a": "1", "d": ""}
    assert parse_query_string("?x=1") == {"x": "1"}
    assert parse_query_string(None) == {}


def test_merge_query_without_string_copies_params():
    params = {"a": "1"}
    merged = merge_query(params, None)
    merged["b"] = "2"
    assert params == {"a": "1"}


def test_get_never_sends_body():
    spec = RequestSpec("http://x", "p", body_params={"k": "v"})
    assert spec.resolved_body() is None
    assert RequestSpec("http://x", "p", method=HttpMethod.DELETE, body_params={"k": "v"}).resolved_body() == {"k": "v"}
    assert RequestSpec("http://x", "p", method=HttpMethod.PUT).resolved_body() is None


def test_request_spec_is_immutable_and_detached_from_caller_dicts():
    headers = {"X": "1"}
    spec = RequestSpec("http://x", "p", headers=headers)
    headers["X"] = "2"
    assert spec.headers["X"] == "1"
    with pytest.raises(TypeError):
        spec.headers["Y"] = "3"  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.path = "other"  # type: ignore[misc]


def test_url_helpers():
    assert normalize_origin(" example.com ") == "http://example.com"
    assert normalize_origin("") == ""
    assert join_url("http://x/api/", "/items") == "http://x/api/items"
    assert join_url("x", "items") == "http://x/items"


def test_response_envelope_from_success():
    raw = httpx.Response(
        200,
        json={"b": 1, "a": [1, 2]},
        request=httpx.Request("GET", "http://example/api/items?sort=desc"),
    )
    envelope = ResponseEnvelope.from_httpx(raw)
    assert envelope.successful is True
    assert envelope.status_code == 200
    assert envelope.status_message == "OK"
    assert envelope.status == "200 OK"
    assert envelope.called_url == "http://example/api/items?sort=desc"
    assert envelope.json() == {"b": 1, "a": [1, 2]}


def test_response_envelope_from_error_status_keeps_error_body(response):
    envelope = ResponseEnvelope.from_httpx(response(404, "no such thing"))
    assert envelope.successful is False
    assert envelope.status == "404 Not Found"
    assert envelope.body == "no such thing"
    assert envelope.json() is None
    assert "404 Not Found" in str(envelope)


def test_response_envelope_keeps_invalid_json_as_text(response):
    envelope = ResponseEnvelope.from_httpx(response(500, "{not json", content_type="application/json"))
    assert envelope.body == "{not json"
    assert envelope.successful is False


@pytest.mark.parametrize("status,expected", [(199, False), (200, True), (204, True), (299, True), (300, False), (503, False)])
def test_successful_reflects_2xx_only(response, status, expected):
    assert ResponseEnvelope.from_httpx(response(status)).successful is expected


def test_retry_config_clamps_attempts():
    assert RetryConfig(max_attempts=0).max_attempts == 1
    assert RetryConfig(max_attempts=-4).max_attempts == 1
    assert RetryConfig(max_attempts=3).max_attempts == 3
    assert RetryConfig().delay == 2.0


def test_event_envelope_requires_exactly_one_payload():
    ok = EventEnvelope.of_response("id", ResponseEnvelope("http://x/p", 200, "OK", True, ""))
    assert ok.success is True
    assert ok.error_message is None

    failed = EventEnvelope.of_error("id", "boom")
    assert failed.success is False
    assert failed.response is None

    with pytest.raises(ValueError):
        EventEnvelope("id", True)
    with pytest.raises(ValueError):
        EventEnvelope("id", True, error_message="boom")
