# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from restcourier.config import CourierSettings
from restcourier.http.cache import TransportCache
from restcourier.http.executor import CallExecutor
from restcourier.http.retry import RetryCoordinator


def make_response(status=200, body="", *, url="http://example/p", method="GET", content_type="text/plain"):
    return httpx.Response(
        status,
        text=body,
        headers={"content-type": content_type},
        request=httpx.Request(method, url),
    )


class ScriptedTransport:
    """Replays outcomes in order; exceptions are raised, responses returned. The last outcome repeats."""

    def __init__(self, base_url, outcomes):
        self.base_url = base_url
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def call(self, method, path, *, headers, params, body=None):
        self.calls.append({"method": method, "path": path, "headers": headers, "params": params, "body": body})
        outcome = self.outcomes[min(len(self.calls) - 1, len(self.outcomes) - 1)]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class Engine:
    def __init__(self, outcomes, *, settings=None, pool=None):
        self.transport = ScriptedTransport("http://example", outcomes)
        self.sleeps = []
        self.settings = settings or CourierSettings()
        self.cache = TransportCache(lambda url, codec: self.transport)
        self.executor = CallExecutor(self.cache, pool=pool)
        self.retry = RetryCoordinator(self.executor, self.settings, sleep=self.sleeps.append)


def network_error(message="connection refused"):
    return httpx.ConnectError(message, request=httpx.Request("GET", "http://example/p"))


@pytest.fixture
def pool():
    executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-restcourier")
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def engine_factory(pool):
    def build(outcomes, **kwargs):
        kwargs.setdefault("pool", pool)
        return Engine(outcomes, **kwargs)

    return build


@pytest.fixture
def response():
    return make_response


@pytest.fixture
def net_error():
    return network_error


@pytest.fixture
def scripted_transport():
    return ScriptedTransport
