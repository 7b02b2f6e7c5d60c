"""Shared fixtures: a scripted stand-in for requests.Session."""

import json

import pytest
import requests

from resilient_request.transport.models import Failure, Success


def make_response(status_code=200, payload=None, text=None, reason=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.reason = reason
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Replays scripted responses/exceptions and records every call.

    The last scripted item repeats once the script is exhausted.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        index = min(len(self.calls), len(self.script)) - 1
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self):
        self.closed = True


class FakeTransport:
    """Single-attempt transport returning scripted outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.specs = []

    def attempt(self, spec, attempt_timeout_ms):
        self.specs.append(spec)
        index = min(len(self.specs), len(self.outcomes)) - 1
        return self.outcomes[index]


class SleepRecorder:
    """Collects requested backoff delays instead of sleeping."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def ok():
    return Success({"code": 0, "msg": "ok"})


@pytest.fixture
def server_error():
    return Failure("Internal Server Error", status_code=500)
