"""Tests for the Request facade."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import FakeSession, FakeTransport, make_response
from resilient_request import ClientConfig, ConfigError, Request
from resilient_request.transport.http_client import INTERFACE_HEADER, HttpTransport
from resilient_request.transport.models import Failure, RequestOptions, RequestSpec, Success

HOST = "http://www.example.com"
URL = HOST + "/test"
BODY = {"a": 1, "b": "bbbbb"}


class TestMethods:

    def test_full_post_flow(self) -> None:
        session = FakeSession(make_response(200, {"code": 0, "msg": "ok"}))
        client = Request(transport=HttpTransport(session))

        outcome = client.post(URL, {"body": BODY})

        assert outcome == Success({"code": 0, "msg": "ok"})
        assert session.calls[0]["json"] == BODY
        assert session.calls[0]["url"] == URL

    def test_full_get_flow(self) -> None:
        session = FakeSession(make_response(200, {"code": 0, "msg": "ok"}))
        client = Request(transport=HttpTransport(session))

        outcome = client.get(URL)

        assert outcome.is_success
        assert outcome.payload == {"code": 0, "msg": "ok"}
        assert session.calls[0]["method"] == "GET"

    @pytest.mark.parametrize("method", ["get", "post", "put"])
    def test_default_options(self, method, ok) -> None:
        transport = FakeTransport(ok)
        client = Request(transport=transport)

        getattr(client, method)(URL, {"body": BODY})

        options = transport.specs[0].options
        assert options == RequestOptions(
            http_method=method, accept="application/json", body_encoding="json"
        )

    def test_caller_options_kept_whole(self, ok) -> None:
        transport = FakeTransport(ok)
        client = Request(transport=transport)
        options = RequestOptions(http_method="put", accept="text/plain", headers={"X-A": "1"})

        client.post(URL, RequestSpec(body=BODY, options=options))

        sent = transport.specs[0].options
        assert sent.http_method == "put"
        assert sent.accept == "text/plain"
        assert sent.headers == {"X-A": "1"}

    def test_mapping_options(self, ok) -> None:
        transport = FakeTransport(ok)
        client = Request(transport=transport)

        client.post(URL, {"body": BODY, "options": {"http_method": "POST", "body_encoding": "form"}})

        sent = transport.specs[0].options
        assert sent.http_method == "post"
        assert sent.body_encoding == "form"
        assert sent.accept is None

    @pytest.mark.parametrize("spec, field", [
        ({"bdy": BODY}, "bdy"),
        ({"body": BODY, "options": {"http_method": "post", "acceptHeader": "text/plain"}}, "acceptHeader"),
    ])
    def test_mapping_with_unknown_keys_rejected(self, ok, spec, field) -> None:
        transport = FakeTransport(ok)
        client = Request(transport=transport)

        with pytest.raises(ValueError, match=field):
            client.post(URL, spec)
        assert transport.specs == []

    def test_url_argument_wins(self, ok) -> None:
        transport = FakeTransport(ok)
        client = Request(transport=transport)

        client.post(URL, RequestSpec(url="http://elsewhere/x", body=BODY))

        assert transport.specs[0].url == URL

    def test_caller_spec_untouched(self, ok) -> None:
        client = Request(transport=FakeTransport(ok))
        spec = RequestSpec(body=BODY)

        client.put(URL, spec)

        assert spec.url == ""
        assert spec.options is None

    def test_reused_spec_unaffected_by_hooks(self, server_error) -> None:
        def before_send(spec):
            spec.options.headers.setdefault("X-Seen", "")
            spec.options.headers["X-Seen"] += str(spec.current_attempt)
            return spec

        transport = FakeTransport(server_error)
        client = Request(transport=transport, before_send=before_send, backoff_factor=0)
        spec = RequestSpec(body=BODY, options=RequestOptions(http_method="post", accept="application/json"))

        client.post(URL, spec)
        client.post(URL, spec)

        assert spec.options.headers == {}
        assert transport.specs[-1].options.headers == {"X-Seen": "5"}

    def test_interface_name_filled_from_url(self) -> None:
        session = FakeSession(make_response(200, {}))
        client = Request(transport=HttpTransport(session))

        client.get(HOST + "/widgets/42")

        assert session.calls[0]["headers"][INTERFACE_HEADER] == "42"

    def test_failure_returned_not_raised(self) -> None:
        session = FakeSession(make_response(500, {}))
        client = Request(transport=HttpTransport(session), backoff_factor=0)

        outcome = client.post(URL, {"body": BODY})

        assert outcome == Failure("Internal Server Error", status_code=500)
        assert outcome.to_dict() == {"err": "Internal Server Error", "status": 500}
        assert len(session.calls) == 5

    def test_send_reports_attempts(self, ok, server_error) -> None:
        client = Request(transport=FakeTransport(server_error, ok), sleep=lambda _: None)

        result = client.send(client.build_spec("post", URL, {"body": BODY}))

        assert result.attempts == 2
        assert result.succeeded

    def test_hook_error_propagates(self) -> None:
        def after_send(outcome):
            raise ValueError("bad payload")

        client = Request(transport=FakeTransport(Success({})), after_send=after_send)

        with pytest.raises(ValueError, match="bad payload"):
            client.post(URL)


class TestConfiguration:

    def test_keyword_overrides(self) -> None:
        client = Request(transport=FakeTransport(), retry_on_timeout=True, attempt_timeout_ms=10)

        assert client.config.retry_on_timeout is True
        assert client.config.attempt_timeout_ms == 10
        assert client.config.max_retries == 4

    def test_mapping_config(self) -> None:
        client = Request({"max_retries": 1}, transport=FakeTransport())
        assert client.config.max_retries == 1

    def test_client_config_instance(self) -> None:
        config = ClientConfig(max_retries=2)
        client = Request(config, transport=FakeTransport())
        assert client.config is config

    def test_client_config_with_overrides(self) -> None:
        hook = lambda spec: spec
        config = ClientConfig(max_retries=2, before_send=hook)

        client = Request(config, transport=FakeTransport(), retry_on_5xx=False)

        assert client.config.max_retries == 2
        assert client.config.retry_on_5xx is False
        assert client.config.before_send is hook
        assert config.retry_on_5xx is True

    def test_invalid_config(self) -> None:
        with pytest.raises(ConfigError):
            Request(transport=FakeTransport(), max_retries="many")

    def test_should_retry_uses_client_config(self) -> None:
        default = Request(transport=FakeTransport())
        no_5xx = Request(transport=FakeTransport(), retry_on_5xx=False)
        failure = Failure("error", status_code="500")

        assert default.should_retry(failure) is True
        assert no_5xx.should_retry(failure) is False
        assert default.should_retry(Failure("error")) is False
        assert default.should_retry(Success({})) is False

    def test_context_manager_closes_transport(self) -> None:
        session = FakeSession()
        transport = HttpTransport(session)
        closed = []
        transport.close = lambda: closed.append(True)

        with Request(transport=transport):
            pass

        assert closed == [True]

    def test_close_without_transport_close(self) -> None:
        Request(transport=FakeTransport()).close()


class PerUrlTransport:
    """Fails every url ending in /fail, succeeds otherwise."""

    def attempt(self, spec, attempt_timeout_ms):
        if spec.url.endswith("/fail"):
            return Failure("Internal Server Error", status_code=500)
        return Success({"url": spec.url, "attempt": spec.current_attempt})


def test_concurrent_calls_are_isolated() -> None:
    client = Request(transport=PerUrlTransport(), backoff_factor=0)
    urls = [f"{HOST}/item/{i}" if i % 2 else f"{HOST}/fail" for i in range(20)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda url: client.send(client.build_spec("get", url)), urls))

    for url, result in zip(urls, results):
        if url.endswith("/fail"):
            assert result.attempts == 5
            assert result.outcome.status_code == 500
        else:
            assert result.attempts == 1
            assert result.outcome.payload == {"url": url, "attempt": 1}
    assert client.config.max_retries == 4
