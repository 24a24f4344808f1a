"""
Tests for UrllibTransport against a local HTTP server, plus client-credential lookup.
Run: pytest tests/test_transport.py -v
"""

import json

import pytest

from restcall import HttpMethod, HttpRequestError, Request, Response, Transport, UrllibTransport, request_builder, send_request
from restcall.config import DEFAULT_TIMEOUT_MS, USER_AGENT
from restcall.transport import resolve_credential
from tests.local_server import LocalServer


@pytest.fixture(scope="module")
def server():
    with LocalServer() as srv:
        yield srv


@pytest.fixture
def transport():
    return UrllibTransport(credentials_dir="")


class TestUrllibTransport:
    def test_is_a_transport(self, transport):
        assert isinstance(transport, Transport)

    def test_explicit_zero_default_timeout_kept(self):
        assert UrllibTransport(default_timeout_ms=0).default_timeout_ms == 0

    def test_default_timeout_from_config(self):
        assert UrllibTransport().default_timeout_ms == DEFAULT_TIMEOUT_MS

    def test_enum_method_sent_as_value(self, server, transport):
        req = Request(endpoint=server.url("/echo"), method=HttpMethod.PATCH, body="x")
        assert json.loads(transport.send(req).body)["method"] == "PATCH"

    def test_get_json(self, server, transport):
        req = request_builder().url(server.url("/json")).method("GET").build()
        assert transport.send(req) == Response(status_code=200, body='{"id": 1}')

    @pytest.mark.parametrize("code", [201, 204, 404, 500])
    def test_non_200_returned_not_raised(self, server, transport, code):
        req = request_builder().url(server.url(f"/status/{code}")).method("GET").build()
        resp = transport.send(req)
        assert resp.status_code == code

    def test_error_body_is_read(self, server, transport):
        req = request_builder().url(server.url("/status/400")).method("GET").build()
        assert transport.send(req).body == "status 400"

    def test_sends_method_headers_and_body(self, server, transport):
        req = (
            request_builder()
            .url(server.url("/echo"))
            .method("PUT")
            .body('{"k": "v"}')
            .add_header("X-Trace", "abc")
            .build()
        )
        echoed = json.loads(transport.send(req).body)
        assert echoed["method"] == "PUT"
        assert echoed["body"] == '{"k": "v"}'
        assert echoed["headers"]["x-trace"] == "abc"

    def test_default_user_agent(self, server, transport):
        req = request_builder().url(server.url("/echo")).method("GET").build()
        echoed = json.loads(transport.send(req).body)
        assert echoed["headers"]["user-agent"] == USER_AGENT

    def test_caller_user_agent_kept(self, server, transport):
        req = request_builder().url(server.url("/echo")).method("GET").add_header("User-Agent", "mine/1").build()
        echoed = json.loads(transport.send(req).body)
        assert echoed["headers"]["user-agent"] == "mine/1"

    def test_missing_method_rejected(self, server, transport):
        req = request_builder().url(server.url("/json")).build()
        with pytest.raises(ValueError, match="method"):
            transport.send(req)

    def test_missing_url_rejected(self, transport):
        req = request_builder().method("GET").build()
        with pytest.raises(Exception):
            transport.send(req)


class TestThroughSender:
    def test_post_201_succeeds(self, server, transport):
        req = request_builder().url(server.url("/status/201")).method("POST").body("x").build()
        assert send_request(req, transport) == "status 201"

    def test_get_201_fails(self, server, transport):
        url = server.url("/status/201")
        req = request_builder().url(url).method("GET").build()
        with pytest.raises(HttpRequestError) as exc:
            send_request(req, transport)
        assert str(exc.value) == f"Request method GET for URL {url} failed with status code: 201"

    def test_timeout_wrapped(self, server, transport):
        req = request_builder().url(server.url("/slow")).method("GET").timeout(100).build()
        with pytest.raises(HttpRequestError, match="An error occurred while sending the request: "):
            send_request(req, transport)

    def test_connection_refused_wrapped(self, transport):
        with LocalServer() as srv:
            url = srv.url("/json")
        req = request_builder().url(url).method("GET").timeout(2000).build()
        with pytest.raises(HttpRequestError, match="An error occurred while sending the request: "):
            send_request(req, transport)

    def test_unknown_credential_wrapped(self, server, tmp_path):
        transport = UrllibTransport(credentials_dir=str(tmp_path))
        req = request_builder().url(server.url("/json")).method("GET").client_credential("nobody").build()
        with pytest.raises(HttpRequestError, match="Client credential 'nobody' not found"):
            send_request(req, transport)


class TestResolveCredential:
    def test_pem_preferred(self, tmp_path):
        (tmp_path / "svc.pem").write_text("pem")
        (tmp_path / "svc.crt").write_text("crt")
        (tmp_path / "svc.key").write_text("key")
        assert resolve_credential("svc", str(tmp_path)) == (str(tmp_path / "svc.pem"), None)

    def test_crt_and_key_pair(self, tmp_path):
        (tmp_path / "svc.crt").write_text("crt")
        (tmp_path / "svc.key").write_text("key")
        assert resolve_credential("svc", str(tmp_path)) == (str(tmp_path / "svc.crt"), str(tmp_path / "svc.key"))

    def test_crt_without_key_not_found(self, tmp_path):
        (tmp_path / "svc.crt").write_text("crt")
        with pytest.raises(FileNotFoundError):
            resolve_credential("svc", str(tmp_path))

    def test_directory_not_configured(self):
        with pytest.raises(ValueError, match="RESTCALL_CREDENTIALS_DIR"):
            resolve_credential("svc", "")
