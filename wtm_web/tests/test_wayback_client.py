from __future__ import annotations

import json
from typing import Any, List, Optional

import pytest
import requests
from requests.utils import get_encoding_from_headers

from wtm_web.adapters import wayback_client
from wtm_web.adapters.wayback_client import WaybackClient, decode_body
from wtm_web.domain.errors import UnexpectedFailure, UpstreamUnavailable


# -----------------------------
# Test doubles
# -----------------------------
class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")
        self.headers = {"Content-Type": "text/html; charset=utf-8"}
        self.encoding = "utf-8"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)


class FakeGet:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self._response = response
        self._error = error
        self.calls: List[dict] = []

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self._error:
            raise self._error
        return self._response


@pytest.fixture
def client() -> WaybackClient:
    return WaybackClient(user_agent="TestAgent/1.0", row_limit=500, index_timeout_seconds=30, page_timeout_seconds=10)


def install(monkeypatch, fake: FakeGet) -> FakeGet:
    monkeypatch.setattr(wayback_client.requests, "get", fake)
    return fake


# -----------------------------
# query_index
# -----------------------------
def test_query_index_sends_cdx_parameters(monkeypatch, client):
    rows = [["timestamp", "original", "statuscode", "mimetype"], ["20200101000000", "example.com/", "200", "text/html"]]
    fake = install(monkeypatch, FakeGet(FakeResponse(200, json.dumps(rows))))

    assert client.query_index("example.com", "20150101", "20251231") == rows

    call = fake.calls[0]
    assert call["url"] == "https://web.archive.org/cdx/search/cdx"
    assert call["params"] == [
        ("url", "example.com"),
        ("output", "json"),
        ("fl", "timestamp,original,statuscode,mimetype"),
        ("filter", "statuscode:200"),
        ("filter", "mimetype:text/html"),
        ("collapse", "timestamp:6"),
        ("from", "20150101"),
        ("to", "20251231"),
        ("limit", "500"),
    ]
    assert call["headers"] == {"User-Agent": "TestAgent/1.0"}
    assert call["timeout"] == 30


@pytest.mark.parametrize("status", [404, 500, 503])
def test_query_index_non_success_is_upstream_unavailable(monkeypatch, client, status):
    install(monkeypatch, FakeGet(FakeResponse(status, "oops")))
    with pytest.raises(UpstreamUnavailable):
        client.query_index("example.com", "20150101", "20251231")


@pytest.mark.parametrize("body", ["", "   \n"])
def test_query_index_empty_body_is_empty_result(monkeypatch, client, body):
    install(monkeypatch, FakeGet(FakeResponse(200, body)))
    assert client.query_index("example.com", "20150101", "20251231") == []


@pytest.mark.parametrize("body", ["<html>not json</html>", '{"rows": []}'])
def test_query_index_bad_payload_is_unexpected_failure(monkeypatch, client, body):
    install(monkeypatch, FakeGet(FakeResponse(200, body)))
    with pytest.raises(UnexpectedFailure):
        client.query_index("example.com", "20150101", "20251231")


def test_query_index_transport_error_is_unexpected_failure(monkeypatch, client):
    install(monkeypatch, FakeGet(error=requests.ConnectionError("refused")))
    with pytest.raises(UnexpectedFailure):
        client.query_index("example.com", "20150101", "20251231")


# -----------------------------
# fetch_page
# -----------------------------
def test_fetch_page_returns_body_with_timeout_and_agent(monkeypatch, client):
    fake = install(monkeypatch, FakeGet(FakeResponse(200, "<title>Hi</title>")))

    assert client.fetch_page("https://web.archive.org/web/2020/https://example.com/") == "<title>Hi</title>"
    assert fake.calls[0]["timeout"] == 10
    assert fake.calls[0]["headers"] == {"User-Agent": "TestAgent/1.0"}


@pytest.mark.parametrize(
    "fake",
    [
        FakeGet(FakeResponse(404, "<title>Not found</title>")),
        FakeGet(FakeResponse(503, "")),
        FakeGet(error=requests.Timeout("slow")),
        FakeGet(error=requests.ConnectionError("reset")),
    ],
)
def test_fetch_page_failures_become_empty_string(monkeypatch, client, fake):
    install(monkeypatch, fake)
    assert client.fetch_page("https://web.archive.org/web/2020/https://example.com/") == ""


def make_real_response(body: bytes, content_type: str, status: int = 200) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body
    resp.headers["Content-Type"] = content_type
    resp.encoding = get_encoding_from_headers(resp.headers)
    return resp


def test_fetch_page_decodes_utf8_when_header_has_no_charset(monkeypatch, client):
    html = "<title>Acme Inc — Home</title><h1>Café crème</h1>"
    install(monkeypatch, FakeGet(make_real_response(html.encode("utf-8"), "text/html")))

    assert client.fetch_page("https://web.archive.org/web/2020/https://acme.example/") == html


def test_fetch_page_honours_declared_charset(monkeypatch, client):
    html = "<title>Café</title>"
    install(monkeypatch, FakeGet(make_real_response(html.encode("latin-1"), "text/html; charset=ISO-8859-1")))

    assert client.fetch_page("https://web.archive.org/web/2020/https://acme.example/") == html


@pytest.mark.parametrize(
    "body, content_type, declared, expected",
    [
        ("Acme — Home".encode("utf-8"), "text/html", "ISO-8859-1", "Acme — Home"),
        ("Acme — Home".encode("utf-8"), "text/html; charset=utf-8", "utf-8", "Acme — Home"),
        ("Acme — Home".encode("utf-8"), "text/html; charset=x-bogus", "x-bogus", "Acme — Home"),
        (b"\xff\xfeAcme", "", None, "\ufffd\ufffdAcme"),
    ],
)
def test_decode_body(body, content_type, declared, expected):
    assert decode_body(body, content_type, declared) == expected
