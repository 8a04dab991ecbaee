import os
import socket
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests
from requests.structures import CaseInsensitiveDict

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from readerview.config import USER_AGENT, Settings
from readerview.errors import TransportFailure, UpstreamFailure, ValidationError
from readerview.http_client import Fetcher, build_session


def _response(status=200, body=b"<html></html>", headers=None, reason="OK", url="https://site.org/"):
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    resp.status_code = status
    resp.reason = reason
    resp.url = url
    resp.headers = CaseInsensitiveDict(headers or {"Content-Type": "text/html"})
    resp.iter_content.return_value = iter([body])
    return resp


def _fetcher(*responses, **settings_kwargs):
    settings_kwargs.setdefault("resolve_dns", False)
    session = MagicMock()
    session.get.side_effect = list(responses)
    return Fetcher(Settings(**settings_kwargs), session=session, log_fn=lambda *_: None), session


class BuildSessionTests(unittest.TestCase):
    def test_session_identifies_itself(self) -> None:
        sess = build_session()
        self.assertEqual(sess.headers["User-Agent"], USER_AGENT)


class FetchTests(unittest.TestCase):
    def test_success_returns_decoded_html(self) -> None:
        body = "<p>Café</p>".encode("utf-8")
        fetcher, session = _fetcher(_response(body=body))
        result = fetcher.fetch("https://site.org/")
        self.assertEqual(result.html, "<p>Café</p>")
        self.assertEqual(result.status, 200)
        _, kwargs = session.get.call_args
        self.assertEqual(kwargs["timeout"], 20.0)
        self.assertFalse(kwargs["allow_redirects"])

    def test_declared_charset_is_used(self) -> None:
        body = "<p>Café</p>".encode("latin-1")
        fetcher, _ = _fetcher(_response(body=body, headers={"Content-Type": "text/html; charset=ISO-8859-1"}))
        self.assertEqual(fetcher.fetch("https://site.org/").html, "<p>Café</p>")

    def test_non_2xx_raises_upstream_failure(self) -> None:
        fetcher, _ = _fetcher(_response(status=404, reason="Not Found"))
        with self.assertRaises(UpstreamFailure) as ctx:
            fetcher.fetch("https://site.org/missing")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.reason, "Not Found")

    def test_connection_error_raises_transport_failure(self) -> None:
        fetcher, _ = _fetcher(requests.ConnectionError("connection reset"))
        with self.assertRaises(TransportFailure):
            fetcher.fetch("https://site.org/")

    def test_timeout_raises_transport_failure(self) -> None:
        fetcher, _ = _fetcher(requests.Timeout("read timed out"))
        with self.assertRaises(TransportFailure):
            fetcher.fetch("https://site.org/")

    def test_redirect_is_followed(self) -> None:
        fetcher, session = _fetcher(
            _response(status=302, headers={"Location": "/final"}),
            _response(body=b"<p>done</p>"),
        )
        result = fetcher.fetch("https://site.org/start")
        self.assertEqual(result.url, "https://site.org/final")
        self.assertEqual(session.get.call_count, 2)

    def test_redirect_to_private_address_is_rejected(self) -> None:
        fetcher, session = _fetcher(_response(status=301, headers={"Location": "http://169.254.169.254/latest"}))
        with self.assertRaises(ValidationError):
            fetcher.fetch("https://site.org/start")
        self.assertEqual(session.get.call_count, 1)

    def test_redirect_budget_is_enforced(self) -> None:
        loops = [_response(status=302, headers={"Location": "/again"}) for _ in range(3)]
        fetcher, _ = _fetcher(*loops, max_redirects=2)
        with self.assertRaises(TransportFailure):
            fetcher.fetch("https://site.org/again")

    def test_body_is_capped(self) -> None:
        resp = _response()
        resp.iter_content.return_value = iter([b"a" * 6, b"b" * 6])
        fetcher, _ = _fetcher(resp, max_response_bytes=8)
        self.assertEqual(fetcher.fetch("https://site.org/").html, "aaaaaabb")

    def test_dns_rebinding_blocked_before_request(self) -> None:
        fetcher, session = _fetcher(_response(), resolve_dns=True)
        infos = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.168.1.20", 443))]
        with patch("readerview.url_analysis.socket.getaddrinfo", return_value=infos):
            with self.assertRaises(ValidationError):
                fetcher.fetch("https://internal.site.org/")
        session.get.assert_not_called()


if __name__ == "__main__":
    unittest.main()
