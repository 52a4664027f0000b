"""Test the requests-based transport"""

from unittest.mock import Mock, patch

import pytest
import requests

from hatchet_resolver.api.transport import JSON_CONTENT_TYPE, HttpTransport
from hatchet_resolver.core.exceptions import TransportError


def response(status: int = 200, text: str = "{}") -> Mock:
    mock_response = Mock()
    mock_response.status_code = status
    mock_response.text = text
    if status >= 400:
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status} Error", response=mock_response
        )
    return mock_response


@pytest.fixture
def transport():
    http = HttpTransport(timeout=3.0, user_agent="tests/1.0")
    yield http
    http.close()


class TestHttpTransport:
    """Test HttpTransport error mapping"""

    def test_session_headers(self, transport):
        """Test the default session headers"""
        assert transport.session.headers["User-Agent"] == "tests/1.0"
        assert transport.session.headers["Accept"] == "application/json"

    def test_get_returns_body(self, transport):
        """Test that GET returns the response body"""
        with patch.object(transport.session, "get", return_value=response(text='{"artists": []}')) as get:
            assert transport.get("https://api.example/v1/artists/") == '{"artists": []}'
        get.assert_called_once_with("https://api.example/v1/artists/", timeout=3.0)

    def test_get_http_error(self, transport):
        """Test that an HTTP error status raises TransportError"""
        with patch.object(transport.session, "get", return_value=response(503)):
            with pytest.raises(TransportError) as exc_info:
                transport.get("https://api.example/v1/artists/")
        assert exc_info.value.status_code == 503
        assert exc_info.value.details["method"] == "GET"

    def test_get_connection_error(self, transport):
        """Test that a connection error raises TransportError"""
        with patch.object(
            transport.session, "get",
            side_effect=requests.exceptions.ConnectionError("connection refused")
        ):
            with pytest.raises(TransportError) as exc_info:
                transport.get("https://api.example/v1/artists/")
        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.details["original_error"]

    def test_post_sends_headers_and_body(self, transport):
        """Test the headers and body of a POST"""
        with patch.object(transport.session, "post", return_value=response()) as post:
            transport.post(
                "https://api.example/v1/socialActions/",
                (("authorization", "tok"),),
                '{"socialAction": {}}'
            )

        kwargs = post.call_args.kwargs
        assert kwargs["headers"] == {"Content-Type": JSON_CONTENT_TYPE, "authorization": "tok"}
        assert kwargs["data"] == b'{"socialAction": {}}'
        assert kwargs["timeout"] == 3.0

    def test_post_timeout(self, transport):
        """Test that a POST timeout raises TransportError"""
        with patch.object(transport.session, "post", side_effect=requests.exceptions.Timeout("slow")):
            with pytest.raises(TransportError):
                transport.post("https://api.example/v1/socialActions/", (), "{}")
