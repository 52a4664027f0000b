"""
HTTPS transport for the Hatchet API.

A thin wrapper around a requests.Session that turns every failure mode
(connection errors, TLS errors, timeouts, non-2xx statuses) into a
TransportError carrying the URL and, when there was one, the status.

Both calls block the calling thread. They run on executor workers,
never on the thread that submitted the request.
"""

import requests

from hatchet_resolver.api.query import Params
from hatchet_resolver.core.exceptions import TransportError
from hatchet_resolver.core.logger import get_logger

logger = get_logger(__name__)


JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class HttpTransport:
    """
    Blocking HTTP client used by the resolver pipeline and the send path.

    Attributes:
        timeout: Seconds before a connect or read is abandoned.
        session: Shared requests.Session (connection pooling across workers).

    Thread Safety:
        requests.Session is shared by the worker threads for connection
        pooling; no per-request state is stored on the transport.
    """

    def __init__(self, timeout: float = 15.0, user_agent: str = "hatchet-resolver/0.1") -> None:
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })

    def get(self, url: str) -> str:
        """
        GET url and return the response body as text.

        Raises:
            TransportError: On any network failure or non-2xx status.
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"HTTP {status} for {url}",
                details={"url": url, "method": "GET"},
                status_code=status
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"GET {url} failed: {e}",
                details={"url": url, "method": "GET", "original_error": str(e)}
            ) from e
        return response.text

    def post(self, url: str, header_params: Params, body: str) -> str:
        """
        POST a pre-serialized JSON body.

        Args:
            url: Target endpoint.
            header_params: (name, value) pairs sent as request headers,
                           e.g. (("authorization", token),).
            body: JSON document to send as-is.

        Raises:
            TransportError: On any network failure or non-2xx status.
        """
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        for name, value in header_params:
            headers[name] = value

        logger.debug(f"POST {url} ({len(body)} bytes)")
        try:
            response = self.session.post(
                url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"HTTP {status} for POST {url}",
                details={"url": url, "method": "POST"},
                status_code=status
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"POST {url} failed: {e}",
                details={"url": url, "method": "POST", "original_error": str(e)}
            ) from e
        return response.text

    def close(self) -> None:
        self.session.close()
