from typing import Mapping, Optional, Protocol

import requests
import structlog

from recaptcha_client.errors import TransportError


log = structlog.get_logger()


class Transport(Protocol):
    """Sends a form POST and returns the response body as text."""

    def post(self, url: str, data: Mapping[str, str]) -> str: ...

    def close(self) -> None: ...


class RequestsTransport:
    """Transport backed by a requests.Session.

    Not safe to share between threads; use one per Verifier. A session passed
    in by the caller is left open on close().
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def post(self, url: str, data: Mapping[str, str]) -> str:
        try:
            response = self._session.post(url, data=dict(data), timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            log.error("request failed", url=url, error=str(e))
            raise TransportError(f"POST {url} failed: {e}") from e

        # The service answers in UTF-8 but may omit the charset.
        response.encoding = "utf-8"
        return response.text

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
