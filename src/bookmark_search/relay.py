"""Client for the backend relay that proxies calls to the Twitter API.

The browser-side app never talks to api.twitter.com directly. Every call is
wrapped in a JSON envelope and POSTed to the relay's ``/request`` endpoint,
which attaches the user's credentials and forwards it upstream:

    POST /request
    {"url": "https://api.twitter.com/2/...", "method": "GET", "body": ""}

The relay answers with the upstream JSON nested under a ``response`` key.

The backend URL can be overridden with the environment variable:
    BOOKMARK_SEARCH_BACKEND_URL
"""

import logging
import os
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = os.environ.get(
    "BOOKMARK_SEARCH_BACKEND_URL",
    "http://localhost:5000",
)

RELAY_PATH = "/request"


class RelayError(RuntimeError):
    """The relay answered, but not with what the caller needed."""


@dataclass
class RelayResult:
    """Outcome of one relay call."""

    ok: bool
    status_code: int
    payload: object = None  # decoded JSON body, None when unparseable

    @property
    def response(self) -> dict | None:
        """The upstream document the relay wrapped under ``response``."""
        if isinstance(self.payload, dict):
            response = self.payload.get("response")
            if isinstance(response, dict):
                return response
        return None


class RelayClient:
    """Sends single requests through the backend relay."""

    def __init__(self, backend_url: str | None = None, timeout: float = 30.0):
        self.backend_url = (backend_url or DEFAULT_BACKEND_URL).rstrip("/")
        self._relay_url = f"{self.backend_url}{RELAY_PATH}"
        self._client = httpx.Client(
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def send(
        self,
        target_url: str | httpx.URL,
        method: str = "GET",
        body: str = "",
    ) -> RelayResult:
        """Relay one upstream request.

        Transport failures (connection errors, timeouts) raise
        ``httpx.HTTPError``; they are not retried here.
        """
        envelope = {"url": str(target_url), "method": method, "body": body}
        logger.debug("Relaying %s %s", method, envelope["url"])

        response = self._client.post(self._relay_url, json=envelope)

        try:
            payload = response.json()
        except ValueError:
            logger.warning(
                "Relay returned a non-JSON body (status %d)",
                response.status_code,
            )
            payload = None

        return RelayResult(
            ok=response.is_success,
            status_code=response.status_code,
            payload=payload,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
