"""BingWebmaster — Bing Webmaster API Client.

Handles bearer authentication and a single HTTP exchange, classifying
failures as transient (retry-worthy) or fatal. Retry, rate limiting and
caching live in the request execution policy that wraps ``send``.
"""

import threading
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from bingwebmaster.core.config import settings
from bingwebmaster.core.errors import (
    FatalTransportError,
    MissingAccessTokenError,
    TransientTransportError,
)
from bingwebmaster.core.logging import get_logger

logger = get_logger("bing.client")

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

ERROR_MESSAGE_KEYS = ("message", "Message", "error")


def extract_message(
    payload: Any, fallback: str, keys: Tuple[str, ...] = ERROR_MESSAGE_KEYS
) -> str:
    """Pull a human-readable message out of a Bing response body."""
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if value:
                return str(value)
    return fallback


class BingClient:
    """Sync HTTP client for the Bing Webmaster JSON API."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.access_token = access_token or settings.access_token or None
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    headers=DEFAULT_HEADERS,
                    transport=self._transport,
                )
            return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()

    # ── Core Request Method ──

    def send(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any] | None = None,
        body: Dict[str, Any] | None = None,
    ) -> Any:
        """Perform one request and return the parsed JSON body.

        Raises:
            TransientTransportError: network failure, timeout, undecodable
                body, 5xx or 429.
            FatalTransportError: any other non-2xx answer.
            MissingAccessTokenError: no token set. Nothing is sent.
        """
        if not self.access_token:
            raise MissingAccessTokenError(
                "No access token set. Pass one to BingWebmaster() or call set_access_token()."
            )

        client = self._get_client()
        headers = {"Authorization": f"Bearer {self.access_token}"}
        path = f"/{endpoint.lstrip('/')}"
        started = time.monotonic()

        try:
            resp = client.request(method, path, params=params, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise TransientTransportError(f"Request to {endpoint} timed out: {e}") from e
        except httpx.TransportError as e:
            raise TransientTransportError(f"Request to {endpoint} failed: {e}") from e
        except httpx.RequestError as e:
            # Undecodable body, redirect loop
            raise TransientTransportError(f"Request to {endpoint} failed: {e}") from e

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        payload = self._parse_body(resp)
        logger.debug(
            f"{method} {endpoint} -> {resp.status_code}",
            extra={
                "endpoint": endpoint,
                "status_code": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if resp.is_success:
            return payload

        message = extract_message(payload, resp.text[:200] or resp.reason_phrase)
        if resp.status_code == 429:
            raise TransientTransportError(
                f"Bing API rate limit exceeded ({endpoint}): {message}",
                status_code=429,
                payload=payload,
            )
        if resp.status_code >= 500:
            raise TransientTransportError(
                f"Bing API server error {resp.status_code} ({endpoint}): {message}",
                status_code=resp.status_code,
                payload=payload,
            )
        raise FatalTransportError(
            f"Bing API error {resp.status_code} ({endpoint}): {message}",
            status_code=resp.status_code,
            payload=payload,
        )

    @staticmethod
    def _parse_body(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            logger.warning(
                f"Non-JSON response body ({resp.status_code})",
                extra={"status_code": resp.status_code},
            )
            return None
