"""BingWebmaster — Error Taxonomy.

Only the request execution path raises. Normalization and aggregation
degrade to zero values instead.
"""

from typing import Any, Optional


class BingWebmasterError(Exception):
    """Base class for every error raised by the client."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        attempts: int = 0,
        payload: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.attempts = attempts
        self.payload = payload
        super().__init__(message)


class TransientTransportError(BingWebmasterError):
    """Network error, timeout, 5xx or remote throttling (429). Retried."""


class FatalTransportError(BingWebmasterError):
    """4xx auth/validation failure. Surfaced immediately, never retried."""


class RateLimitedError(BingWebmasterError):
    """Local admission rejected the request before any network call."""


class ExhaustedRetriesError(BingWebmasterError):
    """Every retry attempt failed with a transient error."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: Optional[TransientTransportError] = None,
    ):
        self.last_error = last_error
        super().__init__(
            message,
            status_code=last_error.status_code if last_error else 0,
            attempts=attempts,
            payload=last_error.payload if last_error else None,
        )


class MissingAccessTokenError(FatalTransportError):
    """No access token was configured. Raised before any request is sent."""
