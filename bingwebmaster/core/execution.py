"""BingWebmaster — Request Execution Policy.

Wraps one logical API call:

    cache check → rate-limit admission → send → retry on transient failure

A cache hit returns immediately and never counts against the rate-limit
window. Fatal failures propagate on the first attempt.
"""

import random
import time
from typing import Any, Callable, Dict, Optional

from bingwebmaster.core.cache import ResponseCache
from bingwebmaster.core.errors import (
    ExhaustedRetriesError,
    FatalTransportError,
    MissingAccessTokenError,
    RateLimitedError,
    TransientTransportError,
)
from bingwebmaster.core.logging import get_logger
from bingwebmaster.core.rate_limiter import RateLimitWindow

logger = get_logger("execution")

SendFn = Callable[..., Any]


class BackoffPolicy:
    """Exponential backoff: ``base_delay * 2 ** (attempt - 1)``, capped."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 30.0, jitter: bool = False):
        self.base_delay = max(0.0, base_delay)
        self.max_delay = max(0.0, max_delay)
        self.jitter = jitter

    def delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        wait = min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))
        if self.jitter:
            wait = random.uniform(0, wait)
        return wait


class RequestExecutionPolicy:
    """Retry, rate limiting and optional caching around a transport call."""

    def __init__(
        self,
        send: SendFn,
        *,
        retry_attempts: int = 3,
        backoff: Optional[BackoffPolicy] = None,
        rate_limiter: Optional[RateLimitWindow] = None,
        cache: Optional[ResponseCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._send = send
        self.retry_attempts = max(1, retry_attempts)
        self.backoff = backoff or BackoffPolicy()
        self.rate_limiter = rate_limiter
        self.cache = cache
        self._sleep = sleep

    def execute(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any] | None = None,
        body: Dict[str, Any] | None = None,
    ) -> Any:
        """Run one logical call and return the raw response envelope."""
        method = method.upper()
        cache_key = None
        if self.cache is not None and method == "GET":
            cache_key = self.cache.key_for(endpoint, params)
            hit, cached = self.cache.lookup(cache_key)
            if hit:
                logger.debug(
                    f"Cache hit for {endpoint}",
                    extra={"endpoint": endpoint, "cache": "hit"},
                )
                return cached

        last_error: Optional[TransientTransportError] = None

        for attempt in range(1, self.retry_attempts + 1):
            if self.rate_limiter is not None and not self.rate_limiter.try_admit():
                logger.warning(
                    f"Local rate limit reached ({self.rate_limiter.max_requests_per_minute}/min), "
                    f"rejecting {endpoint}",
                    extra={"endpoint": endpoint, "attempt": attempt},
                )
                raise RateLimitedError(
                    f"Rate limit of {self.rate_limiter.max_requests_per_minute} requests "
                    f"per minute reached; retry in "
                    f"{self.rate_limiter.seconds_until_available():.1f}s",
                    attempts=attempt - 1,
                ) from last_error

            try:
                payload = self._send(method, endpoint, params=params, body=body)

            except TransientTransportError as e:
                e.attempts = attempt
                last_error = e
                if attempt < self.retry_attempts:
                    wait = self.backoff.delay(attempt)
                    logger.warning(
                        f"{e}. Retrying in {wait:.2f}s (attempt {attempt}/{self.retry_attempts})",
                        extra={
                            "endpoint": endpoint,
                            "attempt": attempt,
                            "status_code": e.status_code,
                        },
                    )
                    self._sleep(wait)
                    continue
                break

            except MissingAccessTokenError as e:
                # Nothing left the process on this attempt
                e.attempts = attempt - 1
                raise

            except FatalTransportError as e:
                e.attempts = attempt
                raise

            if cache_key is not None:
                self.cache.store(cache_key, payload)
            return payload

        logger.error(
            f"{endpoint} failed after {self.retry_attempts} attempts: {last_error}",
            extra={"endpoint": endpoint, "attempt": self.retry_attempts},
        )
        raise ExhaustedRetriesError(
            f"{endpoint} failed after {self.retry_attempts} attempt(s). Last error: {last_error}",
            attempts=self.retry_attempts,
            last_error=last_error,
        ) from last_error
