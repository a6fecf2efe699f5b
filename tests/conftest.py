"""Shared fixtures: fake time, a scripted transport stub and settings."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from bingwebmaster.core.config import Settings


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedSend:
    """Transport stand-in that replays a list of results or exceptions."""

    def __init__(self, outcomes: List[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def __call__(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        self.calls.append(
            {"method": method, "endpoint": endpoint, "params": params, "body": body}
        )
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleeps() -> List[float]:
    """Collects requested backoff delays instead of sleeping."""
    return []


@pytest.fixture()
def make_settings():
    """Settings with rate limiting off unless a test turns it on."""

    def _make(**overrides: Any) -> Settings:
        values: Dict[str, Any] = {
            "access_token": "",
            "rate_limiting_enabled": False,
            "cache_enabled": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture()
def script():
    """Factory for ScriptedSend stubs."""
    return ScriptedSend
