"""Shared fixtures for the trends-gateway test suite."""

from __future__ import annotations

import json
import random
from datetime import datetime
from typing import List, Optional, Sequence, Union

import pytest

from trends_gateway.adapters.interfaces.upstream import UpstreamClient
from trends_gateway.core.config import Settings
from trends_gateway.domain.models.query import CanonicalQuery


SAMPLE_PAYLOAD = {
    "default": {
        "timelineData": [
            {"time": "1760832000", "formattedTime": "Oct 19, 2025", "value": [57], "hasData": [True]},
            {"time": "1760918400", "formattedTime": "Oct 20, 2025", "value": [61], "hasData": [True]},
        ],
        "averages": [],
    }
}


class StubUpstream(UpstreamClient):
    """Upstream that replays a script of payloads and exceptions, one per call."""

    def __init__(self, script: Sequence[Union[str, Exception]], repeat_last: bool = True):
        self.script = list(script)
        self.repeat_last = repeat_last
        self.calls: List[dict] = []
        self.closed = False

    async def fetch(
        self,
        keywords: Sequence[str],
        geo: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> str:
        self.calls.append({
            "keywords": list(keywords),
            "geo": geo,
            "start_time": start_time,
            "end_time": end_time,
        })
        index = len(self.calls) - 1
        if index >= len(self.script):
            if not self.repeat_last:
                raise AssertionError("upstream called more often than scripted")
            index = len(self.script) - 1
        step = self.script[index]
        if isinstance(step, Exception):
            raise step
        return step

    async def close(self) -> None:
        self.closed = True


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sample_payload_text() -> str:
    return json.dumps(SAMPLE_PAYLOAD)


@pytest.fixture
def canonical_query() -> CanonicalQuery:
    return CanonicalQuery(keywords=("ai", "robots"), geo="US")


@pytest.fixture
def make_upstream():
    """Factory for scripted upstream stubs."""
    return StubUpstream
