"""
Pytest configuration for active-sse tests.
"""
import asyncio
from typing import AsyncIterator, List, Optional

import pytest

from active_sse.models import Event
from active_sse.transport import StreamSession, StreamTransport


class StubSession(StreamSession):
    """
    In-memory session that yields a fixed list of events.

    After the events it either ends, raises ``error``, or (with ``hold``)
    waits until released so the stream stays open.
    """

    def __init__(
        self,
        events: Optional[List[Event]] = None,
        error: Optional[Exception] = None,
        hold: bool = False,
    ):
        self._events = list(events or [])
        self._error = error
        self._hold = hold
        self.release = asyncio.Event()
        self.close_calls = 0

    async def events(self) -> AsyncIterator[Event]:
        for event in self._events:
            yield event
        if self._error is not None:
            raise self._error
        if self._hold:
            await self.release.wait()

    async def close(self) -> None:
        self.close_calls += 1

    @property
    def closed(self) -> bool:
        return self.close_calls > 0


class StubTransport(StreamTransport):
    """Transport that hands out a prepared session or fails to open."""

    def __init__(
        self,
        session: Optional[StubSession] = None,
        error: Optional[Exception] = None,
    ):
        self.session = session or StubSession()
        self.error = error
        self.opened_urls: List[str] = []

    async def open(self, url: str) -> StreamSession:
        self.opened_urls.append(url)
        if self.error is not None:
            raise self.error
        return self.session


@pytest.fixture
def three_events():
    """Three distinct events in delivery order."""
    return [
        Event(event="activity", data='{"stream": "s1"}', id="1"),
        Event(event="activity", data='{"stream": "s2"}', id="2"),
        Event(event="activity", data='{"stream": "s3"}', id="3"),
    ]


@pytest.fixture
def stub_transport(three_events):
    """Transport whose session yields three events then closes."""
    return StubTransport(StubSession(three_events))
