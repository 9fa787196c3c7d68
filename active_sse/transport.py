"""
Stream transport interface and the default httpx implementation.

The subscription manager only talks to a ``StreamTransport``: it opens a
``StreamSession`` for a URL and reads ``Event`` objects from it. Connection
handling and wire framing live behind this interface, so the manager can be
driven by any implementation (including in-memory stubs in tests).
"""
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, List, Optional

import httpx

from .models import Event
from .settings import settings

logger = logging.getLogger(__name__)


class StreamSession(ABC):
    """
    One open event stream.

    A session is consumed once: ``events()`` yields events in arrival order
    until the server ends the stream, and raises if the stream breaks.
    """

    @abstractmethod
    def events(self) -> AsyncIterator[Event]:
        """
        Iterate over received events.

        Raises:
            Exception: Any transport error that ends the stream
        """

    @abstractmethod
    async def close(self) -> None:
        """
        Release the connection.

        Must be safe to call more than once.
        """


class StreamTransport(ABC):
    """
    Abstract base class for stream transports.
    """

    @abstractmethod
    async def open(self, url: str) -> StreamSession:
        """
        Open a session against a URL.

        Returns once the server has accepted the stream.

        Raises:
            ConnectionError: If the stream could not be established
        """


# =============================================================================
# httpx implementation
# =============================================================================


class HttpxStreamSession(StreamSession):
    """Event stream read from a streaming ``httpx.Response``."""

    def __init__(
        self,
        response: httpx.Response,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            response: Open streaming response with a 200 status
            client: Client to close with the session (only when owned)
        """
        self._response = response
        self._client = client
        self._closed = False

    async def events(self) -> AsyncIterator[Event]:
        event_type: Optional[str] = None
        event_id: Optional[str] = None
        retry: Optional[int] = None
        data_lines: List[str] = []

        async for line in self._response.aiter_lines():
            if not line:
                # Empty line = end of event
                if data_lines:
                    event = Event(
                        event=event_type or "message",
                        data="\n".join(data_lines),
                        id=event_id,
                        retry=retry,
                    )
                    logger.debug(f"Received SSE event: {event.event}")
                    yield event
                event_type = None
                retry = None
                data_lines = []
                continue

            if line.startswith(":"):
                continue

            field, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]

            if field == "event":
                event_type = value
            elif field == "data":
                data_lines.append(value)
            elif field == "id":
                # The last event ID persists across events
                event_id = value or None
            elif field == "retry":
                if value.isdigit():
                    retry = int(value)
            # Ignore unknown fields

        if data_lines:
            logger.debug("Stream ended with an incomplete event, discarding it")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        await self._response.aclose()
        if self._client is not None:
            await self._client.aclose()


class HttpxStreamTransport(StreamTransport):
    """
    Opens server-sent event streams with ``httpx.AsyncClient``.

    No reconnection is attempted: when a stream ends or breaks, the session
    ends with it.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        connect_timeout: Optional[float] = None,
    ):
        """
        Args:
            client: Client to use; when omitted each session gets its own
                client, closed with the session
            headers: Extra request headers (e.g., authentication)
            connect_timeout: Connection timeout in seconds (defaults to settings)
        """
        self._client = client
        self._headers = headers or {}
        self._connect_timeout = (
            connect_timeout if connect_timeout is not None else settings.connect_timeout
        )

    def _create_client(self) -> httpx.AsyncClient:
        # Configure timeout for SSE streaming:
        # - connect: bounded for the initial handshake
        # - read: None (no timeout) for long-lived SSE streams
        # - pool: None (no timeout) for connection pool
        timeout = httpx.Timeout(
            connect=self._connect_timeout,
            read=None,
            write=settings.write_timeout,
            pool=None,
        )
        return httpx.AsyncClient(timeout=timeout)

    async def open(self, url: str) -> StreamSession:
        owned_client = None
        client = self._client
        if client is None:
            client = owned_client = self._create_client()

        headers = {
            "Accept": "text/event-stream",
            "Cache-Control": "no-cache",
            **self._headers,
        }

        logger.info(f"Connecting to SSE stream: {url}")

        try:
            request = client.build_request("GET", url, headers=headers)
            response = await client.send(request, stream=True)
        except BaseException:
            if owned_client is not None:
                await owned_client.aclose()
            raise

        if response.status_code != 200:
            await response.aclose()
            if owned_client is not None:
                await owned_client.aclose()
            raise ConnectionError(f"SSE connection failed: {response.status_code}")

        return HttpxStreamSession(response, client=owned_client)
