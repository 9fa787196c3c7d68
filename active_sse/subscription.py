"""
Subscription manager for Activeledger server-sent events.

This module turns a ``Config`` into a live stream of ``Event`` objects.

Usage:
    from active_sse import Config, SubscriptionManager

    config = Config.new_activity("http://localhost:5260")
    config.set_stream_id("stream-1")

    manager = SubscriptionManager(config)
    receiver = await manager.subscribe()

    async with receiver:
        async for event in receiver:
            print(event.event, event.parse_data())

``subscribe()`` returns as soon as the transport has accepted the stream.
Events are pumped from the transport session into a queue by a background
task and handed to the caller in arrival order.
"""
import asyncio
import logging
from typing import Optional, Union

from .config import Config
from .errors import StreamClosedError, StreamFailedError, TransportUnavailableError
from .models import Event, SubscriptionState
from .settings import settings
from .transport import HttpxStreamTransport, StreamSession, StreamTransport

logger = logging.getLogger(__name__)


class _StreamEnd:
    """Queue marker for the end of the stream."""

    def __init__(self, error: Optional[BaseException] = None):
        self.error = error


class EventReceiver:
    """
    Consumer handle for one open subscription.

    The receiver owns its transport session. Events are delivered once, in
    arrival order; after the last one the stream's terminal condition is
    raised: ``StreamClosedError`` for a clean end, ``StreamFailedError`` when
    the transport broke.

    Attributes:
        url: URL the session was opened against
        state: OPEN while the transport is delivering, then CLOSED or FAILED
    """

    def __init__(
        self,
        session: StreamSession,
        url: str,
        max_queue_size: int = 0,
    ):
        self._session = session
        self._url = url
        self._queue: asyncio.Queue[Union[Event, _StreamEnd]] = asyncio.Queue(
            maxsize=max_queue_size
        )
        self._state = SubscriptionState.UNOPENED
        self._error: Optional[BaseException] = None
        self._end: Optional[_StreamEnd] = None
        self._released = False
        self._pump_task: Optional[asyncio.Task] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        """Transport error that failed the stream, if any."""
        return self._error

    # =========================================================================
    # Receiving
    # =========================================================================

    async def recv(self) -> Event:
        """
        Wait for the next event.

        Raises:
            StreamClosedError: The stream ended cleanly or the receiver was closed
            StreamFailedError: The transport reported an error
        """
        self._check_receivable()
        item = await self._queue.get()
        return self._unwrap(item)

    def recv_nowait(self) -> Optional[Event]:
        """
        Return the next event if one is pending, otherwise None.

        Raises:
            StreamClosedError: The stream ended cleanly or the receiver was closed
            StreamFailedError: The transport reported an error
        """
        self._check_receivable()
        try:
            item = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        return self._unwrap(item)

    def __aiter__(self) -> "EventReceiver":
        return self

    async def __anext__(self) -> Event:
        try:
            return await self.recv()
        except StreamClosedError:
            raise StopAsyncIteration from None

    def _check_receivable(self) -> None:
        if self._released:
            raise StreamClosedError(f"Receiver for {self._url} is closed")
        if self._end is not None:
            self._raise_end(self._end)

    def _unwrap(self, item: Union[Event, _StreamEnd]) -> Event:
        if isinstance(item, _StreamEnd):
            self._end = item
            # Leave the marker for any other task blocked in recv()
            try:
                self._queue.put_nowait(item)
            except asyncio.QueueFull:
                pass
            self._raise_end(item)
        return item

    def _raise_end(self, end: _StreamEnd) -> None:
        if end.error is not None:
            raise StreamFailedError(self._url, end.error) from end.error
        raise StreamClosedError(f"Event stream from {self._url} ended")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start pumping events from the session. Called by the manager."""
        if self._pump_task is not None:
            return
        self._state = SubscriptionState.OPEN
        self._pump_task = asyncio.create_task(self._pump())

    async def close(self) -> None:
        """
        Release the subscription.

        Stops delivery and closes the transport session. Events not yet
        received are discarded.
        """
        if self._released:
            return
        self._released = True

        if self._pump_task is not None and not self._pump_task.done():
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass
        else:
            await self._close_session()

        # Wake a consumer blocked in recv(); a full queue has no waiters
        try:
            self._queue.put_nowait(_StreamEnd())
        except asyncio.QueueFull:
            pass

        if self._state in (SubscriptionState.UNOPENED, SubscriptionState.OPEN):
            self._state = SubscriptionState.CLOSED
        logger.info(f"Closed subscription to {self._url}")

    async def _pump(self) -> None:
        """Move events from the session into the queue until the stream ends."""
        try:
            async for event in self._session.events():
                await self._queue.put(event)
        except asyncio.CancelledError:
            self._state = SubscriptionState.CLOSED
            raise
        except Exception as e:
            self._state = SubscriptionState.FAILED
            self._error = e
            logger.warning(f"Event stream from {self._url} failed: {e}")
            await self._queue.put(_StreamEnd(e))
        else:
            self._state = SubscriptionState.CLOSED
            logger.info(f"Event stream from {self._url} closed by server")
            await self._queue.put(_StreamEnd())
        finally:
            await self._close_session()

    async def _close_session(self) -> None:
        try:
            await self._session.close()
        except Exception as e:
            logger.warning(f"Error closing stream session for {self._url}: {e}")

    # =========================================================================
    # Context Manager Support
    # =========================================================================

    async def __aenter__(self) -> "EventReceiver":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


class SubscriptionManager:
    """
    Opens subscriptions for a configuration.

    The configuration is locked when handed to the manager and read-only from
    then on. Each ``subscribe()`` call opens an independent session.
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[StreamTransport] = None,
        max_queue_size: Optional[int] = None,
    ):
        """
        Args:
            config: Subscription target
            transport: Stream transport (defaults to HttpxStreamTransport)
            max_queue_size: Receiver queue bound, 0 for unbounded
                (defaults to settings)
        """
        config.lock()
        self._config = config
        self._transport = transport or HttpxStreamTransport()
        self._max_queue_size = (
            max_queue_size if max_queue_size is not None else settings.queue_max_size
        )

    @property
    def config(self) -> Config:
        return self._config

    async def subscribe(self) -> EventReceiver:
        """
        Open a subscription at the configuration's resolved path.

        Returns:
            A started EventReceiver

        Raises:
            TransportUnavailableError: If the transport could not open a session
        """
        url = self._config.resolved_path
        logger.info(f"Subscribing to {url}")

        try:
            session = await self._transport.open(url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Failed to open event stream at {url}: {e}")
            raise TransportUnavailableError(url) from e

        receiver = EventReceiver(session, url, max_queue_size=self._max_queue_size)
        receiver.start()
        return receiver
