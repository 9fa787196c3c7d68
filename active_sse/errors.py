"""
Exceptions raised by the active-sse client.

Configuration errors are raised synchronously by the setter that was misused.
Subscription errors are raised by ``SubscriptionManager.subscribe()``. Stream
errors are the terminal result of receiving from an ``EventReceiver``.
"""
from typing import Optional


class ActiveSSEError(Exception):
    """Base class for all active-sse errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ActiveSSEError):
    """A configuration setter was used incorrectly."""


class IncompatibleConfigError(ConfigError):
    """The setter does not apply to this configuration's kind."""

    def __init__(self, setter: str, kind: str):
        self.setter = setter
        self.kind = kind
        super().__init__(f"{setter}() is not valid for an {kind} configuration")


class ContractNotSetError(ConfigError):
    """An event name was given before a contract."""

    def __init__(self):
        super().__init__("A contract must be set before an event name")


class FieldAlreadySetError(ConfigError):
    """A call-once field was set a second time."""

    def __init__(self, field: str, current: str):
        self.field = field
        self.current = current
        super().__init__(f"{field} is already set to {current!r}")


class ConfigLockedError(ConfigError):
    """The configuration was handed to a subscription manager and is read-only."""

    def __init__(self):
        super().__init__("Configuration is locked and can no longer be changed")


# =============================================================================
# Subscription
# =============================================================================


class SubscribeError(ActiveSSEError):
    """A subscription could not be opened."""


class TransportUnavailableError(SubscribeError, ConnectionError):
    """
    The stream transport could not establish a session.

    The transport's own exception is chained as ``__cause__``; it is not part
    of the message.
    """

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Stream transport unavailable for {url}")


# =============================================================================
# Streaming
# =============================================================================


class StreamError(ActiveSSEError):
    """Terminal condition of an event stream."""


class StreamClosedError(StreamError):
    """The stream ended cleanly or the receiver was closed."""


class StreamFailedError(StreamError):
    """The stream ended because the transport reported an error."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause is not None and str(cause) else ""
        super().__init__(f"Event stream from {url} failed{detail}")
