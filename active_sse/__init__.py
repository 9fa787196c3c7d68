"""
active-sse - Server-sent event subscriptions for Activeledger.

Create a configuration, hand it to a SubscriptionManager and read events from
the receiver it returns:

    from active_sse import Config, SubscriptionManager

    config = Config.new_event("http://localhost:5260")
    config.set_contract("contract-id").set_event("fired")

    receiver = await SubscriptionManager(config).subscribe()
    event = await receiver.recv()
"""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    ActiveSSEError,
    ConfigError,
    ConfigLockedError,
    ContractNotSetError,
    FieldAlreadySetError,
    IncompatibleConfigError,
    StreamClosedError,
    StreamError,
    StreamFailedError,
    SubscribeError,
    TransportUnavailableError,
)
from .models import (
    ActivityTarget,
    Event,
    EventTarget,
    SubscriptionKind,
    SubscriptionState,
)
from .settings import Settings, settings
from .subscription import EventReceiver, SubscriptionManager
from .transport import (
    HttpxStreamSession,
    HttpxStreamTransport,
    StreamSession,
    StreamTransport,
)

__all__ = [
    # Configuration
    "Config",
    "SubscriptionKind",
    "ActivityTarget",
    "EventTarget",
    # Subscription
    "SubscriptionManager",
    "EventReceiver",
    "SubscriptionState",
    "Event",
    # Transport
    "StreamTransport",
    "StreamSession",
    "HttpxStreamTransport",
    "HttpxStreamSession",
    # Settings
    "Settings",
    "settings",
    # Errors
    "ActiveSSEError",
    "ConfigError",
    "IncompatibleConfigError",
    "ContractNotSetError",
    "FieldAlreadySetError",
    "ConfigLockedError",
    "SubscribeError",
    "TransportUnavailableError",
    "StreamError",
    "StreamClosedError",
    "StreamFailedError",
]
