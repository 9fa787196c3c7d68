"""
Subscription configuration for Activeledger server-sent events.

A configuration is either an *activity* subscription (stream creation and
update activity, optionally for one stream) or an *event* subscription
(contract events, optionally for one contract and then one event name). The
kind is chosen by the factory and never changes.

Usage:
    from active_sse import Config

    # Listen to all activity on the network
    config = Config.new_activity("http://localhost:5260")

    # Listen to one stream
    config = Config.new_activity("http://localhost:5260").set_stream_id("stream-1")

    # Listen to one event on one contract
    config = Config.new_event("http://localhost:5260")
    config.set_contract("contract-id")
    config.set_event("fired")

Every setter may be called once. A rejected call leaves the configuration
exactly as it was.
"""
import logging
from typing import Any, Dict, Optional, Union

from .errors import (
    ConfigLockedError,
    ContractNotSetError,
    FieldAlreadySetError,
    IncompatibleConfigError,
)
from .models import (
    ActivityTarget,
    EventTarget,
    SubscriptionKind,
    SubscriptionTarget,
    subscription_target_adapter,
)
from .paths import resolve_path
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Config:
    """
    Subscription target: a base URL plus a kind-specific payload.

    Attributes:
        base_url: Ledger API root the path is built on
        kind: ACTIVITY or EVENT
        resolved_path: URL the subscription will connect to
    """

    def __init__(self, base_url: str, target: Union[SubscriptionTarget, Dict[str, Any]]):
        """
        Args:
            base_url: Ledger API root
            target: Kind-specific payload, as a model or a dict with a
                ``kind`` discriminator (camelCase or snake_case keys)
        """
        self._base_url = base_url
        target = subscription_target_adapter.validate_python(target)
        self._target = target
        self._resolved_path = resolve_path(base_url, target)
        self._locked = False

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def new_activity(cls, base_url: str) -> "Config":
        """
        Create an activity configuration.

        Subscribing to activity listens for stream creation and updates across
        the network, or on one stream once ``set_stream_id`` is called.
        """
        return cls(base_url, ActivityTarget())

    @classmethod
    def new_event(cls, base_url: str) -> "Config":
        """
        Create an event configuration.

        Without further setters this listens to every event on the network.
        ``set_contract`` narrows it to one contract and ``set_event`` to a
        single event on that contract.
        """
        return cls(base_url, EventTarget())

    @classmethod
    def from_settings(
        cls,
        kind: SubscriptionKind,
        stream_id: Optional[str] = None,
        contract_id: Optional[str] = None,
        event_name: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> "Config":
        """
        Build a configuration on the base URL from settings.

        Optional fields are applied through the regular setters, so the same
        kind and ordering rules hold.
        """
        base_url = (settings or default_settings).base_url
        if kind == SubscriptionKind.ACTIVITY:
            config = cls.new_activity(base_url)
        else:
            config = cls.new_event(base_url)

        if stream_id is not None:
            config.set_stream_id(stream_id)
        if contract_id is not None:
            config.set_contract(contract_id)
        if event_name is not None:
            config.set_event(event_name)
        return config

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def kind(self) -> SubscriptionKind:
        return self._target.kind

    @property
    def target(self) -> SubscriptionTarget:
        return self._target

    @property
    def stream_id(self) -> Optional[str]:
        return getattr(self._target, "stream_id", None)

    @property
    def contract_id(self) -> Optional[str]:
        return getattr(self._target, "contract_id", None)

    @property
    def event_name(self) -> Optional[str]:
        return getattr(self._target, "event_name", None)

    @property
    def resolved_path(self) -> str:
        """URL the subscription connects to."""
        return self._resolved_path

    @property
    def is_locked(self) -> bool:
        return self._locked

    # =========================================================================
    # Setters
    # =========================================================================

    def set_stream_id(self, stream_id: str) -> "Config":
        """
        Listen for activity on a specific stream.

        Raises:
            IncompatibleConfigError: If this is not an activity configuration
            FieldAlreadySetError: If a stream ID was already set
            ConfigLockedError: If the configuration is in use by a subscription
        """
        self._check_writable("set_stream_id", SubscriptionKind.ACTIVITY)
        self._check_unset("stream_id", self.stream_id)

        self._apply(stream_id=stream_id)
        return self

    def set_contract(self, contract_id: str) -> "Config":
        """
        Listen for events emitted by a specific contract.

        Raises:
            IncompatibleConfigError: If this is not an event configuration
            FieldAlreadySetError: If a contract was already set
            ConfigLockedError: If the configuration is in use by a subscription
        """
        self._check_writable("set_contract", SubscriptionKind.EVENT)
        self._check_unset("contract_id", self.contract_id)

        self._apply(contract_id=contract_id)
        return self

    def set_event(self, event_name: str) -> "Config":
        """
        Listen for a specific event on the configured contract.

        A contract must be set first.

        Raises:
            IncompatibleConfigError: If this is not an event configuration
            ContractNotSetError: If no contract has been set
            FieldAlreadySetError: If an event name was already set
            ConfigLockedError: If the configuration is in use by a subscription
        """
        self._check_writable("set_event", SubscriptionKind.EVENT)
        if self.contract_id is None:
            raise ContractNotSetError()
        self._check_unset("event_name", self.event_name)

        self._apply(event_name=event_name)
        return self

    def lock(self) -> None:
        """Make the configuration read-only."""
        self._locked = True

    # =========================================================================
    # Internal
    # =========================================================================

    def _check_writable(self, setter: str, required: SubscriptionKind) -> None:
        # Kind errors take precedence: a wrong-kind setter never applies
        if self.kind != required:
            raise IncompatibleConfigError(setter, self.kind.value)
        if self._locked:
            raise ConfigLockedError()

    @staticmethod
    def _check_unset(field: str, current: Optional[str]) -> None:
        if current is not None:
            raise FieldAlreadySetError(field, current)

    def _apply(self, **fields: str) -> None:
        target = subscription_target_adapter.validate_python(
            {**self._target.model_dump(), **fields}
        )
        resolved_path = resolve_path(self._base_url, target)
        self._target = target
        self._resolved_path = resolved_path
        logger.debug(f"Resolved subscription path: {resolved_path}")

    def __repr__(self) -> str:
        return f"Config(kind={self.kind.value!r}, resolved_path={self._resolved_path!r})"
