"""
Data models for the active-sse client.
"""
import json
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """
    Base configuration for all DTOs.

    - Aliases are generated in camelCase for JSON serialization.
    - Allows population by field name (snake_case) in Python code.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SubscriptionKind(str, Enum):
    """Which Activeledger stream a configuration targets."""
    ACTIVITY = "activity"   # Stream creation and update activity
    EVENT = "event"         # Events emitted by contracts


class SubscriptionState(str, Enum):
    """Lifecycle of a single subscription."""
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


class Event(BaseDTO):
    """
    A single server-sent event as delivered by the stream transport.

    Fields:
        event: Event name/type ("message" when the server sends none)
        data: Payload text, multi-line data joined with newlines
        id: Last event ID sent by the server, if any
        retry: Server reconnection hint in milliseconds, if any
    """
    model_config = ConfigDict(frozen=True)

    event: str = Field(
        default="message",
        description="Event name/type"
    )
    data: str = Field(
        default="",
        description="Event payload text"
    )
    id: Optional[str] = Field(
        default=None,
        description="Event ID"
    )
    retry: Optional[int] = Field(
        default=None,
        description="Reconnection time hint in milliseconds"
    )

    def parse_data(self) -> Any:
        """
        Decode the payload as JSON.

        Raises:
            ValueError: If the payload is not valid JSON
        """
        return json.loads(self.data)


# =============================================================================
# Subscription targets
# =============================================================================


class ActivityTarget(BaseDTO):
    """Activity subscription payload: optionally narrowed to one stream."""
    model_config = ConfigDict(frozen=True)

    kind: Literal[SubscriptionKind.ACTIVITY] = SubscriptionKind.ACTIVITY
    stream_id: Optional[str] = Field(
        default=None,
        description="Stream to listen to (all streams when unset)"
    )


class EventTarget(BaseDTO):
    """Event subscription payload: optionally narrowed to a contract, then an event."""
    model_config = ConfigDict(frozen=True)

    kind: Literal[SubscriptionKind.EVENT] = SubscriptionKind.EVENT
    contract_id: Optional[str] = Field(
        default=None,
        description="Contract whose events to listen to (all contracts when unset)"
    )
    event_name: Optional[str] = Field(
        default=None,
        description="Event name on the contract (all events when unset)"
    )

    @model_validator(mode="after")
    def check_event_requires_contract(self) -> "EventTarget":
        if self.event_name is not None and self.contract_id is None:
            raise ValueError("event_name requires contract_id")
        return self


SubscriptionTarget = Annotated[
    Union[ActivityTarget, EventTarget],
    Field(discriminator="kind"),
]

subscription_target_adapter: TypeAdapter[SubscriptionTarget] = TypeAdapter(SubscriptionTarget)
