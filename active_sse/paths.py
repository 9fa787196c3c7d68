"""
Resource path resolution for Activeledger subscriptions.

Paths have the form::

    Activity: <base_url>/api/activity/subscribe/[<stream_id>]
    Event:    <base_url>/api/events/[<contract_id>[<event_name>]]

Segments are appended directly onto the prefix, without separators, in the
order stream id, contract, event name.
"""
from typing import Optional

from .errors import ContractNotSetError
from .models import ActivityTarget, EventTarget, SubscriptionTarget

ACTIVITY_PREFIX = "/api/activity/subscribe/"
EVENT_PREFIX = "/api/events/"


def activity_path(base_url: str, stream_id: Optional[str] = None) -> str:
    """Build the activity subscription path, optionally for a single stream."""
    path = base_url + ACTIVITY_PREFIX
    if stream_id is not None:
        path += stream_id
    return path


def event_path(
    base_url: str,
    contract_id: Optional[str] = None,
    event_name: Optional[str] = None,
) -> str:
    """
    Build the event subscription path.

    Args:
        base_url: Ledger API root (e.g., "http://localhost:5260")
        contract_id: Narrow to events emitted by this contract
        event_name: Narrow further to one event on that contract

    Raises:
        ContractNotSetError: If an event name is given without a contract
    """
    if event_name is not None and contract_id is None:
        raise ContractNotSetError()

    path = base_url + EVENT_PREFIX
    if contract_id is not None:
        path += contract_id
        if event_name is not None:
            path += event_name
    return path


def resolve_path(base_url: str, target: SubscriptionTarget) -> str:
    """Resolve the full subscription path for a target of either kind."""
    if isinstance(target, ActivityTarget):
        return activity_path(base_url, target.stream_id)
    if isinstance(target, EventTarget):
        return event_path(base_url, target.contract_id, target.event_name)
    raise TypeError(f"Unknown subscription target: {type(target).__name__}")
