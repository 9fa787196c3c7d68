#!/usr/bin/env python3
"""
Contract Event Listener

Demonstrates narrowing an event subscription to one contract and, optionally,
one event name on it. Payloads are decoded as JSON where possible.

Usage:
    python listener.py <contract-id> [event-name]
"""

import asyncio
import sys

from active_sse import (
    Config,
    StreamFailedError,
    SubscriptionManager,
    TransportUnavailableError,
    settings,
)


async def main(contract_id: str, event_name: str | None) -> int:
    config = Config.new_event(settings.base_url).set_contract(contract_id)
    if event_name:
        config.set_event(event_name)

    manager = SubscriptionManager(config)

    try:
        receiver = await manager.subscribe()
    except TransportUnavailableError as e:
        print(f"❌ {e}: {e.__cause__}")
        return 1

    print(f"📨 Listening for events on {config.resolved_path}\n")

    async with receiver:
        try:
            async for event in receiver:
                try:
                    payload = event.parse_data()
                except ValueError:
                    payload = event.data
                print(f"[{event.event}] id={event.id} {payload}")
        except StreamFailedError as e:
            print(f"❌ {e}")
            return 1

    print("Stream closed by the ledger")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    try:
        sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)))
    except KeyboardInterrupt:
        print("\n👋 Stopped.")
