#!/usr/bin/env python3
"""
Activity Listener

Demonstrates listening for stream activity on a ledger: globally, or for a
single stream when a stream ID is given.

Usage:
    python listener.py                 # All activity
    python listener.py <stream-id>     # One stream
"""

import asyncio
import sys

from active_sse import Config, SubscriptionManager, settings


async def main(stream_id: str | None) -> None:
    config = Config.new_activity(settings.base_url)
    if stream_id:
        config.set_stream_id(stream_id)

    print(f"📡 Listening on {config.resolved_path}")
    print("   Press Ctrl+C to stop\n")

    manager = SubscriptionManager(config)
    async with await manager.subscribe() as receiver:
        async for event in receiver:
            print(f"[{event.event}] {event.data}")


if __name__ == "__main__":
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
    except KeyboardInterrupt:
        print("\n👋 Stopped.")
