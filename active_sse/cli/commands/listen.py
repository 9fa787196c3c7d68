"""
active-sse activity / events / path - Subscribe to a ledger and print events.
"""

import asyncio
import logging
from typing import Optional

import typer

from active_sse.config import Config
from active_sse.errors import ConfigError, StreamFailedError, TransportUnavailableError
from active_sse.models import SubscriptionKind
from active_sse.settings import Settings, settings
from active_sse.subscription import SubscriptionManager
from active_sse.transport import HttpxStreamTransport, StreamTransport


KIND_EMOJIS = {
    SubscriptionKind.ACTIVITY: "📡",
    SubscriptionKind.EVENT: "📨",
}


def configure_logging(debug: bool) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if debug or settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_transport() -> StreamTransport:
    """Transport used by the listening commands."""
    return HttpxStreamTransport()


def build_config(
    kind: SubscriptionKind,
    base_url: Optional[str] = None,
    stream_id: Optional[str] = None,
    contract_id: Optional[str] = None,
    event_name: Optional[str] = None,
) -> Config:
    """Build a configuration, exiting with an error message if it is invalid."""
    try:
        return Config.from_settings(
            kind,
            stream_id=stream_id,
            contract_id=contract_id,
            event_name=event_name,
            settings=Settings(base_url=base_url) if base_url else Settings(),
        )
    except ConfigError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)


async def stream_events(config: Config, limit: Optional[int] = None) -> int:
    """
    Subscribe and print each event as a JSON line.

    Returns:
        Number of events printed
    """
    manager = SubscriptionManager(config, transport=create_transport())
    count = 0

    async with await manager.subscribe() as receiver:
        async for event in receiver:
            typer.echo(event.model_dump_json(exclude_none=True))
            count += 1
            if limit is not None and count >= limit:
                break

    return count


def run_listener(config: Config, limit: Optional[int]) -> None:
    """Run ``stream_events`` to completion and map failures to exit codes."""
    emoji = KIND_EMOJIS[config.kind]
    typer.echo(f"{emoji} Listening on {config.resolved_path}", err=True)

    try:
        count = asyncio.run(stream_events(config, limit))
    except TransportUnavailableError as e:
        typer.echo(f"❌ Error: {e} ({e.__cause__})", err=True)
        raise typer.Exit(1)
    except StreamFailedError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo("\n👋 Stopped.", err=True)
        return

    typer.echo(f"✅ Received {count} event(s)", err=True)


def listen_activity(
    stream_id: Optional[str] = typer.Option(
        None,
        "--stream-id", "-s",
        help="Only listen to activity on this stream.",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url", "-u",
        help="Ledger API root. Defaults to ACTIVE_SSE_BASE_URL.",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit", "-n",
        min=1,
        help="Stop after this many events.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
):
    """
    Listen for stream activity.

    Examples:

        active-sse activity                      # All activity

        active-sse activity --stream-id abc123   # One stream
    """
    configure_logging(debug)
    config = build_config(SubscriptionKind.ACTIVITY, base_url, stream_id=stream_id)
    run_listener(config, limit)


def listen_events(
    contract_id: Optional[str] = typer.Option(
        None,
        "--contract", "-c",
        help="Only listen to events emitted by this contract.",
    ),
    event_name: Optional[str] = typer.Option(
        None,
        "--event", "-e",
        help="Only listen to this event (requires --contract).",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url", "-u",
        help="Ledger API root. Defaults to ACTIVE_SSE_BASE_URL.",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit", "-n",
        min=1,
        help="Stop after this many events.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
):
    """
    Listen for contract events.

    Examples:

        active-sse events                                  # All events

        active-sse events --contract c1                    # One contract

        active-sse events --contract c1 --event fired      # One event
    """
    configure_logging(debug)
    config = build_config(
        SubscriptionKind.EVENT,
        base_url,
        contract_id=contract_id,
        event_name=event_name,
    )
    run_listener(config, limit)


def show_path(
    kind: SubscriptionKind = typer.Argument(
        ...,
        help="Subscription kind: activity or event.",
        case_sensitive=False,
    ),
    stream_id: Optional[str] = typer.Option(None, "--stream-id", "-s"),
    contract_id: Optional[str] = typer.Option(None, "--contract", "-c"),
    event_name: Optional[str] = typer.Option(None, "--event", "-e"),
    base_url: Optional[str] = typer.Option(None, "--base-url", "-u"),
):
    """
    Print the URL a subscription would connect to, without connecting.
    """
    config = build_config(kind, base_url, stream_id, contract_id, event_name)
    typer.echo(config.resolved_path)
