"""
active-sse CLI - Main entry point.

Commands:
    active-sse activity   - Listen for stream activity
    active-sse events     - Listen for contract events
    active-sse path       - Print a subscription URL
    active-sse version    - Show the client version
"""

import typer

from .commands import listen

app = typer.Typer(
    name="active-sse",
    help="Subscribe to Activeledger server-sent events.",
    no_args_is_help=True,
)

# Register commands
app.command(name="activity", help="Listen for stream activity.")(listen.listen_activity)
app.command(name="events", help="Listen for contract events.")(listen.listen_events)
app.command(name="path", help="Print the URL a subscription would use.")(listen.show_path)


@app.command()
def version():
    """
    Show the active-sse version.
    """
    from active_sse import __version__
    typer.echo(f"active-sse v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
