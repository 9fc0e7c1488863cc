"""CLI interface for bookmark-search.

Commands:
    setup   - Configure the relay backend and token location
    search  - Fetch bookmarks and search them locally
    status  - Show configuration and token status
"""

import sys
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    TOKEN_FILE,
    AppConfig,
    config_exists,
    load_config_or_default,
    save_config,
)
from .logging_config import setup_logging

RETRY_COMMAND = ":retry"
QUIT_COMMANDS = (":q", ":quit")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Bookmark Search — Browse and search your Twitter/X bookmarks."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


def _load(ctx) -> AppConfig:
    try:
        return load_config_or_default(ctx.obj["config_path"])
    except (ValueError, OSError) as e:
        click.echo(f"Error: Invalid config: {e}", err=True)
        sys.exit(1)


@main.command()
@click.pass_context
def setup(ctx):
    """Configure the relay backend and token file."""
    config_path = ctx.obj["config_path"]
    current = _load(ctx)

    click.echo("Bookmark Search — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("Bookmarks are fetched through your relay backend, which")
    click.echo("holds the Twitter credentials and forwards API calls.")
    click.echo()

    backend_url = click.prompt("backend_url", default=current.backend_url)
    if not backend_url.startswith(("http://", "https://")):
        click.echo("Error: backend_url must start with http:// or https://", err=True)
        sys.exit(1)
    token_file = click.prompt("token_file", default=str(current.token_file or TOKEN_FILE))

    config = AppConfig(
        backend_url=backend_url,
        timeout=current.timeout,
        token_file=Path(token_file).expanduser(),
    )
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")
    click.echo("Run 'bookmark-search search' to browse your bookmarks.")


@main.command()
@click.argument("query", required=False, default="")
@click.option(
    "-i", "--interactive", is_flag=True, help="Keep prompting for search queries"
)
@click.pass_context
def search(ctx, query, interactive):
    """Fetch bookmarks and show those matching QUERY.

    Without QUERY every bookmark is shown. In interactive mode, enter a new
    query at each prompt; an empty line shows everything, ':retry' refetches
    after an error and ':q' quits.
    """
    config = _load(ctx)

    # Lazy imports so --help stays fast
    from .auth import TokenStore, authorize_url
    from .controller import BookmarksController, Errored, Ready, Unauthenticated
    from .relay import RelayClient
    from .render import render_view

    with RelayClient(config.backend_url, timeout=config.timeout) as relay:
        controller = BookmarksController(
            relay,
            TokenStore(config.token_file),
            authorize_url(config.backend_url),
        )

        click.echo("Fetching bookmarks...", err=True)
        state = controller.start()

        if isinstance(state, Unauthenticated):
            click.echo("Authorize Twitter so I can read your bookmarks.")
            click.echo("This app can only read your bookmarks. It will never Tweet on your behalf.")
            click.echo(f"Authorize at: {state.authorize_url}")
            sys.exit(1)

        if isinstance(state, Ready):
            state = controller.search(query)
            click.echo(render_view(state.view))
        elif isinstance(state, Errored):
            click.echo(f"Error: {state.message}", err=True)
            if not interactive:
                sys.exit(1)

        if not interactive:
            return

        while True:
            prompt = "retry/quit" if isinstance(state, Errored) else "search"
            value = click.prompt(prompt, default="", show_default=False)

            if value in QUIT_COMMANDS:
                break
            if value == RETRY_COMMAND:
                click.echo("Fetching bookmarks...", err=True)
                state = controller.retry()
                value = ""
            if isinstance(state, Unauthenticated):
                click.echo(f"Authorize at: {state.authorize_url}")
                break
            if isinstance(state, Errored):
                click.echo(
                    f"Error: {state.message} Type '{RETRY_COMMAND}' to try again.",
                    err=True,
                )
                continue

            state = controller.search(value)
            click.echo(render_view(state.view))


@main.command()
@click.pass_context
def status(ctx):
    """Show configuration and token status."""
    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)
    config = _load(ctx)

    from .auth import TokenStore

    click.echo("Bookmark Search — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured'} ({config_path})")
    click.echo(f"Backend: {config.backend_url}")

    valid = TokenStore(config.token_file).has_valid_token()
    click.echo(f"Token: {'Valid' if valid else 'Missing or expired'} ({config.token_file})")

    if not has_config:
        click.echo("\nRun 'bookmark-search setup' to configure the backend.")
