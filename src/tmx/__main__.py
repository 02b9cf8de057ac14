"""CLI entry point for tmx."""

from collections.abc import Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from tmx import __version__
from tmx.commands import (
    init_config,
    list_configured_ids,
    list_running,
    list_running_names,
    list_sessions,
    refresh_session,
    start_session,
    stop_session,
    validate_config_file,
)
from tmx.context import AppContext
from tmx.cycle import cycle
from tmx.diagnostics import setup_logging
from tmx.errors import ExternalCommandError, TmxError
from tmx.tmux_manager import TmuxManager
from tmx.xdg_paths import get_config_file_path

T = TypeVar("T")

app = typer.Typer(
    name="tmx",
    help="A tmux session manager with declarative YAML configuration.",
    no_args_is_help=False,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tmx {__version__}")
        raise typer.Exit()


def _run(ctx: typer.Context, action: Callable[[AppContext], T]) -> T:
    """Run a command, turning tmx errors into ``Error: ...`` and exit status 1."""
    app_ctx: AppContext = ctx.obj
    try:
        return action(app_ctx)
    except TmxError as e:
        app_ctx.log.error(str(e))
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        if isinstance(e, ExternalCommandError):
            err_console.print("[dim]The session may be partially built. Run 'tmx list' to inspect it.[/]")
        raise typer.Exit(1) from None


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-C", help="Config file path (overrides TMX_CONFIG_PATH)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print every tmux command and log at debug level."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version."),
    ] = None,
) -> None:
    """Cycle through running sessions, or start the default one if none are running."""
    log = setup_logging(verbose=verbose, console=err_console)
    tmux = TmuxManager(log)
    ctx.obj = AppContext(
        config_path=get_config_file_path(config_path),
        tmux=tmux,
        log=log,
        inside_tmux=tmux.is_inside(),
        console=console,
        err_console=err_console,
    )

    # If a subcommand was invoked, don't run main logic
    if ctx.invoked_subcommand is not None:
        return

    _run(ctx, cycle)


@app.command()
def start(
    ctx: typer.Context,
    session: Annotated[str, typer.Argument(help="Session id or name from config.")],
) -> None:
    """Start or attach to a session."""
    _run(ctx, lambda app_ctx: start_session(app_ctx, session))


@app.command("open", hidden=True)
def open_(
    ctx: typer.Context,
    session: Annotated[str, typer.Argument(help="Session id or name from config.")],
) -> None:
    """Alias for start."""
    start(ctx, session)


@app.command()
def stop(
    ctx: typer.Context,
    session: Annotated[str, typer.Argument(help="Running session name.")],
) -> None:
    """Stop a running session."""
    _run(ctx, lambda app_ctx: stop_session(app_ctx, session))


@app.command("close", hidden=True)
def close(
    ctx: typer.Context,
    session: Annotated[str, typer.Argument(help="Running session name.")],
) -> None:
    """Alias for stop."""
    stop(ctx, session)


@app.command()
def refresh(
    ctx: typer.Context,
    session: Annotated[str, typer.Argument(help="Session id or name from config.")],
) -> None:
    """Add missing panes to a running session and reapply its layout."""
    _run(ctx, lambda app_ctx: refresh_session(app_ctx, session))


@app.command("list")
def list_(ctx: typer.Context) -> None:
    """List configured and running sessions."""
    _run(ctx, list_sessions)


@app.command("ls", hidden=True)
def ls(ctx: typer.Context) -> None:
    """Alias for list."""
    list_(ctx)


@app.command()
def running(ctx: typer.Context) -> None:
    """Show only running tmux sessions."""
    _run(ctx, list_running)


@app.command()
def validate(ctx: typer.Context) -> None:
    """Validate the configuration file."""
    if not _run(ctx, validate_config_file):
        raise typer.Exit(1)


@app.command()
def init(ctx: typer.Context) -> None:
    """Create the default configuration file."""
    _run(ctx, init_config)


@app.command("__list-configured", hidden=True)
def list_configured(ctx: typer.Context) -> None:
    """List configured session ids (for completions)."""
    for session_id in _run(ctx, list_configured_ids):
        console.print(session_id, markup=False, highlight=False)


@app.command("__list-running", hidden=True)
def list_running_completions(ctx: typer.Context) -> None:
    """List running session names (for completions)."""
    for name in _run(ctx, list_running_names):
        console.print(name, markup=False, highlight=False)


if __name__ == "__main__":
    app()
