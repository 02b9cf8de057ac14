"""Command implementations behind the tmx CLI."""

from pathlib import Path

from rich.markup import escape

from tmx.config import Config, resolve_session, validate_config, write_default_config
from tmx.context import AppContext
from tmx.errors import MultiplexerNotInstalledError, SessionNotRunningError
from tmx.reconciler import WindowRefresh, refresh
from tmx.session_builder import create_session
from tmx.utils import sanitize_session_name


def require_tmux(ctx: AppContext) -> None:
    """Fail early when tmux is not installed."""
    if not ctx.tmux.is_installed():
        raise MultiplexerNotInstalledError()


def attach_or_switch(ctx: AppContext, session_name: str) -> None:
    """Switch the client when inside tmux, attach otherwise."""
    if ctx.inside_tmux:
        ctx.tmux.switch_client(session_name)
    else:
        ctx.tmux.attach_session(session_name)


def start_session(ctx: AppContext, session_id: str, config: Config | None = None, cwd: Path | None = None) -> None:
    """Build a session if it is not running, then attach or switch to it.

    Args:
        ctx: The invocation context.
        session_id: Session id, display name, or a new name for a dynamic session.
        config: Already loaded config; loaded from ``ctx`` if None.
        cwd: Root for a dynamic session.
    """
    require_tmux(ctx)
    if config is None:
        config = ctx.load_config()

    session = resolve_session(config, session_id, cwd)
    session_name = session.name
    ctx.log.info(f"start: session_id={session_id} name={session_name}")

    if ctx.tmux.has_session(session_name):
        ctx.console.print(f"Session '{escape(session_name)}' already exists. Attaching...")
    else:
        ctx.console.print(f"Creating session '{escape(session_name)}' with {len(session.windows)} window(s)...")
        create_session(session, ctx.tmux, ctx.log)
        ctx.console.print(f"[green]✓[/] Session '{escape(session_name)}' created")
        ctx.console.print(f"  Windows: {len(session.windows)}")
        for window in session.windows:
            ctx.console.print(f"    - {escape(window.name)}: {len(window.panes)} pane(s)")

    attach_or_switch(ctx, session_name)


def stop_session(ctx: AppContext, session_name: str) -> None:
    """Kill a running session.

    Raises:
        SessionNotRunningError: If no such session is live.
    """
    require_tmux(ctx)
    ctx.log.info(f"stop: session_name={session_name}")
    if not ctx.tmux.has_session(session_name):
        raise SessionNotRunningError(session_name)
    ctx.tmux.kill_session(session_name)
    ctx.log.info(f"session '{session_name}' stopped")
    ctx.console.print(f"[green]✓[/] Session '{escape(session_name)}' stopped")


def refresh_session(ctx: AppContext, session_id: str, cwd: Path | None = None) -> list[WindowRefresh]:
    """Reconcile a running session with its config and print what changed."""
    require_tmux(ctx)
    config = ctx.load_config()
    session, report = refresh(config, session_id, ctx.tmux, ctx.log, cwd)

    ctx.console.print(f"Refreshing layout for session '{escape(session.name)}'...")
    for entry in report:
        ctx.console.print(
            f"  Window '{escape(entry.name)}': current={entry.live_panes} pane(s), config={entry.desired_panes} pane(s)"
        )
        if entry.added:
            ctx.console.print(f"    Added {entry.added} pane(s)")
        if entry.extra:
            noun = "pane" if entry.extra == 1 else "panes"
            ctx.console.print(f"    [yellow]Keeping {entry.extra} extra {noun}[/] (not removing)")
        if entry.layout:
            ctx.console.print(f"    Applied layout: {entry.layout}")
    ctx.console.print(f"[green]✓[/] Session '{escape(session.name)}' layout refreshed")
    return report


def list_sessions(ctx: AppContext) -> None:
    """Show configured sessions (marking live ones) and every running session."""
    if not ctx.config_path.exists():
        ctx.console.print(f"No configuration file found at {ctx.config_path}")
        ctx.console.print("Run 'tmx init' to create one.")
        return

    config = ctx.load_config()
    running = ctx.tmux.list_sessions()

    ctx.console.print("[bold]Configured sessions:[/]")
    for session_id in config.session_ids():
        session = config.sessions[session_id]
        status = " [green](running)[/]" if sanitize_session_name(session.name) in running else ""
        ctx.console.print(f"  {escape(session_id)}{status}")

    ctx.console.print()
    _print_running(ctx, running, "All running tmux sessions:")


def list_running(ctx: AppContext) -> None:
    """Show only running sessions."""
    _print_running(ctx, ctx.tmux.list_sessions(), "Running tmux sessions:")


def _print_running(ctx: AppContext, running: list[str], title: str) -> None:
    ctx.console.print(f"[bold]{title}[/]")
    if not running:
        ctx.console.print("  (none)")
    for name in running:
        ctx.console.print(f"  {escape(name)}")


def list_configured_ids(ctx: AppContext) -> list[str]:
    """Configured session ids, for shell completion."""
    return ctx.load_config().session_ids()


def list_running_names(ctx: AppContext) -> list[str]:
    """Running session names, for shell completion."""
    return ctx.tmux.list_sessions()


def validate_config_file(ctx: AppContext) -> bool:
    """Validate every session of the config file.

    Returns:
        True if all sessions are valid.
    """
    config = ctx.load_config()
    failures = validate_config(config)

    for session_id, error in failures.items():
        ctx.log.error(f"validation failed for session '{session_id}': {error.detail}")
        ctx.err_console.print(f"[red]✗[/] Validation failed for session '{escape(session_id)}':")
        ctx.err_console.print(escape(str(error)))

    if failures:
        return False

    ctx.console.print("[green]✓[/] Configuration is valid")
    ctx.console.print(f"  Found {len(config.sessions)} session(s)")
    return True


def init_config(ctx: AppContext) -> bool:
    """Write the default config file.

    Returns:
        True if a new file was written.
    """
    path = ctx.config_path
    if not write_default_config(path):
        ctx.console.print(f"[yellow]Configuration file already exists at[/] {path}")
        ctx.console.print(f"Edit it with: $EDITOR {path}")
        return False

    ctx.log.info(f"created config file {path}")
    ctx.console.print(f"[green]✓[/] Configuration file created at {path}")
    ctx.console.print()
    ctx.console.print(f"Edit it with: $EDITOR {path}")
    ctx.console.print("Then start a session with: tmx start dev")
    return True
