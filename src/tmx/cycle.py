"""Cycle through running sessions (the default tmx action)."""

from rich.markup import escape

from tmx.commands import require_tmux, start_session
from tmx.config import Config, default_session_id
from tmx.context import AppContext
from tmx.errors import TmxError
from tmx.utils import sanitize_session_name


def order_sessions(running: list[str], config: Config | None) -> list[str]:
    """Order running sessions for cycling.

    Configured sessions come first, in order of their config ids, followed by
    every other running session alphabetically. Without a config all running
    sessions are sorted alphabetically.

    Args:
        running: Live session names.
        config: The loaded configuration, if any.

    Returns:
        Live session names in cycling order.
    """
    if config is None:
        return sorted(running)

    configured: list[str] = []
    for session_id in config.session_ids():
        live_name = sanitize_session_name(config.sessions[session_id].name)
        if live_name in running and live_name not in configured:
            configured.append(live_name)

    unconfigured = sorted(name for name in running if name not in configured)
    return configured + unconfigured


def find_next_session(sessions: list[str], current: str) -> str:
    """Get the session after ``current``, wrapping around.

    An unknown ``current`` yields the first session.
    """
    if current in sessions:
        return sessions[(sessions.index(current) + 1) % len(sessions)]
    return sessions[0]


def cycle(ctx: AppContext) -> str:
    """Switch to the next running session, or start one if none are running.

    Inside tmux the client switches to the session after the current one;
    outside tmux the first session in cycling order is attached. With nothing
    running, the default (or alphabetically first) configured session is built.

    Args:
        ctx: The invocation context.

    Returns:
        The session switched to, attached to, or started.
    """
    require_tmux(ctx)
    running = ctx.tmux.list_sessions()

    config: Config | None
    if not running:
        config = ctx.load_config()
        session_id = default_session_id(config)
        ctx.console.print(f"No sessions running. Starting '{escape(session_id)}'...")
        start_session(ctx, session_id, config=config)
        return session_id

    try:
        config = ctx.load_config()
    except TmxError as e:
        ctx.log.debug(f"Cycling without configuration: {e}")
        config = None

    ordered = order_sessions(running, config)

    if ctx.inside_tmux:
        target = find_next_session(ordered, ctx.tmux.current_session())
        ctx.console.print(f"Switching to session '{escape(target)}'...")
        ctx.tmux.switch_client(target)
        return target

    target = ordered[0]
    ctx.console.print(f"Attaching to session '{escape(target)}'...")
    ctx.tmux.attach_session(target)
    return target
