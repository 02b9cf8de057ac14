"""Refresh a running session towards its configuration."""

from dataclasses import dataclass
from pathlib import Path

from tmx.config import Config, Session, resolve_session, validate_session
from tmx.diagnostics import Diagnostics
from tmx.errors import SessionNotRunningError
from tmx.session_builder import apply_window_layout, create_window_panes
from tmx.tmux_manager import Multiplexer


@dataclass
class WindowRefresh:
    """What a refresh did to one window."""

    name: str
    index: int
    live_panes: int
    desired_panes: int
    layout: str | None = None

    @property
    def added(self) -> int:
        """Panes created by the refresh."""
        return max(self.desired_panes - self.live_panes, 0)

    @property
    def extra(self) -> int:
        """Live panes beyond the configured ones, left untouched."""
        return max(self.live_panes - self.desired_panes, 0)

    @property
    def final_panes(self) -> int:
        """Pane count after the refresh."""
        return max(self.live_panes, self.desired_panes)


def reconcile_session(session: Session, tmux: Multiplexer, log: Diagnostics) -> list[WindowRefresh]:
    """Grow a live session's windows to match the config and reapply layouts.

    Missing panes are split off; extra live panes are kept. No keys are sent
    to any pane, so running processes are untouched. Layout and explicit
    sizes are always reapplied to multi-pane windows, overriding manual resizes.

    Args:
        session: The desired session.
        tmux: The multiplexer to drive.
        log: Diagnostics sink.

    Returns:
        One entry per configured window.

    Raises:
        ConfigValidationError: If the session is invalid.
        SessionNotRunningError: If the session is not live.
        ExternalCommandError: If any tmux command fails.
    """
    validate_session(session)

    session_name = session.name
    if not tmux.has_session(session_name):
        raise SessionNotRunningError(session_name)

    log.info(f"Refreshing layout for session '{session_name}'")

    base_index = tmux.base_index()
    pane_base = tmux.pane_base_index()
    session_root = session.root_expanded()

    report: list[WindowRefresh] = []
    for window_offset, window in enumerate(session.windows):
        window_index = base_index + window_offset
        window_root = window.root_expanded(session_root)

        live = tmux.pane_count(session_name, window_index)
        desired = len(window.panes)
        log.info(f"Window '{window.name}': live={live} panes, config={desired} panes")

        if live < desired:
            create_window_panes(tmux, session_name, window_index, window, window_root, start_index=live)
        elif live > desired:
            log.info(f"Window '{window.name}': keeping {live - desired} extra pane(s)")

        layout = apply_window_layout(tmux, session_name, window_index, window, pane_base=pane_base, log=log)
        report.append(WindowRefresh(window.name, window_index, live, desired, layout))

    log.info(f"Session '{session_name}' layout refreshed")
    return report


def refresh(
    config: Config,
    session_id: str,
    tmux: Multiplexer,
    log: Diagnostics,
    cwd: Path | None = None,
) -> tuple[Session, list[WindowRefresh]]:
    """Resolve a session id and reconcile the live session with it.

    Args:
        config: The loaded configuration.
        session_id: Session id or name; unknown ids use the default session.
        tmux: The multiplexer to drive.
        log: Diagnostics sink.
        cwd: Root for a dynamic session.

    Returns:
        The resolved session and the per-window report.
    """
    session = resolve_session(config, session_id, cwd)
    return session, reconcile_session(session, tmux, log)
