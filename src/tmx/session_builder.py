"""Build tmux sessions from their configuration."""

from tmx.config import Session, Window, validate_session
from tmx.diagnostics import Diagnostics
from tmx.layouts import determine_layout, determine_split_direction, governing_dimension, resolve_size
from tmx.tmux_manager import Multiplexer
from tmx.utils import shell_escape


def create_session(session: Session, tmux: Multiplexer, log: Diagnostics) -> None:
    """Create a new tmux session from a configuration.

    Windows are processed in declaration order: the window is created, its
    extra panes are split off, its layout and explicit sizes are applied, and
    finally each pane gets its environment and command typed in. The startup
    window and pane are selected last.

    Nothing is rolled back if a tmux call fails; the error propagates and the
    session is left as far as it got.

    Args:
        session: The session to create.
        tmux: The multiplexer to drive.
        log: Diagnostics sink.

    Raises:
        ConfigValidationError: If the session is invalid.
        ExternalCommandError: If any tmux command fails.
    """
    validate_session(session)

    base_index = tmux.base_index()
    pane_base = tmux.pane_base_index()
    session_name = session.name
    session_root = session.root_expanded()

    log.info(f"Creating session '{session_name}' with {len(session.windows)} window(s)")

    first_window = session.windows[0]
    tmux.new_session(session_name, first_window.name, first_window.root_expanded(session_root))

    for window_offset, window in enumerate(session.windows):
        window_index = base_index + window_offset
        window_root = window.root_expanded(session_root)

        # First window already exists
        if window_offset > 0:
            tmux.new_window(session_name, window_index, window.name, window_root)

        if len(window.panes) > 1:
            create_window_panes(tmux, session_name, window_index, window, window_root, start_index=1)
            apply_window_layout(tmux, session_name, window_index, window, pane_base=pane_base, log=log)

        send_pane_commands(tmux, session_name, window_index, window, pane_base=pane_base)

    startup_window = base_index + session.resolve_startup_window()
    tmux.select_window(session_name, startup_window)
    tmux.select_pane(session_name, startup_window, pane_base + session.get_startup_pane())

    log.info(f"Session '{session_name}' created")


def create_window_panes(
    tmux: Multiplexer,
    session_name: str,
    window_index: int,
    window: Window,
    window_root: str,
    start_index: int,
) -> int:
    """Split off the panes of a window from ``start_index`` onwards.

    Panes are created without sizes; :func:`apply_window_layout` sizes them
    once the whole pane set exists.

    Args:
        tmux: The multiplexer to drive.
        session_name: Session name.
        window_index: Absolute window index.
        window: The window config.
        window_root: The window's expanded root directory.
        start_index: First pane position to create (1 for a new window,
            the live pane count when refreshing).

    Returns:
        Number of panes created.
    """
    created = 0
    for pane_idx in range(start_index, len(window.panes)):
        pane = window.panes[pane_idx]
        direction = determine_split_direction(pane_idx, pane)
        tmux.split_window(session_name, window_index, direction, root=pane.root_expanded(window_root))
        created += 1
    return created


def apply_window_layout(
    tmux: Multiplexer,
    session_name: str,
    window_index: int,
    window: Window,
    pane_base: int = 0,
    log: Diagnostics | None = None,
) -> str | None:
    """Apply the window's layout, then override it with explicit pane sizes.

    Percentage sizes are resolved against the window dimensions measured after
    the layout has been applied. Only configured panes are resized, by position.

    Args:
        tmux: The multiplexer to drive.
        session_name: Session name.
        window_index: Absolute window index.
        window: The window config.
        pane_base: tmux ``pane-base-index``.
        log: Optional diagnostics sink.

    Returns:
        The applied layout, or None for single-pane windows.
    """
    pane_count = len(window.panes)
    if pane_count <= 1:
        return None

    layout = determine_layout(window, pane_count)
    if log is not None:
        log.debug(f"Window {window_index}: applying layout {layout}")
    tmux.select_layout(session_name, window_index, layout)

    width, height = tmux.window_dimensions(session_name, window_index)
    for pane_idx, pane in enumerate(window.panes):
        if pane.size is None:
            continue
        direction = determine_split_direction(pane_idx, pane)
        size = resolve_size(pane.size, governing_dimension(direction, width, height))
        if log is not None:
            log.debug(f"Window {window_index}: pane {pane_idx} size {pane.size} -> {size} ({direction})")
        tmux.resize_pane(session_name, window_index, pane_base + pane_idx, size, direction)

    return layout


def send_pane_commands(
    tmux: Multiplexer,
    session_name: str,
    window_index: int,
    window: Window,
    pane_base: int = 0,
) -> None:
    """Type each pane's environment exports and command into it."""
    for pane_idx, pane in enumerate(window.panes):
        target_pane = pane_base + pane_idx
        for key, value in pane.env.items():
            tmux.send_keys(session_name, window_index, target_pane, f"export {key}={shell_escape(value)}")
        if pane.command:
            tmux.send_keys(session_name, window_index, target_pane, pane.command)
