"""Tmux adapter for tmx.

All interaction with the tmux binary goes through :class:`TmuxManager`. The
builder, reconciler and cycle selector only depend on the
:class:`Multiplexer` protocol, so they can run against an in-memory fake.
"""

import logging
import os
import shlex
import subprocess
from typing import Protocol

from tmx.config import SizeSpec, SplitDirection, parse_size
from tmx.diagnostics import LOGGER_NAME, Diagnostics
from tmx.errors import ExternalCommandError, MultiplexerNotInstalledError
from tmx.utils import sanitize_session_name

TMUX = "tmux"
SUBMIT_KEY = "Enter"


def is_inside_tmux() -> bool:
    """Check if we're running inside a tmux session."""
    return os.environ.get("TMUX") is not None


def session_target(session: str) -> str:
    """Target string for a session."""
    return sanitize_session_name(session)


def window_target(session: str, window_index: int) -> str:
    """Target string for a window (``session:window``)."""
    return f"{session_target(session)}:{window_index}"


def pane_target(session: str, window_index: int, pane_index: int) -> str:
    """Target string for a pane (``session:window.pane``)."""
    return f"{window_target(session, window_index)}.{pane_index}"


class Multiplexer(Protocol):
    """Operations tmx needs from a terminal multiplexer.

    Window and pane indices are absolute, i.e. already offset by the base
    indices. Session names are display names; implementations sanitize them
    wherever they are used as targets.
    """

    def is_installed(self) -> bool: ...

    def is_inside(self) -> bool: ...

    def base_index(self) -> int: ...

    def pane_base_index(self) -> int: ...

    def has_session(self, name: str) -> bool: ...

    def list_sessions(self) -> list[str]: ...

    def current_session(self) -> str: ...

    def pane_count(self, session: str, window_index: int) -> int: ...

    def window_dimensions(self, session: str, window_index: int) -> tuple[int, int]: ...

    def new_session(self, name: str, window_name: str, root: str | None = None) -> None: ...

    def new_window(self, session: str, window_index: int, window_name: str, root: str | None = None) -> None: ...

    def split_window(
        self,
        session: str,
        window_index: int,
        direction: SplitDirection,
        size: str | None = None,
        root: str | None = None,
    ) -> None: ...

    def select_layout(self, session: str, window_index: int, layout: str) -> None: ...

    def resize_pane(
        self, session: str, window_index: int, pane_index: int, size: int, direction: SplitDirection
    ) -> None: ...

    def send_keys(self, session: str, window_index: int, pane_index: int, keys: str) -> None: ...

    def select_window(self, session: str, window_index: int) -> None: ...

    def select_pane(self, session: str, window_index: int, pane_index: int) -> None: ...

    def attach_session(self, name: str) -> None: ...

    def switch_client(self, name: str) -> None: ...

    def kill_session(self, name: str) -> None: ...


class TmuxManager:
    """Runs tmux commands, one blocking call at a time."""

    def __init__(self, log: Diagnostics | None = None) -> None:
        self.log: Diagnostics = log or logging.getLogger(LOGGER_NAME)

    def _run(self, args: list[str], check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a tmux command and capture its output.

        Args:
            args: Arguments after ``tmux``.
            check: Raise on a non-zero exit status.

        Returns:
            CompletedProcess result.

        Raises:
            MultiplexerNotInstalledError: If the tmux binary is missing.
            ExternalCommandError: If ``check`` is set and tmux fails.
        """
        cmd = [TMUX, *args]
        self.log.debug(f"tmux: {shlex.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise MultiplexerNotInstalledError() from e
        if check and result.returncode != 0:
            raise ExternalCommandError(cmd, result.stderr)
        return result

    def _show_option(self, args: list[str]) -> int:
        """Read a numeric option; ``0`` if unset or unreadable."""
        result = self._run(args, check=False)
        if result.returncode != 0:
            return 0
        # Output format: "base-index 1"
        fields = result.stdout.split()
        if fields and fields[-1].isdigit():
            return int(fields[-1])
        return 0

    def is_installed(self) -> bool:
        """Check whether the tmux binary can be run."""
        try:
            result = subprocess.run([TMUX, "-V"], capture_output=True, check=False)
        except FileNotFoundError:
            return False
        return result.returncode == 0

    def is_inside(self) -> bool:
        """Check if we're running inside a tmux session."""
        return is_inside_tmux()

    def base_index(self) -> int:
        """Get the first window index (tmux ``base-index``)."""
        return self._show_option(["show-options", "-g", "base-index"])

    def pane_base_index(self) -> int:
        """Get the first pane index (tmux ``pane-base-index``)."""
        return self._show_option(["show-options", "-gw", "pane-base-index"])

    def has_session(self, name: str) -> bool:
        """Check if a session with the given name exists."""
        result = self._run(["has-session", "-t", session_target(name)], check=False)
        return result.returncode == 0

    def list_sessions(self) -> list[str]:
        """List running session names; empty when no server is running."""
        result = self._run(["list-sessions", "-F", "#{session_name}"], check=False)
        if result.returncode != 0:
            return []
        return [line for line in result.stdout.splitlines() if line]

    def current_session(self) -> str:
        """Name of the session this client is attached to (inside tmux only)."""
        result = self._run(["display-message", "-p", "#S"])
        return result.stdout.strip()

    def pane_count(self, session: str, window_index: int) -> int:
        """Count the panes of a live window."""
        target = window_target(session, window_index)
        result = self._run(["display-message", "-p", "-t", target, "#{window_panes}"])
        output = result.stdout.strip()
        if not output.isdigit():
            raise ExternalCommandError(
                [TMUX, "display-message", "-p", "-t", target, "#{window_panes}"],
                f"unexpected pane count: {output!r}",
            )
        return int(output)

    def window_dimensions(self, session: str, window_index: int) -> tuple[int, int]:
        """Get a live window's (width, height) in character cells."""
        args = ["display-message", "-p", "-t", window_target(session, window_index), "#{window_width} #{window_height}"]
        result = self._run(args)
        fields = result.stdout.split()
        if len(fields) != 2 or not all(f.isdigit() for f in fields):
            raise ExternalCommandError([TMUX, *args], f"unexpected window dimensions: {result.stdout.strip()!r}")
        return int(fields[0]), int(fields[1])

    def new_session(self, name: str, window_name: str, root: str | None = None) -> None:
        """Create a detached session whose first window is ``window_name``."""
        cmd = ["new-session", "-d", "-s", session_target(name), "-n", window_name]
        if root:
            cmd.extend(["-c", root])
        self._run(cmd)

    def new_window(self, session: str, window_index: int, window_name: str, root: str | None = None) -> None:
        """Create a window at an absolute index."""
        cmd = ["new-window", "-t", window_target(session, window_index), "-n", window_name]
        if root:
            cmd.extend(["-c", root])
        self._run(cmd)

    def split_window(
        self,
        session: str,
        window_index: int,
        direction: SplitDirection,
        size: str | None = None,
        root: str | None = None,
    ) -> None:
        """Split the active pane of a window.

        Args:
            session: Session name.
            window_index: Absolute window index.
            direction: Horizontal (side-by-side) or vertical (stacked).
            size: Optional ``"N%"`` (sent with ``-p``) or absolute count (``-l``).
            root: Optional working directory for the new pane.
        """
        flag = "-h" if direction == SplitDirection.HORIZONTAL else "-v"
        cmd = ["split-window", "-t", window_target(session, window_index), flag]
        if size is not None:
            spec: SizeSpec = parse_size(size)
            cmd.extend(["-p" if spec.percent else "-l", str(spec.value)])
        if root:
            cmd.extend(["-c", root])
        self._run(cmd)

    def select_layout(self, session: str, window_index: int, layout: str) -> None:
        """Apply a named layout to a window."""
        self._run(["select-layout", "-t", window_target(session, window_index), layout])

    def resize_pane(
        self, session: str, window_index: int, pane_index: int, size: int, direction: SplitDirection
    ) -> None:
        """Resize a pane to an absolute width (horizontal) or height (vertical)."""
        axis = "-x" if direction == SplitDirection.HORIZONTAL else "-y"
        self._run(["resize-pane", "-t", pane_target(session, window_index, pane_index), axis, str(size)])

    def send_keys(self, session: str, window_index: int, pane_index: int, keys: str) -> None:
        """Type text into a pane and press Enter."""
        self._run(["send-keys", "-t", pane_target(session, window_index, pane_index), keys, SUBMIT_KEY])

    def select_window(self, session: str, window_index: int) -> None:
        """Make a window the active one."""
        self._run(["select-window", "-t", window_target(session, window_index)])

    def select_pane(self, session: str, window_index: int, pane_index: int) -> None:
        """Make a pane the active one."""
        self._run(["select-pane", "-t", pane_target(session, window_index, pane_index)])

    def attach_session(self, name: str) -> None:
        """Attach the terminal to a session; blocks until detach."""
        cmd = [TMUX, "attach-session", "-t", session_target(name)]
        self.log.debug(f"tmux: {shlex.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=False)
        except FileNotFoundError as e:
            raise MultiplexerNotInstalledError() from e
        if result.returncode != 0:
            raise ExternalCommandError(cmd, f"exited with status {result.returncode}")

    def switch_client(self, name: str) -> None:
        """Switch the current client to another session (inside tmux)."""
        self._run(["switch-client", "-t", session_target(name)])

    def kill_session(self, name: str) -> None:
        """Kill a session and all its processes."""
        self._run(["kill-session", "-t", session_target(name)])
