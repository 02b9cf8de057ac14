"""Shared fixtures for tmx tests."""

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console

from tmx.config import SplitDirection
from tmx.context import AppContext
from tmx.errors import ExternalCommandError
from tmx.utils import sanitize_session_name


class FakeTmux:
    """In-memory stand-in for TmuxManager.

    Tracks sessions as ``{name: {window_index: pane_count}}`` and records
    every mutating call as a tuple starting with the method name.
    """

    def __init__(
        self,
        base_index: int = 0,
        pane_base_index: int = 0,
        width: int = 200,
        height: int = 50,
        installed: bool = True,
        inside: bool = False,
        current: str = "",
    ) -> None:
        self._base_index = base_index
        self._pane_base_index = pane_base_index
        self.width = width
        self.height = height
        self.installed = installed
        self.inside = inside
        self.current = current
        self.sessions: dict[str, dict[int, int]] = {}
        self.calls: list[tuple[object, ...]] = []
        self.fail_on: str | None = None

    def add_session(self, name: str, panes_per_window: list[int]) -> None:
        """Pretend a session is already running."""
        self.sessions[sanitize_session_name(name)] = {
            self._base_index + offset: count for offset, count in enumerate(panes_per_window)
        }

    def calls_to(self, method: str) -> list[tuple[object, ...]]:
        """Recorded calls of one method."""
        return [call for call in self.calls if call[0] == method]

    def _record(self, *call: object) -> None:
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise ExternalCommandError(["tmux", str(call[0])], "simulated failure")

    def _windows(self, session: str) -> dict[int, int]:
        windows = self.sessions.get(sanitize_session_name(session))
        if windows is None:
            raise ExternalCommandError(["tmux"], f"can't find session: {session}")
        return windows

    def is_installed(self) -> bool:
        return self.installed

    def is_inside(self) -> bool:
        return self.inside

    def base_index(self) -> int:
        return self._base_index

    def pane_base_index(self) -> int:
        return self._pane_base_index

    def has_session(self, name: str) -> bool:
        return sanitize_session_name(name) in self.sessions

    def list_sessions(self) -> list[str]:
        return list(self.sessions)

    def current_session(self) -> str:
        return self.current

    def pane_count(self, session: str, window_index: int) -> int:
        windows = self._windows(session)
        if window_index not in windows:
            raise ExternalCommandError(["tmux"], f"can't find window: {window_index}")
        return windows[window_index]

    def window_dimensions(self, session: str, window_index: int) -> tuple[int, int]:
        self._windows(session)
        return self.width, self.height

    def new_session(self, name: str, window_name: str, root: str | None = None) -> None:
        self._record("new_session", name, window_name, root)
        self.sessions[sanitize_session_name(name)] = {self._base_index: 1}

    def new_window(self, session: str, window_index: int, window_name: str, root: str | None = None) -> None:
        self._record("new_window", session, window_index, window_name, root)
        self._windows(session)[window_index] = 1

    def split_window(
        self,
        session: str,
        window_index: int,
        direction: SplitDirection,
        size: str | None = None,
        root: str | None = None,
    ) -> None:
        self._record("split_window", session, window_index, direction, size, root)
        self._windows(session)[window_index] += 1

    def select_layout(self, session: str, window_index: int, layout: str) -> None:
        self._record("select_layout", session, window_index, layout)

    def resize_pane(
        self, session: str, window_index: int, pane_index: int, size: int, direction: SplitDirection
    ) -> None:
        self._record("resize_pane", session, window_index, pane_index, size, direction)

    def send_keys(self, session: str, window_index: int, pane_index: int, keys: str) -> None:
        self._record("send_keys", session, window_index, pane_index, keys)

    def select_window(self, session: str, window_index: int) -> None:
        self._record("select_window", session, window_index)

    def select_pane(self, session: str, window_index: int, pane_index: int) -> None:
        self._record("select_pane", session, window_index, pane_index)

    def attach_session(self, name: str) -> None:
        self._record("attach_session", name)

    def switch_client(self, name: str) -> None:
        self._record("switch_client", name)

    def kill_session(self, name: str) -> None:
        self._record("kill_session", name)
        self.sessions.pop(sanitize_session_name(name), None)


SAMPLE_CONFIG = """\
default: dev
sessions:
  dev:
    name: dev
    root: /tmp/dev
    windows:
      - name: editor
        panes:
          - command: nvim
          - command: ""
  work:
    name: work-main
    root: /tmp/work
    startup_window: logs
    windows:
      - name: code
        panes:
          - command: nvim
      - name: logs
        layout: tiled
        panes:
          - command: tail -f app.log
            env:
              LOG_LEVEL: debug
          - command: ""
            size: 30%
          - command: htop
"""


@pytest.fixture
def fake_tmux() -> FakeTmux:
    """A fresh in-memory multiplexer."""
    return FakeTmux()


@pytest.fixture
def log() -> logging.Logger:
    """Logger used as the diagnostics sink."""
    return logging.getLogger("tmx_tests")


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A config file holding SAMPLE_CONFIG."""
    path = tmp_path / "tmx.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def app_ctx(config_file: Path, fake_tmux: FakeTmux, log: logging.Logger) -> AppContext:
    """Context wired to the fake multiplexer with captured console output."""
    return AppContext(
        config_path=config_file,
        tmux=fake_tmux,
        log=log,
        inside_tmux=False,
        console=Console(file=io.StringIO(), width=200),
        err_console=Console(file=io.StringIO(), width=200),
    )


def console_output(console: Console) -> str:
    """Text written to a console created with a StringIO file."""
    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()
