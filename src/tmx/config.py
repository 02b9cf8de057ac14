"""Configuration management for tmx."""

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, NonNegativeInt, ValidationError, field_serializer, field_validator

from tmx.errors import (
    ConfigEmptyError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    InvalidShellArgError,
    SessionNotFoundError,
)
from tmx.utils import expand_root


class LayoutName(StrEnum):
    """tmux layouts a window may request."""

    EVEN_HORIZONTAL = "even-horizontal"
    EVEN_VERTICAL = "even-vertical"
    MAIN_HORIZONTAL = "main-horizontal"
    MAIN_VERTICAL = "main-vertical"
    TILED = "tiled"


class SplitDirection(StrEnum):
    """Direction for a pane split."""

    HORIZONTAL = "horizontal"  # side-by-side (left/right)
    VERTICAL = "vertical"  # stacked (top/bottom)


_SIZE_PATTERN = re.compile(r"([0-9]+)(%?)")

_SIZE_HINT = "Use a percentage between 1% and 100% (e.g. '30%') or a positive number of lines or columns (e.g. '20')"


@dataclass(frozen=True)
class SizeSpec:
    """A parsed pane size: a percentage of the window or an absolute cell count."""

    value: int
    percent: bool = False

    def __str__(self) -> str:
        return f"{self.value}%" if self.percent else str(self.value)


def parse_size(spec: str) -> SizeSpec:
    """Parse a pane size value.

    Args:
        spec: ``"N%"`` with 1 <= N <= 100, or a positive integer.

    Returns:
        The parsed size.

    Raises:
        InvalidShellArgError: If the value matches neither form.
    """
    match = _SIZE_PATTERN.fullmatch(spec)
    if match is None:
        raise InvalidShellArgError(f"Invalid size: {spec!r}")
    value = int(match.group(1))
    percent = match.group(2) == "%"
    if percent and not 1 <= value <= 100:
        raise InvalidShellArgError(f"Invalid percentage: {spec!r}")
    if not percent and value <= 0:
        raise InvalidShellArgError(f"Invalid size: {spec!r}")
    return SizeSpec(value=value, percent=percent)


def is_valid_size(spec: str) -> bool:
    """Check a pane size value against the size grammar."""
    try:
        parse_size(spec)
    except InvalidShellArgError:
        return False
    return True


class WindowByIndex(BaseModel):
    """Startup window given as a 0-based index."""

    index: int


class WindowByName(BaseModel):
    """Startup window given by name."""

    name: str


StartupWindow = WindowByIndex | WindowByName


class Pane(BaseModel):
    """A single pane in a window."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    command: str = ""
    env: dict[str, str] = {}
    root: str | None = None
    split: str | None = None
    size: str | None = None

    def root_expanded(self, window_root: str) -> str:
        """Get the pane's working directory, falling back to the window's."""
        if self.root:
            return expand_root(self.root)
        return window_root


class Window(BaseModel):
    """A window holding an ordered list of panes."""

    name: str
    panes: list[Pane] = []
    layout: str | None = None
    root: str | None = None

    def root_expanded(self, session_root: str) -> str:
        """Get the window's working directory, falling back to the session's."""
        return expand_root(self.root or session_root)


class Session(BaseModel):
    """A session definition."""

    name: str
    root: str = "~"
    windows: list[Window] = []
    startup_window: StartupWindow | None = None
    startup_pane: NonNegativeInt | None = None

    @field_validator("startup_window", mode="before")
    @classmethod
    def _tag_startup_window(cls, value: object) -> object:
        # bool is an int subclass; let it fail validation instead of becoming an index
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return WindowByIndex(index=value)
        if isinstance(value, str):
            return WindowByName(name=value)
        return value

    @field_serializer("startup_window")
    def _untag_startup_window(self, value: StartupWindow | None) -> int | str | None:
        if isinstance(value, WindowByIndex):
            return value.index
        if isinstance(value, WindowByName):
            return value.name
        return None

    def root_expanded(self) -> str:
        """Get the expanded session root directory."""
        return expand_root(self.root)

    def resolve_startup_window(self) -> int:
        """Resolve the startup window to a 0-based window position.

        A name resolves to the first window carrying it (0 if none does); an
        index is clamped to the last window.
        """
        max_index = max(len(self.windows) - 1, 0)
        if isinstance(self.startup_window, WindowByIndex):
            return min(max(self.startup_window.index, 0), max_index)
        if isinstance(self.startup_window, WindowByName):
            for i, window in enumerate(self.windows):
                if window.name == self.startup_window.name:
                    return i
        return 0

    def get_startup_pane(self) -> int:
        """Get the startup pane position (default 0)."""
        return self.startup_pane or 0


class Config(BaseModel):
    """The full tmx configuration document."""

    sessions: dict[str, Session] = {}
    default: str | None = None

    def get_session(self, id_or_name: str) -> Session | None:
        """Look a session up by config key, then by its ``name`` field.

        Args:
            id_or_name: Session id or display name.

        Returns:
            The matching session, or None.
        """
        session = self.sessions.get(id_or_name)
        if session is not None:
            return session
        for candidate in self.sessions.values():
            if candidate.name == id_or_name:
                return candidate
        return None

    def session_ids(self) -> list[str]:
        """List all session ids in sorted order."""
        return sorted(self.sessions)


def validate_session(session: Session) -> None:
    """Check a session against the config invariants.

    Args:
        session: The session to check.

    Raises:
        ConfigValidationError: For the first violated invariant.
    """
    name = session.name
    if not name:
        raise ConfigValidationError(name, "Session name cannot be empty", hint="Set 'name' on the session")

    if not session.windows:
        raise ConfigValidationError(
            name,
            f"Session '{name}' must have at least one window",
            hint="Add a 'windows' list with at least one window",
        )

    window_count = len(session.windows)
    startup = session.startup_window
    if isinstance(startup, WindowByIndex) and not 0 <= startup.index < window_count:
        raise ConfigValidationError(
            name,
            f"Invalid startup_window index: {startup.index}",
            hint=f"Valid range is 0 to {window_count - 1} (session has {window_count} window(s)); "
            "window indices are 0-based",
        )
    if isinstance(startup, WindowByName) and not any(w.name == startup.name for w in session.windows):
        available = ", ".join(w.name for w in session.windows)
        raise ConfigValidationError(
            name,
            f"Invalid startup_window value: '{startup.name}'",
            hint=f"Use a window name from your windows list ({available}) or a 0-based index",
        )

    for window_idx, window in enumerate(session.windows):
        _validate_window(name, window_idx, window)


def _validate_window(session_name: str, window_idx: int, window: Window) -> None:
    """Check a single window and its panes."""

    def error(detail: str, hint: str = "", pane: int | None = None) -> ConfigValidationError:
        return ConfigValidationError(
            session_name, detail, hint=hint, window=window_idx, window_name=window.name, pane=pane
        )

    if not window.name:
        raise error("Window name cannot be empty", hint="Set 'name' on the window")

    if not window.panes:
        raise error(
            f"Window '{window.name}' must have at least one pane",
            hint="Add a 'panes' list; use 'command: \"\"' for a plain shell",
        )

    valid_layouts = [layout.value for layout in LayoutName]
    if window.layout is not None and window.layout not in valid_layouts:
        raise error(
            f"Invalid layout value: '{window.layout}'",
            hint=f"Valid layouts are: {', '.join(valid_layouts)}. "
            "Use 'even-horizontal' for side-by-side panes or 'tiled' for a grid",
        )

    valid_splits = [direction.value for direction in SplitDirection]
    for pane_idx, pane in enumerate(window.panes):
        if pane.split is not None and pane.split not in valid_splits:
            raise error(
                f"Invalid split value: '{pane.split}'",
                hint="Valid values are 'horizontal' (side-by-side split) or 'vertical' (top-bottom split)",
                pane=pane_idx,
            )
        if pane.size is not None and not is_valid_size(pane.size):
            raise error(f"Invalid size value: '{pane.size}'", hint=_SIZE_HINT, pane=pane_idx)


def validate_config(config: Config) -> dict[str, ConfigValidationError]:
    """Validate every session in a config.

    Args:
        config: The loaded configuration.

    Returns:
        Mapping of session id to its first violation, for failing sessions only.
    """
    failures: dict[str, ConfigValidationError] = {}
    for session_id in config.session_ids():
        try:
            validate_session(config.sessions[session_id])
        except ConfigValidationError as e:
            failures[session_id] = e
    return failures


def resolve_session(config: Config, session_id: str, cwd: Path | None = None) -> Session:
    """Find the session to build or refresh for a requested id.

    Unknown ids fall back to a dynamic session: a copy of the configured
    ``default`` session renamed to ``session_id`` and rooted at ``cwd``.

    Args:
        config: The loaded configuration.
        session_id: Session id or display name.
        cwd: Root for a dynamic session. Uses the current directory if None.

    Returns:
        The configured or dynamic session.

    Raises:
        SessionNotFoundError: If the id is unknown and no default session exists.
    """
    session = config.get_session(session_id)
    if session is not None:
        return session

    template = config.sessions.get(config.default) if config.default else None
    if template is None:
        raise SessionNotFoundError(session_id, config.session_ids())

    root = cwd or Path.cwd()
    return template.model_copy(deep=True, update={"name": session_id, "root": str(root)})


def default_session_id(config: Config) -> str:
    """Pick the session to start when nothing is running.

    Args:
        config: The loaded configuration.

    Returns:
        The ``default`` id when set and present, else the first id alphabetically.

    Raises:
        SessionNotFoundError: If ``default`` names a missing session.
    """
    if config.default is not None:
        if config.default not in config.sessions:
            raise SessionNotFoundError(config.default, config.session_ids())
        return config.default
    return config.session_ids()[0]


def parse_config(text: str, source: str = "<string>") -> Config:
    """Parse a YAML config document.

    Args:
        text: The document text.
        source: Where the text came from, for error messages.

    Returns:
        The parsed configuration.

    Raises:
        ConfigParseError: If the document is not valid YAML or has the wrong shape.
        ConfigEmptyError: If it declares no sessions.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse config file {source}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigParseError(f"Failed to parse config file {source}: top level must be a mapping")
    if raw.get("sessions") is None:
        raw["sessions"] = {}

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        lines = [f"Failed to parse config file {source}:"]
        for error in e.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            lines.append(f"  {field_path}: {error['msg']}")
        raise ConfigParseError("\n".join(lines)) from e

    if not config.sessions:
        raise ConfigEmptyError(source)
    return config


def load_config(config_path: Path) -> Config:
    """Load the configuration file.

    Args:
        config_path: Resolved path to the config file.

    Returns:
        The parsed configuration.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigParseError: If it cannot be read or parsed.
        ConfigEmptyError: If it declares no sessions.
    """
    if not config_path.exists():
        raise ConfigNotFoundError(config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(f"Failed to read config file {config_path}: {e}") from e
    return parse_config(text, source=str(config_path))


def dump_config(config: Config) -> str:
    """Serialize a configuration to YAML, omitting unset optional fields."""
    data = config.model_dump(exclude_none=True)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def write_default_config(config_path: Path) -> bool:
    """Write the default config template unless a file already exists.

    Args:
        config_path: Where to write the template.

    Returns:
        True if the file was created, False if one was already there.
    """
    if config_path.exists():
        return False
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    return True


DEFAULT_CONFIG = """\
# tmx configuration
# Define your tmux sessions here.

# Session to start when no sessions are running (optional).
# Unknown session ids passed to 'tmx start' reuse its layout, rooted at the current directory.
default: dev

sessions:
  # Simple development session
  dev:
    name: dev
    root: ~/projects
    startup_window: 0             # Focus first window (0-based index)
    windows:
      - name: editor
        layout: main-vertical     # Large main pane, smaller side pane
        panes:
          - command: nvim         # Main pane
          - command: ""
            size: 25%             # Side pane takes 25% width
      - name: terminal
        panes:
          - command: ""

  # Advanced session with multiple features
  work:
    name: work
    root: ~/work
    startup_window: code          # Can use a window name instead of an index
    windows:
      - name: code
        layout: even-horizontal   # Panes evenly distributed horizontally
        panes:
          - command: nvim
          - command: ""
      - name: servers
        layout: tiled             # Grid layout for multiple panes
        root: ~/work/services     # Per-window working directory
        panes:
          - command: echo 'Backend server'
            env:
              NODE_ENV: development
          - command: echo 'Frontend server'
            split: horizontal     # Explicit side-by-side split
            size: 50%
          - command: echo 'Database'
            root: ~/work/database # Per-pane working directory
"""
