"""Error types raised by tmx."""


class TmxError(Exception):
    """Base class for every error tmx surfaces to the user."""


class ConfigNotFoundError(TmxError):
    """The resolved config file does not exist."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Config file not found at {path}\nRun 'tmx init' to create one.")


class ConfigParseError(TmxError):
    """The config document is malformed."""


class ConfigEmptyError(TmxError):
    """The config document declares no sessions."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Config file contains no sessions: {path}")


class ConfigValidationError(TmxError):
    """A session violates a config invariant.

    Carries the position of the offending entity so the message can point the
    user at the exact session, window and pane, plus a remediation hint.
    """

    def __init__(
        self,
        session: str,
        detail: str,
        hint: str = "",
        window: int | None = None,
        window_name: str | None = None,
        pane: int | None = None,
    ) -> None:
        self.session = session
        self.detail = detail
        self.hint = hint
        self.window = window
        self.window_name = window_name
        self.pane = pane
        super().__init__(self._format())

    @property
    def location(self) -> str:
        """Human readable position of the violation."""
        parts = [f"session '{self.session}'"]
        if self.window is not None:
            parts.append(f"window {self.window} ('{self.window_name}')")
        if self.pane is not None:
            parts.append(f"pane {self.pane}")
        return ", ".join(parts)

    def _format(self) -> str:
        message = f"{self.detail}\n  In: {self.location}"
        if self.hint:
            message += f"\n  Hint: {self.hint}"
        return message


class MultiplexerNotInstalledError(TmxError):
    """The tmux binary could not be found."""

    def __init__(self) -> None:
        super().__init__("tmux is not installed")


class SessionNotFoundError(TmxError):
    """A requested session id/name is absent from config and no default exists."""

    def __init__(self, session_id: str, available: list[str]) -> None:
        self.session_id = session_id
        self.available = available
        super().__init__(
            f"Session '{session_id}' not found in configuration\nAvailable sessions: {', '.join(available)}"
        )


class SessionNotRunningError(TmxError):
    """A session that must be live is not running."""

    def __init__(self, session_name: str) -> None:
        self.session_name = session_name
        super().__init__(f"Session '{session_name}' is not running\nRun 'tmx running' to see active sessions.")


class ExternalCommandError(TmxError):
    """A tmux invocation exited with a non-zero status."""

    def __init__(self, command: list[str], stderr: str) -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(f"tmux command failed: {' '.join(command)}\n  {stderr.strip()}")


class InvalidShellArgError(TmxError):
    """A size or percentage value could not be parsed."""
