"""Per-invocation context shared by tmx commands."""

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from tmx.config import Config, load_config
from tmx.diagnostics import Diagnostics
from tmx.tmux_manager import Multiplexer


@dataclass
class AppContext:
    """Everything a command needs, resolved once at process entry.

    The config itself is not held here; each command loads it when it starts
    and passes it on explicitly.
    """

    config_path: Path
    tmux: Multiplexer
    log: Diagnostics
    inside_tmux: bool = False
    console: Console = field(default_factory=Console)
    err_console: Console = field(default_factory=lambda: Console(stderr=True))

    def load_config(self) -> Config:
        """Read and parse the config file at ``config_path``."""
        return load_config(self.config_path)
