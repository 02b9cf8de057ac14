"""Utility functions for tmx."""

import os
import re

# Characters tmux treats as target separators.
_TARGET_UNSAFE = re.compile(r"[.:\s]")

# Characters that force a value to be quoted when typed into a shell.
_SHELL_SPECIAL = "'\"`$\\"


def sanitize_session_name(name: str) -> str:
    """Make a session name safe to use inside a tmux target string.

    tmux parses ``session:window.pane`` targets, so ``.``, ``:`` and
    whitespace in a session name are replaced with ``_``.

    Args:
        name: The display name of the session.

    Returns:
        The name as tmux knows it.
    """
    return _TARGET_UNSAFE.sub("_", name)


def expand_root(path: str) -> str:
    """Expand a leading ``~`` in a configured directory.

    Args:
        path: The path as written in the config file.

    Returns:
        The path with the user's home directory substituted.
    """
    return os.path.expanduser(path)


def shell_escape(value: str) -> str:
    """Quote a value so it survives being typed into a shell.

    Values with whitespace or any of ``'"`$\\`` are wrapped in single quotes,
    embedded single quotes becoming ``'\\''``. Anything else is returned as is.

    Args:
        value: The raw value.

    Returns:
        The shell-safe value.
    """
    if any(c.isspace() or c in _SHELL_SPECIAL for c in value):
        return "'" + value.replace("'", "'\\''") + "'"
    return value
