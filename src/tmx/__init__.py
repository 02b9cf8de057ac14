"""Declarative tmux session manager."""

__version__ = "0.4.0"
