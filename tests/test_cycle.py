"""Tests for tmx.cycle module."""

from pathlib import Path

import pytest
from conftest import SAMPLE_CONFIG, FakeTmux, console_output

from tmx.config import parse_config
from tmx.context import AppContext
from tmx.cycle import cycle, find_next_session, order_sessions
from tmx.errors import ConfigNotFoundError, MultiplexerNotInstalledError


class TestOrderSessions:
    """Tests for order_sessions function."""

    def test_without_config(self) -> None:
        """Should sort alphabetically."""
        assert order_sessions(["zebra", "alpha", "beta"], None) == ["alpha", "beta", "zebra"]

    def test_configured_first(self) -> None:
        """Should put configured sessions first in id order, then the rest alphabetically."""
        config = parse_config(SAMPLE_CONFIG)
        running = ["zebra", "work-main", "apple", "dev"]
        assert order_sessions(running, config) == ["dev", "work-main", "apple", "zebra"]

    def test_configured_but_not_running_skipped(self) -> None:
        """Should only include live sessions."""
        config = parse_config(SAMPLE_CONFIG)
        assert order_sessions(["work-main"], config) == ["work-main"]

    def test_sanitized_names_match(self) -> None:
        """Should compare configured names the way tmux stores them."""
        config = parse_config(SAMPLE_CONFIG)
        config.sessions["work"].name = "work.main"
        assert order_sessions(["other", "work_main"], config) == ["work_main", "other"]

    def test_duplicate_names_listed_once(self) -> None:
        """Should not list a session twice when two ids share a name."""
        config = parse_config(SAMPLE_CONFIG)
        config.sessions["work"].name = "dev"
        assert order_sessions(["dev"], config) == ["dev"]


class TestFindNextSession:
    """Tests for find_next_session function."""

    def test_next(self) -> None:
        """Should return the following session."""
        assert find_next_session(["dev", "work", "test"], "dev") == "work"

    def test_wraps_around(self) -> None:
        """Should wrap from the last session to the first."""
        assert find_next_session(["dev", "work", "test"], "test") == "dev"

    def test_unknown_current(self) -> None:
        """Should return the first session when current is not in the list."""
        assert find_next_session(["dev", "work", "test"], "other") == "dev"

    def test_single_session(self) -> None:
        """Should return the only session."""
        assert find_next_session(["dev"], "dev") == "dev"


class TestCycle:
    """Tests for cycle function."""

    def test_starts_default_when_nothing_running(self, app_ctx: AppContext, fake_tmux: FakeTmux) -> None:
        """Should build and attach the default session."""
        assert cycle(app_ctx) == "dev"
        assert fake_tmux.calls_to("new_session") == [("new_session", "dev", "editor", "/tmp/dev")]
        assert fake_tmux.calls_to("attach_session") == [("attach_session", "dev")]
        assert "No sessions running" in console_output(app_ctx.console)

    def test_starts_first_id_without_default(self, app_ctx: AppContext, fake_tmux: FakeTmux) -> None:
        """Should fall back to the alphabetically first session id."""
        app_ctx.config_path.write_text(SAMPLE_CONFIG.replace("default: dev\n", ""), encoding="utf-8")
        assert cycle(app_ctx) == "dev"

    def test_attaches_first_outside_tmux(self, app_ctx: AppContext, fake_tmux: FakeTmux) -> None:
        """Should attach to the first session in cycling order."""
        fake_tmux.add_session("zebra", [1])
        fake_tmux.add_session("work-main", [1, 3])

        assert cycle(app_ctx) == "work-main"
        assert fake_tmux.calls == [("attach_session", "work-main")]

    def test_switches_to_next_inside_tmux(self, app_ctx: AppContext, fake_tmux: FakeTmux) -> None:
        """Should switch the client to the session after the current one."""
        for name in ("dev", "work-main", "zebra"):
            fake_tmux.add_session(name, [1])
        fake_tmux.current = "zebra"
        app_ctx.inside_tmux = True

        assert cycle(app_ctx) == "dev"
        assert fake_tmux.calls == [("switch_client", "dev")]

    def test_cycles_without_config(self, app_ctx: AppContext, fake_tmux: FakeTmux, tmp_path: Path) -> None:
        """Should order alphabetically when the config cannot be loaded."""
        app_ctx.config_path = tmp_path / "missing.yaml"
        fake_tmux.add_session("zebra", [1])
        fake_tmux.add_session("alpha", [1])

        assert cycle(app_ctx) == "alpha"

    def test_nothing_running_without_config(self, app_ctx: AppContext, tmp_path: Path) -> None:
        """Should fail when there is nothing to cycle and nothing to start."""
        app_ctx.config_path = tmp_path / "missing.yaml"
        with pytest.raises(ConfigNotFoundError):
            cycle(app_ctx)

    def test_tmux_not_installed(self, app_ctx: AppContext, fake_tmux: FakeTmux) -> None:
        """Should fail early."""
        fake_tmux.installed = False
        with pytest.raises(MultiplexerNotInstalledError):
            cycle(app_ctx)
