"""Tests for tmx.utils module."""

from pathlib import Path

from tmx.utils import expand_root, sanitize_session_name, shell_escape


class TestSanitizeSessionName:
    """Tests for sanitize_session_name function."""

    def test_plain_name_unchanged(self) -> None:
        """Should leave safe names alone."""
        assert sanitize_session_name("my-project") == "my-project"

    def test_dots_replaced(self) -> None:
        """Should replace dots, which separate window and pane."""
        assert sanitize_session_name("api.v2") == "api_v2"

    def test_colons_replaced(self) -> None:
        """Should replace colons, which separate session and window."""
        assert sanitize_session_name("a:b") == "a_b"

    def test_whitespace_replaced(self) -> None:
        """Should replace spaces and tabs."""
        assert sanitize_session_name("my project\tx") == "my_project_x"

    def test_idempotent(self) -> None:
        """Should be stable when applied twice."""
        once = sanitize_session_name("a.b:c d")
        assert sanitize_session_name(once) == once


class TestExpandRoot:
    """Tests for expand_root function."""

    def test_tilde(self) -> None:
        """Should expand ~ to the home directory."""
        assert expand_root("~") == str(Path.home())
        assert expand_root("~/code") == str(Path.home() / "code")

    def test_absolute_unchanged(self) -> None:
        """Should leave absolute paths alone."""
        assert expand_root("/srv/app") == "/srv/app"


class TestShellEscape:
    """Tests for shell_escape function."""

    def test_simple_value_unquoted(self) -> None:
        """Should not quote plain words."""
        assert shell_escape("development") == "development"
        assert shell_escape("3000") == "3000"

    def test_whitespace_quoted(self) -> None:
        """Should quote values containing whitespace."""
        assert shell_escape("hello world") == "'hello world'"

    def test_special_characters_quoted(self) -> None:
        """Should quote values with shell metacharacters."""
        assert shell_escape("$HOME") == "'$HOME'"
        assert shell_escape("a`b`") == "'a`b`'"
        assert shell_escape('say "hi"') == "'say \"hi\"'"
        assert shell_escape("back\\slash") == "'back\\slash'"

    def test_single_quotes_escaped(self) -> None:
        """Should close, escape and reopen around embedded single quotes."""
        assert shell_escape("it's") == "'it'\\''s'"

    def test_empty(self) -> None:
        """Should leave an empty value as is."""
        assert shell_escape("") == ""
