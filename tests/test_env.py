"""
Variable expansion tests

Environment variables are set with monkeypatch; command substitution runs
real (trivial) shell commands.
"""

from pathlib import Path

from dotprep.lib.env import env_expand, expand, path_expand, subst_expand


class TestEnvironment:
    """$NAME and ${NAME}"""

    def test_dollar(self, monkeypatch):
        monkeypatch.setenv("DOTPREP_TEST", "value")
        assert expand("$DOTPREP_TEST") == "value"

    def test_braces(self, monkeypatch):
        monkeypatch.setenv("DOTPREP_TEST", "value")
        assert expand("pre${DOTPREP_TEST}post") == "prevaluepost"

    def test_unset_is_empty(self, monkeypatch):
        monkeypatch.delenv("DOTPREP_UNSET", raising=False)
        assert expand("[$DOTPREP_UNSET]") == "[]"

    def test_name_stops_at_other_characters(self, monkeypatch):
        """Names consist of letters and underscores only"""
        monkeypatch.setenv("DOTPREP_A", "x")
        assert expand("$DOTPREP_A-1") == "x-1"

    def test_backslash_prevents_expansion(self, monkeypatch):
        monkeypatch.setenv("DOTPREP_TEST", "value")
        assert expand(r"\$DOTPREP_TEST") == r"\$DOTPREP_TEST"

    def test_plain_text_unchanged(self):
        assert env_expand("no variables here") == "no variables here"


class TestCommands:
    """$(command)"""

    def test_output(self):
        assert subst_expand("$(echo hello)") == "hello"

    def test_trailing_newlines_trimmed(self):
        assert expand("$(printf 'a\\n\\n')") == "a"

    def test_embedded(self):
        assert expand("<$(echo x)>") == "<x>"

    def test_failing_command_is_empty(self):
        assert expand("$(exit 3)") == ""

    def test_backslash_prevents_command(self):
        assert subst_expand(r"\$(echo x)") == r"\$(echo x)"

    def test_commands_before_environment(self, monkeypatch):
        """Command output is itself environment-expanded"""
        monkeypatch.setenv("DOTPREP_TEST", "value")
        assert expand("$(echo '$DOTPREP_TEST')") == "value"


class TestPaths:
    """Configuration paths"""

    def test_expanded(self, monkeypatch):
        monkeypatch.setenv("DOTPREP_HOME", "/home/me")
        assert path_expand(Path("$DOTPREP_HOME/.vimrc")) == Path("/home/me/.vimrc")

    def test_relative_kept(self):
        assert path_expand(Path("./awesome.config")) == Path("awesome.config")
