"""
Configuration tests - TOML loading, defaults and escapes
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dotprep.config import AppSettings
from dotprep.lib.errors import ConfigError
from dotprep.lib.preprocessor import config_load
from dotprep.models.config import Config, Escape, FileConfig, RawConfig


FULL_CONFIG = """
default_escape = ["{{{", "}}}"]
default_prefix = "//~"
default_remove_instructions = false

[substitutions]
RED = "#FF0000"

[[config]]
source = "./awesome.config"
target = "$HOME/.awesome"

[[config]]
source = "vimrc"
target = "$HOME/.vimrc"
prefix = '"~'
remove_instructions = true
escape = { start = "<<", end = ">>" }
"""


class TestEscape:
    """Escape pairs and their regular expression"""

    def test_pair_list(self):
        escape = Escape.model_validate(["{{{", "}}}"])
        assert (escape.start, escape.end) == ("{{{", "}}}")

    def test_wrong_length(self):
        with pytest.raises(ValidationError):
            Escape.model_validate(["{{{"])

    def test_empty_sequence(self):
        with pytest.raises(ValidationError):
            Escape.model_validate(["", "}}}"])

    def test_regex_key(self):
        regex = Escape(start="{{{", end="}}}").regex_make()
        assert [m.group(1) for m in regex.finditer("{{{A}}} and {{{$HOME}}}")] == ["A", "$HOME"]

    def test_regex_adjacent(self):
        regex = Escape(start="{{{", end="}}}").regex_make()
        assert regex.sub("x", "{{{A}}}{{{B}}}") == "xx"

    def test_regex_escaped_start(self):
        """A backslash before the start escape disables the substitution"""
        regex = Escape(start="{{{", end="}}}").regex_make()
        assert regex.search(r"\{{{A}}}") is None

    def test_regex_special_characters(self):
        """Escapes are literals, not patterns"""
        regex = Escape(start="$(", end=")$").regex_make()
        assert regex.sub("x", "a $(KEY)$ b") == "a x b"


class TestNormalize:
    """Defaults filling unset per-file options"""

    def test_defaults_applied(self):
        raw = RawConfig.model_validate({
            "default_escape": ["{{{", "}}}"],
            "default_prefix": "#~",
            "config": [{"source": "a", "target": "b"}],
        })
        fc = Config.raw_normalize(raw).file_configurations[0]

        assert fc.prefix == "#~"
        assert fc.escape == Escape(start="{{{", end="}}}")
        assert fc.remove_instructions is True

    def test_explicit_options_kept(self):
        raw = RawConfig.model_validate({
            "default_prefix": "#~",
            "default_remove_instructions": True,
            "config": [{"source": "a", "target": "b", "prefix": "//~", "remove_instructions": False}],
        })
        fc = Config.raw_normalize(raw).file_configurations[0]

        assert fc.prefix == "//~"
        assert fc.remove_instructions is False

    def test_no_defaults(self):
        raw = RawConfig.model_validate({"config": [{"source": "a", "target": "b"}]})
        fc = Config.raw_normalize(raw).file_configurations[0]

        assert fc.prefix is None
        assert fc.escape is None

    def test_raw_left_untouched(self):
        raw = RawConfig.model_validate({"default_prefix": "#~", "config": [{"source": "a", "target": "b"}]})
        Config.raw_normalize(raw)
        assert raw.file_configurations[0].prefix is None

    def test_supplement(self):
        fc = FileConfig(source=Path("a"), target=Path("b"), prefix="%~")
        fc.supplement(escape=None, remove_instructions=False, prefix="#~")
        assert fc.prefix == "%~"
        assert fc.remove_instructions is False

    def test_unknown_file_option(self):
        with pytest.raises(ValidationError):
            RawConfig.model_validate({"config": [{"source": "a", "target": "b", "colour": "red"}]})

    def test_missing_target(self):
        with pytest.raises(ValidationError):
            RawConfig.model_validate({"config": [{"source": "a"}]})


class TestConfigLoad:
    """Reading the TOML file"""

    def test_full(self, tmp_path):
        path = tmp_path / "preprocessor.toml"
        path.write_text(FULL_CONFIG)

        config = config_load(path)

        assert config.substitutions == {"RED": "#FF0000"}
        first, second = config.file_configurations
        assert first.source == Path("awesome.config")
        assert first.prefix == "//~"
        assert first.remove_instructions is False
        assert first.escape == Escape(start="{{{", end="}}}")
        assert second.prefix == '"~'
        assert second.remove_instructions is True
        assert second.escape == Escape(start="<<", end=">>")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "preprocessor.toml"
        path.write_text("")
        assert config_load(path).file_configurations == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Failed to load"):
            config_load(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "preprocessor.toml"
        path.write_text("default_prefix = \n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            config_load(path)

    def test_invalid_schema(self, tmp_path):
        path = tmp_path / "preprocessor.toml"
        path.write_text("default_remove_instructions = 'maybe'\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            config_load(path)


class TestAppSettings:
    """Tool settings from the environment"""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.preprocessed_suffix == ".preprocessed"
        assert settings.shell == "sh"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DOTPREP_PREPROCESSED_SUFFIX", ".out")
        monkeypatch.setenv("DOTPREP_STRICT_MODE", "true")
        settings = AppSettings()
        assert settings.preprocessed_suffix == ".out"
        assert settings.strict_mode is True

    def test_preprocessed_path(self):
        settings = AppSettings()
        assert settings.preprocessedPath_make(Path("out"), Path("vim/vimrc")) == Path(
            "out/vim/vimrc.preprocessed"
        )
