"""
Configuration file models

Schema of the TOML configuration file listing the files to preprocess.
Parsed with tomllib and validated with pydantic.

Example configuration:

    default_escape = ["{{{", "}}}"]
    default_prefix = "//~"
    default_remove_instructions = true

    [substitutions]
    RED = "#FF0000"

    [[config]]
    source = "./awesome.config"
    target = "$HOME/.awesome"
    prefix = "#~"
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Escape(BaseModel):
    """
    Escape sequences delimiting substitution keys

    Written either as a two element array `["{{{", "}}}"]` or as a table
    `{ start = "{{{", end = "}}}" }`.
    """
    start: str = Field(min_length=1)
    end: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def pair_accept(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError("escape must contain exactly a start and an end sequence")
            return {"start": value[0], "end": value[1]}
        return value

    def regex_make(self) -> "re.Pattern[str]":
        """
        Regular expression matching an escaped key including its escapes.

        Group 1 is the key. The match fails when the start escape is
        preceded by a backslash or the key ends with one.

        Example:
            >>> Escape(start="{{{", end="}}}").regex_make().sub(r"<\\1>", "a {{{KEY}}}")
            'a <KEY>'
        """
        start = re.escape(self.start)
        end = re.escape(self.end)
        return re.compile(rf"(?<!\\){start}(.*?[^\\]){end}")


class FileConfig(BaseModel):
    """
    Configuration of a single file

    Attributes:
        source: File to preprocess (environment variables allowed)
        target: Link to create, pointing at the preprocessed file
        escape: Substitution escapes, falls back to default_escape
        prefix: Directive line prefix, falls back to default_prefix
        remove_instructions: Drop directive lines from the output,
                             falls back to default_remove_instructions
    """
    model_config = ConfigDict(extra="forbid")

    source: Path
    target: Path
    escape: Optional[Escape] = None
    prefix: Optional[str] = None
    remove_instructions: Optional[bool] = None

    def supplement(
        self,
        escape: Optional[Escape],
        remove_instructions: bool,
        prefix: Optional[str],
    ) -> None:
        """
        Replace unset options with the given defaults.

        Options set explicitly for this file are left untouched.
        """
        if self.escape is None:
            self.escape = escape
        if self.remove_instructions is None:
            self.remove_instructions = remove_instructions
        if self.prefix is None:
            self.prefix = prefix


class RawConfig(BaseModel):
    """The configuration file exactly as written"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    default_escape: Optional[Escape] = None
    default_prefix: Optional[str] = None
    default_remove_instructions: bool = True
    file_configurations: List[FileConfig] = Field(default_factory=list, alias="config")
    substitutions: Dict[str, str] = Field(default_factory=dict)


class Config(BaseModel):
    """
    The complete, normalized configuration

    All unset options of the file configurations have been filled in with
    the defaults, where those were defined.
    """
    file_configurations: List[FileConfig] = Field(default_factory=list)
    substitutions: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def raw_normalize(cls, raw: RawConfig) -> "Config":
        file_configurations = [fc.model_copy(deep=True) for fc in raw.file_configurations]
        for fc in file_configurations:
            fc.supplement(raw.default_escape, raw.default_remove_instructions, raw.default_prefix)
        return cls(file_configurations=file_configurations, substitutions=dict(raw.substitutions))
