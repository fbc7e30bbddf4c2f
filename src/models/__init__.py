"""
Models package for dotprep

Contains data structures and type definitions for the preprocessing pipeline.
"""

from .state import ProgramState, pipeline
from .directives import (
    Ask,
    Comment,
    Directive,
    DirectiveCategory,
    DirectiveSpec,
    Else,
    EndAsk,
    EndIf,
    If,
    IfDef,
    IfNDef,
    LocatedDirective,
    Option,
)
from .blocks import Block, ConditionalBlock, InteractiveBlock
from .config import Config, Escape, FileConfig, RawConfig

__all__ = [
    "ProgramState",
    "pipeline",
    "Ask",
    "Comment",
    "Directive",
    "DirectiveCategory",
    "DirectiveSpec",
    "Else",
    "EndAsk",
    "EndIf",
    "If",
    "IfDef",
    "IfNDef",
    "LocatedDirective",
    "Option",
    "Block",
    "ConditionalBlock",
    "InteractiveBlock",
    "Config",
    "Escape",
    "FileConfig",
    "RawConfig",
]
