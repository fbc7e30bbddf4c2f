"""
dotprep - Line-oriented dotfile preprocessor

Conditional and interactive directive lines decide which lines of a
configuration file survive.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Evaluator,
    Preprocessor,
    DirectiveRegistry,
    config_load,
    skips_evaluate,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Parser",
    "Evaluator",
    "Preprocessor",
    "DirectiveRegistry",
    "config_load",
    "skips_evaluate",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
