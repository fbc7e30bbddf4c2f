"""
dotprep - Line-oriented dotfile preprocessor

Conditional and interactive directive lines decide which lines of a
configuration file survive.
"""

__version__ = "1.0.0"

from .parser import Parser, directive_parse
from .blocks import BlockBuilder, blocks_build
from .evaluator import Evaluator, skips_evaluate
from .directives import DirectiveRegistry
from .preprocessor import Preprocessor, config_load
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "directive_parse",
    "BlockBuilder",
    "blocks_build",
    "Evaluator",
    "skips_evaluate",
    "DirectiveRegistry",
    "Preprocessor",
    "config_load",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
