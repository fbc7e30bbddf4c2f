"""
Verbosity-gated logging on top of loguru.

The active ProgramState is kept in a context variable, so library code
(parser, evaluator, preprocessor) can call LOG() without being handed the
state or its verbosity.

Verbosity levels:
    0 = always shown (warnings and errors the user must see)
    1 = normal run output
    2 = per-file details (-v)
    3 = directive and expansion trace (-vv)

Usage:
    from dotprep.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Preprocessing vimrc", level=1)
    LOG("Process 'uname -s' exited abnormally", level=0, severity="WARNING")
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <22}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

# Everything goes to stderr, stdout is left to --listDirectives
logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make `state.verbosity` the threshold of every following LOG() call.

    Args:
        state: ProgramState (anything with a `verbosity` attribute)
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, severity: str = "DEBUG", **kwargs: Any) -> None:
    """
    Log `message` when the connected state's verbosity reaches `level`.

    Level 0 messages bypass the verbosity check. Without a connected state
    only level 0 messages are logged.

    Args:
        message: Text to log
        level: Verbosity required to show the message
        severity: Loguru level name of the record (DEBUG, INFO, WARNING, ERROR)
        **kwargs: Passed on to loguru
    """
    if level > 0:
        state = _program_state.get()
        if state is None or getattr(state, 'verbosity', 0) < level:
            return
    # depth=1 reports the caller's function and line, not LOG itself
    logger.opt(depth=1).log(severity, message, **kwargs)
