"""
Variable expansion

Expands the variable expressions used in conditions, substitutions and
configuration paths:

    $NAME       environment variable NAME (letters and underscores only)
    ${NAME}     same, delimited
    $(command)  standard output of `command`, run through the shell

Unset variables expand to the empty string. A backslash in front of the
dollar sign prevents expansion (the backslash is kept). Command
substitution runs first, environment expansion second.
"""

import os
import re
import subprocess
from pathlib import Path

from ..config import appsettings
from .log import LOG

RE_DOLLAR = re.compile(r"(?<!\\)\$([a-zA-Z_]+)")
RE_DOLLAR_BRACES = re.compile(r"(?<!\\)\$\{([a-zA-Z_]+)\}")
RE_DOLLAR_PARENS = re.compile(r"(?<!\\)\$\((.+?[^\\])\)")


def expand(expression: str) -> str:
    """
    Expand commands and environment variables in `expression`

    This is the default variable resolver of the evaluator.

    Example:
        >>> os.environ["EDITOR"] = "vim"
        >>> expand("${EDITOR}-$(echo x)")
        'vim-x'
    """
    return env_expand(subst_expand(expression))


def env_expand(expression: str) -> str:
    """Expand $NAME and ${NAME}"""

    def env_replace(found: "re.Match[str]") -> str:
        return os.environ.get(found.group(1), "")

    expanded = RE_DOLLAR.sub(env_replace, expression)
    return RE_DOLLAR_BRACES.sub(env_replace, expanded)


def subst_expand(expression: str) -> str:
    """Replace $(command) with the command's output"""
    return RE_DOLLAR_PARENS.sub(command_run, expression)


def command_run(found: "re.Match[str]") -> str:
    """
    Run the command of a $(command) match

    Trailing newlines of the output are dropped. A command that cannot be
    started or exits with a non-zero status is reported and expands to the
    empty string.
    """
    command = found.group(1)
    LOG(f"Running {command!r}", level=3)
    try:
        completed = subprocess.run(
            [appsettings.shell, appsettings.shell_flag, command],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        LOG(f"Process {command!r} could not be started: {e}", level=0, severity="WARNING")
        return ""

    if completed.returncode != 0:
        LOG(f"Process {command!r} exited abnormally", level=0, severity="WARNING")
        return ""
    return completed.stdout.rstrip("\n")


def path_expand(path: Path) -> Path:
    """
    Expand environment variables in a configuration path

    Example:
        >>> os.environ["HOME"] = "/home/me"
        >>> path_expand(Path("$HOME/.vimrc"))
        PosixPath('/home/me/.vimrc')
    """
    return Path(env_expand(str(path)))
