"""
Parser for prefixed directive lines

Extracts preprocessor directives from the lines of a text file.

A directive line starts with the file's prefix (e.g. "#~"), followed by
optional spaces/tabs and a keyword:

    #~ IFDEF $DISPLAY
    font_size = 12
    #~ ELSE
    font_size = 10
    #~ ENDIF

Matching is line-local and keywords are case-insensitive. Lines not starting
with the prefix are ordinary content and are never looked at again.

Example:
    >>> parser = Parser("a\\n#~ ifdef $X\\nb\\n#~ endif\\n", prefix="#~")
    >>> [located.line for located in parser.parse()]
    [1, 3]
"""

import re
from typing import List, Optional

from ..models.directives import Directive, LocatedDirective
from .directives import DirectiveRegistry
from .errors import UnrecognizedDirectiveError
from .log import LOG

# Whitespace allowed between the prefix and the keyword
_LEADING_BLANKS = re.compile(r"[ \t]*")


def lines_split(content: str) -> List[str]:
    r"""
    Split text into lines

    Lines are separated by '\n'; a trailing '\r' is dropped from every line
    and a final line terminator does not produce an empty last line.

    Example:
        >>> lines_split("a\r\nb\n")
        ['a', 'b']
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Parser:
    """
    Parser for prefixed directive lines

    Handles:
    - Prefix detection (exact, case-sensitive literal)
    - Keyword grammars in priority order (via DirectiveRegistry)
    - Error reporting with the offending text
    """

    def __init__(self, source: str, prefix: str, registry: Optional[DirectiveRegistry] = None):
        """
        Initialize parser with source text

        Args:
            source: Raw text of the file
            prefix: Literal prefix introducing directive lines
            registry: Optional DirectiveRegistry holding the keyword grammars

        Attributes:
            lines: Source split into lines (see lines_split); the
                   preprocessor reuses them to drop skipped lines
        """
        self.prefix = prefix
        self.lines = lines_split(source)

        if registry is None:
            registry = DirectiveRegistry()
        self.registry = registry

    def parse(self) -> List[LocatedDirective]:
        """
        Parse every line of the source

        Returns:
            Located directives ordered by line. Empty if the source contains
            no directive lines.

        Raises:
            UnrecognizedDirectiveError: On the first line that starts with the
                prefix but matches no directive grammar. No directives are
                returned in that case.
        """
        directives: List[LocatedDirective] = []
        for line_number, line in enumerate(self.lines):
            directive = self.line_parse(line)
            if directive is None:
                continue
            LOG(f"Line {line_number + 1}: {directive}", level=3)
            directives.append(LocatedDirective(line=line_number, directive=directive))

        return directives

    def line_parse(self, line: str) -> Optional[Directive]:
        """
        Parse a single line

        Args:
            line: One line of text (no trailing line terminator needed)

        Returns:
            None if the line does not start with the prefix, the directive
            otherwise

        Raises:
            UnrecognizedDirectiveError: If the line starts with the prefix but
                no keyword grammar matches

        Example:
            >>> Parser("", prefix="//~").line_parse("//~\\tIfDef\\tX")
            IfDef(expression='X')
        """
        return directive_parse(self.prefix, line, self.registry)


_default_registry: Optional[DirectiveRegistry] = None


def directive_parse(
    prefix: str, line: str, registry: Optional[DirectiveRegistry] = None
) -> Optional[Directive]:
    """
    Parse a single line against `prefix` without building a Parser

    See Parser.line_parse.
    """
    global _default_registry

    if not line.startswith(prefix):
        return None

    if registry is None:
        if _default_registry is None:
            _default_registry = DirectiveRegistry()
        registry = _default_registry

    remaining = line[len(prefix):]
    remaining = remaining[_LEADING_BLANKS.match(remaining).end():]  # type: ignore[union-attr]

    directive = registry.match(remaining)
    if directive is None:
        raise UnrecognizedDirectiveError(remaining)
    return directive
