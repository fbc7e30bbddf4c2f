"""
Directive specification and value models

Defines the closed set of preprocessor directives, the located form handed
to the block builder, and the metadata used by DirectiveRegistry to match
directive keywords in priority order.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, ClassVar, List, Optional, Union


class DirectiveCategory(Enum):
    """
    Categories of preprocessor directives

    Used for organization, documentation generation, and block building.
    """
    CONDITIONAL = "conditional"    # IFDEF, IFNDEF, IF, ELSE, ENDIF
    INTERACTIVE = "interactive"    # ASK, OPTION, ENDASK
    ANNOTATION = "annotation"      # #


@dataclass(frozen=True)
class IfDef:
    """True if the expression expands to a non-blank value"""
    expression: str
    keyword: ClassVar[str] = "IFDEF"


@dataclass(frozen=True)
class IfNDef:
    """True if the expression expands to a blank value"""
    expression: str
    keyword: ClassVar[str] = "IFNDEF"


@dataclass(frozen=True)
class If:
    """True if both expressions expand to equal values (after trimming)"""
    left: str
    right: str
    keyword: ClassVar[str] = "IF"


@dataclass(frozen=True)
class Else:
    keyword: ClassVar[str] = "ELSE"


@dataclass(frozen=True)
class EndIf:
    keyword: ClassVar[str] = "ENDIF"


@dataclass(frozen=True)
class Ask:
    """Opens an interactive block asking `question`"""
    question: str
    keyword: ClassVar[str] = "ASK"


@dataclass(frozen=True)
class Option:
    """One selectable choice inside an open ASK block"""
    label: str
    keyword: ClassVar[str] = "OPTION"


@dataclass(frozen=True)
class EndAsk:
    keyword: ClassVar[str] = "ENDASK"


@dataclass(frozen=True)
class Comment:
    keyword: ClassVar[str] = "#"


Directive = Union[IfDef, IfNDef, If, Else, EndIf, Ask, Option, EndAsk, Comment]

# Directives opening a block that needs a closing directive
CONDITIONAL_OPENERS = (IfDef, IfNDef, If)
BLOCK_OPENERS = (IfDef, IfNDef, If, Ask)


@dataclass(frozen=True)
class LocatedDirective:
    """
    A directive together with the 0-based line index it was found on

    Attributes:
        line: Zero-based index of the line in the source text
        directive: The parsed directive

    Example:
        For source "#~ IFDEF $HOME" on the first line:
        LocatedDirective(line=0, directive=IfDef(expression="$HOME"))
    """
    line: int
    directive: Directive


def directive_describe(directive: Directive) -> str:
    """
    Render a directive for diagnostics.

    Example:
        >>> directive_describe(If(left="$A", right="b"))
        'IF $A == b'
    """
    if isinstance(directive, (IfDef, IfNDef)):
        return f"{directive.keyword} {directive.expression}"
    if isinstance(directive, If):
        return f"{directive.keyword} {directive.left} == {directive.right}"
    if isinstance(directive, Ask):
        return f"{directive.keyword} {directive.question}"
    if isinstance(directive, Option):
        return f"{directive.keyword} {directive.label}"
    return directive.keyword


@dataclass
class DirectiveSpec:
    """
    Specification for a preprocessor directive

    Defines the keyword grammar and metadata for a directive.
    Used by DirectiveRegistry to match lines in priority order.

    Attributes:
        name: Directive keyword (matched case-insensitively)
        category: Category for organization
        description: Human-readable description
        pattern: Grammar matched right after prefix and leading whitespace
        builder: Builds the Directive from the pattern match
        examples: Example usage strings (shown with the default prefix)
    """
    name: str
    category: DirectiveCategory
    description: str
    pattern: str
    builder: Callable[["re.Match[str]"], Directive]
    examples: List[str] = field(default_factory=list)
    regex: "re.Pattern[str]" = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.regex = re.compile(self.pattern, re.IGNORECASE)

    def match(self, text: str) -> Optional[Directive]:
        """
        Try this spec's grammar at the start of `text`

        Only a prefix of `text` has to match; anything after a bare keyword
        (e.g. 'ELSE this branch') is ignored.

        Args:
            text: Line text following the prefix and its whitespace

        Returns:
            The directive if the grammar matches, None otherwise
        """
        found = self.regex.match(text)
        if found is None:
            return None
        return self.builder(found)
