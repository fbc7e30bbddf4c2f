"""
Directive grammars for dotprep

Each directive keyword is described by a DirectiveSpec holding its grammar
and the builder producing the Directive value. The registry keeps the specs
in priority order: IF is a prefix of IFDEF and IFNDEF, so the longer
keywords have to be tried first.
"""

import re
from typing import Dict, List, Optional

from ..models.directives import (
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
    Option,
)

# One or more spaces/tabs, then the rest of the line. The rest starts with a
# non-blank character and stops at a carriage return or line feed.
REST_OF_LINE = r"[ \t]+(?P<rest>[^ \t\r\n][^\r\n]*)"


class DirectiveRegistry:
    """
    Registry of directive specifications

    Maps directive keywords to DirectiveSpec objects and matches line text
    against them in registration (priority) order.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.conditionalDirectives_register()
        self.interactiveDirectives_register()
        self.annotationDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec

    def directives_listByCategory(self, category: DirectiveCategory) -> List[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def match(self, text: str) -> Optional[Directive]:
        """
        Match line text against the registered grammars

        Args:
            text: Line text following the prefix and its leading whitespace

        Returns:
            The first matching directive, or None if no grammar matches

        Example:
            >>> DirectiveRegistry().match("ifdef $HOME")
            IfDef(expression='$HOME')
        """
        for spec in self.specs.values():
            directive = spec.match(text)
            if directive is not None:
                return directive
        return None

    def conditionalDirectives_register(self) -> None:
        """Register IFDEF, IFNDEF, IF, ELSE and ENDIF"""

        def if_build(found: "re.Match[str]") -> Directive:
            return If(left=found.group("left").strip(), right=found.group("right").strip())

        self.register(DirectiveSpec(
            name="IFDEF",
            category=DirectiveCategory.CONDITIONAL,
            description="Keep the block if the expression expands to a non-blank value",
            pattern=r"IFDEF" + REST_OF_LINE,
            builder=lambda found: IfDef(expression=found.group("rest")),
            examples=["#~ IFDEF $DISPLAY", "#~ IFDEF $(command -v nvim)"],
        ))

        self.register(DirectiveSpec(
            name="IFNDEF",
            category=DirectiveCategory.CONDITIONAL,
            description="Keep the block if the expression expands to a blank value",
            pattern=r"IFNDEF" + REST_OF_LINE,
            builder=lambda found: IfNDef(expression=found.group("rest")),
            examples=["#~ IFNDEF $SSH_CONNECTION"],
        ))

        self.register(DirectiveSpec(
            name="IF",
            category=DirectiveCategory.CONDITIONAL,
            description="Keep the block if both expressions expand to the same value",
            pattern=r"IF[ \t]+(?P<left>.*?)[ \t]*==[ \t]*(?P<right>[^ \t\r\n][^\r\n]*)",
            builder=if_build,
            examples=["#~ IF $(hostname) == workstation"],
        ))

        self.register(DirectiveSpec(
            name="ELSE",
            category=DirectiveCategory.CONDITIONAL,
            description="Start the alternative branch of the open conditional",
            pattern=r"ELSE",
            builder=lambda found: Else(),
            examples=["#~ ELSE"],
        ))

        self.register(DirectiveSpec(
            name="ENDIF",
            category=DirectiveCategory.CONDITIONAL,
            description="Close the nearest open conditional",
            pattern=r"ENDIF",
            builder=lambda found: EndIf(),
            examples=["#~ ENDIF"],
        ))

    def interactiveDirectives_register(self) -> None:
        """Register ASK, OPTION and ENDASK"""

        self.register(DirectiveSpec(
            name="ASK",
            category=DirectiveCategory.INTERACTIVE,
            description="Ask a yes/no question, or a multiple-choice one when OPTIONs follow",
            pattern=r"ASK" + REST_OF_LINE,
            builder=lambda found: Ask(question=found.group("rest")),
            examples=["#~ ASK Enable the work proxy?", "#~ ASK Which colour scheme?"],
        ))

        self.register(DirectiveSpec(
            name="OPTION",
            category=DirectiveCategory.INTERACTIVE,
            description="One choice of the open ASK; owns the lines up to the next OPTION or ENDASK",
            pattern=r"OPTION" + REST_OF_LINE,
            builder=lambda found: Option(label=found.group("rest")),
            examples=["#~ OPTION solarized", "#~ OPTION gruvbox"],
        ))

        self.register(DirectiveSpec(
            name="ENDASK",
            category=DirectiveCategory.INTERACTIVE,
            description="Close the nearest open ASK",
            pattern=r"ENDASK",
            builder=lambda found: EndAsk(),
            examples=["#~ ENDASK"],
        ))

    def annotationDirectives_register(self) -> None:
        """Register the comment directive"""

        self.register(DirectiveSpec(
            name="#",
            category=DirectiveCategory.ANNOTATION,
            description="Preprocessor comment, ignored entirely",
            pattern=r"\#",
            builder=lambda found: Comment(),
            examples=["#~ # only visible in the source file"],
        ))
