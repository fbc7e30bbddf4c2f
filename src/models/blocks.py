"""
Block tree data models

Type-safe structures produced by BlockBuilder and consumed by Evaluator.
The flat located-directive list of a file becomes a forest of blocks; every
opener is matched with its closer before anything is evaluated.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .directives import Ask, IfDef, IfNDef, If, LocatedDirective, Option


@dataclass
class ConditionalBlock:
    """
    An IFDEF/IFNDEF/IF block and everything up to its ENDIF

    Attributes:
        opener: The located opening directive
        else_line: Line of the ELSE at this level, if any
        end_line: Line of the closing ENDIF
        children: Nested blocks in document order

    Example:
        For directives [(1, IfDef("A")), (5, Else()), (10, EndIf())]:
        ConditionalBlock(
            opener=LocatedDirective(1, IfDef("A")),
            else_line=5,
            end_line=10,
            children=[]
        )
    """
    opener: LocatedDirective
    else_line: Optional[int]
    end_line: int
    children: List["Block"] = field(default_factory=list)

    @property
    def condition(self) -> Union[IfDef, IfNDef, If]:
        return self.opener.directive  # type: ignore[return-value]


@dataclass
class InteractiveBlock:
    """
    An ASK block, its OPTIONs and everything up to its ENDASK

    With no options the block is a yes/no question; otherwise each option
    owns the lines between it and the next option (or the ENDASK).

    Attributes:
        opener: The located ASK directive
        options: OPTION directives found directly at this level, in order
        end_line: Line of the closing ENDASK
        children: Nested blocks in document order
    """
    opener: LocatedDirective
    options: List[LocatedDirective]
    end_line: int
    children: List["Block"] = field(default_factory=list)

    @property
    def question(self) -> str:
        ask: Ask = self.opener.directive  # type: ignore[assignment]
        return ask.question

    @property
    def option_labels(self) -> Tuple[str, ...]:
        labels = []
        for located in self.options:
            option: Option = located.directive  # type: ignore[assignment]
            labels.append(option.label)
        return tuple(labels)


Block = Union[ConditionalBlock, InteractiveBlock]
