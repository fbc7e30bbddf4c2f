"""
Block builder

Turns the flat, ordered list of located directives of a file into a forest
of ConditionalBlock / InteractiveBlock nodes. This is where all structural
validation happens, so that nothing is evaluated (and nobody is asked a
question) for a file whose directives do not nest properly.

Rules, per nesting level:
- IFDEF/IFNDEF/IF and ASK open a nested block (recursion)
- comments are dropped
- inside a conditional: at most one ELSE, closed by ENDIF
- inside an ASK: any number of OPTIONs, closed by ENDASK
- anything else is a stray directive
- running out of directives inside a block is a missing closing directive,
  reported for the innermost open block
"""

from typing import List, NoReturn

from ..models.blocks import Block, ConditionalBlock, InteractiveBlock
from ..models.directives import (
    Ask,
    BLOCK_OPENERS,
    Comment,
    CONDITIONAL_OPENERS,
    Else,
    EndAsk,
    EndIf,
    LocatedDirective,
    Option,
    directive_describe,
)
from .errors import MissingClosingDirectiveError, StrayDirectiveError
from .log import LOG


class BlockBuilder:
    """
    Recursive descent over a located-directive list

    Attributes:
        directives: The located directives, ordered by line
        position: Index of the next directive to consume
    """

    def __init__(self, directives: List[LocatedDirective]) -> None:
        self.directives = directives
        self.position = 0

    def blocks_build(self) -> List[Block]:
        """
        Build the top-level blocks

        Returns:
            Top-level blocks in document order

        Raises:
            StrayDirectiveError: ELSE/ENDIF/OPTION/ENDASK outside a matching block
            MissingClosingDirectiveError: A block is never closed
        """
        blocks: List[Block] = []
        self.position = 0

        while self.position < len(self.directives):
            located = self.directives[self.position]
            directive = located.directive

            if isinstance(directive, BLOCK_OPENERS):
                blocks.append(self.block_build())
            elif isinstance(directive, Comment):
                self.position += 1
            else:
                self.stray_raise(located)

        LOG(f"Built {len(blocks)} top-level blocks", level=3)
        return blocks

    def block_build(self) -> Block:
        """Build the block opened by the directive at the current position"""
        located = self.directives[self.position]
        if isinstance(located.directive, CONDITIONAL_OPENERS):
            return self.conditional_build()
        if isinstance(located.directive, Ask):
            return self.interactive_build()
        raise TypeError(f"BUG: block_build called on {located.directive!r}")

    def conditional_build(self) -> ConditionalBlock:
        """
        Build an IFDEF/IFNDEF/IF block

        Consumes directives up to and including the matching ENDIF.
        """
        opener = self.directives[self.position]
        self.position += 1
        else_line = None
        children: List[Block] = []

        while self.position < len(self.directives):
            located = self.directives[self.position]
            directive = located.directive

            if isinstance(directive, BLOCK_OPENERS):
                children.append(self.block_build())
            elif isinstance(directive, Comment):
                self.position += 1
            elif isinstance(directive, Else) and else_line is None:
                else_line = located.line
                self.position += 1
            elif isinstance(directive, EndIf):
                self.position += 1
                return ConditionalBlock(
                    opener=opener,
                    else_line=else_line,
                    end_line=located.line,
                    children=children,
                )
            else:
                # a second ELSE, or OPTION/ENDASK without an open ASK
                self.stray_raise(located)

        raise MissingClosingDirectiveError(opener.line, directive_describe(opener.directive))

    def interactive_build(self) -> InteractiveBlock:
        """
        Build an ASK block

        Consumes directives up to and including the matching ENDASK,
        collecting the OPTIONs found directly at this level.
        """
        opener = self.directives[self.position]
        self.position += 1
        options: List[LocatedDirective] = []
        children: List[Block] = []

        while self.position < len(self.directives):
            located = self.directives[self.position]
            directive = located.directive

            if isinstance(directive, BLOCK_OPENERS):
                children.append(self.block_build())
            elif isinstance(directive, Comment):
                self.position += 1
            elif isinstance(directive, Option):
                options.append(located)
                self.position += 1
            elif isinstance(directive, EndAsk):
                self.position += 1
                return InteractiveBlock(
                    opener=opener,
                    options=options,
                    end_line=located.line,
                    children=children,
                )
            else:
                self.stray_raise(located)

        raise MissingClosingDirectiveError(opener.line, directive_describe(opener.directive))

    def stray_raise(self, located: LocatedDirective) -> NoReturn:
        raise StrayDirectiveError(located.line, directive_describe(located.directive))


def blocks_build(directives: List[LocatedDirective]) -> List[Block]:
    """Build the block forest of a located-directive list"""
    return BlockBuilder(directives).blocks_build()
