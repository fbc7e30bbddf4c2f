"""
Block evaluator

Walks a block forest and computes the set of line indices to drop from a
file. One Evaluator is one evaluation session: it owns the answer cache, so
asking the same question (with the same options) twice in a file prompts
only once. A fresh Evaluator is created for every file.

Skip ranges are collected purely by union. A nested block contributes its
ranges whether or not the enclosing branch survives; dropping the enclosing
branch adds a superset range to the same set.
"""

from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from ..models.blocks import Block, ConditionalBlock, InteractiveBlock
from ..models.directives import If, IfDef, IfNDef, LocatedDirective
from .blocks import blocks_build
from .env import expand
from .log import LOG
from .prompt import ConsolePrompter, Prompter

Resolver = Callable[[str], str]
Answer = Union[bool, int]
QuestionKey = Tuple[str, Tuple[str, ...]]


class Evaluator:
    """
    Evaluate conditional and interactive blocks

    Attributes:
        resolver: Expands a variable expression to its string value
        prompter: Answers ASK blocks
        answers: Answers given so far in this session, keyed by
                 (question, option labels)
        skips: Accumulated line indices to drop
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        prompter: Optional[Prompter] = None,
    ) -> None:
        self.resolver: Resolver = resolver or expand
        self.prompter: Prompter = prompter or ConsolePrompter()
        self.answers: Dict[QuestionKey, Answer] = {}
        self.skips: Set[int] = set()

    def evaluate(self, blocks: Iterable[Block]) -> Set[int]:
        """
        Evaluate a block forest

        Nested blocks are evaluated before the block containing them, in
        document order, so questions are asked in the order their closing
        directives appear in the file.

        Returns:
            The line indices to drop
        """
        for block in blocks:
            self.block_evaluate(block)
        return self.skips

    def evaluate_lines(self, directives: List[LocatedDirective]) -> Set[int]:
        """Build the blocks of a located-directive list and evaluate them"""
        return self.evaluate(blocks_build(directives))

    def block_evaluate(self, block: Block) -> None:
        for child in block.children:
            self.block_evaluate(child)

        if isinstance(block, ConditionalBlock):
            self.conditional_evaluate(block)
        elif isinstance(block, InteractiveBlock):
            self.interactive_evaluate(block)
        else:
            raise TypeError(f"BUG: unknown block {block!r}")

    def condition_test(self, condition: Union[IfDef, IfNDef, If]) -> bool:
        """
        Test a block condition

        IFDEF is true for a non-blank expansion, IFNDEF for a blank one and
        IF when both expansions are equal. Expansions are compared after
        trimming surrounding whitespace.
        """
        if isinstance(condition, IfDef):
            return self.resolver(condition.expression).strip() != ""
        if isinstance(condition, IfNDef):
            return self.resolver(condition.expression).strip() == ""
        if isinstance(condition, If):
            left = self.resolver(condition.left).strip()
            right = self.resolver(condition.right).strip()
            LOG(f"{left!r} == {right!r}? {left == right}", level=3)
            return left == right
        raise TypeError(f"BUG: not a condition {condition!r}")

    def conditional_evaluate(self, block: ConditionalBlock) -> None:
        """
        Drop the branch of a conditional that does not survive

            true,  no ELSE -> nothing
            true,  ELSE    -> lines after ELSE up to ENDIF
            false, no ELSE -> lines after the opener up to ENDIF
            false, ELSE    -> lines after the opener up to ELSE
        """
        start = block.opener.line
        holds = self.condition_test(block.condition)
        LOG(f"Line {start + 1}: {block.condition} -> {holds}", level=2)

        if block.else_line is None:
            if not holds:
                self.skips.update(range(start + 1, block.end_line))
        elif holds:
            self.skips.update(range(block.else_line + 1, block.end_line))
        else:
            self.skips.update(range(start + 1, block.else_line))

    def question_ask(self, question: str, options: Tuple[str, ...]) -> Answer:
        """
        Answer a question, from the session cache when it was already asked

        Returns:
            A bool for yes/no questions (no options), the zero-based index of
            the selected option otherwise
        """
        key = (question, options)
        if key in self.answers:
            LOG(f"Reusing answer to {question!r}", level=2)
            return self.answers[key]

        answer: Answer
        if options:
            answer = self.prompter.option_ask(question, list(options))
        else:
            answer = self.prompter.yesNo_ask(question)
        self.answers[key] = answer
        return answer

    def interactive_evaluate(self, block: InteractiveBlock) -> None:
        """
        Drop the parts of an ASK block that were not chosen

        Yes/no: answering no drops everything between ASK and ENDASK.
        Multiple choice: the lines between ASK and the first OPTION are always
        dropped, and so is the body of every option except the selected one.
        OPTION lines themselves are never part of a body.
        """
        start = block.opener.line
        labels = block.option_labels
        answer = self.question_ask(block.question, labels)

        if not labels:
            if not answer:
                self.skips.update(range(start + 1, block.end_line))
            return

        option_lines = [located.line for located in block.options]
        self.skips.update(range(start + 1, option_lines[0]))

        boundaries = option_lines[1:] + [block.end_line]
        for index, (option_line, body_end) in enumerate(zip(option_lines, boundaries)):
            if index != answer:
                self.skips.update(range(option_line + 1, body_end))


def skips_evaluate(
    directives: List[LocatedDirective],
    resolver: Optional[Resolver] = None,
    prompter: Optional[Prompter] = None,
) -> Set[int]:
    """
    Compute the skip set of a file's located directives

    Uses a fresh Evaluator, hence a fresh answer cache.
    """
    return Evaluator(resolver=resolver, prompter=prompter).evaluate_lines(directives)
