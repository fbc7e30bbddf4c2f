"""
Evaluator tests - skip sets of conditional and interactive blocks

Uses a dict-backed resolver and a scripted prompter so no environment or
terminal is touched.
"""

from typing import Dict, List, Sequence, Tuple, Union

import pytest

from dotprep.lib.errors import MissingClosingDirectiveError, StrayDirectiveError
from dotprep.lib.evaluator import Evaluator, skips_evaluate
from dotprep.models.directives import (
    Ask,
    Comment,
    Else,
    EndAsk,
    EndIf,
    If,
    IfDef,
    IfNDef,
    LocatedDirective as L,
    Option,
)


def resolver_make(values: Dict[str, str]):
    """Resolver looking expressions up in `values`, unknown ones are blank"""
    return lambda expression: values.get(expression, "")


class ScriptedPrompter:
    """Answers questions from a script and records every question asked"""

    def __init__(self, *answers: Union[bool, int]) -> None:
        self.answers = list(answers)
        self.asked: List[Tuple[str, Tuple[str, ...]]] = []

    def yesNo_ask(self, question: str) -> bool:
        self.asked.append((question, ()))
        return bool(self.answers.pop(0))

    def option_ask(self, question: str, options: Sequence[str]) -> int:
        self.asked.append((question, tuple(options)))
        return int(self.answers.pop(0))


def evaluate(directives, values=None, prompter=None):
    return skips_evaluate(
        directives,
        resolver=resolver_make(values or {}),
        prompter=prompter or ScriptedPrompter(),
    )


class TestConditionals:
    """IFDEF, IFNDEF and IF ranges"""

    IFDEF_ELSE = [L(1, IfDef("A")), L(5, Else()), L(10, EndIf())]

    def test_ifdef_defined(self):
        assert evaluate(self.IFDEF_ELSE, {"A": "set"}) == {6, 7, 8, 9}

    def test_ifdef_undefined(self):
        assert evaluate(self.IFDEF_ELSE) == {2, 3, 4}

    def test_ifdef_whitespace_is_blank(self):
        """An expansion of only whitespace counts as undefined"""
        assert evaluate(self.IFDEF_ELSE, {"A": " \t\n"}) == {2, 3, 4}

    def test_ifndef_blank(self):
        assert evaluate([L(1, IfNDef("A")), L(7, EndIf())]) == set()

    def test_ifndef_non_blank(self):
        assert evaluate([L(1, IfNDef("A")), L(7, EndIf())], {"A": "x"}) == {2, 3, 4, 5, 6}

    def test_if_equal(self):
        directives = [L(3, If("X", "Y")), L(6, Else()), L(11, EndIf())]
        assert evaluate(directives, {"X": "linux", "Y": "linux"}) == {7, 8, 9, 10}

    def test_if_equal_after_trimming(self):
        """Expansions are trimmed before comparison"""
        directives = [L(3, If("X", "Y")), L(6, Else()), L(11, EndIf())]
        assert evaluate(directives, {"X": " linux\n", "Y": "linux"}) == {7, 8, 9, 10}

    def test_if_unequal(self):
        directives = [L(3, If("X", "Y")), L(6, Else()), L(11, EndIf())]
        assert evaluate(directives, {"X": "linux", "Y": "darwin"}) == {4, 5}

    def test_if_both_blank(self):
        """Two undefined expressions are equal"""
        assert evaluate([L(0, If("X", "Y")), L(2, EndIf())]) == set()

    def test_adjacent_directives(self):
        """Empty branches produce empty ranges"""
        assert evaluate([L(0, IfDef("A")), L(1, Else()), L(2, EndIf())]) == set()

    def test_comments_ignored(self):
        directives = [L(0, Comment()), L(1, IfDef("A")), L(2, Comment()), L(4, EndIf())]
        assert evaluate(directives) == {2, 3}


class TestYesNo:
    """ASK without OPTIONs"""

    DIRECTIVES = [L(2, Ask("Use proxy?")), L(6, EndAsk())]

    def test_no(self):
        assert evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(False)) == {3, 4, 5}

    def test_yes(self):
        assert evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(True)) == set()

    def test_question_text(self):
        prompter = ScriptedPrompter(True)
        evaluate(self.DIRECTIVES, prompter=prompter)
        assert prompter.asked == [("Use proxy?", ())]


class TestMultipleChoice:
    """ASK with OPTIONs"""

    DIRECTIVES = [
        L(1, Ask("Colour?")),
        L(3, Option("red")),
        L(6, Option("green")),
        L(9, Option("blue")),
        L(12, EndAsk()),
    ]

    def test_middle_option(self):
        """Lines before the first option and unselected bodies are dropped"""
        skips = evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(1))
        assert skips == {2, 4, 5, 10, 11}
        assert not skips & {7, 8}

    def test_first_option(self):
        assert evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(0)) == {2, 7, 8, 10, 11}

    def test_last_option(self):
        assert evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(2)) == {2, 4, 5, 7, 8}

    def test_option_lines_never_skipped(self):
        """OPTION lines are not part of any body"""
        for answer in range(3):
            skips = evaluate(self.DIRECTIVES, prompter=ScriptedPrompter(answer))
            assert not skips & {3, 6, 9}

    def test_options_offered(self):
        prompter = ScriptedPrompter(0)
        evaluate(self.DIRECTIVES, prompter=prompter)
        assert prompter.asked == [("Colour?", ("red", "green", "blue"))]


class TestAnswerCache:
    """Identical questions are asked once per evaluation"""

    def test_yes_no_asked_once(self):
        directives = [
            L(0, Ask("Work machine?")),
            L(2, EndAsk()),
            L(4, Ask("Work machine?")),
            L(7, EndAsk()),
        ]
        prompter = ScriptedPrompter(False)

        assert evaluate(directives, prompter=prompter) == {1, 5, 6}
        assert len(prompter.asked) == 1

    def test_options_asked_once(self):
        directives = [
            L(0, Ask("Shell?")), L(1, Option("bash")), L(3, Option("zsh")), L(5, EndAsk()),
            L(6, Ask("Shell?")), L(7, Option("bash")), L(9, Option("zsh")), L(11, EndAsk()),
        ]
        prompter = ScriptedPrompter(1)

        assert evaluate(directives, prompter=prompter) == {2, 8}
        assert len(prompter.asked) == 1

    def test_different_options_asked_again(self):
        """Same question, different option set: a different question"""
        directives = [
            L(0, Ask("Shell?")), L(1, Option("bash")), L(3, EndAsk()),
            L(4, Ask("Shell?")), L(5, Option("zsh")), L(6, Option("fish")), L(8, EndAsk()),
            L(9, Ask("Shell?")), L(10, EndAsk()),
        ]
        prompter = ScriptedPrompter(0, 1, True)

        evaluate(directives, prompter=prompter)
        assert len(prompter.asked) == 3

    def test_cache_per_evaluator(self):
        """A new Evaluator starts with an empty cache"""
        directives = [L(0, Ask("q")), L(2, EndAsk())]
        prompter = ScriptedPrompter(True, False)
        resolver = resolver_make({})

        assert Evaluator(resolver, prompter).evaluate_lines(directives) == set()
        assert Evaluator(resolver, prompter).evaluate_lines(directives) == {1}
        assert len(prompter.asked) == 2


class TestNesting:
    """Nested contributions are unioned"""

    def test_inner_ranges_kept_in_dropped_branch(self):
        """The inner block contributes even when the outer branch is dropped"""
        directives = [
            L(0, IfDef("OUTER")),
            L(1, IfDef("INNER")),
            L(3, Else()),
            L(5, EndIf()),
            L(6, EndIf()),
        ]
        assert evaluate(directives) == {1, 2, 3, 4, 5}

    def test_inner_ranges_in_surviving_branch(self):
        directives = [
            L(0, IfDef("OUTER")),
            L(1, IfDef("INNER")),
            L(3, Else()),
            L(5, EndIf()),
            L(6, EndIf()),
        ]
        assert evaluate(directives, {"OUTER": "1"}) == {2}

    def test_children_asked_first(self):
        """Questions are asked in the order of their closing directives"""
        directives = [
            L(0, Ask("outer")),
            L(1, Ask("inner")),
            L(3, EndAsk()),
            L(4, EndAsk()),
        ]
        prompter = ScriptedPrompter(True, True)

        evaluate(directives, prompter=prompter)
        assert [question for question, _ in prompter.asked] == ["inner", "outer"]

    def test_conditional_inside_option(self):
        directives = [
            L(0, Ask("Editor?")),
            L(1, Option("vim")),
            L(2, IfDef("DISPLAY")),
            L(4, EndIf()),
            L(5, Option("emacs")),
            L(7, EndAsk()),
        ]
        assert evaluate(directives, prompter=ScriptedPrompter(1)) == {2, 3, 4}

    def test_idempotent(self):
        """Same input, same resolver, same answers: same skip set"""
        directives = [
            L(0, IfDef("A")),
            L(1, Ask("q")),
            L(2, Option("a")),
            L(4, Option("b")),
            L(6, EndAsk()),
            L(7, Else()),
            L(9, EndIf()),
        ]
        first = evaluate(directives, {"A": "x"}, ScriptedPrompter(0))
        second = evaluate(directives, {"A": "x"}, ScriptedPrompter(0))
        assert first == second == {5, 8}


class TestErrors:
    """Structural errors abort before any question is asked"""

    def test_stray(self):
        prompter = ScriptedPrompter(True)
        with pytest.raises(StrayDirectiveError):
            evaluate([L(0, Ask("q")), L(1, EndAsk()), L(2, EndIf())], prompter=prompter)
        assert prompter.asked == []

    def test_missing_closer(self):
        prompter = ScriptedPrompter(True)
        with pytest.raises(MissingClosingDirectiveError) as excinfo:
            evaluate([L(0, Ask("q")), L(1, EndAsk()), L(4, IfDef("A"))], prompter=prompter)
        assert excinfo.value.line == 4
        assert prompter.asked == []
