"""
Interactive questions for ASK blocks

The evaluator only depends on the Prompter protocol; ConsolePrompter asks on
the terminal using rich. Re-asking on invalid input is the prompter's job,
the evaluator receives a validated answer.
"""

from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt

from .errors import UserInputError


class Prompter(Protocol):
    """Source of answers for ASK blocks"""

    def yesNo_ask(self, question: str) -> bool:
        ...

    def option_ask(self, question: str, options: Sequence[str]) -> int:
        """Return the zero-based index of the selected option"""
        ...


class ConsolePrompter:
    """
    Ask questions on the terminal

    Yes/no questions accept y/n. Multiple-choice questions list the options
    numbered from 1 and ask for a number until one in range is entered.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        # Prompts go to stderr so stdout stays clean
        self.console = console or Console(stderr=True)

    def yesNo_ask(self, question: str) -> bool:
        try:
            return Confirm.ask(f"[bold cyan]ASK[/bold cyan]  ─ {escape(question)}", console=self.console)
        except EOFError as e:
            raise UserInputError(f"Failed to read the answer to {question!r}") from e

    def option_ask(self, question: str, options: Sequence[str]) -> int:
        self.console.print(f"[bold cyan]ASK[/bold cyan]  ┬ {escape(question)}")
        for number, label in enumerate(options, start=1):
            self.console.print(f"     │ [bold]{number:>2}[/bold]> {escape(label)}")

        while True:
            try:
                selection = IntPrompt.ask("     └ Please enter a number", console=self.console)
            except EOFError as e:
                raise UserInputError(f"Failed to read the answer to {question!r}") from e
            if 1 <= selection <= len(options):
                return selection - 1
            self.console.print(f"[prompt.invalid]Please enter a number between 1 and {len(options)}")
