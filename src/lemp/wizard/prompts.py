"""Input ports for the wizard: the terminal, or a scripted answer list."""

from typing import Iterable, List, Optional

from rich.console import Console
from rich.text import Text


class Prompter:
    """Interface the wizard reads answers from."""

    def ask(self, message: str, default: Optional[str] = None, show_default: bool = True) -> str:
        raise NotImplementedError

    def ask_secret(self, message: str) -> str:
        raise NotImplementedError

    def say(self, message: str) -> None:
        raise NotImplementedError


def format_prompt(message: str, default: Optional[str] = None, show_default: bool = True) -> str:
    if not show_default:
        return f"{message}: "
    if default:
        return f"{message} [default: {default}]: "
    return f"{message} [no default]: "


class ConsolePrompter(Prompter):
    """Reads answers from the terminal through rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def ask(self, message: str, default: Optional[str] = None, show_default: bool = True) -> str:
        answer = self.console.input(Text(format_prompt(message, default, show_default))).strip()
        return answer or (default or "")

    def ask_secret(self, message: str) -> str:
        return self.console.input(Text(f"{message}: "), password=True)

    def say(self, message: str) -> None:
        self.console.print(Text(message))


class ScriptedPrompter(Prompter):
    """Answers questions from a fixed list, for tests and automation."""

    def __init__(self, answers: Iterable[str]):
        self._answers = list(answers)
        self.asked: List[str] = []
        self.defaults: List[Optional[str]] = []
        self.output: List[str] = []

    def _next(self, message: str) -> str:
        self.asked.append(message)
        if not self._answers:
            raise EOFError(f"No scripted answer for: {message}")
        return self._answers.pop(0)

    def ask(self, message: str, default: Optional[str] = None, show_default: bool = True) -> str:
        self.defaults.append(default)
        answer = self._next(message).strip()
        return answer or (default or "")

    def ask_secret(self, message: str) -> str:
        self.defaults.append(None)
        return self._next(message)

    def say(self, message: str) -> None:
        self.output.append(message)
