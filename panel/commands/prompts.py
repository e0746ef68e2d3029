from __future__ import annotations

import getpass
import sys
from typing import Callable, Mapping, Optional


InputFn = Callable[[str], str]
PrintFn = Callable[[str], object]


class MissingInputError(RuntimeError):
    """Raised when a non-interactive prompt has no default to fall back on."""


class ConsolePrompter:
    """Question/answer helpers for console commands.

    In non-interactive mode every question resolves to its default without
    reading input; questions that have no default raise MissingInputError.
    """

    def __init__(
        self,
        interactive: Optional[bool] = None,
        *,
        input_fn: Optional[InputFn] = None,
        secret_fn: Optional[InputFn] = None,
        print_fn: Optional[PrintFn] = None,
    ):
        if interactive is None:
            interactive = sys.stdin.isatty()
        self.interactive = interactive
        self._input = input_fn or input
        self._secret = secret_fn or getpass.getpass
        self._print = print_fn or print

    # ---------- output ----------
    def note(self, message: str) -> None:
        self._print(f" ! [NOTE] {message}")

    def error(self, message: str) -> None:
        self._print(f" [ERROR] {message}")

    def info(self, message: str) -> None:
        self._print(message)

    # ---------- questions ----------
    def ask(self, question: str, default: Optional[object] = None) -> str:
        shown = "" if default is None else str(default)
        if not self.interactive:
            if default is None:
                raise MissingInputError(f"No answer given for {question!r} in non-interactive mode.")
            return shown

        prompt = f" {question}" + (f" [{shown}]" if shown else "") + ":\n > "
        while True:
            answer = str(self._input(prompt) or "").strip()
            if answer:
                return answer
            if default is not None:
                return shown
            self.error("A value is required.")

    def secret(self, question: str) -> str:
        if not self.interactive:
            return ""
        return str(self._secret(f" {question}:\n > ") or "")

    def confirm(self, question: str, default: bool = False) -> bool:
        if not self.interactive:
            return default

        suffix = "(yes/no) [yes]" if default else "(yes/no) [no]"
        while True:
            answer = str(self._input(f" {question} {suffix}:\n > ") or "").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False

    def choice(self, question: str, choices: Mapping[str, str], default: Optional[str] = None) -> str:
        if not self.interactive:
            if default is None:
                raise MissingInputError(f"No answer given for {question!r} in non-interactive mode.")
            return default

        header = f" {question}" + (f" [{choices[default]}]" if default in choices else "") + ":"
        width = max(len(key) for key in choices)
        lines = [header] + [f"  [{key.ljust(width)}] {label}" for key, label in choices.items()]
        while True:
            self._print("\n".join(lines))
            answer = str(self._input(" > ") or "").strip()
            if not answer and default in choices:
                return default
            for key, label in choices.items():
                if answer == key or answer.lower() == label.lower():
                    return key
            self.error(f'Value "{answer}" is invalid')
