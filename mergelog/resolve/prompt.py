"""Blocking operator prompts with an injectable input stream."""

from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

from rich.console import Console

from ..errors import MergelogError

logger = logging.getLogger(__name__)


class PromptError(MergelogError):
    """Raised when the operator input stream ends before an answer is given."""

    code = "prompt::closed_input"


class Prompter:
    """Ask questions on a console and read answers from a text stream."""

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self.console = console or Console(stderr=True)
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdin

    def ask(
        self,
        message: str,
        *,
        validate: Callable[[str], bool],
        default: str | None = None,
    ) -> str:
        """Prompt until *validate* accepts the trimmed answer.

        Empty input returns *default* when one is given.
        """

        while True:
            self.console.print(message, end="", markup=False, highlight=False, soft_wrap=True)
            line = self.stream.readline()
            if not line:
                self.console.print()
                raise PromptError(
                    "Input closed while waiting for an answer",
                    location=message.strip(),
                )
            answer = line.strip()
            if not answer and default is not None:
                return default
            if validate(answer):
                return answer
            logger.debug("Rejected answer %r", answer)

    def confirm(self, message: str, *, default: bool = True) -> bool:
        answer = self.ask(
            message,
            validate=lambda value: value in ("y", "n"),
            default="y" if default else "n",
        )
        return answer == "y"

    def ask_nonempty(self, message: str) -> str:
        return self.ask(message, validate=bool)
