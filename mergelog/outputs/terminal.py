"""Stderr rendering helpers: status lines, fragment context and diagnostics."""

from __future__ import annotations

from typing import Sequence, TextIO

from rich.console import Console
from rich.text import Text

from ..errors import MergelogError
from ..git.gitlab_api import RemoteRequest


def make_console(file: TextIO | None = None) -> Console:
    """Return the console used for everything except the changelog itself."""

    if file is not None:
        return Console(file=file, highlight=False)
    return Console(stderr=True, highlight=False)


def print_success(console: Console, message: str) -> None:
    console.print(Text(f"✓ {message}", style="green"), soft_wrap=True)


def print_fragment_context(
    console: Console,
    name: str,
    contents: str,
    suggestions: Sequence[RemoteRequest],
) -> None:
    """Show an unresolved fragment and the requests it might belong to."""

    header = Text("╭─ ")
    header.append(
        f"Cannot automatically determine pull request for changelog '{name}.md', if it even has one",
        style="red",
    )
    header.append(":")
    console.print(header, soft_wrap=True)
    console.print("│", markup=False)
    for line in contents.splitlines():
        row = Text("│ ")
        row.append(line, style="bright_black")
        console.print(row, soft_wrap=True)
    console.print("│", markup=False)
    if suggestions:
        hint = Text("├─ ")
        hint.append("help", style="cyan")
        hint.append(": Is it one of:")
        console.print(hint, soft_wrap=True)
        for request in suggestions:
            console.print(
                Text(f"│          {request.shorthand_link}: {request.title}"),
                soft_wrap=True,
            )
        console.print("│", markup=False)


def print_error(console: Console, error: MergelogError) -> None:
    console.print(Text(error.render(), style="red"), soft_wrap=True)
