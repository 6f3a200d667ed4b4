"""Base error type shared by every mergelog stage."""

from __future__ import annotations


class MergelogError(RuntimeError):
    """Fatal error carrying a stable code and optional source location."""

    code: str = "mergelog::error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        help: str | None = None,
        location: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.help = help
        self.location = location

    def render(self) -> str:
        lines = [f"error[{self.code}]: {self.message}"]
        if self.location:
            lines.append(f"  --> {self.location}")
        if self.help:
            lines.append(f"  help: {self.help}")
        return "\n".join(lines)
