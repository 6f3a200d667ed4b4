"""Link resolution for changelog fragments."""

from .guess import guess_requests
from .links import Link, LinkResolver
from .prompt import PromptError, Prompter

__all__ = [
    "guess_requests",
    "Link",
    "LinkResolver",
    "PromptError",
    "Prompter",
]
