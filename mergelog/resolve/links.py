"""Resolve the merge/pull request link of each changelog fragment."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Sequence

from ..git.gitlab_api import RemoteRequest
from ..git.hosts import RepositoryRef
from ..outputs.terminal import print_fragment_context, print_success
from .guess import guess_requests
from .prompt import Prompter

logger = logging.getLogger(__name__)

_NUMERIC_NAME_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class Link:
    """Shorthand reference (e.g. ``!42``) and the full URL it stands for."""

    shorthand: str
    full: str


class LinkResolver:
    """Determine the link for changelog fragments of one repository.

    Fragments named after a request id are matched against the catalog.
    Anything else is shown to the operator, together with fuzzy guesses,
    and the link is entered by hand.
    """

    def __init__(
        self,
        repository: RepositoryRef,
        catalog: Sequence[RemoteRequest],
        prompter: Prompter,
    ) -> None:
        self.repository = repository
        self.catalog = list(catalog)
        self.prompter = prompter
        self._by_id: Dict[int, RemoteRequest] = {}
        for request in self.catalog:
            self._by_id.setdefault(request.id, request)

    def resolve(self, name: str, contents: str) -> Link:
        if _NUMERIC_NAME_RE.fullmatch(name):
            link = self._resolve_numeric(int(name))
        else:
            link = self._resolve_interactive(name, contents)
        print_success(self.prompter.console, f"Processing changelog for {link.shorthand}")
        logger.debug("Resolved fragment %s to %s (%s)", name, link.shorthand, link.full)
        return link

    def _resolve_numeric(self, request_id: int) -> Link:
        """Link a fragment named after a request id.

        The full link always comes from the id. Requests missing from the
        catalog are confirmed first and get the host's shorthand either way.
        """

        full = self.repository.full_link(request_id)
        request = self._by_id.get(request_id)
        if request is not None:
            return Link(shorthand=request.shorthand_link, full=full)

        shorthand = self.repository.shorthand(request_id)
        confirmed = self.prompter.confirm(
            f"Request {shorthand} is not among the {len(self.catalog)} most recently merged "
            "requests fetched from the remote.\nIs it ok to link it anyway? (y/n) [y]: "
        )
        if not confirmed:
            logger.warning("Linking request %s without catalog confirmation", shorthand)
        return Link(shorthand=shorthand, full=full)

    def _resolve_interactive(self, name: str, contents: str) -> Link:
        suggestions = guess_requests(name, self.catalog)
        print_fragment_context(self.prompter.console, name, contents, suggestions)

        entered = self.prompter.ask_nonempty(
            "╰─ Please enter the desired link (can also be a link like !30 in GitLab): "
        )
        request_id = self.repository.parse_shorthand(entered)
        if request_id is not None:
            return Link(shorthand=entered, full=self.repository.full_link(request_id))

        shorthand = self.prompter.ask_nonempty(
            "   Please provide the markdown shorthand name for the link: "
        )
        return Link(shorthand=shorthand, full=entered)
