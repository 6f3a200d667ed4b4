"""Fuzzy matching of fragment names against merged request titles."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..git.gitlab_api import RemoteRequest

MAX_SUGGESTIONS = 5


def guess_requests(name: str, catalog: Sequence[RemoteRequest]) -> List[RemoteRequest]:
    """Return up to five catalog entries ranked by descending score for *name*.

    A title word longer than one byte that appears in the (case-folded) name
    is worth ten times the title length; every other word adds the edit
    distance between the whole title and the name. The sum is normalized by
    the title length. Lengths are measured in UTF-8 bytes. Ties keep catalog
    order.
    """

    scored: List[Tuple[RemoteRequest, float]] = [
        (request, score_request(name, request)) for request in catalog
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [request for request, _ in scored[:MAX_SUGGESTIONS]]


def score_request(name: str, request: RemoteRequest) -> float:
    title = request.title
    # lengths are UTF-8 byte counts; edit distances count characters
    title_length = len(title.encode("utf-8"))
    words = title.split()
    folded_name = name.casefold()
    total = 0
    for word in words:
        if len(word.encode("utf-8")) > 1 and word.casefold() in folded_name:
            total += title_length * 10
        else:
            total += edit_distance(title, name)
    normalizer = title_length if words else 1
    return total / normalizer


def edit_distance(left: str, right: str) -> int:
    """Levenshtein distance between two strings."""

    if len(left) < len(right):
        left, right = right, left
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]
