from __future__ import annotations

from mergelog.git.gitlab_api import RemoteRequest
from mergelog.resolve.guess import edit_distance, guess_requests, score_request


def make_request(request_id: int, title: str) -> RemoteRequest:
    return RemoteRequest(id=request_id, shorthand_link=f"!{request_id}", title=title)


def test_edit_distance():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("flaw", "lawn") == 2
    assert edit_distance("", "abc") == 3
    assert edit_distance("same", "same") == 0


def test_keyword_matches_rank_first(catalog):
    suggestions = guess_requests("fix-login-bug", catalog)
    assert suggestions[0].id == 42


def test_score_follows_formula():
    request = make_request(1, "Fix bug")
    # both words are contained in the name: (70 + 70) / 7
    assert score_request("fix-the-bug", request) == 20.0

    partial = make_request(2, "Fix x")
    # "Fix" matches (50), "x" is too short and adds the edit distance
    expected = (50 + edit_distance("Fix x", "fix-x")) / 5
    assert score_request("fix-x", partial) == expected



def test_lengths_count_utf8_bytes():
    # "\u00e9" is one character but two bytes, so it counts as a keyword: 20 / 2
    assert score_request("caf\u00e9", make_request(1, "\u00e9")) == 10.0


def test_larger_edit_distance_ranks_higher():
    short = make_request(1, "a")
    long = make_request(2, "abcdefghij")
    # "a": 3 / 1 = 3.0, "abcdefghij": 10 / 10 = 1.0; ranking is descending
    assert [r.id for r in guess_requests("zzz", [long, short])] == [1, 2]


def test_ties_keep_catalog_order_and_truncate():
    catalog = [make_request(i, "") for i in range(1, 8)]
    suggestions = guess_requests("anything", catalog)
    assert [r.id for r in suggestions] == [1, 2, 3, 4, 5]


def test_empty_catalog_has_no_suggestions():
    assert guess_requests("anything", []) == []


def test_ranking_is_reproducible(catalog):
    first = guess_requests("onboarding-docs", catalog)
    second = guess_requests("onboarding-docs", list(catalog))
    assert first == second
