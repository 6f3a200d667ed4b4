from __future__ import annotations

import pytest

from mergelog.git.hosts import RepositoryHost, RepositoryRef, UnimplementedHostError
from mergelog.resolve.links import Link, LinkResolver

MR_URL = "https://gitlab.com/group/project/-/merge_requests"


def test_numeric_id_in_catalog_resolves_without_prompt(repository, catalog, make_prompter):
    prompter, output = make_prompter("")
    resolver = LinkResolver(repository, catalog, prompter)

    link = resolver.resolve("42", "## Fixed\n- thing\n")

    assert link == Link(shorthand="!42", full=f"{MR_URL}/42")
    assert "Processing changelog for !42" in output.getvalue()


def test_numeric_id_with_leading_zeros(repository, catalog, make_prompter):
    prompter, _ = make_prompter("")
    link = LinkResolver(repository, catalog, prompter).resolve("007", "")
    assert link == Link(shorthand="!7", full=f"{MR_URL}/7")


def test_unknown_numeric_id_defaults_to_confirmation(repository, catalog, make_prompter):
    prompter, output = make_prompter("\n")
    link = LinkResolver(repository, catalog, prompter).resolve("99", "")

    assert link == Link(shorthand="!99", full=f"{MR_URL}/99")
    assert "(y/n)" in output.getvalue()


def test_declined_numeric_id_still_links_the_id(repository, catalog, make_prompter):
    prompter, output = make_prompter("n\n")
    link = LinkResolver(repository, catalog, prompter).resolve("99", "- item\n")

    assert link == Link(shorthand="!99", full=f"{MR_URL}/99")
    assert "Please enter the desired link" not in output.getvalue()


def test_named_fragment_accepts_shorthand(repository, catalog, make_prompter):
    prompter, output = make_prompter("!30\n")
    link = LinkResolver(repository, catalog, prompter).resolve(
        "fix-bug", "## Fixed\n- [x] checkbox stays literal\n"
    )

    assert link == Link(shorthand="!30", full=f"{MR_URL}/30")
    text = output.getvalue()
    assert "Cannot automatically determine pull request for changelog 'fix-bug.md'" in text
    assert "│ - [x] checkbox stays literal" in text
    assert "!42: Fix bug" in text


def test_named_fragment_accepts_full_link_and_shorthand(repository, catalog, make_prompter):
    prompter, _ = make_prompter("https://example.com/issue/1\n\nEXT-1\n")
    link = LinkResolver(repository, catalog, prompter).resolve("external", "")
    assert link == Link(shorthand="EXT-1", full="https://example.com/issue/1")


def test_named_fragment_without_catalog_shows_no_hints(repository, make_prompter):
    prompter, output = make_prompter("!1\n")
    LinkResolver(repository, [], prompter).resolve("external", "")
    assert "Is it one of" not in output.getvalue()


def test_github_host_is_unimplemented(catalog, make_prompter):
    repository = RepositoryRef(host=RepositoryHost.GITHUB, owner="o", name="n")
    prompter, _ = make_prompter("")
    with pytest.raises(UnimplementedHostError):
        LinkResolver(repository, catalog, prompter).resolve("42", "")
