"""Git repository helpers used to infer the remote repository URL."""

from __future__ import annotations

import logging
from pathlib import Path

import git

from .hosts import RepositoryUrlError

logger = logging.getLogger(__name__)


def open_repository(root: Path | None = None) -> git.Repo:
    """Open the git repository containing *root* (default: the working directory)."""

    root = root or Path.cwd()
    try:
        return git.Repo(root, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        raise RepositoryUrlError(
            "Failed to determine origin URL: not inside a git repository",
            code="repository::no_repository",
            location=str(root),
            help="Run mergelog inside a git checkout or pass --repo explicitly.",
        ) from exc


def get_origin_url(root: Path | None = None) -> str:
    """Return the URL of the ``origin`` remote of the repository at *root*."""

    repo = open_repository(root)
    remote_url = _get_remote_url(repo)
    if not remote_url:
        raise RepositoryUrlError(
            "Failed to parse empty origin URL",
            code="repository::parse_url",
            location=str(repo.working_tree_dir or root or Path.cwd()),
            help=(
                "Add a valid remote origin URL with `git remote add origin <url>`. "
                "You can also specify the URL manually by passing --repo."
            ),
        )
    logger.debug("Using origin remote %s", remote_url)
    return remote_url


def _get_remote_url(repo: git.Repo) -> str | None:
    try:
        origin = repo.remotes.origin
    except (AttributeError, IndexError):
        return None
    urls = list(origin.urls)
    return urls[0].strip() if urls else None
