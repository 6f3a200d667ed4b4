"""Repository host model: URL parsing, host inference and link derivation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import SplitResult, urlsplit

from ..errors import MergelogError

_SCP_REMOTE_RE = re.compile(r"^(?P<user>[\w.-]+)@(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_GITLAB_SHORTHAND_RE = re.compile(r"^!(?P<id>[0-9]+)$")


class RepositoryHost(str, Enum):
    """Supported repository hosts."""

    GITHUB = "github"
    GITLAB = "gitlab"


HOST_ALIASES = {
    "github": RepositoryHost.GITHUB,
    "gh": RepositoryHost.GITHUB,
    "gitlab": RepositoryHost.GITLAB,
    "gl": RepositoryHost.GITLAB,
}

HOST_DOMAINS = {
    "github.com": RepositoryHost.GITHUB,
    "gitlab.com": RepositoryHost.GITLAB,
}


class RepositoryUrlError(MergelogError):
    """Raised when the repository URL or host cannot be resolved."""

    code = "repository::url"


class UnimplementedHostError(MergelogError):
    """Raised when an operation is not yet supported for the selected host."""

    code = "repository::unimplemented_host"

    def __init__(self, host: RepositoryHost, operation: str) -> None:
        super().__init__(
            f"{operation} is not implemented for {host.value} repositories",
            help="Only GitLab repositories are currently supported.",
        )
        self.host = host
        self.operation = operation


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """A resolved repository on a known host."""

    host: RepositoryHost
    owner: str
    name: str

    def full_link(self, request_id: int) -> str:
        """Return the web URL of merge/pull request *request_id*."""

        if self.host is RepositoryHost.GITLAB:
            return f"https://gitlab.com/{self.owner}/{self.name}/-/merge_requests/{request_id}"
        raise UnimplementedHostError(self.host, "Deriving pull request links")

    def shorthand(self, request_id: int) -> str:
        if self.host is RepositoryHost.GITLAB:
            return f"!{request_id}"
        raise UnimplementedHostError(self.host, "Deriving pull request shorthands")

    def parse_shorthand(self, text: str) -> int | None:
        """Return the request id if *text* uses the host's shorthand syntax."""

        if self.host is RepositoryHost.GITLAB:
            match = _GITLAB_SHORTHAND_RE.match(text)
            return int(match.group("id")) if match else None
        raise UnimplementedHostError(self.host, "Parsing pull request shorthands")


def parse_host(value: str) -> RepositoryHost:
    """Parse a ``--host`` value such as ``gl`` or ``github``."""

    try:
        return HOST_ALIASES[value]
    except KeyError:
        raise RepositoryUrlError(
            f"Failed to parse '{value}' as a repository host",
            code="repository::unknown_host",
            help="Options include 'github'/'gh' for GitHub and 'gitlab'/'gl' for GitLab.",
        ) from None


def parse_repository_url(url: str) -> SplitResult:
    """Split *url*, accepting scp-style remotes like ``git@host:owner/name.git``."""

    text = url.strip()
    scp_match = _SCP_REMOTE_RE.match(text)
    if scp_match and "://" not in text:
        text = f"ssh://{scp_match.group('user')}@{scp_match.group('host')}/{scp_match.group('path')}"

    parts = urlsplit(text)
    if not parts.scheme:
        raise RepositoryUrlError(
            f"Failed to parse {'empty ' if not text else ''}repository URL",
            code="repository::parse_url",
            location=f"url: {url!r}",
            help="Pass the repository explicitly with --repo https://gitlab.com/{owner}/{name}.",
        )
    return parts


def infer_host(url: SplitResult) -> RepositoryHost:
    """Infer the repository host from the URL domain."""

    domain = (url.hostname or "").lower()
    if not domain:
        raise RepositoryUrlError(
            "Provided URL missing domain",
            code="infer_host::missing_domain",
            location=f"url: {url.geturl()}",
        )
    host = HOST_DOMAINS.get(domain)
    if host is None:
        raise RepositoryUrlError(
            f"Unknown host domain '{domain}'",
            code="infer_host::unknown_domain",
            location=f"url: {url.geturl()}",
            help="Please use a known repository host like github.com or gitlab.com, or pass --host.",
        )
    return host


def parse_owner_and_name(url: SplitResult, host: RepositoryHost) -> RepositoryRef:
    """Extract the ``owner/name`` pair from a repository URL."""

    if host is RepositoryHost.GITHUB:
        raise UnimplementedHostError(host, "Parsing repository URLs")

    segments = url.path.split("/")[1:] if url.path else []
    if len(segments) < 2 or (len(segments) == 2 and (not segments[0] or not segments[1])):
        raise RepositoryUrlError(
            "URL does not point to a repository (less than two path segments)",
            code="parse_owner_and_name::incorrect_format",
            location=f"url: {url.geturl()}",
            help="The URL should be of the form: https://gitlab.com/{owner}/{name}",
        )

    owner, name = segments[0], segments[1]
    if name.endswith(".git"):
        name = name[:-4]
    return RepositoryRef(host=host, owner=owner, name=name)
