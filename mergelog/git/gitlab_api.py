"""Request catalog: merged merge requests listed from the remote host."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping
from urllib.parse import quote

import requests

from ..errors import MergelogError
from .hosts import RepositoryHost, RepositoryRef, UnimplementedHostError

logger = logging.getLogger(__name__)

GITLAB_API_URL = "https://gitlab.com/api/v4"
PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class RemoteRequest:
    """A merged merge/pull request known to the remote host."""

    id: int
    shorthand_link: str
    title: str


class RemoteFetchError(MergelogError):
    """Raised when merged requests cannot be listed or decoded."""

    code = "fetch_merge_requests::api_error"


class GitLabClient:
    """Minimal GitLab REST API client for listing merged merge requests."""

    def __init__(
        self,
        owner: str,
        name: str,
        *,
        token: str | None = None,
        session: requests.Session | None = None,
        base_url: str = GITLAB_API_URL,
    ) -> None:
        self.owner = owner
        self.name = name
        project = quote(f"{owner}/{name}", safe="")
        self.base_url = f"{base_url}/projects/{project}"
        self._session = session or requests.Session()
        self._token = token

    def fetch_merged_requests(self) -> List[RemoteRequest]:
        """Return the most recent merged merge requests of the project."""

        url = f"{self.base_url}/merge_requests"
        params = {"state": "merged", "view": "simple", "per_page": PER_PAGE}
        headers = {"Accept": "application/json"}
        if self._token:
            headers["PRIVATE-TOKEN"] = self._token

        try:
            response = self._session.get(url, params=params, headers=headers, timeout=10)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteFetchError(
                f"Failed to obtain merge requests from {self.owner}/{self.name}: {exc}",
                location=url,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            position = ""
            if hasattr(exc, "lineno") and hasattr(exc, "colno"):
                position = f":{exc.lineno}:{exc.colno}"
            raise RemoteFetchError(
                f"Failed to parse GitLab API response text: {exc}",
                code="fetch_merge_requests::serde_json_error",
                location=f"{url}{position}",
            ) from exc

        if not isinstance(payload, list):
            raise RemoteFetchError(
                "Failed to parse GitLab API response text: expected array of merge request details",
                code="fetch_merge_requests::malformed_json",
                location=url,
            )

        requests_list = [_request_from_gitlab(item, url) for item in payload]
        logger.debug("Fetched %d merged requests from %s", len(requests_list), url)
        return requests_list


def fetch_merge_requests(
    repository: RepositoryRef,
    *,
    token: str | None = None,
    session: requests.Session | None = None,
) -> List[RemoteRequest]:
    """Return the request catalog for *repository*."""

    if repository.host is RepositoryHost.GITLAB:
        client = GitLabClient(repository.owner, repository.name, token=token, session=session)
        return client.fetch_merged_requests()
    raise UnimplementedHostError(repository.host, "Listing merged pull requests")


def _request_from_gitlab(payload: object, url: str) -> RemoteRequest:
    if not isinstance(payload, Mapping):
        raise RemoteFetchError(
            "Expected merge request object in GitLab API response",
            code="fetch_merge_requests::malformed_json",
            location=url,
        )
    iid = payload.get("iid")
    if isinstance(iid, bool) or not isinstance(iid, int) or iid < 0:
        raise RemoteFetchError(
            "Missing 'iid' field on merge request",
            code="fetch_merge_requests::malformed_json",
            location=url,
        )
    title = payload.get("title")
    if not isinstance(title, str):
        raise RemoteFetchError(
            f"Missing 'title' field on merge request !{iid}",
            code="fetch_merge_requests::malformed_json",
            location=url,
        )
    return RemoteRequest(id=iid, shorthand_link=f"!{iid}", title=title)
