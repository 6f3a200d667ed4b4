from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from pathlib import Path

import git
import pytest
import requests

from mergelog.git.gitlab_api import RemoteRequest
from mergelog.git.hosts import RepositoryHost, RepositoryRef
from mergelog.outputs.terminal import make_console
from mergelog.resolve.prompt import Prompter


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure host credentials don't interfere with tests."""
    monkeypatch.delenv("GITLAB_TOKEN", raising=False)


@pytest.fixture
def repository() -> RepositoryRef:
    return RepositoryRef(host=RepositoryHost.GITLAB, owner="group", name="project")


@pytest.fixture
def catalog() -> list[RemoteRequest]:
    return [
        RemoteRequest(id=42, shorthand_link="!42", title="Fix bug"),
        RemoteRequest(id=7, shorthand_link="!7", title="Add onboarding flow"),
        RemoteRequest(id=3, shorthand_link="!3", title="Update documentation links"),
    ]


@pytest.fixture
def make_prompter():
    """Build a prompter reading canned answers; returns (prompter, output buffer)."""

    def _make(answers: str = "") -> tuple[Prompter, io.StringIO]:
        output = io.StringIO()
        prompter = Prompter(console=make_console(output), stream=io.StringIO(answers))
        return prompter, output

    return _make


@pytest.fixture
def fragments_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "changelog"
    directory.mkdir()
    (directory / "42.md").write_text(
        "## Fixed\n\n- Crash when saving empty drafts\n\n## Added\n\n- Draft autosave\n",
        encoding="utf-8",
    )
    (directory / "7.md").write_text(
        "## Added\n\n* Onboarding tour for new users\n\n## Security\n\n- Rotate session keys\n",
        encoding="utf-8",
    )
    (directory / "notes.txt").write_text("not a fragment", encoding="utf-8")
    return directory


@pytest.fixture
def sample_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    repo_dir = tmp_path / "repo"
    repo = git.Repo.init(repo_dir)
    repo.create_remote("origin", "https://example.org/group/project.git")

    changelog = repo_dir / "changelog"
    changelog.mkdir()
    (changelog / "42.md").write_text("## Fixed\n\n- Crash on start\n", encoding="utf-8")

    monkeypatch.chdir(repo_dir)
    return repo_dir


@pytest.fixture
def run_cli(sample_repo: Path):
    def _run(*args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        env = os.environ.copy()
        env["PYTHONPATH"] = f"{Path(__file__).resolve().parents[1]}:{env.get('PYTHONPATH', '')}".rstrip(":")
        cmd = [sys.executable, "-m", "mergelog", *args]
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=check,
            env=env,
            stdin=subprocess.DEVNULL,
        )

    return _run


class FakeResponse:
    def __init__(self, payload: object = None, *, text: str | None = None, status_code: int = 200) -> None:
        self._payload = payload
        self._text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def json(self) -> object:
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, *, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
