"""Konfiguration für Tests.

Echte Netzwerkzugriffe sind blockiert; HTTP wird über `httpx.MockTransport`
gestubbt, das Repository über `FakeRepo`.
"""

from __future__ import annotations

import base64
from typing import Any, Sequence

import httpx
import pytest

from link_checker.errors import GithubApiError
from link_checker.models import ContentEntry


@pytest.fixture(autouse=True)
def _block_external_network_calls(monkeypatch: pytest.MonkeyPatch) -> None:
    """Blockiert unbeabsichtigte externe Calls in Tests (offline-sicher).

    Only the real transports are patched, so clients built with
    `httpx.MockTransport` keep working.
    """

    def _blocked(*_args, **_kwargs):
        raise RuntimeError("Network call blocked in tests")

    async def _blocked_async(*_args, **_kwargs):
        raise RuntimeError("Network call blocked in tests")

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _blocked)
    monkeypatch.setattr(httpx.AsyncHTTPTransport, "handle_async_request", _blocked_async)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "GITHUB_TOKEN",
        "LINK_CHECKER_REPOSITORY",
        "LINK_CHECKER_CONFIG",
        "GITHUB_WEBHOOK_SECRET",
    ):
        monkeypatch.delenv(var, raising=False)


def _author(login: str) -> dict[str, Any]:
    """GitHub-artiges `user`-Objekt eines Issues."""
    return {"login": login, "type": "Bot" if login.endswith("[bot]") else "User"}


class FakeRepo:
    """In-memory RepoContext: files, directories and issues."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        owner: str = "octo",
        repo: str = "docs",
        dirs: Sequence[str] = (),
        issues: list[dict[str, Any]] | None = None,
        identity: str = "link-checker[bot]",
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.files = dict(files or {})
        self.dirs = set(dirs)
        self.issues = list(issues or [])
        self.identity = identity
        self.broken_reads: set[str] = set()
        self.calls: list[tuple[str, Any]] = []
        self.fail_issue_api = False
        self.identity_forbidden = False

    async def list_contents(self, path: str = "") -> list[ContentEntry]:
        self.calls.append(("list_contents", path))
        prefix = f"{path.strip('/')}/" if path.strip("/") else ""
        entries: list[ContentEntry] = []
        for name in sorted(self.files):
            if name.startswith(prefix) and "/" not in name[len(prefix) :]:
                entries.append(ContentEntry(name=name[len(prefix) :], type="file", path=name))
        for d in sorted(self.dirs):
            if d.startswith(prefix) and "/" not in d[len(prefix) :]:
                entries.append(ContentEntry(name=d[len(prefix) :], type="dir", path=d))
        return entries

    async def get_content(self, path: str) -> dict[str, Any]:
        self.calls.append(("get_content", path))
        if path in self.broken_reads:
            raise GithubApiError("boom", status_code=500)
        if path in self.files:
            encoded = base64.b64encode(self.files[path].encode("utf-8")).decode("ascii")
            return {"path": path, "type": "file", "encoding": "base64", "content": encoded}
        if path in self.dirs:
            return {"path": path, "type": "dir", "entries": []}
        raise GithubApiError("Not Found", status_code=404)

    async def read_text(self, path: str) -> str:
        data = await self.get_content(path)
        return base64.b64decode(data["content"]).decode("utf-8")

    async def list_open_issues(
        self, *, creator: str | None, labels: Sequence[str]
    ) -> list[dict[str, Any]]:
        self.calls.append(("list_open_issues", (creator, tuple(labels))))
        if self.fail_issue_api:
            raise GithubApiError("issues unavailable", status_code=503)
        return [
            i
            for i in self.issues
            if i["state"] == "open"
            and (creator is None or i["user"]["login"] == creator)
            and all(label in i["labels"] for label in labels)
        ]

    async def update_issue(self, number: int, *, body: str) -> dict[str, Any]:
        self.calls.append(("update_issue", number))
        for issue in self.issues:
            if issue["number"] == number:
                issue["body"] = body
                return issue
        raise GithubApiError("Not Found", status_code=404)

    async def create_issue(
        self, *, title: str, body: str, labels: Sequence[str]
    ) -> dict[str, Any]:
        self.calls.append(("create_issue", title))
        issue = {
            "number": len(self.issues) + 1,
            "title": title,
            "body": body,
            "labels": list(labels),
            "state": "open",
            "user": _author(self.identity),
        }
        self.issues.append(issue)
        return issue

    async def resolve_identity(self) -> str:
        self.calls.append(("resolve_identity", None))
        if self.identity_forbidden:
            raise GithubApiError("Resource not accessible by integration", status_code=403)
        return self.identity

    async def aclose(self) -> None:
        return None

    def open_issues(self, label: str = "link-check") -> list[dict[str, Any]]:
        return [i for i in self.issues if i["state"] == "open" and label in i["labels"]]


@pytest.fixture
def make_repo():
    return FakeRepo


def mock_http_client(handler) -> httpx.AsyncClient:
    """AsyncClient wie `build_http_client`, aber mit MockTransport."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        headers={"User-Agent": "Link-Checker-Bot"},
        timeout=5.0,
        follow_redirects=True,
    )


@pytest.fixture
def http_client_factory():
    return mock_http_client
