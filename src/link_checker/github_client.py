from __future__ import annotations

import base64
import logging
from typing import Any, Optional, Protocol, Sequence
from urllib.parse import quote

import httpx

from .errors import GithubApiError
from .models import ContentEntry


logger = logging.getLogger(__name__)


class RepoContext(Protocol):
    """Die Operationen, die der Checker gegen ein Repository braucht."""

    owner: str
    repo: str

    async def list_contents(self, path: str = "") -> list[ContentEntry]: ...

    async def get_content(self, path: str) -> dict[str, Any]: ...

    async def read_text(self, path: str) -> str: ...

    async def list_open_issues(
        self, *, creator: Optional[str], labels: Sequence[str]
    ) -> list[dict[str, Any]]: ...

    async def update_issue(self, number: int, *, body: str) -> dict[str, Any]: ...

    async def create_issue(
        self, *, title: str, body: str, labels: Sequence[str]
    ) -> dict[str, Any]: ...

    async def resolve_identity(self) -> str: ...


def decode_content(data: dict[str, Any]) -> str:
    raw = data.get("content")
    if raw is None:
        raise GithubApiError(f"content missing for {data.get('path')!r}")
    encoding = data.get("encoding", "base64")
    if encoding != "base64":
        return str(raw)
    return base64.b64decode(raw).decode("utf-8", errors="replace")


def split_full_name(full_name: str) -> tuple[str, str]:
    owner, _, name = (full_name or "").strip().strip("/").partition("/")
    if not owner or not name or "/" in name:
        raise ValueError(f"invalid repository name: {full_name!r}")
    return owner, name


class GithubRepoContext:
    """RepoContext über die GitHub REST API v3."""

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "Link-Checker-Bot",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=api_url.rstrip("/"), headers=headers, timeout=timeout_s
        )
        if client is not None:
            self._client.headers.update(headers)

    async def __aenter__(self) -> "GithubRepoContext":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{quote(self.owner, safe='')}/{quote(self.repo, safe='')}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        resp = await self._client.request(method, url, **kwargs)
        if resp.status_code >= 400:
            try:
                data = resp.json()
                message = data.get("message", resp.text)
            except (ValueError, AttributeError):
                data, message = None, resp.text
            raise GithubApiError(
                f"github {method} {url} failed: {resp.status_code} {message}",
                status_code=resp.status_code,
                data=data if isinstance(data, dict) else None,
            )
        return resp.json() if resp.content else {}

    async def list_contents(self, path: str = "") -> list[ContentEntry]:
        data = await self._request(
            "GET", f"{self._repo_path}/contents/{quote(path.strip('/'), safe='/')}"
        )
        items = data if isinstance(data, list) else [data]
        return [
            ContentEntry(
                name=str(item.get("name", "")),
                type=str(item.get("type", "")),
                path=str(item.get("path", "")),
            )
            for item in items
        ]

    async def get_content(self, path: str) -> dict[str, Any]:
        data = await self._request(
            "GET", f"{self._repo_path}/contents/{quote(path.strip('/'), safe='/')}"
        )
        if isinstance(data, list):
            # Directory listing: the path exists.
            return {"path": path, "type": "dir", "entries": data}
        return data

    async def read_text(self, path: str) -> str:
        return decode_content(await self.get_content(path))

    async def list_open_issues(
        self, *, creator: Optional[str], labels: Sequence[str]
    ) -> list[dict[str, Any]]:
        params = {"state": "open", "labels": ",".join(labels)}
        if creator:
            params["creator"] = creator
        data = await self._request("GET", f"{self._repo_path}/issues", params=params)
        # The issues endpoint also returns pull requests.
        return [item for item in data if "pull_request" not in item]

    async def update_issue(self, number: int, *, body: str) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"{self._repo_path}/issues/{int(number)}", json={"body": body}
        )

    async def create_issue(
        self, *, title: str, body: str, labels: Sequence[str]
    ) -> dict[str, Any]:
        payload = {"title": title, "body": body, "labels": list(labels)}
        return await self._request("POST", f"{self._repo_path}/issues", json=payload)

    async def resolve_identity(self) -> str:
        data = await self._request("GET", "/user")
        login = data.get("login") if isinstance(data, dict) else None
        if not login:
            raise GithubApiError("could not resolve authenticated user login")
        return str(login)
