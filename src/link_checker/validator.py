"""Validate classified links.

Anchors are always valid. Internal targets are looked up through the
repository context; external URLs get a single HEAD probe. Every failure is
returned as a record, nothing is raised past `LinkValidator.validate`.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .classifier import escapes_repo_root
from .config_models import CheckerConfig
from .github_client import RepoContext
from .models import (
    AnchorRecord,
    ClassifiedLink,
    ExternalRecord,
    InternalNotFoundRecord,
    InternalOkRecord,
    LinkKind,
    LinkRecord,
)


logger = logging.getLogger(__name__)


def build_http_client(settings: Optional[CheckerConfig] = None) -> httpx.AsyncClient:
    settings = settings or CheckerConfig()
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.timeout_s,
        follow_redirects=settings.follow_redirects,
    )


class LinkValidator:
    def __init__(self, *, repo: RepoContext, client: httpx.AsyncClient) -> None:
        self._repo = repo
        self._client = client

    async def validate(self, classified: ClassifiedLink) -> LinkRecord:
        if classified.kind is LinkKind.ANCHOR:
            return AnchorRecord(url=classified.link, filename=classified.source_file)
        if classified.kind is LinkKind.INTERNAL:
            return await self.check_internal_file(
                classified.target or "", classified.link, classified.source_file
            )
        return await self.check_url(classified.link, classified.source_file)

    async def check_internal_file(
        self, file_path: str, original_link: str, source_file: str
    ) -> LinkRecord:
        if escapes_repo_root(file_path):
            # Above the repository root, never part of the file tree.
            return InternalNotFoundRecord(
                url=original_link, filename=source_file, attempted_path=file_path
            )
        try:
            await self._repo.get_content(file_path)
        except Exception as exc:
            # Any lookup failure counts as not found.
            logger.debug("Internal lookup failed for %s: %s", file_path, exc)
            return InternalNotFoundRecord(
                url=original_link, filename=source_file, attempted_path=file_path
            )
        return InternalOkRecord(
            url=original_link, filename=source_file, resolved_path=file_path
        )

    async def check_url(self, url: str, source_file: str) -> ExternalRecord:
        try:
            resp = await self._client.head(url)
        except Exception as exc:
            logger.debug("HEAD %s failed: %r", url, exc)
            return ExternalRecord(
                url=url,
                filename=source_file,
                status=0,
                error=str(exc) or type(exc).__name__,
            )
        return ExternalRecord(url=url, filename=source_file, status=resp.status_code)
