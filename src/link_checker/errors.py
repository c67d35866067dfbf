from __future__ import annotations

from typing import Any


class LinkCheckError(RuntimeError):
    """Base error for the link checker."""


class GithubApiError(LinkCheckError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.data = data or {}


class ConfigError(LinkCheckError, ValueError):
    """Missing or invalid configuration value."""
