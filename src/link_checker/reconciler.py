"""
Hält genau ein offenes Tracking-Issue pro Repository aktuell.

Kein Retry: Fehler der Issue-API propagieren zum Aufrufer.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from .config_models import IssueConfig
from .errors import GithubApiError
from .github_client import RepoContext
from .models import LinkRecord, ReconcileAction
from .report import render_report


logger = logging.getLogger(__name__)


def _is_bot_author(issue: dict[str, Any]) -> bool:
    user = issue.get("user")
    return isinstance(user, dict) and user.get("type") == "Bot"


async def _resolve_creator(repo: RepoContext) -> Optional[str]:
    """Login des Token-Besitzers, `None` wenn der Token `/user` nicht lesen darf.

    Installation tokens (including the Actions `GITHUB_TOKEN`) get 403 there;
    issues are then matched by label and bot authorship instead.
    """
    try:
        return await repo.resolve_identity()
    except GithubApiError as e:
        logger.warning(
            f"Could not resolve token identity ({e}), matching bot-authored issues by label"
        )
        return None


async def reconcile_issue(
    repo: RepoContext,
    records: Sequence[LinkRecord],
    settings: Optional[IssueConfig] = None,
    *,
    now: Optional[datetime] = None,
) -> ReconcileAction:
    settings = settings or IssueConfig()

    if not any(not r.valid for r in records):
        logger.info("No broken links, tracking issue left untouched")
        return ReconcileAction.SKIPPED

    body = render_report(records, now=now)

    if settings.dry_run:
        logger.info("Dry run: skipping issue update for %s/%s", repo.owner, repo.repo)
        return ReconcileAction.DRY_RUN

    creator = settings.creator or await _resolve_creator(repo)
    existing = await repo.list_open_issues(creator=creator, labels=[settings.label])
    if creator is None:
        existing = [i for i in existing if _is_bot_author(i)]

    if existing:
        if len(existing) > 1:
            logger.warning(
                "Found %d open '%s' issues, updating the first (#%s)",
                len(existing),
                settings.label,
                existing[0]["number"],
            )
        number = existing[0]["number"]
        await repo.update_issue(number, body=body)
        logger.info(f"Updated existing issue #{number}")
        return ReconcileAction.UPDATED

    await repo.create_issue(title=settings.title, body=body, labels=[settings.label])
    logger.info("Created new issue for broken links")
    return ReconcileAction.CREATED
