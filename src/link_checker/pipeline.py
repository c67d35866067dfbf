"""
Pipeline des Link Checkers.

Dateien werden nacheinander verarbeitet; die Links einer Datei werden parallel
geprüft (`asyncio.gather`). Fehler einer einzelnen Datei werden geloggt und
übersprungen, Fehler beim Issue-Abgleich propagieren.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .classifier import DEFAULT_HOST, classify
from .config_models import Config
from .extractor import extract_links
from .github_client import RepoContext
from .models import ContentEntry, LinkRecord, ReconcileAction
from .reconciler import reconcile_issue
from .validator import LinkValidator, build_http_client


logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    records: list[LinkRecord] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)
    action: ReconcileAction = ReconcileAction.SKIPPED

    @property
    def invalid(self) -> list[LinkRecord]:
        return [r for r in self.records if not r.valid]

    @property
    def ok(self) -> bool:
        return not self.invalid and not self.failed_files


async def list_markdown_files(
    repo: RepoContext, *, root: str = "", suffix: str = ".md"
) -> list[ContentEntry]:
    entries = await repo.list_contents(root)
    return [e for e in entries if e.name.endswith(suffix) and e.is_file]


async def process_markdown_content(
    content: str,
    filename: str,
    *,
    repo: RepoContext,
    validator: LinkValidator,
    host: str = DEFAULT_HOST,
) -> list[LinkRecord]:
    links = extract_links(content)
    classified = [
        classify(link, filename, owner=repo.owner, repo=repo.repo, host=host)
        for link in links
    ]
    # gather keeps input order regardless of completion order
    return list(await asyncio.gather(*(validator.validate(c) for c in classified)))


async def collect_records(
    repo: RepoContext,
    config: Config,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> CheckResult:
    result = CheckResult()

    markdown_files = await list_markdown_files(
        repo, root=config.scan.root, suffix=config.scan.suffix
    )
    if not markdown_files:
        logger.info("No markdown files found")
        return result

    owns_client = http_client is None
    client = http_client or build_http_client(config.checker)
    validator = LinkValidator(repo=repo, client=client)
    try:
        for entry in markdown_files:
            result.files.append(entry.path)
            try:
                content = await repo.read_text(entry.path)
                records = await process_markdown_content(
                    content,
                    entry.path,
                    repo=repo,
                    validator=validator,
                    host=config.github.host,
                )
            except Exception as e:
                logger.error(f"Error processing file {entry.path}: {e}")
                result.failed_files.append(entry.path)
                continue
            broken = sum(1 for r in records if not r.valid)
            logger.info(
                "Checked %s: %d links, %d broken", entry.path, len(records), broken
            )
            result.records.extend(records)
    finally:
        if owns_client:
            await client.aclose()

    return result


async def run_check(
    repo: RepoContext,
    config: Optional[Config] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> CheckResult:
    """Prüft alle Markdown-Dateien und gleicht das Tracking-Issue ab."""
    config = config or Config()
    logger.info(f"Running link check for {repo.owner}/{repo.repo}")

    result = await collect_records(repo, config, http_client=http_client)
    if result.invalid:
        result.action = await reconcile_issue(repo, result.records, config.issue)
    return result
