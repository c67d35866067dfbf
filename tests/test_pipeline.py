from __future__ import annotations

import asyncio

import httpx
import pytest

from link_checker.config_models import Config
from link_checker.errors import GithubApiError
from link_checker.models import (
    AnchorRecord,
    ExternalRecord,
    InternalNotFoundRecord,
    InternalOkRecord,
    LinkStatus,
    ReconcileAction,
)
from link_checker.pipeline import list_markdown_files, run_check


README = "# Demo\n\n[x](#install)\n[y](./missing.md)\n[z](https://example.com)\n"


def _run(repo, handler, http_client_factory, config: Config | None = None):
    async def _go():
        client = http_client_factory(handler)
        try:
            return await run_check(repo, config or Config(), http_client=client)
        finally:
            await client.aclose()

    return asyncio.run(_go())


def _status(code: int):
    return lambda request: httpx.Response(code)


def test_readme_scenario_creates_issue(make_repo, http_client_factory) -> None:
    repo = make_repo({"README.md": README})
    result = _run(repo, _status(404), http_client_factory)

    assert len(result.records) == 3
    anchor, missing, external = result.records
    assert isinstance(anchor, AnchorRecord) and anchor.valid
    assert isinstance(missing, InternalNotFoundRecord)
    assert missing.status is LinkStatus.INTERNAL_NOT_FOUND
    assert missing.attempted_path == "missing.md"
    assert not missing.valid
    assert isinstance(external, ExternalRecord)
    assert external.status == 404 and not external.valid

    assert result.action is ReconcileAction.CREATED
    assert len(repo.open_issues()) == 1


def test_second_run_updates_instead_of_duplicating(make_repo, http_client_factory) -> None:
    repo = make_repo({"README.md": README})
    first = _run(repo, _status(404), http_client_factory)
    second = _run(repo, _status(404), http_client_factory)

    assert first.action is ReconcileAction.CREATED
    assert second.action is ReconcileAction.UPDATED
    assert len(repo.open_issues()) == 1


def test_clean_run_publishes_nothing(make_repo, http_client_factory) -> None:
    repo = make_repo({"README.md": "[a](docs/a.md) [b](https://example.com)", "docs/a.md": "x"})
    result = _run(repo, _status(200), http_client_factory)

    assert all(r.valid for r in result.records)
    assert result.action is ReconcileAction.SKIPPED
    assert result.ok
    assert repo.issues == []
    assert not any(call[0] in {"list_open_issues", "create_issue"} for call in repo.calls)


def test_records_follow_file_then_link_order(make_repo, http_client_factory) -> None:
    repo = make_repo(
        {
            "A.md": "[1](https://slow.example) [2](#two)",
            "B.md": "[3](#three)",
            "docs/nested.md": "[skipped](#nested)",
        },
        dirs=["docs"],
    )

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        return httpx.Response(200)

    result = _run(repo, handler, http_client_factory)
    assert [(r.filename, r.url) for r in result.records] == [
        ("A.md", "https://slow.example"),
        ("A.md", "#two"),
        ("B.md", "#three"),
    ]
    assert result.files == ["A.md", "B.md"]


def test_failing_file_is_skipped(make_repo, http_client_factory) -> None:
    repo = make_repo({"A.md": "[a](#a)", "B.md": "[b](nope.md)", "C.md": "[c](#c)"})
    repo.broken_reads.add("B.md")
    result = _run(repo, _status(200), http_client_factory)

    assert result.failed_files == ["B.md"]
    assert [r.url for r in result.records] == ["#a", "#c"]
    assert result.action is ReconcileAction.SKIPPED
    assert not result.ok


def test_no_markdown_files(make_repo, http_client_factory) -> None:
    repo = make_repo({"setup.py": "print()"})
    result = _run(repo, _status(200), http_client_factory)
    assert result.records == []
    assert result.files == []


def test_blob_links_to_this_repo_are_checked_internally(make_repo, http_client_factory) -> None:
    repo = make_repo(
        {"README.md": "[s](https://github.com/octo/docs/blob/main/docs/setup.md)", "docs/setup.md": "x"}
    )

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("blob links must not be fetched over HTTP")

    result = _run(repo, handler, http_client_factory)
    assert isinstance(result.records[0], InternalOkRecord)
    assert result.records[0].resolved_path == "docs/setup.md"


def test_reconcile_failure_propagates(make_repo, http_client_factory) -> None:
    repo = make_repo({"README.md": "[y](./missing.md)"})
    repo.fail_issue_api = True
    with pytest.raises(GithubApiError):
        _run(repo, _status(200), http_client_factory)


def test_scan_suffix_and_root_are_configurable(make_repo) -> None:
    repo = make_repo({"docs/a.mdx": "", "docs/b.md": "", "README.md": ""}, dirs=["docs"])
    entries = asyncio.run(list_markdown_files(repo, root="docs", suffix=".mdx"))
    assert [e.path for e in entries] == ["docs/a.mdx"]
