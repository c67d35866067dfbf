"""
Kommandozeilen-Einstieg für den Markdown Link Checker.

Lädt die Konfiguration, prüft die Markdown-Dateien eines GitHub-Repositories
und aktualisiert (oder erstellt) das Tracking-Issue.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, TYPE_CHECKING

from pydantic import ValidationError

if TYPE_CHECKING:
    from .config_models import Config
    from .github_client import GithubRepoContext
    from .pipeline import CheckResult


logger = logging.getLogger(__name__)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="link-checker", description="Markdown Link Checker"
    )
    parser.add_argument(
        "config_path",
        type=str,
        help="Path to the configuration file (default: $LINK_CHECKER_CONFIG or built-in defaults)",
        nargs="?",
        default=None,
    )
    parser.add_argument(
        "--repo",
        dest="repository",
        default=None,
        help="Repository to check as owner/name (overrides config)",
    )
    parser.add_argument(
        "--token", default=None, help="GitHub token (overrides any other source)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the report but never create or update the tracking issue.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Also write the rendered report to this Markdown file.",
    )
    return parser.parse_args(argv)


def make_repo_context(config: "Config") -> "GithubRepoContext":
    from .github_client import GithubRepoContext

    owner, name = config.get_repository()
    return GithubRepoContext(
        owner,
        name,
        token=config.github.token,
        api_url=config.github.api_url,
        timeout_s=config.github.timeout_s,
    )


async def _check_repository(config: "Config") -> "CheckResult":
    from .pipeline import run_check

    repo = make_repo_context(config)
    try:
        return await run_check(repo, config)
    finally:
        await repo.aclose()


def _load_config_or_none(args: argparse.Namespace) -> Optional["Config"]:
    from .config import load_config
    from .config_models import normalize_repository

    try:
        config = load_config(args.config_path)
    except FileNotFoundError as e:
        print(f"Error: Configuration file not found: {e}")
        return None
    except ValidationError as e:
        logger.error("Configuration validation failed.")
        print("--- Configuration Validation Errors ---")
        for error in e.errors():
            loc = ".".join(map(str, error["loc"]))
            print(f"Field: {loc}, Error: {error['msg']}, Input: {error.get('input', 'N/A')!r}")
        print("---------------------------------------")
        return None
    except Exception as e:
        logger.exception("An unexpected error occurred during configuration loading: %s", e)
        print(f"An unexpected error occurred during config loading: {e}")
        return None

    try:
        if args.repository:
            config.repository = normalize_repository(args.repository)
    except ValueError as e:
        print(f"Error: --repo: {e}")
        return None
    if args.token:
        config.github.token = args.token
    if args.dry_run:
        config.issue.dry_run = True
    return config


def _run_with_parsed_args(args: argparse.Namespace) -> int:
    from dotenv import load_dotenv

    from .logging_setup import setup_basic_logging, setup_logging
    from .report import render_report
    from .run_summary import RunStats, format_run_summary, write_text_report

    # .env only after argparse handled `--help`
    load_dotenv()
    setup_basic_logging()

    config = _load_config_or_none(args)
    if config is None:
        return 1
    if not config.repository:
        print("Error: no repository configured. Hint: pass --repo owner/name or set `repository:`.")
        return 1

    setup_logging(config)

    started_at = _now_utc_iso()
    try:
        result = asyncio.run(_check_repository(config))
    except Exception as e:
        logger.exception("Link check for %s failed: %s", config.repository, e)
        print(f"Link check failed: {e}")
        return 1

    if args.output:
        out_path = Path(args.output)
        write_text_report(out_path, render_report(result.records))
        logger.info("Report written to %s", out_path)

    print(
        format_run_summary(
            stats=RunStats.from_result(result),
            repository=config.repository,
            run_started_at=started_at,
            run_finished_at=_now_utc_iso(),
        )
    )
    return 0 if result.ok else 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main function to run the link check."""
    args = parse_arguments(argv)
    sys.exit(_run_with_parsed_args(args))


if __name__ == "__main__":
    main()
