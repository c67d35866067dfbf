"""
Markdown Link Checker.

Prüft die Links in den Markdown-Dateien eines GitHub-Repositories und pflegt
ein einzelnes Tracking-Issue mit den kaputten Links.
"""

# NOTE:
# `import link_checker` soll ohne httpx/fastapi funktionieren (z.B. `--help`).
# Öffentliche Symbole werden deshalb lazy über __getattr__ geladen.

__version__ = "0.1.0"

__all__ = [
    "classify",
    "extract_links",
    "LinkValidator",
    "render_report",
    "reconcile_issue",
    "run_check",
    "CheckResult",
    "GithubRepoContext",
    "load_config",
]


def __getattr__(name: str):
    """Lazy-Export für öffentliche API."""
    if name == "classify":
        from .classifier import classify

        return classify

    if name == "extract_links":
        from .extractor import extract_links

        return extract_links

    if name == "LinkValidator":
        from .validator import LinkValidator

        return LinkValidator

    if name == "render_report":
        from .report import render_report

        return render_report

    if name == "reconcile_issue":
        from .reconciler import reconcile_issue

        return reconcile_issue

    if name in {"run_check", "CheckResult"}:
        from . import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name == "GithubRepoContext":
        from .github_client import GithubRepoContext

        return GithubRepoContext

    if name == "load_config":
        from .config import load_config

        return load_config

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
