"""
Klassifiziert Link-Tokens (Anker / interne Datei / externe URL) und löst
interne Ziele relativ zur Quelldatei auf.
"""

from __future__ import annotations

import posixpath
import re
from urllib.parse import unquote, urlparse

from .models import ClassifiedLink, LinkKind


DEFAULT_HOST = "github.com"

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]+):")
# Schemes that are only valid with an authority part (`https:foo` is not a URL).
_AUTHORITY_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
_BLOB_PATH_RE = re.compile(r"/blob/[^/]+/(.+)$")


def is_absolute_url(link: str) -> bool:
    """True, wenn `link` als absolute URL parst.

    Single-letter schemes are rejected so Windows drive paths (`C:/x.md`)
    stay internal.
    """
    m = _SCHEME_RE.match(link)
    if not m:
        return False
    scheme = m.group(1).lower()
    if scheme not in _AUTHORITY_SCHEMES:
        return True
    try:
        return bool(urlparse(link).netloc)
    except ValueError:
        return False


def _strip_fragment(target: str) -> str:
    return target.split("#", 1)[0].split("?", 1)[0]


def escapes_repo_root(path: str) -> bool:
    """True für normalisierte Pfade oberhalb der Repository-Wurzel."""
    return path == ".." or path.startswith("../")


def resolve_relative(source_file: str, link: str) -> str:
    """Löst `link` relativ zum Verzeichnis von `source_file` auf.

    Always uses forward slashes and collapses `.`/`..`; a leading `/` is
    joined like any other segment, so `/a.md` from `docs/x.md` is `docs/a.md`.
    """
    target = unquote(_strip_fragment(link)).replace("\\", "/").lstrip("/")
    base = posixpath.dirname(source_file.replace("\\", "/"))
    return posixpath.normpath(posixpath.join(base, target))


def same_repo_blob_path(
    link: str, *, owner: str, repo: str, host: str = DEFAULT_HOST
) -> str | None:
    """Pfad hinter `/blob/<ref>/`, falls `link` auf dieses Repo zeigt."""
    try:
        hostname = (urlparse(link).hostname or "").lower()
    except ValueError:
        return None
    if hostname not in {host.lower(), f"www.{host.lower()}"}:
        return None
    if owner not in link or repo not in link:
        return None
    m = _BLOB_PATH_RE.search(link)
    if not m:
        return None
    path = posixpath.normpath(unquote(_strip_fragment(m.group(1))).strip("/") or ".")
    return None if path == "." else path


def classify(
    link: str,
    source_file: str,
    *,
    owner: str,
    repo: str,
    host: str = DEFAULT_HOST,
) -> ClassifiedLink:
    if link.startswith("#"):
        return ClassifiedLink(kind=LinkKind.ANCHOR, link=link, source_file=source_file)

    if is_absolute_url(link):
        blob_path = same_repo_blob_path(link, owner=owner, repo=repo, host=host)
        if blob_path is not None:
            return ClassifiedLink(
                kind=LinkKind.INTERNAL,
                link=link,
                source_file=source_file,
                target=blob_path,
            )
        return ClassifiedLink(kind=LinkKind.EXTERNAL, link=link, source_file=source_file)

    return ClassifiedLink(
        kind=LinkKind.INTERNAL,
        link=link,
        source_file=source_file,
        target=resolve_relative(source_file, link),
    )
