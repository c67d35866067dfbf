"""Extract raw link targets from Markdown text.

Covers inline links and images `[text](target)` (including an image nested in
the link text, the usual badge form), reference definitions `[id]: target`,
autolinks `<https://...>`, raw HTML `<a href>`/`<img src>` and bare
`http(s)://` URLs. Fenced and indented code blocks and code spans are
ignored. Results keep their order of appearance; duplicates are kept.
"""

from __future__ import annotations

import re


_FENCE_RE = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")
_INDENTED_RE = re.compile(r"^(?: {4}|\t)")
_LIST_ITEM_RE = re.compile(r"^[ ]{0,3}(?:[-*+]|\d{1,9}[.)])(?:[ \t]|$)")
# Code spans may wrap lines but never cross a blank line.
_CODE_SPAN_RE = re.compile(
    r"(?<!`)(`+)(?!`)((?:(?!\n[ \t\r]*\n).)+?)(?<!`)\1(?!`)", re.DOTALL
)

_INLINE_LINK_RE = re.compile(
    r"!?\[((?:[^\[\]]|\[[^\]]*\])*)\]"
    r"\(\s*(<[^>\n]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)"
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
_HTML_LINK_RE = re.compile(
    r"<(?:a|img)\b[^>]*?\s(?:href|src)\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'=<>`]+))",
    re.IGNORECASE,
)
_REFERENCE_DEF_RE = re.compile(r"^[ ]{0,3}\[[^\]]+\]:[ \t]*(<[^>\n]*>|\S+)", re.MULTILINE)
_AUTOLINK_RE = re.compile(r"<((?:https?|ftp)://[^\s<>]+|mailto:[^\s<>]+)>")
_BARE_URL_RE = re.compile(r"https?://[^\s<>\[\]()`\"']+")

_TRAILING_PUNCT = ".,;:!?*_~"


def _blank(line: str) -> str:
    body = line.rstrip("\r\n")
    return " " * len(body) + line[len(body) :]


def _strip_code(text: str) -> str:
    """Blank out code blocks and code spans, keeping offsets stable."""
    out: list[str] = []
    fence: str | None = None
    in_indented = False
    in_list = False
    prev_blank = True
    for line in text.splitlines(keepends=True):
        if fence is not None:
            if line.strip().startswith(fence):
                fence = None
            out.append(_blank(line))
            continue

        blank = not line.strip()
        if in_indented and (blank or _INDENTED_RE.match(line)):
            out.append(_blank(line))
            prev_blank = blank
            continue
        in_indented = False

        m = _FENCE_RE.match(line)
        if m:
            fence = m.group(1)
            out.append(_blank(line))
            prev_blank = False
            continue
        # Indented lines inside a list are item content, not code.
        if not blank and prev_blank and not in_list and _INDENTED_RE.match(line):
            in_indented = True
            out.append(_blank(line))
            continue

        if _LIST_ITEM_RE.match(line):
            in_list = True
        elif not blank and not line[0].isspace():
            in_list = False
        out.append(line)
        prev_blank = blank

    return _CODE_SPAN_RE.sub(
        lambda c: re.sub(r"[^\n]", " ", c.group(0)), "".join(out)
    )


def _unwrap(target: str) -> str:
    t = target.strip()
    if t.startswith("<") and t.endswith(">"):
        t = t[1:-1].strip()
    return t


def extract_links(text: str) -> list[str]:
    if not text:
        return []

    clean = _strip_code(text)
    found: list[tuple[int, str]] = []
    taken: list[tuple[int, int]] = []

    def _covered(start: int, end: int) -> bool:
        return any(s <= start and end <= e for s, e in taken)

    for m in _INLINE_LINK_RE.finditer(clean):
        taken.append((m.start(), m.end()))
        target = _unwrap(m.group(2))
        if target:
            found.append((m.start(), target))
        # Badges: [![alt](image)](href)
        for inner in _INLINE_LINK_RE.finditer(m.group(1)):
            inner_target = _unwrap(inner.group(2))
            if inner_target:
                found.append((m.start(1) + inner.start(), inner_target))

    for m in _HTML_LINK_RE.finditer(clean):
        if _covered(m.start(), m.end()):
            continue
        taken.append((m.start(), m.end()))
        target = next(g for g in m.groups() if g is not None).strip()
        if target:
            found.append((m.start(), target))

    for pattern in (_REFERENCE_DEF_RE, _AUTOLINK_RE):
        for m in pattern.finditer(clean):
            if _covered(m.start(), m.end()):
                continue
            taken.append((m.start(), m.end()))
            target = _unwrap(m.group(1))
            if target:
                found.append((m.start(), target))

    for m in _BARE_URL_RE.finditer(clean):
        if _covered(m.start(), m.end()):
            continue
        url = m.group(0).rstrip(_TRAILING_PUNCT)
        if url:
            found.append((m.start(), url))

    found.sort(key=lambda item: item[0])
    return [target for _, target in found]
