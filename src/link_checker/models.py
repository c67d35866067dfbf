"""
Datenmodelle für Link-Prüfungen.

Ein `LinkRecord` ist eine von vier Varianten; jede trägt nur die Felder, die für
ihren Status gelten. `valid` wird immer aus `status` abgeleitet.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


NOT_FOUND_ERROR = "File not found in repository"


class LinkStatus(str, Enum):
    INTERNAL_ANCHOR = "INTERNAL_ANCHOR"
    INTERNAL_OK = "INTERNAL_OK"
    INTERNAL_NOT_FOUND = "INTERNAL_NOT_FOUND"

    def __str__(self) -> str:
        return self.value


class LinkKind(str, Enum):
    ANCHOR = "anchor"
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass(frozen=True)
class ClassifiedLink:
    kind: LinkKind
    link: str
    source_file: str
    # Repo-relative path for internal links, None otherwise.
    target: Optional[str] = None


@dataclass(frozen=True)
class AnchorRecord:
    url: str
    filename: str

    @property
    def status(self) -> LinkStatus:
        return LinkStatus.INTERNAL_ANCHOR

    @property
    def valid(self) -> bool:
        return True


@dataclass(frozen=True)
class InternalOkRecord:
    url: str
    filename: str
    resolved_path: str

    @property
    def status(self) -> LinkStatus:
        return LinkStatus.INTERNAL_OK

    @property
    def valid(self) -> bool:
        return True


@dataclass(frozen=True)
class InternalNotFoundRecord:
    url: str
    filename: str
    attempted_path: str
    error: str = NOT_FOUND_ERROR

    @property
    def status(self) -> LinkStatus:
        return LinkStatus.INTERNAL_NOT_FOUND

    @property
    def valid(self) -> bool:
        return False


@dataclass(frozen=True)
class ExternalRecord:
    """Ergebnis eines HEAD-Probes; `status == 0` bedeutet Transportfehler."""

    url: str
    filename: str
    status: int
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return 200 <= self.status < 300


LinkRecord = Union[AnchorRecord, InternalOkRecord, InternalNotFoundRecord, ExternalRecord]


@dataclass(frozen=True)
class ContentEntry:
    name: str
    type: str
    path: str

    @property
    def is_file(self) -> bool:
        return self.type == "file"


class ReconcileAction(str, Enum):
    SKIPPED = "skipped"
    UPDATED = "updated"
    CREATED = "created"
    DRY_RUN = "dry_run"
