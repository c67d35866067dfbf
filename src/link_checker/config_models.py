"""
Pydantic models for configuration validation.
"""

from pathlib import Path
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError
from .path_utils import has_unresolved_placeholder, substitute_env_vars


def _resolve_secret(value: Optional[str]) -> Optional[str]:
    if not value or not isinstance(value, str):
        return value
    resolved = substitute_env_vars(value).strip()
    if not resolved or has_unresolved_placeholder(resolved):
        return None
    return resolved


def normalize_repository(value: Optional[str]) -> Optional[str]:
    """`owner/name` mit Env-Substitution; None, wenn leer oder unaufgelöst."""
    if value is None:
        return None
    resolved = substitute_env_vars(str(value)).strip().strip("/")
    if not resolved or has_unresolved_placeholder(resolved):
        return None
    if resolved.count("/") != 1:
        raise ValueError("repository must have the form 'owner/name'")
    return resolved


class GithubConfig(BaseModel):
    """Zugang zur GitHub REST API."""

    token: Optional[str] = Field(None, description="Token (PAT oder Installation-Token)")
    api_url: str = Field("https://api.github.com", description="Basis-URL der REST API")
    host: str = Field(
        "github.com",
        description="Host, unter dem Repo-Dateien verlinkt werden (für interne Links)",
    )
    timeout_s: float = Field(30.0, gt=0.0, description="Timeout für API-Requests")

    @field_validator("token", mode="before")
    @classmethod
    def resolve_token_env_vars(cls, value: Optional[str]) -> Optional[str]:
        """Ersetzt Umgebungsvariablen im Token."""
        return _resolve_secret(value)

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class ScanConfig(BaseModel):
    """Welche Dateien gescannt werden."""

    root: str = Field("", description="Verzeichnis, dessen Einträge gelistet werden")
    suffix: str = Field(".md", description="Dateiendung der zu prüfenden Dateien")


class CheckerConfig(BaseModel):
    """Einstellungen für den HEAD-Probe externer URLs."""

    timeout_s: float = Field(5.0, gt=0.0)
    user_agent: str = "Link-Checker-Bot"
    follow_redirects: bool = True


class IssueConfig(BaseModel):
    """Tracking-Issue für kaputte Links."""

    title: str = "🔍 Markdown Link Check Report"
    label: str = "link-check"
    creator: Optional[str] = Field(
        None,
        description="Login des Issue-Autors; None → über GET /user ermitteln",
    )
    dry_run: bool = Field(False, description="Report erzeugen, aber kein Issue anfassen")

    @field_validator("creator", mode="before")
    @classmethod
    def resolve_creator_env_vars(cls, value: Optional[str]) -> Optional[str]:
        return _resolve_secret(value)


class WebhookConfig(BaseModel):
    secret: Optional[str] = None
    events: List[str] = Field(default_factory=lambda: ["push"])

    @field_validator("secret", mode="before")
    @classmethod
    def resolve_secret_env_vars(cls, value: Optional[str]) -> Optional[str]:
        return _resolve_secret(value)


class LoggingConfig(BaseModel):
    """Logging-Konfiguration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: str = "logs/link_checker.log"
    error_log_file: str = "logs/error.log"

    rotation_enabled: bool = False
    rotation_when: str = "D"
    rotation_interval: int = 1
    rotation_backup_count: int = 7

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def get_log_file_path(self) -> str:
        """Konvertiert zu absolutem Pfad für die Log-Datei."""
        path_obj = Path(self.file)
        if not path_obj.is_absolute():
            return str((Path.cwd() / path_obj).resolve())
        return str(path_obj)

    def get_error_log_file_path(self) -> str:
        """Konvertiert zu absolutem Pfad für die Error-Log-Datei."""
        path_obj = Path(self.error_log_file)
        if not path_obj.is_absolute():
            return str((Path.cwd() / path_obj).resolve())
        return str(path_obj)


class Config(BaseModel):
    """Haupt-Konfigurationsmodell."""

    repository: Optional[str] = Field(
        None, description="Zu prüfendes Repository im Format owner/name"
    )
    github: GithubConfig = Field(default_factory=GithubConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    checker: CheckerConfig = Field(default_factory=CheckerConfig)
    issue: IssueConfig = Field(default_factory=IssueConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("repository", mode="before")
    @classmethod
    def validate_repository(cls, value: Optional[str]) -> Optional[str]:
        return normalize_repository(value)

    def get_repository(self) -> Tuple[str, str]:
        if not self.repository:
            raise ConfigError("repository is not configured (expected 'owner/name')")
        owner, name = self.repository.split("/", 1)
        return owner, name
