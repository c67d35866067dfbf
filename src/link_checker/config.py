"""
Konfigurationsmodul für den Markdown Link Checker.

Lädt und validiert Konfigurationen aus YAML-Dateien.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .config_models import Config
from .path_utils import resolve_paths


CONFIG_ENV_VAR = "LINK_CHECKER_CONFIG"

log = logging.getLogger(__name__)


def _load_yaml_dict(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


def _apply_env_overrides(config_data: dict[str, Any]) -> dict[str, Any]:
    """Env vars win over empty config values (token, repository)."""
    token = os.environ.get("GITHUB_TOKEN", "").strip()
    repository = os.environ.get("LINK_CHECKER_REPOSITORY", "").strip()

    if token:
        github_cfg = dict(config_data.get("github") or {})
        if not github_cfg.get("token"):
            github_cfg["token"] = token
        config_data["github"] = github_cfg
    if repository:
        config_data["repository"] = repository
    return config_data


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """Lädt die Konfiguration aus einer YAML-Datei.

    Args:
        config_path: Pfad zur Konfigurationsdatei (optional). Ohne Pfad wird
            `$LINK_CHECKER_CONFIG` verwendet, sonst gelten die Defaults.

    Returns:
        Config-Objekt mit geladenen oder Standardwerten

    Raises:
        FileNotFoundError: Wenn die Konfigurationsdatei nicht existiert
        ValidationError: Bei ungültigen Konfigurationswerten
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
        config_path = env_path or None

    if config_path is None:
        return Config(**_apply_env_overrides({}))

    config_path = Path(config_path)
    base_dir = config_path.parent.resolve()

    try:
        config_data = resolve_paths(_load_yaml_dict(config_path), base_dir)
        # Empty sections (`github:` without keys) fall back to defaults
        config_data = {k: v for k, v in config_data.items() if v is not None}
        config_data = _apply_env_overrides(config_data)
        return Config(**config_data)
    except FileNotFoundError:
        log.error(f"Konfigurationsdatei nicht gefunden: {config_path}")
        raise
    except yaml.YAMLError as e:
        log.error(f"Fehler beim Parsen der YAML-Datei: {e}")
        raise
