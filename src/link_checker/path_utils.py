"""
Utilities for path resolution and environment substitution in config data.
"""

import copy
import os
import re
from pathlib import Path
from typing import Dict


# Keys whose string values are filesystem paths relative to the config file.
PATH_KEYS = {"file", "error_log_file"}


def substitute_env_vars(value: str) -> str:
    """Ersetzt `${VAR}`-Platzhalter in Strings durch Umgebungsvariablen.

    Policy:
    - Wenn `${VAR}` vorkommt und `VAR` ist gesetzt → ersetzen.
    - Wenn `VAR` nicht gesetzt ist → Platzhalter bleibt unverändert (keine Exception).
    """
    if not value or not isinstance(value, str):
        return value

    if "${" not in value or "}" not in value:
        return value

    for var in re.findall(r"\${([^}]+)}", value):
        if var in os.environ:
            value = value.replace(f"${{{var}}}", os.environ[var])
    return value


def has_unresolved_placeholder(value: str) -> bool:
    return bool(re.search(r"\${[^}]+}", value or ""))


def _resolve_path(path_str: str, base_path: Path) -> Path:
    path_str = substitute_env_vars(path_str.strip().strip('"').strip("'"))
    path_obj = Path(os.path.normpath(path_str))
    if not path_obj.is_absolute():
        path_obj = base_path / path_obj
    return path_obj.resolve()


def resolve_paths(config_data: Dict, base_path: Path) -> Dict:
    """Löst relative Pfade in der Konfiguration auf."""
    if not isinstance(config_data, dict):
        return config_data

    resolved_data = copy.deepcopy(config_data)
    for key, value in resolved_data.items():
        if isinstance(value, dict):
            resolved_data[key] = resolve_paths(value, base_path)
        elif isinstance(value, str) and value and key in PATH_KEYS:
            resolved_data[key] = str(_resolve_path(value, base_path))
    return resolved_data


def ensure_parent_exists(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
