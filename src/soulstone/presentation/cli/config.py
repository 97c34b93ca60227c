"""CLI configuration helpers for options persistence and logging setup."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict

_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Soulstone"
        return Path.home() / "Soulstone"
    return Path.home() / ".config" / "soulstone"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_log_path() -> Path:
    return get_user_data_dir() / "soulstone.log"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_content_path(value: object) -> str:
    return value if isinstance(value, str) else ""


def _defaults() -> Dict[str, str]:
    return {"log_level": _DEFAULT_LOG_LEVEL, "content_path": ""}


def load_config(path: Path | None = None) -> Dict[str, str]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return _defaults()
    if not isinstance(raw, dict):
        return _defaults()
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "content_path": _normalize_content_path(raw.get("content_path")),
    }


def save_config(config: Dict[str, str], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "log_level": _normalize_log_level(config.get("log_level")),
        "content_path": _normalize_content_path(config.get("content_path")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def resolve_log_level(config: Dict[str, str]) -> int:
    """SOULSTONE_DEBUG=1 forces DEBUG; otherwise the configured level applies."""
    if os.getenv("SOULSTONE_DEBUG") == "1":
        return logging.DEBUG
    return getattr(logging, _normalize_log_level(config.get("log_level")))


def configure_logging(config: Dict[str, str], log_path: Path | None = None) -> None:
    """Send log records to a file so they never interleave with the game text."""
    target = log_path or get_log_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=resolve_log_level(config),
        format=_LOG_FORMAT,
        filename=str(target),
        encoding="utf-8",
        force=True,
    )
