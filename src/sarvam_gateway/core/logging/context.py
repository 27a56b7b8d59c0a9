"""
Request Context and Configuration State for Logging.

The request ID lives in a ContextVar so that every log line emitted while
handling one HTTP request (including code running on FastAPI's worker
threads) carries the same correlation ID.

Environment Variables:
    - SARVAM_GATEWAY_LOG_LEVEL: Override log level (1-4 or name)
    - SARVAM_GATEWAY_LOG_DIR: Directory for the JSONL log file
    - SARVAM_GATEWAY_JSONL_FILE: JSONL filename
    - SARVAM_GATEWAY_LOG_ROTATE_BYTES: Max file size before rotation
    - SARVAM_GATEWAY_LOG_ROTATE_BACKUP: Number of rotated files to keep
"""
from __future__ import annotations

import os
from contextvars import ContextVar
from typing import Any, Dict

from .levels import LEVEL_NAMES, LogLevel

# "-" marks log lines emitted outside a request
_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_configured: bool = False
_log_config: Dict[str, Any] = {}
_current_level: LogLevel = LogLevel.NORMAL


def get_request_id() -> str:
    """Get the current request ID, or "-" outside a request."""
    return _request_id.get()


def set_request_id(rid: str) -> None:
    """Set the request ID for the current context."""
    _request_id.set(rid)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def get_level_name() -> str:
    """Current log level as a name ("MINIMAL", "NORMAL", ...)."""
    return LEVEL_NAMES.get(_current_level, "NORMAL")


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def get_log_config() -> Dict[str, Any]:
    return _log_config


def set_log_config(config: Dict[str, Any]) -> None:
    global _log_config
    _log_config = config


def read_logging_config() -> Dict[str, Any]:
    """
    Read logging configuration from the settings file and environment.

    Priority (highest first):
        1. SARVAM_GATEWAY_LOG_* environment variables
        2. The ``logging`` section of the settings YAML
        3. Defaults applied by configure_logging()

    Returns:
        Dictionary with resolved logging configuration.
    """
    cfg: Dict[str, Any] = {}

    settings_path = os.getenv("SARVAM_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        from sarvam_gateway.core.config import load_settings
        settings = load_settings(settings_path)
        cfg.update(settings.raw.get("logging", {}) or {})
    except Exception:
        # Missing or unreadable settings: logging still works on defaults
        pass

    if os.getenv("SARVAM_GATEWAY_LOG_LEVEL"):
        cfg["level"] = os.environ["SARVAM_GATEWAY_LOG_LEVEL"]
    if os.getenv("SARVAM_GATEWAY_LOG_DIR"):
        cfg["log_dir"] = os.environ["SARVAM_GATEWAY_LOG_DIR"]
    if os.getenv("SARVAM_GATEWAY_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["SARVAM_GATEWAY_JSONL_FILE"]
    for env_name, key in (
        ("SARVAM_GATEWAY_LOG_ROTATE_BYTES", "rotate_max_bytes"),
        ("SARVAM_GATEWAY_LOG_ROTATE_BACKUP", "rotate_backup_count"),
    ):
        if os.getenv(env_name):
            try:
                cfg[key] = int(os.environ[env_name])
            except ValueError:
                pass  # ignored, default applies

    return cfg
