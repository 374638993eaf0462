"""Fantasy football odds engine."""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

# Configure structured logging on import
from .logging_config import configure_logging

_log_level = os.getenv("LOG_LEVEL", "INFO")
_json_logs = os.getenv("JSON_LOGS", "true").lower() == "true"
_service_name = os.getenv("SERVICE_NAME", "fantasy-odds")

configure_logging(
    log_level=_log_level,
    json_logs=_json_logs,
    service_name=_service_name,
)


def _load_version() -> str:
    """Installed distribution version, else the source checkout's VERSION file."""
    try:
        return version("fantasy-odds")
    except PackageNotFoundError:
        pass

    version_path = Path(__file__).resolve().parent.parent / "VERSION"
    try:
        value = version_path.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.0.0"
    return value or "0.0.0"


__version__ = _load_version()
