"""
Logging setup for routemark (library + CLI).

Defaults:
- stderr StreamHandler only
- Level INFO (overridable via env)
- Optional JSON format via env

Env options (optional):
- ROUTEMARK_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR (default INFO)
- ROUTEMARK_LOG_JSON=1 (JSON formatting)
"""
import json
import logging
import os
import sys
from typing import Optional

_INITIALIZED = False
_TRUTHY = ("1", "true", "yes", "on")


class _ServiceFilter(logging.Filter):
    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service
        return True


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "service": getattr(record, "service", ""),
            "message": record.getMessage(),
        }
        return json.dumps(payload, ensure_ascii=False)


def _get_level(level: Optional[str] = None) -> int:
    name = (level or os.getenv("ROUTEMARK_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(service: str = "routemark", level: Optional[str] = None,
                  json_format: Optional[bool] = None) -> None:
    """Configure the root logger once. Safe to call multiple times.

    Args:
        service: label injected into every record (e.g. 'routemark')
        level: optional level override (DEBUG/INFO/...), else from env
        json_format: force JSON output on/off, else from env
    """
    global _INITIALIZED
    if _INITIALIZED:
        return

    root = logging.getLogger()
    root.setLevel(_get_level(level))

    if json_format is None:
        json_format = os.getenv("ROUTEMARK_LOG_JSON", "").lower() in _TRUTHY
    if json_format:
        formatter = _JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(service)s] %(message)s")

    sh = logging.StreamHandler(stream=sys.stderr)
    sh.setFormatter(formatter)
    sh.addFilter(_ServiceFilter(service))
    root.addHandler(sh)

    _INITIALIZED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "routemark")
