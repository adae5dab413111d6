from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "promptstack"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_CONFIGURED_TARGET: str | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str = "WARNING", *, log_path: Optional[Path] = None) -> None:
    """Install a single handler on the ``promptstack`` logger.

    Logs go to ``log_path`` when given, otherwise to stderr (stdout stays
    reserved for command output). Idempotent per process for the same target;
    switching targets replaces the previously installed handler.
    """
    global _INSTALLED_HANDLER, _CONFIGURED_TARGET

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    pkg_logger = logging.getLogger(LOGGER_NAME)
    pkg_logger.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None and _CONFIGURED_TARGET == target:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level))
        return

    if _INSTALLED_HANDLER is not None:
        pkg_logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    if log_path:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pkg_logger.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler and restore the default level."""
    global _INSTALLED_HANDLER, _CONFIGURED_TARGET
    pkg_logger = logging.getLogger(LOGGER_NAME)
    if _INSTALLED_HANDLER is not None:
        pkg_logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    pkg_logger.setLevel(logging.NOTSET)
    _INSTALLED_HANDLER = None
    _CONFIGURED_TARGET = None


__all__ = ["LOGGER_NAME", "configure_logging", "reset_logging_for_tests"]
