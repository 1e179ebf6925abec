"""Logging setup shared by the nodeboundary command-line tools.

The library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed here, by the entry points, never on import.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.settings import Settings

__all__ = ["setup_logging", "configure_from_settings", "get_logger", "get_log_path"]

_DEFAULT_LOG_DIR = Path.home() / ".nodeboundary" / "logs"
_LOG_FILE_NAME = "nodeboundary.log"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_QUIET_LOGGERS: tuple[str, ...] = ("ruamel", "jsonschema")
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    to_file: bool = True,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path | None:
    """Install a rotating file handler and/or a stderr handler on the root logger.

    Returns the log file path, or ``None`` when ``to_file`` is false. Repeated
    calls are no-ops unless ``force`` is given.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force:
        return _LOG_PATH

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = []
    log_path: Path | None = None

    if to_file:
        target_dir = _resolve_log_dir(log_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / _LOG_FILE_NAME
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        handlers.append(file_handler)

    if console:
        handlers.append(logging.StreamHandler())

    if not handlers:
        handlers.append(logging.NullHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    _quiet_dependencies(level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def configure_from_settings(settings: Settings, *, force: bool = False) -> Path | None:
    """Apply the logging fields of ``settings``; file logging needs a ``log_dir``."""

    return setup_logging(
        settings.effective_log_level,
        log_dir=settings.log_dir,
        to_file=bool(settings.log_dir or os.environ.get("NODEBOUNDARY_LOG_DIR")),
        console=settings.log_to_console,
        force=force,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger."""

    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the currently configured log file if available."""

    return _LOG_PATH


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    env_override = os.environ.get("NODEBOUNDARY_LOG_DIR")
    return Path(log_dir or env_override or _DEFAULT_LOG_DIR).expanduser()


def _quiet_dependencies(root_level: int) -> None:
    quiet_level = max(root_level, logging.WARNING)
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
