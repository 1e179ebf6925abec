"""Settings dataclass and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

__all__ = ["Settings", "SettingsStore", "TREE_FORMAT_CHOICES"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".nodeboundary"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "NODEBOUNDARY_LOG_LEVEL": "log_level",
    "NODEBOUNDARY_LOG_DIR": "log_dir",
    "NODEBOUNDARY_TREE_FORMAT": "tree_format",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "NODEBOUNDARY_DEBUG_LOGGING": "debug_logging",
    "NODEBOUNDARY_LOG_TO_CONSOLE": "log_to_console",
    "NODEBOUNDARY_ANCHOR_LEAVES_OUTSIDE": "anchor_leaves_outside",
    "NODEBOUNDARY_NORMALIZE_EXCLUSIVE": "normalize_exclusive",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "NODEBOUNDARY_MAX_WALK_STEPS": "max_walk_steps",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
TREE_FORMAT_CHOICES: tuple[str, ...] = ("auto", "json", "yaml", "xml")


@dataclass(slots=True)
class Settings:
    """User-configurable settings for the command-line tools."""

    log_level: str = "INFO"
    debug_logging: bool = False
    log_dir: str | None = None
    log_to_console: bool = True
    anchor_leaves_outside: bool = True
    normalize_exclusive: bool = True
    tree_format: str = "auto"
    max_walk_steps: int = 10_000

    @property
    def effective_log_level(self) -> int:
        """Return the numeric logging level, honouring ``debug_logging``."""

        if self.debug_logging:
            return logging.DEBUG
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.INFO


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(data))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        settings = self._apply_env_overrides(settings)
        if settings.tree_format not in TREE_FORMAT_CHOICES:
            LOGGER.warning("Unknown tree format %r; falling back to auto", settings.tree_format)
            settings = replace(settings, tree_format="auto")
        return settings

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}
