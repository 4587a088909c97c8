"""Central configuration loader with YAML + environment support."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "TRIGRAM_LANGID_"


def _default_cache_dir() -> Path:
    base = Path(os.getenv("TRIGRAM_LANGID_CACHE_DIR", "")).expanduser()
    if base and base.name:
        return base
    return Path.home() / ".cache" / "trigram_langid"


class ModelSettings(BaseModel):
    """Where reference models live and how the built index is cached."""

    models_dir: Optional[str] = None
    languages: Optional[Tuple[str, ...]] = None
    cache_path: Optional[str] = None
    use_cache: bool = True
    write_cache: bool = True

    @field_validator("models_dir", "cache_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str]) -> Optional[str]:  # noqa: D401
        if not value:
            return None
        return str(Path(value).expanduser())

    @field_validator("languages", mode="before")
    @classmethod
    def _normalise_languages(
        cls, value: Optional[Sequence[str]] | str
    ) -> Optional[Tuple[str, ...]]:  # noqa: D401
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        languages = tuple(str(item).strip() for item in value if str(item).strip())
        return languages or None

    @property
    def resolved_models_dir(self) -> Optional[Path]:
        return Path(self.models_dir) if self.models_dir else None

    @property
    def resolved_cache_path(self) -> Path:
        if self.cache_path:
            return Path(self.cache_path)
        return _default_cache_dir() / "language-index.jsonl"


class DetectionSettings(BaseModel):
    """Defaults applied when scoring text."""

    default_language: str = "en"
    attach_country: bool = False

    @field_validator("default_language")
    @classmethod
    def _normalise_default(cls, value: str) -> str:  # noqa: D401
        tag = value.strip().lower()
        if not tag:
            raise ValueError("default_language must not be empty")
        return tag


class LangIdSettings(BaseModel):
    """Composite settings object loaded from YAML + environment variables."""

    models: ModelSettings = Field(default_factory=ModelSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)


def _default_settings_path() -> Path:
    base_dir = Path(__file__).resolve().parents[2]
    return base_dir / "configs" / "settings.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings YAML at {path} must contain a dictionary")
    return data


def _resolve_settings_path(explicit: Optional[str | Path]) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.getenv("TRIGRAM_LANGID_SETTINGS_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return _default_settings_path()


def _resolve_env_path() -> Optional[Path]:
    candidate = os.getenv("TRIGRAM_LANGID_DOTENV")
    if candidate:
        return Path(candidate).expanduser()
    base_dir = Path(__file__).resolve().parents[2]
    default = base_dir / ".env"
    return default if default.exists() else None


def _collect_env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX) :].split("__")
        if len(parts) < 2:
            # Single-segment names (SETTINGS_PATH, DOTENV, CACHE_DIR) are loader switches.
            continue
        cursor = overrides
        for idx, part in enumerate(parts):
            normalized = part.lower()
            if idx == len(parts) - 1:
                cursor[normalized] = value
            else:
                cursor = cursor.setdefault(normalized, {})  # type: ignore[assignment]
    return overrides


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> LangIdSettings:
    """Load the global settings, caching the resulting object."""

    env_path = _resolve_env_path()
    if env_path is not None:
        load_dotenv(dotenv_path=env_path, override=False)
    data = _read_yaml(_resolve_settings_path(path))
    merged = _deep_merge(data, _collect_env_overrides())
    return LangIdSettings.model_validate(merged)


def reset_settings_cache() -> None:
    """Clear the cached settings instance (useful for tests)."""

    get_settings.cache_clear()  # type: ignore[attr-defined]


__all__ = [
    "DetectionSettings",
    "LangIdSettings",
    "ModelSettings",
    "get_settings",
    "reset_settings_cache",
]
