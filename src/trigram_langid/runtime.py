# SPDX-License-Identifier: AGPL-3.0-or-later
"""Build the language index once per configuration and share it."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Optional, Set, Tuple

from .detector import Detector
from .errors import ConfigurationError, IndexSnapshotError
from .index import LanguageIndex
from .settings import LangIdSettings, ModelSettings, get_settings
from .sources import DirectoryModelSource, load_models

logger = logging.getLogger(__name__)


def _expected_languages(settings: ModelSettings) -> Optional[Set[str]]:
    if settings.languages is not None:
        return set(settings.languages)
    models_dir = settings.resolved_models_dir
    if models_dir is None or not models_dir.is_dir():
        # Snapshot-only deployments ship the cache without model files.
        return None
    return set(DirectoryModelSource(models_dir).available())


def _read_cached_index(settings: ModelSettings) -> Optional[LanguageIndex]:
    path = settings.resolved_cache_path
    if not settings.use_cache or not path.exists():
        return None
    try:
        index = LanguageIndex.read_snapshot(path)
    except IndexSnapshotError as exc:
        logger.warning("Ignoring language index snapshot: %s", exc)
        return None
    expected = _expected_languages(settings)
    if expected is not None and set(index.languages) != expected:
        logger.info("Language index snapshot at %s covers a different model set; rebuilding", path)
        return None
    logger.debug("Loaded language index snapshot from %s", path)
    return index


def _write_cached_index(index: LanguageIndex, settings: ModelSettings) -> None:
    path = settings.resolved_cache_path
    try:
        index.write_snapshot(path)
    except OSError as exc:
        logger.warning("Could not write language index snapshot to %s: %s", path, exc)
        return
    logger.info("Wrote language index snapshot to %s", path)


def load_language_index(settings: Optional[ModelSettings] = None) -> LanguageIndex:
    """Load the index from its snapshot or rebuild it from the model files."""

    if settings is None:
        settings = get_settings().models

    cached = _read_cached_index(settings)
    if cached is not None:
        return cached

    models_dir = settings.resolved_models_dir
    if models_dir is None:
        raise ConfigurationError(
            "No language model directory configured; set models.models_dir "
            "or TRIGRAM_LANGID_MODELS__MODELS_DIR"
        )
    source = DirectoryModelSource(models_dir)
    index = LanguageIndex.build(load_models(source, settings.languages))
    if settings.write_cache:
        _write_cached_index(index, settings)
    return index


_IndexKey = Tuple[Optional[str], Optional[Tuple[str, ...]], str, bool]

_INDEX_CACHE: Dict[_IndexKey, LanguageIndex] = {}
_INDEX_LOCK = Lock()


def _cache_key(settings: ModelSettings) -> _IndexKey:
    return (
        settings.models_dir,
        settings.languages,
        str(settings.resolved_cache_path),
        settings.use_cache,
    )


def get_language_index(settings: Optional[LangIdSettings] = None) -> LanguageIndex:
    """Return the shared index for *settings*, building it on first use."""

    if settings is None:
        settings = get_settings()
    key = _cache_key(settings.models)
    with _INDEX_LOCK:
        index = _INDEX_CACHE.get(key)
        if index is None:
            index = load_language_index(settings.models)
            _INDEX_CACHE[key] = index
        return index


def get_detector(settings: Optional[LangIdSettings] = None) -> Detector:
    if settings is None:
        settings = get_settings()
    return Detector(get_language_index(settings), default_language=settings.detection.default_language)


def reset_language_index() -> None:
    with _INDEX_LOCK:
        _INDEX_CACHE.clear()


def detect(text: str) -> str:
    """Detect the language of *text* with the configured model set."""

    return get_detector().detect(text)


__all__ = [
    "detect",
    "get_detector",
    "get_language_index",
    "load_language_index",
    "reset_language_index",
]
