# SPDX-License-Identifier: AGPL-3.0-or-later
"""Public interface for :mod:`trigram_langid` with lightweight imports."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any, Dict, Tuple

__all__ = [
    "ConfigurationError",
    "DetectionResult",
    "Detector",
    "DirectoryModelSource",
    "IndexSnapshotError",
    "LanguageDetectionError",
    "LanguageIndex",
    "LanguageModel",
    "MalformedModelError",
    "MappingModelSource",
    "build_index",
    "default_locale",
    "detect",
    "extract_trigrams",
    "get_detector",
    "get_language_index",
    "load_model",
    "load_models",
    "reset_language_index",
    "save_model",
]

_LAZY_ATTRS: Dict[str, Tuple[str, str]] = {
    "ConfigurationError": (".errors", "ConfigurationError"),
    "DetectionResult": (".detector", "DetectionResult"),
    "Detector": (".detector", "Detector"),
    "DirectoryModelSource": (".sources", "DirectoryModelSource"),
    "IndexSnapshotError": (".errors", "IndexSnapshotError"),
    "LanguageDetectionError": (".errors", "LanguageDetectionError"),
    "LanguageIndex": (".index", "LanguageIndex"),
    "LanguageModel": (".model", "LanguageModel"),
    "MalformedModelError": (".errors", "MalformedModelError"),
    "MappingModelSource": (".sources", "MappingModelSource"),
    "build_index": (".index", "build_index"),
    "default_locale": (".locales", "default_locale"),
    "detect": (".runtime", "detect"),
    "extract_trigrams": (".trigrams", "extract_trigrams"),
    "get_detector": (".runtime", "get_detector"),
    "get_language_index": (".runtime", "get_language_index"),
    "load_model": (".model", "load_model"),
    "load_models": (".sources", "load_models"),
    "reset_language_index": (".runtime", "reset_language_index"),
    "save_model": (".model", "save_model"),
}

if TYPE_CHECKING:  # pragma: no cover - import-time only for type checkers
    from .detector import DetectionResult, Detector
    from .errors import ConfigurationError, IndexSnapshotError, LanguageDetectionError, MalformedModelError
    from .index import LanguageIndex, build_index
    from .locales import default_locale
    from .model import LanguageModel, load_model, save_model
    from .runtime import detect, get_detector, get_language_index, reset_language_index
    from .sources import DirectoryModelSource, MappingModelSource, load_models
    from .trigrams import extract_trigrams


def __getattr__(name: str) -> Any:
    try:
        module_name, attr_name = _LAZY_ATTRS[name]
    except KeyError as exc:
        raise AttributeError(name) from exc
    module = import_module(module_name, package=__name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - simple delegation
    return sorted(__all__)
