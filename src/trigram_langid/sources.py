# SPDX-License-Identifier: AGPL-3.0-or-later
"""Model sources that hand serialized trigram tables to the index builder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence

from .errors import ConfigurationError, MalformedModelError
from .model import MODEL_SUFFIX, LanguageModel, load_model, model_path

logger = logging.getLogger(__name__)

# Languages covered by the reference model distribution.
KNOWN_LANGUAGES = (
    "ar", "bg", "ca", "cs", "da", "de", "el", "en", "eo", "es", "fa", "fi",
    "fr", "hr", "hu", "in", "it", "iw", "ja", "ko", "lt", "nl", "no", "pt",
    "ro", "ru", "sk", "sl", "sr", "th", "tr", "uk", "vi", "zh",
)


class ModelSource(Protocol):
    """Anything that can list and read serialized language models."""

    def available(self) -> List[str]:
        ...

    def read(self, tag: str) -> str:
        ...


class DirectoryModelSource:
    """Read ``<tag>.model`` files from a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).expanduser()

    def __repr__(self) -> str:
        return f"DirectoryModelSource({str(self.directory)!r})"

    def available(self) -> List[str]:
        if not self.directory.is_dir():
            raise ConfigurationError(f"Model directory '{self.directory}' does not exist")
        return sorted(path.stem for path in self.directory.glob(f"*{MODEL_SUFFIX}") if path.is_file())

    def read(self, tag: str) -> str:
        path = model_path(self.directory, tag)
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Language model '{tag}' not found at {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Language model '{tag}' at {path} is unreadable: {exc}") from exc


class MappingModelSource:
    """Serve serialized models held in memory."""

    def __init__(self, payloads: Mapping[str, str]) -> None:
        self._payloads = dict(payloads)

    def available(self) -> List[str]:
        return sorted(self._payloads)

    def read(self, tag: str) -> str:
        try:
            return self._payloads[tag]
        except KeyError as exc:
            raise ConfigurationError(f"Language model '{tag}' is not available") from exc


def _unique_tags(tags: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for tag in tags:
        normalised = tag.strip()
        if not normalised:
            continue
        if normalised in seen:
            raise ConfigurationError(f"Language '{normalised}' is configured more than once")
        seen.add(normalised)
        ordered.append(normalised)
    return ordered


def load_models(source: ModelSource, languages: Optional[Sequence[str]] = None) -> List[LanguageModel]:
    """Load every required model from *source*.

    ``languages`` defaults to everything the source advertises. Any missing or
    malformed model aborts the load: a partial model set is never returned.
    """

    tags = _unique_tags(languages if languages is not None else source.available())
    if not tags:
        raise ConfigurationError(f"No language models available from {source!r}")
    models: List[LanguageModel] = []
    for tag in tags:
        try:
            models.append(load_model(tag, source))
        except MalformedModelError as exc:
            logger.warning("Rejecting malformed language model '%s': %s", tag, exc)
            raise ConfigurationError(f"Language model '{tag}' could not be parsed: {exc}") from exc
    return models


__all__ = [
    "DirectoryModelSource",
    "KNOWN_LANGUAGES",
    "MappingModelSource",
    "ModelSource",
    "load_models",
]
