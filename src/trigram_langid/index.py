# SPDX-License-Identifier: AGPL-3.0-or-later
"""Inverted trigram index over all loaded language models."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from .errors import ConfigurationError, IndexSnapshotError
from .model import LanguageModel

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "trigram-langid-index"
SNAPSHOT_VERSION = 1

_EMPTY_POSTINGS: Mapping[str, float] = MappingProxyType({})


class LanguageIndex:
    """Read-only mapping ``trigram -> {language: reference weight}``.

    Instances never change after construction and can be shared freely
    between threads.
    """

    __slots__ = ("_postings", "_languages")

    def __init__(self, postings: Mapping[str, Mapping[str, float]], languages: Iterable[str]) -> None:
        self._postings: Mapping[str, Mapping[str, float]] = MappingProxyType(
            {trigram: MappingProxyType(dict(entry)) for trigram, entry in postings.items()}
        )
        self._languages: Tuple[str, ...] = tuple(sorted(set(languages)))

    @classmethod
    def build(cls, models: Sequence[LanguageModel]) -> "LanguageIndex":
        """Invert *models* into a single index.

        Each language may appear only once; a repeated tag means the model set
        is misconfigured and raises :class:`ConfigurationError`.
        """

        postings: Dict[str, Dict[str, float]] = {}
        languages: List[str] = []
        for model in models:
            if model.tag in languages:
                logger.warning("Duplicate language model '%s' in model set", model.tag)
                raise ConfigurationError(f"Language '{model.tag}' appears more than once in the model set")
            languages.append(model.tag)
            for trigram, weight in model.normalize().items():
                postings.setdefault(trigram, {})[model.tag] = weight
        logger.info("Built language index with %d languages and %d trigrams", len(languages), len(postings))
        return cls(postings, languages)

    @property
    def languages(self) -> Tuple[str, ...]:
        return self._languages

    def postings_for(self, trigram: str) -> Mapping[str, float]:
        return self._postings.get(trigram, _EMPTY_POSTINGS)

    def __contains__(self, trigram: object) -> bool:
        return trigram in self._postings

    def __len__(self) -> int:
        return len(self._postings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LanguageIndex):
            return NotImplemented
        return self._languages == other._languages and dict(self._postings) == dict(other._postings)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"LanguageIndex(languages={list(self._languages)!r}, trigrams={len(self)})"

    def entries(self) -> Iterator[Tuple[str, str, float]]:
        """Yield ``(trigram, language, weight)`` triples in a stable order."""

        for trigram in sorted(self._postings):
            entry = self._postings[trigram]
            for language in sorted(entry):
                yield trigram, language, entry[language]

    # ---------------------------------------------------------------- snapshot
    def write_snapshot(self, destination: str | Path) -> Path:
        """Persist the index as a versioned JSON Lines table."""

        path = Path(destination).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        header = {"format": SNAPSHOT_FORMAT, "version": SNAPSHOT_VERSION, "languages": list(self._languages)}
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(json.dumps(header, ensure_ascii=False) + "\n")
                for triple in self.entries():
                    handle.write(json.dumps(list(triple), ensure_ascii=False) + "\n")
            tmp_path.replace(path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return path

    @classmethod
    def read_snapshot(cls, source: str | Path) -> "LanguageIndex":
        """Load an index written by :meth:`write_snapshot`."""

        path = Path(source).expanduser()
        try:
            with path.open("r", encoding="utf-8") as handle:
                lines = handle.read().split("\n")
        except OSError as exc:
            raise IndexSnapshotError(f"Index snapshot {path} is unreadable: {exc}") from exc
        if not lines[0].strip():
            raise IndexSnapshotError(f"Index snapshot {path} is empty")
        languages = _parse_header(lines[0], path)
        postings: Dict[str, Dict[str, float]] = {}
        for number, line in enumerate(lines[1:], 2):
            if not line.strip():
                continue
            trigram, language, weight = _parse_entry(line, path, number)
            if language not in languages:
                raise IndexSnapshotError(f"{path}:{number}: unknown language {language!r}")
            postings.setdefault(trigram, {})[language] = weight
        return cls(postings, languages)


def _parse_header(line: str, path: Path) -> List[str]:
    try:
        header = json.loads(line)
    except json.JSONDecodeError as exc:
        raise IndexSnapshotError(f"{path}: invalid snapshot header: {exc}") from exc
    if not isinstance(header, dict) or header.get("format") != SNAPSHOT_FORMAT:
        raise IndexSnapshotError(f"{path} is not a {SNAPSHOT_FORMAT} snapshot")
    if header.get("version") != SNAPSHOT_VERSION:
        raise IndexSnapshotError(
            f"{path} has snapshot version {header.get('version')!r}, expected {SNAPSHOT_VERSION}"
        )
    languages = header.get("languages")
    if not isinstance(languages, list) or not all(isinstance(tag, str) for tag in languages):
        raise IndexSnapshotError(f"{path}: snapshot header lists no languages")
    return languages


def _parse_entry(line: str, path: Path, number: int) -> Tuple[str, str, float]:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as exc:
        raise IndexSnapshotError(f"{path}:{number}: invalid entry: {exc}") from exc
    if not isinstance(record, list) or len(record) != 3:
        raise IndexSnapshotError(f"{path}:{number}: expected [trigram, language, weight]")
    trigram, language, weight = record
    if not isinstance(trigram, str) or len(trigram) != 3 or not isinstance(language, str):
        raise IndexSnapshotError(f"{path}:{number}: malformed trigram or language")
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise IndexSnapshotError(f"{path}:{number}: weight must be numeric")
    if not math.isfinite(weight) or weight < 0:
        raise IndexSnapshotError(f"{path}:{number}: weight must be non-negative")
    return trigram, language, float(weight)


def build_index(models: Sequence[LanguageModel]) -> LanguageIndex:
    return LanguageIndex.build(models)


__all__ = [
    "LanguageIndex",
    "SNAPSHOT_FORMAT",
    "SNAPSHOT_VERSION",
    "build_index",
]
