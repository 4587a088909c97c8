# SPDX-License-Identifier: AGPL-3.0-or-later
"""Score text against the language index and pick the best match."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .index import LanguageIndex
from .trigrams import extract_trigrams

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class DetectionResult:
    """Winning language with the raw similarity score behind it."""

    language: str
    score: float = 0.0
    fallback: bool = False


class Detector:
    """Cosine-style trigram matcher bound to a single :class:`LanguageIndex`.

    Both the text profile and the reference models have unit length, so the
    sparse dot product is the cosine similarity. Detection only reads the
    index and is safe to call from many threads at once.
    """

    def __init__(self, index: LanguageIndex, *, default_language: str = DEFAULT_LANGUAGE) -> None:
        default = (default_language or "").strip()
        if not default:
            raise ValueError("default_language must be a non-empty language tag")
        self._index = index
        self._default_language = default

    @property
    def index(self) -> LanguageIndex:
        return self._index

    @property
    def default_language(self) -> str:
        return self._default_language

    def scores(self, text: str) -> Dict[str, float]:
        """Accumulate the similarity of *text* with every matching language."""

        totals: Dict[str, float] = {}
        for trigram, weight in extract_trigrams(text).items():
            for language, reference in self._index.postings_for(trigram).items():
                totals[language] = totals.get(language, 0.0) + reference * weight
        return totals

    def detect_result(self, text: str) -> DetectionResult:
        totals = self.scores(text)
        if not totals:
            return DetectionResult(self._default_language, 0.0, fallback=True)
        # Highest score wins; equal scores go to the lexicographically lowest tag.
        language, score = min(totals.items(), key=lambda item: (-item[1], item[0]))
        if score <= 0.0:
            return DetectionResult(self._default_language, 0.0, fallback=True)
        return DetectionResult(language, score)

    def detect(self, text: str) -> str:
        return self.detect_result(text).language


__all__ = ["DEFAULT_LANGUAGE", "DetectionResult", "Detector"]
