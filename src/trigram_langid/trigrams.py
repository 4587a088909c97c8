# SPDX-License-Identifier: AGPL-3.0-or-later
"""Character trigram statistics used as language fingerprints.

Texts are reduced to their most frequent 3-character windows, weighted by
relative frequency and scaled to unit length so that two profiles can be
compared with a plain dot product.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping

MAX_TRIGRAMS = 2500
"""Upper bound on the number of trigrams kept per profile."""

LATIN_LIMIT = 0x024F
"""Code points below this value count as Latin-range characters."""

TRIGRAM_SIZE = 3


def is_latin(char: str) -> bool:
    return ord(char) < LATIN_LIMIT


def count_trigrams(text: str) -> tuple[Dict[str, int], int, int]:
    """Count every 3-character window of *text*.

    Returns the raw counts (in first-occurrence order) together with the
    number of Latin and non-Latin characters seen across all windows. A
    character is seen once per window that covers it.
    """

    counts: Dict[str, int] = {}
    latin = 0
    non_latin = 0
    for start in range(len(text) - TRIGRAM_SIZE + 1):
        trigram = text[start : start + TRIGRAM_SIZE]
        counts[trigram] = counts.get(trigram, 0) + 1
        for char in trigram:
            if is_latin(char):
                latin += 1
            else:
                non_latin += 1
    return counts, latin, non_latin


def drop_latin(counts: Mapping[str, int]) -> Dict[str, int]:
    """Keep only trigrams made entirely of non-Latin characters."""

    return {
        trigram: count
        for trigram, count in counts.items()
        if not any(is_latin(char) for char in trigram)
    }


def top_trigrams(counts: Mapping[str, float], limit: int = MAX_TRIGRAMS) -> Dict[str, float]:
    # sorted() is stable, so equal counts keep their first-occurrence order.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return {trigram: float(count) for trigram, count in ranked[: max(0, limit)]}


def normalize_vector(vector: Mapping[str, float]) -> Dict[str, float]:
    """Scale *vector* to unit Euclidean length (empty stays empty)."""

    norm = math.sqrt(sum(value * value for value in vector.values()))
    if norm <= 0:
        return {}
    return {trigram: value / norm for trigram, value in vector.items()}


def extract_trigrams(text: str, *, limit: int = MAX_TRIGRAMS) -> Dict[str, float]:
    """Return the normalized trigram profile of *text*.

    Latin-range trigrams are discarded when non-Latin characters dominate the
    text: short Latin fragments (brand names, markup) inside e.g. Chinese text
    would otherwise outrank the native trigrams, which are spread over a much
    larger alphabet.
    """

    counts, latin, non_latin = count_trigrams(text)
    if non_latin > latin:
        counts = drop_latin(counts)
    return normalize_vector(top_trigrams(counts, limit))


__all__ = [
    "LATIN_LIMIT",
    "MAX_TRIGRAMS",
    "count_trigrams",
    "drop_latin",
    "extract_trigrams",
    "is_latin",
    "normalize_vector",
    "top_trigrams",
]
