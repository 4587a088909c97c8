from __future__ import annotations

import math

import pytest

from trigram_langid.trigrams import (
    MAX_TRIGRAMS,
    count_trigrams,
    extract_trigrams,
    is_latin,
    normalize_vector,
    top_trigrams,
)


def _norm(vector: dict[str, float]) -> float:
    return math.sqrt(sum(value * value for value in vector.values()))


def test_short_text_yields_empty_profile() -> None:
    assert extract_trigrams("") == {}
    assert extract_trigrams("ab") == {}


def test_every_window_is_counted_including_the_last() -> None:
    counts, latin, non_latin = count_trigrams("abcab")

    assert counts == {"abc": 1, "bca": 1, "cab": 1}
    assert latin == 9
    assert non_latin == 0
    assert "cab" in extract_trigrams("abcab")


def test_profile_has_unit_norm() -> None:
    profile = extract_trigrams("the quick brown fox jumps over the lazy dog, the end")

    assert _norm(profile) == pytest.approx(1.0)
    # "the" occurs three times and must outweigh single occurrences.
    assert profile["the"] > profile["qui"]


def test_profile_is_capped() -> None:
    text = "".join(chr(0x4E00 + offset) for offset in range(MAX_TRIGRAMS + 500))

    profile = extract_trigrams(text)

    assert len(profile) == MAX_TRIGRAMS
    assert _norm(profile) == pytest.approx(1.0)


def test_latin_trigrams_dropped_when_non_latin_dominates() -> None:
    text = "привет мир " * 20 + "hello world"

    profile = extract_trigrams(text)

    assert profile
    for trigram in profile:
        assert not any(is_latin(char) for char in trigram)
    assert "при" in profile


def test_latin_trigrams_kept_when_latin_dominates() -> None:
    text = "hello world " * 10 + "мир"

    profile = extract_trigrams(text)

    assert "hel" in profile
    assert "мир" in profile
    assert "o w" in profile


def test_equal_script_counts_do_not_filter() -> None:
    # Two Latin and two non-Latin characters per window set: no strict majority.
    counts, latin, non_latin = count_trigrams("aбaб")
    assert latin == non_latin
    assert set(extract_trigrams("aбaб")) == set(counts)


def test_top_trigrams_breaks_ties_by_first_occurrence() -> None:
    counts = {"aaa": 1, "bbb": 3, "ccc": 1, "ddd": 3}

    assert list(top_trigrams(counts, limit=3)) == ["bbb", "ddd", "aaa"]


def test_normalize_vector_handles_empty_and_zero() -> None:
    assert normalize_vector({}) == {}
    assert normalize_vector({"abc": 0.0}) == {}
    assert normalize_vector({"abc": 3.0, "bcd": 4.0}) == pytest.approx({"abc": 0.6, "bcd": 0.8})


def test_extraction_is_deterministic() -> None:
    text = "Die abzugebenden Aufgaben sowie der Abgabetermin sind im Übungsblatt verzeichnet."

    assert list(extract_trigrams(text).items()) == list(extract_trigrams(text).items())
