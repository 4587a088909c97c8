from __future__ import annotations

import json
from pathlib import Path

import pytest

from trigram_langid.errors import ConfigurationError, IndexSnapshotError
from trigram_langid.index import SNAPSHOT_FORMAT, LanguageIndex, build_index
from trigram_langid.model import LanguageModel


def _models() -> list[LanguageModel]:
    return [
        LanguageModel("en", {"the": 0.9, "ing": 0.436, "ein": 0.1}, normalized=True),
        LanguageModel("de", {"der": 0.95, "ich": 0.312, "ein": 0.2}, normalized=True),
    ]


def test_postings_hold_each_language_weight() -> None:
    index = build_index(_models())

    assert index.languages == ("de", "en")
    assert dict(index.postings_for("ein")) == {"en": 0.1, "de": 0.2}
    assert dict(index.postings_for("the")) == {"en": 0.9}
    assert dict(index.postings_for("zzz")) == {}
    assert "der" in index
    assert len(index) == 5


def test_postings_are_read_only() -> None:
    index = build_index(_models())

    with pytest.raises(TypeError):
        index.postings_for("the")["fr"] = 1.0  # type: ignore[index]


def test_duplicate_language_is_rejected() -> None:
    models = _models() + [LanguageModel("en", {"and": 1.0}, normalized=True)]

    with pytest.raises(ConfigurationError):
        build_index(models)


def test_build_normalizes_raw_models() -> None:
    index = build_index([LanguageModel("en", {"the": 3.0, "ing": 4.0})])

    assert index.postings_for("the")["en"] == pytest.approx(0.6)
    assert index.postings_for("ing")["en"] == pytest.approx(0.8)


def test_disjoint_model_does_not_touch_other_postings() -> None:
    before = build_index(_models())
    after = build_index(_models() + [LanguageModel("ru", {"что": 0.8, "это": 0.6}, normalized=True)])

    for trigram, language, weight in before.entries():
        assert after.postings_for(trigram)[language] == weight
        assert "ru" not in after.postings_for(trigram)
    assert dict(after.postings_for("что")) == {"ru": 0.8}
    assert len(after) == len(before) + 2


def test_snapshot_round_trip(tmp_path: Path) -> None:
    index = build_index(_models() + [LanguageModel("zh", {"中文字": 1.0}, normalized=True)])

    path = index.write_snapshot(tmp_path / "cache" / "index.jsonl")
    restored = LanguageIndex.read_snapshot(path)

    assert restored == index
    assert restored.languages == index.languages
    header = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
    assert header["format"] == SNAPSHOT_FORMAT
    assert header["version"] == 1


def test_failed_snapshot_write_leaves_no_partial_file(tmp_path: Path, monkeypatch) -> None:
    index = build_index(_models())
    destination = tmp_path / "cache" / "index.jsonl"

    def failing_entries(self):
        yield ("the", "en", 1.0)
        raise OSError("disk full")

    monkeypatch.setattr(LanguageIndex, "entries", failing_entries)

    with pytest.raises(OSError):
        index.write_snapshot(destination)

    assert not destination.exists()
    assert list(destination.parent.iterdir()) == []


def test_snapshot_with_unknown_version_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "index.jsonl"
    path.write_text(
        json.dumps({"format": SNAPSHOT_FORMAT, "version": 99, "languages": ["en"]}) + "\n",
        encoding="utf-8",
    )

    with pytest.raises(IndexSnapshotError):
        LanguageIndex.read_snapshot(path)


def test_snapshot_with_bad_entries_is_rejected(tmp_path: Path) -> None:
    header = json.dumps({"format": SNAPSHOT_FORMAT, "version": 1, "languages": ["en"]})
    path = tmp_path / "index.jsonl"

    path.write_text(header + "\n" + json.dumps(["the", "de", 0.5]) + "\n", encoding="utf-8")
    with pytest.raises(IndexSnapshotError):
        LanguageIndex.read_snapshot(path)

    path.write_text(header + "\nnot json\n", encoding="utf-8")
    with pytest.raises(IndexSnapshotError):
        LanguageIndex.read_snapshot(path)

    path.write_text("", encoding="utf-8")
    with pytest.raises(IndexSnapshotError):
        LanguageIndex.read_snapshot(path)

    with pytest.raises(IndexSnapshotError):
        LanguageIndex.read_snapshot(tmp_path / "missing.jsonl")
