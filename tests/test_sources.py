from __future__ import annotations

from pathlib import Path

import pytest

from trigram_langid.errors import ConfigurationError
from trigram_langid.sources import DirectoryModelSource, MappingModelSource, load_models


def _write(directory: Path, tag: str, payload: str) -> None:
    (directory / f"{tag}.model").write_text(payload, encoding="utf-8")


def test_directory_source_lists_model_files(tmp_path: Path) -> None:
    _write(tmp_path, "en", "the_DELIMITER_1.0_ENDLINE_\n")
    _write(tmp_path, "de", "der_DELIMITER_1.0_ENDLINE_\n")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    source = DirectoryModelSource(tmp_path)

    assert source.available() == ["de", "en"]
    assert [model.tag for model in load_models(source)] == ["de", "en"]


def test_missing_directory_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        DirectoryModelSource(tmp_path / "missing").available()


def test_load_models_requires_every_listed_language() -> None:
    source = MappingModelSource({"en": "the_DELIMITER_1.0_ENDLINE_\n"})

    with pytest.raises(ConfigurationError):
        load_models(source, ["en", "de"])


def test_load_models_wraps_parse_errors() -> None:
    source = MappingModelSource({"en": "garbage_ENDLINE_\n"})

    with pytest.raises(ConfigurationError) as excinfo:
        load_models(source)
    assert "could not be parsed" in str(excinfo.value)


def test_load_models_rejects_duplicate_and_empty_sets() -> None:
    source = MappingModelSource({"en": "the_DELIMITER_1.0_ENDLINE_\n"})

    with pytest.raises(ConfigurationError):
        load_models(source, ["en", "en"])
    with pytest.raises(ConfigurationError):
        load_models(MappingModelSource({}))
