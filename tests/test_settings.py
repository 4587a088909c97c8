from pathlib import Path

import pytest
from pydantic import ValidationError

from trigram_langid.settings import DetectionSettings, get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_settings_loads_yaml_and_env(tmp_path: Path, monkeypatch) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text(
        """
models:
  models_dir: ~/langid/models
  languages: [en, de, fr]
  write_cache: false
detection:
  default_language: DE
        """,
        encoding="utf-8",
    )
    dotenv = tmp_path / ".env"
    dotenv.write_text("TRIGRAM_LANGID_DETECTION__ATTACH_COUNTRY=true\n", encoding="utf-8")

    monkeypatch.delenv("TRIGRAM_LANGID_DETECTION__ATTACH_COUNTRY", raising=False)
    monkeypatch.setenv("TRIGRAM_LANGID_DOTENV", str(dotenv))
    monkeypatch.setenv("TRIGRAM_LANGID_MODELS__CACHE_PATH", str(tmp_path / "index.jsonl"))
    settings = get_settings(path=config)

    assert settings.models.models_dir == str(Path("~/langid/models").expanduser())
    assert settings.models.languages == ("en", "de", "fr")
    assert settings.models.write_cache is False
    assert settings.models.use_cache is True
    assert settings.models.resolved_cache_path == tmp_path / "index.jsonl"
    assert settings.detection.default_language == "de"
    assert settings.detection.attach_country is True


def test_env_languages_accept_comma_lists(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TRIGRAM_LANGID_DOTENV", str(tmp_path / "missing.env"))
    monkeypatch.setenv("TRIGRAM_LANGID_MODELS__LANGUAGES", "en, ru ,")
    monkeypatch.setenv("TRIGRAM_LANGID_CACHE_DIR", str(tmp_path / "cache"))

    settings = get_settings(path=tmp_path / "absent.yaml")

    assert settings.models.languages == ("en", "ru")
    assert settings.models.models_dir is None
    assert settings.models.resolved_cache_path == tmp_path / "cache" / "language-index.jsonl"
    assert settings.detection.default_language == "en"


def test_empty_default_language_is_rejected() -> None:
    with pytest.raises(ValidationError):
        DetectionSettings(default_language="  ")


def test_non_mapping_yaml_is_rejected(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TRIGRAM_LANGID_DOTENV", str(tmp_path / "missing.env"))
    config = tmp_path / "settings.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        get_settings(path=config)
