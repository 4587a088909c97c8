"""Default country per language for callers that need a full locale."""

from __future__ import annotations

from typing import Dict

# Most common country for each language, e.g. "de" -> "de_DE" rather than "de_CH".
DEFAULT_COUNTRIES: Dict[str, str] = {
    "ar": "AE",
    "bg": "BG",
    "de": "DE",
    "en": "US",
    "es": "ES",
    "fi": "FI",
    "fr": "FR",
    "hr": "HR",
    "hu": "HU",
    "is": "IS",
    "it": "IT",
    "jp": "JP",
    "lt": "LT",
    "lv": "LV",
    "mk": "MK",
    "mt": "MT",
    "nl": "NL",
    "no": "NO",
    "pl": "PL",
    "pt": "PT",
    "ro": "RO",
    "ru": "RU",
    "sk": "SK",
    "th": "TH",
    "tr": "TR",
}


def default_locale(language: str) -> str:
    """Return ``<language>_<COUNTRY>`` or *language* when no default is known."""

    country = DEFAULT_COUNTRIES.get(language.lower())
    return f"{language}_{country}" if country else language


__all__ = ["DEFAULT_COUNTRIES", "default_locale"]
