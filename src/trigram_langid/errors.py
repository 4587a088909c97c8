# SPDX-License-Identifier: AGPL-3.0-or-later
"""Shared exceptions for language model loading and index construction."""

from __future__ import annotations

from typing import Optional


class LanguageDetectionError(RuntimeError):
    """Base class for every error raised by :mod:`trigram_langid`."""


class ConfigurationError(LanguageDetectionError):
    """Raised when the model set cannot produce a complete language index."""


class MalformedModelError(LanguageDetectionError, ValueError):
    """Raised when a persisted model record violates the trigram encoding."""

    def __init__(self, message: str, *, tag: Optional[str] = None, record: Optional[int] = None) -> None:
        location = []
        if tag:
            location.append(f"model '{tag}'")
        if record is not None:
            location.append(f"record {record}")
        prefix = ", ".join(location)
        super().__init__(f"{prefix}: {message}" if prefix else message)
        self.tag = tag
        self.record = record


class IndexSnapshotError(LanguageDetectionError):
    """Raised when a cached index snapshot cannot be used."""


__all__ = [
    "ConfigurationError",
    "IndexSnapshotError",
    "LanguageDetectionError",
    "MalformedModelError",
]
