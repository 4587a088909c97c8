# SPDX-License-Identifier: AGPL-3.0-or-later
"""Per-language reference models and their textual encoding."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, Mapping, Tuple

from .errors import ConfigurationError, MalformedModelError
from .trigrams import MAX_TRIGRAMS, extract_trigrams, normalize_vector

if TYPE_CHECKING:  # pragma: no cover - import-time only for type checkers
    from .sources import ModelSource

logger = logging.getLogger(__name__)

MODEL_SUFFIX = ".model"
FIELD_DELIMITER = "_DELIMITER_"
RECORD_SEPARATOR = "_ENDLINE_\n"


@dataclass(frozen=True)
class LanguageModel:
    """Reference trigram profile of one language."""

    tag: str
    trigrams: Mapping[str, float]
    normalized: bool = False

    # Frozen but unhashable: the trigram mapping is a MappingProxyType.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        tag = (self.tag or "").strip()
        if not tag:
            raise ValueError("LanguageModel requires a non-empty language tag")
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "trigrams", MappingProxyType(dict(self.trigrams)))

    @classmethod
    def from_text(cls, tag: str, corpus: str, *, limit: int = MAX_TRIGRAMS) -> "LanguageModel":
        """Build a reference model from a training corpus."""

        return cls(tag, extract_trigrams(corpus, limit=limit), normalized=True)

    def normalize(self) -> "LanguageModel":
        """Return the unit-length version of this model.

        Subsequent calls on the result are no-ops and return it unchanged.
        """

        if self.normalized:
            return self
        return LanguageModel(self.tag, normalize_vector(self.trigrams), normalized=True)

    def __len__(self) -> int:
        return len(self.trigrams)

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self.trigrams.items())


def _parse_weight(raw: str, *, tag: str, record: int) -> float:
    try:
        weight = float(raw)
    except ValueError as exc:
        raise MalformedModelError(f"invalid weight {raw!r}", tag=tag, record=record) from exc
    if not math.isfinite(weight) or weight < 0:
        raise MalformedModelError(f"weight must be a non-negative number, got {raw!r}", tag=tag, record=record)
    return weight


def parse_model(tag: str, payload: str) -> LanguageModel:
    """Deserialize the ``trigram_DELIMITER_weight_ENDLINE_`` encoding.

    Persisted models are produced already trimmed and normalized, so the
    result is flagged as normalized without re-running the extractor.
    """

    trigrams: Dict[str, float] = {}
    for number, record in enumerate(payload.split(RECORD_SEPARATOR), 1):
        if not record:
            continue
        trigram, delimiter, raw_weight = record.rpartition(FIELD_DELIMITER)
        if not delimiter:
            raise MalformedModelError("missing field delimiter", tag=tag, record=number)
        if len(trigram) != 3:
            raise MalformedModelError(f"expected a 3-character trigram, got {trigram!r}", tag=tag, record=number)
        if trigram in trigrams:
            raise MalformedModelError(f"duplicate trigram {trigram!r}", tag=tag, record=number)
        trigrams[trigram] = _parse_weight(raw_weight, tag=tag, record=number)
    return LanguageModel(tag, trigrams, normalized=True)


def dump_model(model: LanguageModel) -> str:
    """Serialize *model*, normalizing it first when required."""

    model = model.normalize()
    return "".join(
        f"{trigram}{FIELD_DELIMITER}{weight!r}{RECORD_SEPARATOR}" for trigram, weight in model.items()
    )


def model_path(directory: str | Path, tag: str) -> Path:
    return Path(directory) / f"{tag}{MODEL_SUFFIX}"


def load_model(tag: str, source: "ModelSource") -> LanguageModel:
    """Locate *tag* in *source* and parse it.

    Missing or unreadable models raise :class:`ConfigurationError`, malformed
    records raise :class:`MalformedModelError`.
    """

    payload = source.read(tag)
    model = parse_model(tag, payload)
    if not len(model):
        raise ConfigurationError(f"Language model '{tag}' contains no trigrams")
    logger.debug("Loaded language model '%s' with %d trigrams", tag, len(model))
    return model


def save_model(model: LanguageModel, directory: str | Path) -> Path:
    """Write *model* to ``<directory>/<tag>.model`` and return the path."""

    path = model_path(directory, model.tag)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the record separator byte-exact on every platform.
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(dump_model(model))
    return path


__all__ = [
    "FIELD_DELIMITER",
    "LanguageModel",
    "MODEL_SUFFIX",
    "RECORD_SEPARATOR",
    "dump_model",
    "load_model",
    "model_path",
    "parse_model",
    "save_model",
]
