# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line interface for trigram language detection."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError
from .index import LanguageIndex
from .locales import default_locale
from .model import LanguageModel, save_model
from .runtime import get_detector
from .settings import DetectionSettings, LangIdSettings, get_settings
from .sources import KNOWN_LANGUAGES, DirectoryModelSource, load_models


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Identify the language of text from character trigrams")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log index construction details")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", help="Detect the language of a text")
    detect_parser.add_argument("text", nargs="?", help="Text to analyse (defaults to stdin)")
    detect_parser.add_argument("--file", type=Path, help="Read the text from a UTF-8 file")
    detect_parser.add_argument("--models", type=Path, help="Directory containing <tag>.model files")
    detect_parser.add_argument("--default", help="Language returned when nothing matches")
    detect_parser.add_argument(
        "--locale",
        action="store_true",
        help="Print a full locale such as de_DE instead of the bare language tag",
    )
    detect_parser.add_argument("--score", action="store_true", help="Print the result as JSON with its score")

    train_parser = subparsers.add_parser("train", help="Build a reference model from a corpus")
    train_parser.add_argument("--tag", required=True, help="Language tag of the corpus, e.g. 'de'")
    train_parser.add_argument("--corpus", type=Path, required=True, help="UTF-8 training corpus")
    train_parser.add_argument("--out", type=Path, required=True, help="Directory receiving <tag>.model")

    index_parser = subparsers.add_parser("build-index", help="Write an index snapshot for a model directory")
    index_parser.add_argument("--models", type=Path, required=True, help="Directory containing <tag>.model files")
    index_parser.add_argument("--out", type=Path, required=True, help="Destination snapshot file")
    index_parser.add_argument("--languages", nargs="+", help="Restrict the index to these language tags")

    languages_parser = subparsers.add_parser("languages", help="List the languages of a model directory")
    languages_parser.add_argument("--models", type=Path, required=True, help="Directory containing <tag>.model files")
    languages_parser.add_argument(
        "--missing",
        action="store_true",
        help="List reference languages that have no model in the directory instead",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "detect":
            return _handle_detect(args)
        if args.command == "train":
            return _handle_train(args)
        if args.command == "build-index":
            index = LanguageIndex.build(load_models(DirectoryModelSource(args.models), args.languages))
            path = index.write_snapshot(args.out)
            print(f"{len(index.languages)} language(s), {len(index)} trigram(s) written to {path}")
            return 0
        if args.command == "languages":
            available = DirectoryModelSource(args.models).available()
            tags = [tag for tag in KNOWN_LANGUAGES if tag not in available] if args.missing else available
            for tag in tags:
                print(tag)
            return 0
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 3
    raise ValueError(f"Unhandled command: {args.command}")


def _handle_detect(args: argparse.Namespace) -> int:
    try:
        text = _resolve_text(args.text, args.file)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    try:
        settings = _detect_settings(get_settings(), models=args.models, default=args.default)
    except ValidationError as exc:
        print(f"Invalid --default language: {exc.errors()[0]['msg']}", file=sys.stderr)
        return 2
    result = get_detector(settings).detect_result(text)
    language = result.language
    if args.locale or settings.detection.attach_country:
        language = default_locale(language)
    if args.score:
        payload = {"language": language, "score": result.score, "fallback": result.fallback}
        json.dump(payload, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        print(language)
    return 0


def _handle_train(args: argparse.Namespace) -> int:
    corpus_path = args.corpus.expanduser()
    try:
        corpus = corpus_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Failed to read corpus '{corpus_path}': {exc}", file=sys.stderr)
        return 2
    model = LanguageModel.from_text(args.tag, corpus)
    if not len(model):
        print(f"Corpus '{corpus_path}' is too short to build a model", file=sys.stderr)
        return 2
    path = save_model(model, args.out.expanduser())
    print(f"{len(model)} trigram(s) written to {path}")
    return 0


def _detect_settings(base: LangIdSettings, *, models: Path | None, default: str | None) -> LangIdSettings:
    settings = base
    if models is not None:
        model_settings = settings.models.model_copy(
            update={"models_dir": str(models.expanduser()), "use_cache": False, "write_cache": False}
        )
        settings = settings.model_copy(update={"models": model_settings})
    if default is not None:
        detection = DetectionSettings(
            default_language=default, attach_country=settings.detection.attach_country
        )
        settings = settings.model_copy(update={"detection": detection})
    return settings


def _resolve_text(text: str | None, path: Path | None) -> str:
    if text is not None and path is not None:
        raise ValueError("Provide either TEXT or --file, not both")
    if text is not None:
        return text
    if path is not None:
        try:
            return path.expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ValueError(f"Failed to read '{path}': {exc}") from exc
    return sys.stdin.read()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
