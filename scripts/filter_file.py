#!/usr/bin/env python3

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure the project root is importable when running this script directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from wordfilter.FilterService.filter import filter_content
from wordfilter.SettingsStore.service import (
    FILTER_TERMS_OPTION,
    REPLACEMENT_TEXT_OPTION,
    JsonFileSettingsStore,
    SettingsStoreError,
)


def _load_environment(env_file: str | None) -> None:
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()


def _resolve_options(args: argparse.Namespace) -> tuple[str, str | None]:
    terms = args.terms
    replacement = args.replacement

    settings_file = args.settings_file or os.getenv("WORD_FILTER_SETTINGS_FILE", "").strip()
    if settings_file and (terms is None or replacement is None):
        store = JsonFileSettingsStore(settings_file)
        try:
            if terms is None:
                terms = store.get(FILTER_TERMS_OPTION)
            if replacement is None:
                replacement = store.get(REPLACEMENT_TEXT_OPTION)
        except SettingsStoreError as exc:
            raise SystemExit(str(exc)) from exc

    return terms or "", replacement


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replace filtered words in a text file."
    )
    parser.add_argument("input", help="Path of the file to filter, or - for stdin.")
    parser.add_argument(
        "--terms",
        default=None,
        help="Comma-separated words to filter. Overrides the settings file.",
    )
    parser.add_argument(
        "--replacement",
        default=None,
        help="Replacement text (default: *** unless the settings file sets one).",
    )
    parser.add_argument(
        "--settings-file",
        default=None,
        help="JSON settings file holding filterTerms and replacementText.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Optional path to a .env file. Defaults to .env in the project root.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the result to this path instead of stdout.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    env_file = args.env_file
    if env_file:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise SystemExit(f"Specified env file does not exist: {env_file}")

    _load_environment(env_file)
    terms, replacement = _resolve_options(args)

    if args.input == "-":
        content = sys.stdin.read()
    else:
        input_path = Path(args.input)
        if not input_path.is_file():
            raise SystemExit(f"Input file does not exist: {args.input}")
        content = input_path.read_text(encoding="utf-8")

    filtered = filter_content(content, terms, replacement) if terms else content

    if args.output:
        Path(args.output).write_text(filtered, encoding="utf-8")
    else:
        sys.stdout.write(filtered)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
