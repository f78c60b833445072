#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Repetition Analyzer (sentence and phrase recurrence across lines)
Version: 1.2.0
License: MIT

Finds sentences and word n-grams that recur on two or more distinct lines of a
text. Matching is case-insensitive and whitespace-insensitive; reported text keeps
the casing of the first occurrence.

Pipeline
--------
1. normalize_whitespace(): CRLF -> LF, runs of tabs/spaces -> one space, trim.
2. split_into_sentences(): per line, split after . ! ? ; : when followed by
   whitespace. Abbreviations ("Mr. Smith") and decimals are not special-cased.
3. analyze_text(): sentences with >= 5 tokens are tracked whole, and every window
   of 3..8 tokens (joined length >= 12 chars) is tracked as a phrase. Keys seen on
   more than one distinct line are reported.

What's new in 1.2.0
-------------------
- analyze_text_within_limit() guards against oversized inputs (ResourceLimitExceeded).
- DetectorThresholds makes the sentence/phrase floors configurable from the CLI.

What's new in 1.1.0
-------------------
- Sorting ties on equal counts are broken case-insensitively, then by exact text,
  so output order is stable across runs.
"""

from __future__ import annotations
import argparse
import re
import sys
import unicodedata
from dataclasses import dataclass, field
from itertools import groupby
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import json_utils as json

VERSION = "1.2.0"

# -----------------------------
# Errors
# -----------------------------

class RepetitionAnalysisError(Exception):
    """Base class for analyzer errors."""


class ResourceLimitExceeded(RepetitionAnalysisError):
    """Raised when an input exceeds the configured character limit."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Input too large: {length} characters exceeds the limit of {limit} characters"
        )

# -----------------------------
# Normalization
# -----------------------------

_HORIZONTAL_WS_RE = re.compile(r"[\t ]+")
_ANY_WS_RE = re.compile(r"\s+")

def normalize_whitespace(text: str) -> str:
    cleaned = text.replace("\r\n", "\n")
    cleaned = _HORIZONTAL_WS_RE.sub(" ", cleaned)
    return cleaned.strip()

def normalize_for_key(text: str) -> str:
    """Case- and whitespace-insensitive identity used to merge occurrences."""
    return _ANY_WS_RE.sub(" ", text.strip()).lower()

# -----------------------------
# Segmentation & tokenization
# -----------------------------

# Zero-width split point after a terminator, consuming the whitespace that follows.
SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?;:])\s+")
# Unicode letters (L*) and decimal digits (Nd) plus apostrophes. Other numerics like ² or ½ split tokens.
TOKEN_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Nd"})


def is_token_char(ch: str) -> bool:
    return ch == "'" or unicodedata.category(ch) in TOKEN_CATEGORIES

def split_into_sentences(line: str) -> Iterator[str]:
    for part in SENTENCE_SPLIT_RE.split(line):
        sentence = part.strip()
        if sentence:
            yield sentence

def tokenize(sentence: str) -> List[str]:
    return ["".join(run) for is_token, run in groupby(sentence, key=is_token_char) if is_token]

def count_words(sentence: str) -> int:
    return len(tokenize(sentence))

# -----------------------------
# Occurrence tracking
# -----------------------------

@dataclass(frozen=True)
class DetectorThresholds:
    min_sentence_words: int = 5     # shorter sentences are ignored entirely
    min_phrase_words: int = 3       # smallest n-gram window
    max_phrase_words: int = 8       # largest n-gram window
    min_phrase_chars: int = 12      # joined phrase must be at least this long

    def __post_init__(self):
        if self.min_sentence_words < 1:
            raise ValueError("min_sentence_words must be >= 1")
        if self.min_phrase_words < 1:
            raise ValueError("min_phrase_words must be >= 1")
        if self.max_phrase_words < self.min_phrase_words:
            raise ValueError("max_phrase_words must be >= min_phrase_words")
        if self.min_phrase_chars < 0:
            raise ValueError("min_phrase_chars must be >= 0")


DEFAULT_THRESHOLDS = DetectorThresholds()


@dataclass
class OccurrenceRecord:
    text: str
    line_numbers: Set[int] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.line_numbers)


@dataclass(frozen=True)
class Repetition:
    text: str
    count: int
    lines: Tuple[int, ...]

    @classmethod
    def from_record(cls, record: OccurrenceRecord) -> "Repetition":
        lines = tuple(sorted(record.line_numbers))
        return cls(text=record.text, count=len(lines), lines=lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "count": self.count, "lines": list(self.lines)}


@dataclass(frozen=True)
class AnalysisResult:
    sentence_repetitions: Tuple[Repetition, ...] = ()
    phrase_repetitions: Tuple[Repetition, ...] = ()

    @property
    def total_repeated(self) -> int:
        return len(self.sentence_repetitions) + len(self.phrase_repetitions)

    def to_dict(self) -> Dict[str, Any]:
        """Wire format consumed by the upload page and the CLI."""
        return {
            "sentences": [r.to_dict() for r in self.sentence_repetitions],
            "phrases": [r.to_dict() for r in self.phrase_repetitions],
            "totalRepeated": self.total_repeated,
        }


def add_occurrence(
    occurrences: Dict[str, OccurrenceRecord],
    key: str,
    original: str,
    line_number: int,
) -> None:
    record = occurrences.get(key)
    if record is None:
        record = OccurrenceRecord(text=original.strip())
        occurrences[key] = record
    record.line_numbers.add(line_number)

def iter_phrase_windows(tokens: List[str], min_size: int, max_size: int) -> Iterator[str]:
    """Yield every contiguous window of min_size..min(max_size, len(tokens)) tokens."""
    upper = min(max_size, len(tokens))
    for size in range(min_size, upper + 1):
        for start in range(len(tokens) - size + 1):
            yield " ".join(tokens[start:start + size])

def _repeated(occurrences: Dict[str, OccurrenceRecord]) -> Tuple[Repetition, ...]:
    repeated = [rec for rec in occurrences.values() if rec.count > 1]
    repeated.sort(key=lambda rec: (-rec.count, rec.text.lower(), rec.text))
    return tuple(Repetition.from_record(rec) for rec in repeated)

# -----------------------------
# Analysis
# -----------------------------

def analyze_text(text: str, thresholds: Optional[DetectorThresholds] = None) -> AnalysisResult:
    th = thresholds or DEFAULT_THRESHOLDS
    normalized = normalize_whitespace(text)

    sentence_map: Dict[str, OccurrenceRecord] = {}
    phrase_map: Dict[str, OccurrenceRecord] = {}

    for line_number, line in enumerate(normalized.split("\n"), start=1):
        if not line.strip():
            continue

        for sentence in split_into_sentences(line):
            tokens = tokenize(sentence)
            if len(tokens) < th.min_sentence_words:
                continue

            add_occurrence(sentence_map, normalize_for_key(sentence), sentence, line_number)

            for phrase in iter_phrase_windows(tokens, th.min_phrase_words, th.max_phrase_words):
                if len(phrase) < th.min_phrase_chars:
                    continue
                add_occurrence(phrase_map, normalize_for_key(phrase), phrase, line_number)

    return AnalysisResult(
        sentence_repetitions=_repeated(sentence_map),
        phrase_repetitions=_repeated(phrase_map),
    )

def analyze_text_within_limit(
    text: str,
    max_chars: int,
    thresholds: Optional[DetectorThresholds] = None,
) -> AnalysisResult:
    """analyze_text() with an input size cap; max_chars <= 0 disables the cap."""
    if max_chars > 0 and len(text) > max_chars:
        raise ResourceLimitExceeded(len(text), max_chars)
    return analyze_text(text, thresholds)

# -----------------------------
# CLI
# -----------------------------

def read_text_from_file(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()

def build_cli_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Repetition Analyzer -> JSON. Reports sentences and phrases repeated across distinct lines."
    )
    p.add_argument("--file", type=str, default="", help="Input .txt file (utf-8).")
    p.add_argument("--text", type=str, default="", help="Raw text provided directly via CLI (overrides --file if both given).")

    p.add_argument("--min-sentence-words", type=int, default=DEFAULT_THRESHOLDS.min_sentence_words,
                   help="Sentences with fewer tokens are ignored (default: 5).")
    p.add_argument("--min-phrase-words", type=int, default=DEFAULT_THRESHOLDS.min_phrase_words,
                   help="Smallest phrase window in tokens (default: 3).")
    p.add_argument("--max-phrase-words", type=int, default=DEFAULT_THRESHOLDS.max_phrase_words,
                   help="Largest phrase window in tokens (default: 8).")
    p.add_argument("--min-phrase-chars", type=int, default=DEFAULT_THRESHOLDS.min_phrase_chars,
                   help="Phrases shorter than this many characters are ignored (default: 12).")
    p.add_argument("--max-input-chars", type=int, default=0,
                   help="Reject inputs longer than this many characters (0 = unlimited).")

    p.add_argument("--json-out", type=str, default="", help="If provided, write JSON to this path; otherwise print to stdout.")
    return p

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    if args.text:
        text = args.text
    elif args.file:
        text = read_text_from_file(args.file)
    else:
        parser.error("one of --text or --file is required")

    try:
        thresholds = DetectorThresholds(
            min_sentence_words=args.min_sentence_words,
            min_phrase_words=args.min_phrase_words,
            max_phrase_words=args.max_phrase_words,
            min_phrase_chars=args.min_phrase_chars,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        result = analyze_text_within_limit(text, args.max_input_chars, thresholds)
    except ResourceLimitExceeded as exc:
        sys.stderr.write(f"{exc}\n")
        return 2

    payload = result.to_dict()
    payload["version"] = VERSION
    out_json = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.json_out:
        with open(args.json_out, "w", encoding="utf-8") as f:
            f.write(out_json)
    else:
        print(out_json)
    return 0

if __name__ == "__main__":
    sys.exit(main())
