# src/batch/parser.py - v1
"""Identifier parser: raw pasted or scanned text to an ordered identifier list.

Lines that are not purely decimal digits are dropped without error, since
barcode scanners routinely inject stray characters. Order and duplicates
are kept. All functions are pure and safe to call on every keystroke.

Only ``\\n``, ``\\r\\n`` and ``\\r`` end a line. Other separators such as
the GS1 group separator ``\\x1d`` stay inside the line, which then fails
the digits-only check.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from caseintake.core.models import Identifier

IDENTIFIER_RE = re.compile(r"^\d+$", re.ASCII)
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_NON_INPUT_RE = re.compile(r"[^\d\n]", re.ASCII)


def split_lines(raw_text: str) -> list[str]:
    """Split on ``\\n``, ``\\r\\n`` and ``\\r`` only."""
    return LINE_BREAK_RE.split(raw_text)


def is_identifier(candidate: object) -> bool:
    """True for a non-empty string of ASCII digits."""
    return isinstance(candidate, str) and IDENTIFIER_RE.fullmatch(candidate) is not None


def parse_identifiers(raw_text: str) -> list[Identifier]:
    """Split ``raw_text`` into identifiers, one per line.

    >>> parse_identifiers("123\\nabc\\n\\n456\\n12a")
    ['123', '456']
    """
    identifiers: list[Identifier] = []
    for line in split_lines(raw_text):
        candidate = line.strip()
        if is_identifier(candidate):
            identifiers.append(candidate)
    return identifiers


def filter_identifiers(items: Iterable[object]) -> list[Identifier]:
    """Keep the elements of an already-split batch that are valid identifiers.

    Elements are not trimmed: ``" 12"`` is dropped like ``"abc"`` or ``""``.
    """
    return [item for item in items if is_identifier(item)]


def count_identifiers(raw_text: str) -> int:
    """Number of valid identifiers in a live input buffer."""
    return len(parse_identifiers(raw_text))


def sanitize_input(raw_text: str) -> str:
    """Keep only ASCII digits and newlines, as the input box does while typing.

    Carriage returns are normalized to newlines first so Windows line
    endings do not glue identifiers together.
    """
    normalized = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    return _NON_INPUT_RE.sub("", normalized)
