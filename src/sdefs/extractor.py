# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extraction of conditional compilation symbol names from source lines."""

import logging
import re
from typing import Callable

logger = logging.getLogger(__name__)

EXPRESSION_SEPARATOR = re.compile(r"\|\||&&")
NON_IDENTIFIER_CHAR = re.compile(r"[^a-zA-Z0-9_]")
TRIM_CHARS = "!() \t\n\r"


def extract_symbols(line: str, marker: str, emit: Callable[[str], None]) -> int:
    """Extract symbol names that follow ``marker`` on one source line.

    Only the first case-insensitive occurrence of the marker is used. The
    remainder of the line is split on ``||`` and ``&&``; every fragment is
    trimmed of negation, parentheses and whitespace and then cut at the first
    non-identifier character, so ``FOO==1`` or ``FOO // note`` yield ``FOO``.

    Args:
        line: One line of source text.
        marker: Literal text preceding the region of interest.
        emit: Callback invoked once per symbol name, left to right.

    Returns:
        Number of symbol names passed to ``emit``.
    """
    match = re.search(re.escape(marker), line, flags=re.IGNORECASE)
    if match is None:
        return 0

    count = 0
    for fragment in EXPRESSION_SEPARATOR.split(line[match.end() :]):
        if not fragment:
            continue
        name = _symbol_name(fragment)
        if name:
            count += 1
            emit(name)
    return count


def _symbol_name(fragment: str) -> str:
    name = fragment.strip(TRIM_CHARS)
    invalid = NON_IDENTIFIER_CHAR.search(name)
    if invalid is None:
        return name
    return name[: invalid.start()]
