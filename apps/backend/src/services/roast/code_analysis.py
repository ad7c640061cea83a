"""Cheap text heuristics over one sampled source file."""

from __future__ import annotations

import math
import re

from schemas.roast import CodeAnalysis


CONSOLE_LOG_RE = re.compile(r"console\.(log|warn|error|info)", re.IGNORECASE)
TODO_RE = re.compile(r"TODO|FIXME|HACK|XXX", re.IGNORECASE)
MAGIC_NUMBER_RE = re.compile(r"\b\d{2,}\b")
SINGLE_LETTER_VAR_RE = re.compile(r"\b(let|const|var)\s+[a-z]\b", re.IGNORECASE)

COMMENT_PREFIXES = ("//", "/*", "*", "#")
LONG_LINE_LENGTH = 120
SNIPPET_LINES = 20
NESTING_DEPTH = 4


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def analyze_code(code: str, file_name: str) -> CodeAnalysis:
    lines = code.split("\n")
    comment_lines = sum(1 for line in lines if line.strip().startswith(COMMENT_PREFIXES))

    return CodeAnalysis(
        file_name=file_name,
        lines=len(lines),
        has_console_log=CONSOLE_LOG_RE.search(code) is not None,
        has_todos=TODO_RE.search(code) is not None,
        comment_ratio=_round_half_up(comment_lines / len(lines) * 100),
        snippet="\n".join(lines[:SNIPPET_LINES]),
        # four opening braces in sequence, not necessarily balanced
        deep_nesting=code.count("{") >= NESTING_DEPTH,
        long_lines=sum(1 for line in lines if len(line) > LONG_LINE_LENGTH),
        magic_numbers=len(MAGIC_NUMBER_RE.findall(code)),
        single_letter_vars=len(SINGLE_LETTER_VAR_RE.findall(code)),
    )
