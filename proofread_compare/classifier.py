"""
Code-vs-prose content detection.

A line looks like code when it shows at least two independent code
signals (leading keyword, statement terminator, compound operator, call or
index syntax, snake/camel identifier, assignment). A buffer is code when at
least half of its non-blank lines look like code. Anything ambiguous is
treated as prose.
"""

import re

from .segmenter import split_lines

CODE_LINE_RATIO = 0.5
MIN_LINE_SIGNALS = 2

_KEYWORD = re.compile(
    r'^(?:def|class|return|import|from|function|var|let|const|if|elif|else|'
    r'for|while|do|switch|case|try|catch|except|finally|async|await|public|'
    r'private|protected|static|struct|enum|fn|func|package|#include|#define)\b'
)
_CODE_PUNCTUATION = re.compile(r'[{}()\[\];=<>]')
_TERMINATOR = re.compile(r'[;{}]$')
_COMPOUND_OPERATOR = re.compile(r'==|!=|<=|>=|=>|->|&&|\|\||\+\+|--|\+=|-=|\*=|/=|::')
_CALL_OR_INDEX = re.compile(r'[A-Za-z_]\w*(?:\.\w+)*[(\[]')
_IDENTIFIER = re.compile(r'\b[a-z]+_[a-z0-9_]+\b|\b[a-z]+[A-Z]\w*\b')
_ASSIGNMENT = re.compile(r'^[A-Za-z_][\w.\[\]]*\s*=[^=]')
_BRACKETS_ONLY = re.compile(r'^[{}()\[\];,]+$')


def _line_signals(line: str) -> int:
    signals = 0
    if _KEYWORD.match(line) and _CODE_PUNCTUATION.search(line):
        signals += 1
    if _TERMINATOR.search(line):
        signals += 1
    if _COMPOUND_OPERATOR.search(line):
        signals += 1
    if _CALL_OR_INDEX.search(line):
        signals += 1
    if _IDENTIFIER.search(line):
        signals += 1
    if _ASSIGNMENT.match(line):
        signals += 1
    return signals


def line_looks_like_code(line: str) -> bool:
    """Heuristically decide whether a single stripped line resembles code."""
    if _BRACKETS_ONLY.match(line):
        return True
    return _line_signals(line) >= MIN_LINE_SIGNALS


def detect_code_content(text: str) -> bool:
    """
    Decide whether a buffer should be compared as source code.

    Not guaranteed correct; empty or whitespace-only buffers are prose.
    """
    lines = [line.text.strip() for line in split_lines(text)]
    lines = [line for line in lines if line]
    if not lines:
        return False

    code_lines = sum(1 for line in lines if line_looks_like_code(line))
    return code_lines >= CODE_LINE_RATIO * len(lines)
