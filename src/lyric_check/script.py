#!/usr/bin/env python3

from dataclasses import dataclass

import logging
import re
from typing import List, Union

from .config import report_non_ascii

logger = logging.getLogger(__name__)

_LINE_NUMBER = re.compile(r"^([0-9]+)\.")

_REPLACEMENTS = {
    "\u2019": "'",
    "\u2026": "...",
}


@dataclass(frozen=True)
class Heading:
    text: str


@dataclass(frozen=True)
class LineNumber:
    label: str


@dataclass(frozen=True)
class ScriptWord:
    text: str


Token = Union[Heading, LineNumber, ScriptWord]


def normalize_line(line: str) -> str:
    for old, new in _REPLACEMENTS.items():
        line = line.replace(old, new)
    return line


def _report_non_ascii(line: str, line_number: int) -> None:
    for column, char in enumerate(line, 1):
        if not char.isascii():
            logger.warning(f"Non-ASCII character {char!r} (U+{ord(char):04X}) at line {line_number}, column {column}")


def read_script(text: str) -> List[Token]:
    """
    Splits a lyric script into tokens.

    A line starting with digits and a full stop is a numbered lyric line:
    it gives a LineNumber followed by one ScriptWord per space separated
    word. Any other non-blank line is a Heading.

    Args:
        text (str): The script contents.

    Returns:
        List[Token]: Tokens in script order.
    """
    tokens: List[Token] = []
    report: bool = report_non_ascii()
    for line_number, raw in enumerate(text.lstrip("\ufeff").splitlines(), 1):
        line: str = normalize_line(raw)
        if report:
            _report_non_ascii(line, line_number)
        match = _LINE_NUMBER.match(line)
        if match:
            tokens.append(LineNumber(match.group(1)))
            tokens.extend(ScriptWord(word) for word in line[match.end():].split(" ") if word)
        elif line.strip():
            tokens.append(Heading(line.strip()))
    return tokens
