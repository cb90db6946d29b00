"""Decoding of raw ignore-file lines into blank, comment and pattern lines."""

from __future__ import annotations

import re

from ignore_lens.engine.types import ClassifiedLine, LineKind

_ESCAPED_TRAILING_WS = re.compile(r"\\([ \t])$")
_LINE_BREAK = re.compile(r"\r?\n")


def _strip_trailing(text: str) -> str:
    escaped = _ESCAPED_TRAILING_WS.search(text)
    if escaped:
        # keep exactly the escaped whitespace character
        return text[:-2] + escaped.group(1)
    return text.rstrip()


def classify(raw_line: str) -> ClassifiedLine:
    """Classify one line following gitignore escape rules.

    Only a ``#`` in column zero starts a comment. ``\\#`` and ``\\!`` lose
    their backslash and keep the literal character as part of the pattern.
    """

    text = _strip_trailing(raw_line)
    if not text:
        return ClassifiedLine(kind=LineKind.BLANK, raw_text=raw_line)

    if text.startswith("#"):
        return ClassifiedLine(kind=LineKind.COMMENT, raw_text=raw_line)

    if text.startswith("\\#"):
        text = text[1:]

    is_negation = False
    if text.startswith("!"):
        is_negation = True
        text = text[1:]
    elif text.startswith("\\!"):
        text = text[1:]

    if not text:
        return ClassifiedLine(kind=LineKind.BLANK, raw_text=raw_line)

    return ClassifiedLine(
        kind=LineKind.PATTERN,
        pattern=text,
        is_negation=is_negation,
        is_directory_anchor=text.endswith("/"),
        raw_text=raw_line,
    )


def split_lines(content: str) -> list[str]:
    return _LINE_BREAK.split(content)


def parse_document(content: str) -> list[ClassifiedLine]:
    return [classify(line) for line in split_lines(content)]
