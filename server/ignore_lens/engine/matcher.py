"""Single-pattern path matching backed by pathspec's gitignore grammar."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable

import pathspec

from ignore_lens.engine.types import ClassifiedLine, MatchResult

logger = logging.getLogger(__name__)


def _escape_for_spec(pattern: str) -> str:
    """Re-escape a decoded pattern so pathspec reads it literally.

    The classifier already removed the backslashes from ``\\#``, ``\\!`` and
    escaped trailing whitespace; pathspec would otherwise treat the leading
    character as a comment/negation marker and strip the whitespace.
    """

    if pattern.startswith(("#", "!")):
        pattern = "\\" + pattern
    stripped = pattern.rstrip()
    if stripped != pattern:
        trailing = pattern[len(stripped):]
        pattern = stripped + "".join("\\" + ch for ch in trailing)
    return pattern


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> pathspec.GitIgnoreSpec | None:
    """Compile one cleaned pattern, or ``None`` if pathspec rejects it."""

    try:
        return pathspec.GitIgnoreSpec.from_lines([_escape_for_spec(pattern)])
    except ValueError as exc:
        logger.warning("pattern_rejected", extra={"pattern": pattern, "error": str(exc)})
        return None


def _select(pattern: str, candidates: Iterable[str]) -> tuple[str, ...]:
    spec = compile_pattern(pattern)
    unique = dict.fromkeys(candidates)
    if spec is None:
        return ()
    return tuple(path for path in unique if spec.match_file(path))


def find_matches(pattern: str, candidates: Iterable[str]) -> MatchResult:
    """Return the candidates that ``pattern`` selects, ignoring negation.

    A leading ``!`` only sets ``is_negation`` on the result; the set semantics
    of negation belong to the evaluator.
    """

    is_negation = pattern.startswith("!")
    clean = pattern[1:] if is_negation else pattern
    matching = _select(clean, candidates) if clean else ()
    return MatchResult(pattern=pattern, matching_paths=matching, is_negation=is_negation)


def match_line(line: ClassifiedLine, candidates: Iterable[str]) -> MatchResult:
    """Match a classified line whose pattern is already decoded."""

    matching = _select(line.pattern, candidates) if line.is_pattern and line.pattern else ()
    return MatchResult(
        pattern=line.source_pattern,
        matching_paths=matching,
        is_negation=line.is_negation,
    )


def matches_path(pattern: str, path: str) -> bool:
    return bool(find_matches(pattern, [path]).matching_paths)
