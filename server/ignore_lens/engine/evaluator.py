"""Cumulative, order-sensitive evaluation of ignore patterns.

Patterns are applied in document order against one :class:`EvaluationState`.
Normal patterns add their matches to the ignored set, negations remove them,
and a negation cannot re-include a path whose parent directory was excluded
by an explicit directory pattern (``dist/``) because Git never descends into
such a directory. Glob-qualified directory patterns (``dist/*``, ``dist/**``)
leave the directory traversable, so they never block later negations.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ignore_lens.engine.types import (
    ClassifiedLine,
    EvaluationReport,
    EvaluationState,
    LineOutcome,
    MatchResult,
)

logger = logging.getLogger(__name__)

WILDCARD_CHARS = ("*", "?")


class InconsistentMatchError(ValueError):
    """A match result was paired with a line it was not computed for."""


def directory_release_prefix(pattern: str) -> str | None:
    """Directory prefix released by a negated ``pattern`` (``!`` removed).

    Derived from the pattern's shape alone so that directory names holding
    glob metacharacters (``[tmp]/``) and directories with no remaining files
    are still released.
    """

    if pattern.endswith("/"):
        prefix = pattern
    elif pattern.endswith("/**"):
        prefix = pattern[:-2]
    elif pattern.endswith("/*"):
        prefix = pattern[:-1]
    else:
        return None
    prefix = prefix.lstrip("/")
    return prefix or None


def directory_acquire_prefix(pattern: str, matching_paths: tuple[str, ...]) -> str | None:
    """Directory prefix an explicit directory pattern excludes, if any."""

    if not pattern.endswith("/") or not matching_paths:
        return None
    if any(char in pattern for char in WILDCARD_CHARS):
        return None
    first = matching_paths[0]
    slash = first.find("/")
    if slash == -1:
        return None
    return first[: slash + 1]


def _zero_outcome(line_index: int, line: ClassifiedLine, state: EvaluationState) -> LineOutcome:
    return LineOutcome(
        line_index=line_index,
        pattern=line.pattern,
        is_negation=line.is_negation,
        match_count=0,
        set_size_after=state.size,
    )


def _is_consistent(line: ClassifiedLine, match: MatchResult) -> bool:
    return match.is_negation == line.is_negation and match.pattern == line.source_pattern


def evaluate_line(
    line: ClassifiedLine,
    match: MatchResult | None,
    state: EvaluationState,
    *,
    line_index: int = 0,
    strict: bool = False,
) -> LineOutcome | None:
    """Apply one line to ``state`` and return its outcome.

    Blank and comment lines return ``None``. Malformed pairs leave the state
    untouched and produce a zero outcome, or raise in ``strict`` mode when the
    match result belongs to a different pattern.
    """

    if not line.is_pattern:
        return None

    if not line.pattern or match is None:
        logger.warning(
            "malformed_line_skipped",
            extra={"line_index": line_index, "raw_text": line.raw_text},
        )
        return _zero_outcome(line_index, line, state)

    if not _is_consistent(line, match):
        if strict:
            raise InconsistentMatchError(
                f"line {line_index} pattern {line.source_pattern!r} "
                f"paired with match for {match.pattern!r}"
            )
        logger.warning(
            "inconsistent_match",
            extra={
                "line_index": line_index,
                "pattern": line.source_pattern,
                "match_pattern": match.pattern,
            },
        )
        return _zero_outcome(line_index, line, state)

    action = no_action = blocked = 0

    if line.is_negation:
        # release before the per-path loop so "!dir/" is not blocked by "dir/" itself
        released = directory_release_prefix(line.pattern)
        if released is not None:
            state.ignored_dir_prefixes.discard(released)

        for path in match.matching_paths:
            if state.is_under_ignored_dir(path):
                blocked += 1
            elif path in state.ignored_set:
                state.ignored_set.remove(path)
                action += 1
            else:
                no_action += 1
    else:
        for path in match.matching_paths:
            if path in state.ignored_set:
                no_action += 1
            else:
                state.ignored_set.add(path)
                action += 1

        if line.is_directory_anchor:
            acquired = directory_acquire_prefix(line.pattern, match.matching_paths)
            if acquired is not None:
                state.ignored_dir_prefixes.add(acquired)

    return LineOutcome(
        line_index=line_index,
        pattern=line.pattern,
        is_negation=line.is_negation,
        match_count=match.match_count,
        action_count=action,
        no_action_count=no_action,
        blocked_count=blocked,
        set_size_after=state.size,
    )


def evaluate_document(
    pairs: Iterable[tuple[ClassifiedLine, MatchResult | None]],
    *,
    state: EvaluationState | None = None,
    strict: bool = False,
) -> EvaluationReport:
    """Evaluate classified lines and their match results in document order.

    ``pairs`` holds one entry per document line, so line indexes in the
    outcomes refer back to the original document. A fresh state is created
    unless one is supplied; a state must not be shared between passes.
    """

    state = state if state is not None else EvaluationState()
    outcomes: list[LineOutcome] = []
    for line_index, (line, match) in enumerate(pairs):
        outcome = evaluate_line(line, match, state, line_index=line_index, strict=strict)
        if outcome is not None:
            outcomes.append(outcome)
    return EvaluationReport(outcomes=tuple(outcomes), state=state)
