"""Cumulative gitignore pattern evaluation."""

from .classifier import classify, parse_document, split_lines
from .evaluator import (
    InconsistentMatchError,
    directory_acquire_prefix,
    directory_release_prefix,
    evaluate_document,
    evaluate_line,
)
from .matcher import find_matches, match_line, matches_path
from .pipeline import evaluate_content, evaluate_lines, normalize_path, scope_candidates
from .types import (
    ClassifiedLine,
    EvaluationReport,
    EvaluationState,
    LineKind,
    LineOutcome,
    MatchResult,
)

__all__ = [
    "ClassifiedLine",
    "EvaluationReport",
    "EvaluationState",
    "InconsistentMatchError",
    "LineKind",
    "LineOutcome",
    "MatchResult",
    "classify",
    "directory_acquire_prefix",
    "directory_release_prefix",
    "evaluate_content",
    "evaluate_document",
    "evaluate_line",
    "evaluate_lines",
    "find_matches",
    "match_line",
    "matches_path",
    "normalize_path",
    "parse_document",
    "scope_candidates",
    "split_lines",
]
