"""End-to-end evaluation of an ignore document against a file snapshot."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Sequence

from ignore_lens.engine.classifier import classify, split_lines
from ignore_lens.engine.evaluator import evaluate_document
from ignore_lens.engine.matcher import match_line
from ignore_lens.engine.types import EvaluationReport

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def scope_candidates(candidates: Iterable[str], base_dir: str | None) -> list[str]:
    """Re-root workspace paths at the directory holding a nested ignore file."""

    if not base_dir:
        return list(candidates)
    prefix = normalize_path(base_dir).strip("/")
    if not prefix:
        return list(candidates)
    prefix += "/"
    return [path[len(prefix):] for path in candidates if path.startswith(prefix) and path != prefix]


def evaluate_lines(
    raw_lines: Sequence[str],
    candidates: Iterable[str],
    *,
    strict: bool = False,
) -> EvaluationReport:
    start = time.time()
    snapshot = list(dict.fromkeys(candidates))
    classified = [classify(line) for line in raw_lines]
    pairs = [
        (line, match_line(line, snapshot) if line.is_pattern else None)
        for line in classified
    ]
    report = evaluate_document(pairs, strict=strict)
    duration_ms = int((time.time() - start) * 1000)
    logger.debug(
        "evaluation_completed",
        extra={
            "line_count": len(classified),
            "pattern_count": len(report.outcomes),
            "candidate_count": len(snapshot),
            "total_ignored": report.total_ignored,
            "duration_ms": duration_ms,
        },
    )
    return report


def evaluate_content(
    content: str,
    candidates: Iterable[str],
    *,
    strict: bool = False,
) -> EvaluationReport:
    return evaluate_lines(split_lines(content), candidates, strict=strict)
