"""Request-level orchestration of document evaluation."""

from __future__ import annotations

import logging
import time

from ignore_lens.config import Settings
from ignore_lens.engine.pipeline import evaluate_content, normalize_path, scope_candidates
from ignore_lens.engine.types import EvaluationReport
from ignore_lens.models.schemas import (
    DecorationModel,
    EvaluateRequest,
    EvaluateResponse,
    EvaluationSummary,
    LineOutcomeModel,
)
from ignore_lens.services.cache import EvaluationCache, snapshot_key
from ignore_lens.services.decorations import build_decorations
from ignore_lens.services.generation import ResultStore
from ignore_lens.services.metrics import StatsTracker

logger = logging.getLogger(__name__)


def summarize(report: EvaluationReport) -> EvaluationSummary:
    return EvaluationSummary(
        pattern_lines=len(report.outcomes),
        total_ignored=report.total_ignored,
        total_shadowed=report.total_shadowed,
        total_blocked=report.total_blocked,
        no_match_lines=report.no_match_lines,
        ignored_dir_prefixes=sorted(report.state.ignored_dir_prefixes),
    )


class EvaluationService:
    """Evaluates snapshots and keeps the newest result per document."""

    def __init__(
        self,
        settings: Settings,
        *,
        cache: EvaluationCache,
        results: ResultStore[EvaluateResponse],
        stats: StatsTracker,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.results = results
        self.stats = stats

    def _render(
        self,
        req: EvaluateRequest,
        report: EvaluationReport,
        *,
        generation: int,
        cache_hit: bool,
    ) -> EvaluateResponse:
        decorations = []
        if req.include_decorations:
            decorations = [
                DecorationModel(**vars(decoration))
                for decoration in build_decorations(report, self.settings)
            ]
        return EvaluateResponse(
            document_id=req.document_id,
            generation=generation,
            cache_hit=cache_hit,
            outcomes=[
                LineOutcomeModel(**vars(outcome), is_shadowed=outcome.is_shadowed)
                for outcome in report.outcomes
            ],
            summary=summarize(report),
            decorations=decorations,
        )

    def evaluate(self, req: EvaluateRequest) -> EvaluateResponse:
        generation = self.results.begin(req.document_id)
        start = time.time()

        candidates = scope_candidates(
            (normalize_path(path) for path in req.candidates), req.base_dir
        )
        key = snapshot_key(req.content, candidates, req.base_dir)
        report = self.cache.get(key)
        cache_hit = report is not None
        if report is None:
            report = evaluate_content(
                req.content, candidates, strict=self.settings.strict_matching
            )
            self.cache.put(key, report)
        else:
            self.stats.increment_cache_hit()

        response = self._render(req, report, generation=generation, cache_hit=cache_hit)
        duration_ms = int((time.time() - start) * 1000)
        self.stats.record_evaluation(duration_ms, len(report.outcomes))

        if not self.results.commit(req.document_id, generation, response):
            self.stats.increment_stale()
            response = response.model_copy(update={"stale": True})

        logger.info(
            "evaluation_served",
            extra={
                "document_id": req.document_id,
                "generation": generation,
                "candidate_count": len(candidates),
                "pattern_lines": len(report.outcomes),
                "total_ignored": report.total_ignored,
                "cache_hit": cache_hit,
                "stale": response.stale,
                "duration_ms": duration_ms,
            },
        )
        return response

    def latest(self, document_id: str) -> EvaluateResponse | None:
        return self.results.get(document_id)
