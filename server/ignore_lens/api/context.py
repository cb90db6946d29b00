"""Application context shared across routers."""

from __future__ import annotations

from dataclasses import dataclass

from ignore_lens.config import Settings
from ignore_lens.services.evaluation import EvaluationService
from ignore_lens.services.metrics import StatsTracker


@dataclass
class AppContext:
    settings: Settings
    evaluator: EvaluationService
    stats: StatsTracker
