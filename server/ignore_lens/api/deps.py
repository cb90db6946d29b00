"""FastAPI dependencies resolving pieces of the application context."""

from __future__ import annotations

from fastapi import Depends, Request

from ignore_lens.api.context import AppContext
from ignore_lens.config import Settings
from ignore_lens.services.evaluation import EvaluationService
from ignore_lens.services.metrics import StatsTracker


def get_context(request: Request) -> AppContext:
    return request.app.state.context  # type: ignore[attr-defined]


def provide_evaluator(context: AppContext = Depends(get_context)) -> EvaluationService:
    return context.evaluator


def provide_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


def provide_stats(context: AppContext = Depends(get_context)) -> StatsTracker:
    return context.stats
