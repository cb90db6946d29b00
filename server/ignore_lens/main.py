"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ignore_lens.api import api_router
from ignore_lens.api.context import AppContext
from ignore_lens.config import Settings, settings
from ignore_lens.models.schemas import EvaluateResponse
from ignore_lens.services.cache import EvaluationCache
from ignore_lens.services.evaluation import EvaluationService
from ignore_lens.services.generation import ResultStore
from ignore_lens.services.metrics import StatsTracker
from ignore_lens.utils.logging import RequestIdMiddleware, configure_logging

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    current = app_settings or settings
    stats = StatsTracker()

    evaluator = EvaluationService(
        current,
        cache=EvaluationCache(current.result_cache_ttl_s, current.result_cache_size),
        results=ResultStore[EvaluateResponse](),
        stats=stats,
    )
    context = AppContext(settings=current, evaluator=evaluator, stats=stats)

    app = FastAPI(title="Ignore Lens")
    app.state.context = context  # type: ignore[attr-defined]

    app.add_middleware(RequestIdMiddleware)
    app.include_router(api_router)

    logger.info(
        "app_created",
        extra={
            "decoration_style": current.decoration_style.value,
            "strict_matching": current.strict_matching,
        },
    )
    return app


app = create_app()
