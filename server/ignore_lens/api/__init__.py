"""API router aggregation."""

from __future__ import annotations

from fastapi import APIRouter

from ignore_lens.api.routes import config, evaluate, metrics

api_router = APIRouter()
api_router.include_router(evaluate.router)
api_router.include_router(config.router)
api_router.include_router(metrics.router)
