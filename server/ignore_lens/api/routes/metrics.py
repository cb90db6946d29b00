"""Metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ignore_lens.api.deps import provide_stats
from ignore_lens.services.metrics import StatsTracker

router = APIRouter(prefix="/v1")


@router.get("/metrics")
async def metrics(stats: StatsTracker = Depends(provide_stats)) -> dict[str, object]:
    return stats.snapshot()
