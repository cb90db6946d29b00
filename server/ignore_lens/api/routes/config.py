"""Presentation configuration endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ignore_lens.api.deps import provide_settings
from ignore_lens.config import Settings
from ignore_lens.models.schemas import ConfigResponse

router = APIRouter(prefix="/v1")


@router.get("/config", response_model=ConfigResponse)
async def get_config(current: Settings = Depends(provide_settings)) -> ConfigResponse:
    return ConfigResponse(
        enabled=current.enabled,
        decoration_style=current.decoration_style,
        show_counts=current.show_counts,
        scan_debounce_ms=current.scan_debounce_ms,
    )
