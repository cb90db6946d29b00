"""Evaluation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ignore_lens.api.deps import provide_evaluator
from ignore_lens.models.schemas import EvaluateRequest, EvaluateResponse
from ignore_lens.services.evaluation import EvaluationService

router = APIRouter(prefix="/v1")


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(
    req: EvaluateRequest,
    evaluator: EvaluationService = Depends(provide_evaluator),
) -> EvaluateResponse:
    # runs in the threadpool; overlapping passes are settled by generation tokens
    return evaluator.evaluate(req)


@router.get("/documents/{document_id:path}", response_model=EvaluateResponse)
async def get_document(
    document_id: str,
    evaluator: EvaluationService = Depends(provide_evaluator),
) -> EvaluateResponse:
    latest = evaluator.latest(document_id)
    if latest is None:
        raise HTTPException(status_code=404, detail="document not evaluated")
    return latest
