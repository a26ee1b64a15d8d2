from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException, status

from cv_ats.ai.factory import get_insight_provider
from cv_ats.core.validation import InputValidationError, validate_analyze_request
from cv_ats.schemas.analysis import Report
from cv_ats.schemas.api import AnalyzeRequest
from cv_ats.services.analysis_service import AnalysisService

router = APIRouter()


@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    provider = get_insight_provider()
    return AnalysisService(keyword_provider=provider, completeness_provider=provider)


@router.post(
    "/analyze",
    response_model=Report,
    summary="Analyze CV",
    description="Score a plain-text CV for ATS compatibility, optionally against a target job.",
)
def analyze_cv(payload: AnalyzeRequest):
    try:
        validate_analyze_request(payload)
    except InputValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": exc.field, "message": str(exc)},
        ) from exc

    return get_analysis_service().analyze(
        payload.resume_text,
        payload.job_title,
        payload.job_description,
        include_composite=payload.include_composite,
    )
