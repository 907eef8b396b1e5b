"""Sentence analysis route.

Endpoints:
- POST /analyze: Analyze a sentence into words, lemmas, parts of speech,
  morphemes, translations and multi-word groups
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_analysis_service, get_app_settings
from api.models import AnalysisResponse, AnalyzeRequest, ErrorResponse
from domain.model.errors import AnalysisError
from services.analysis_service import AnalysisService
from utils.config import Settings
from utils.llm import REQUEST_TIMEOUT_RESPONSE, get_analysis_error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse},
               502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def analyze_sentence(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
    settings: Settings = Depends(get_app_settings),
):
    """Analyze a sentence with the language model.

    The whole request, retries and fallback included, is bounded by
    ``settings.request_timeout``.

    Args:
        request: Analyze request with the sentence (already trimmed)
        service: Per-request analysis service
        settings: Application settings

    Returns:
        AnalysisResponse with one entry per token, punctuation included
    """
    try:
        result = await asyncio.wait_for(
            service.analyze(request.sentence),
            timeout=settings.request_timeout,
        )
    except asyncio.TimeoutError:
        logger.error("Analysis exceeded request deadline", extra={
            "request_timeout": settings.request_timeout,
            "attempts": len(service.attempts),
        })
        status_code, detail = REQUEST_TIMEOUT_RESPONSE
        raise HTTPException(status_code=status_code, detail=detail)
    except AnalysisError as e:
        status_code, detail = get_analysis_error_response(e)
        raise HTTPException(status_code=status_code, detail=detail)

    logger.info("Sentence analyzed", extra={
        "analysisId": result.id,
        "sentence_length": len(request.sentence),
        "word_count": len(result.words),
        "partial": result.partial,
        "attempts": [f"{a.tier}:{a.outcome}" for a in service.attempts],
    })

    return AnalysisResponse.from_domain(result)
