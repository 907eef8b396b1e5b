"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_app_settings, get_llm_port
from port.llm import LLMPort
from utils.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(
    llm: LLMPort = Depends(get_llm_port),
    settings: Settings = Depends(get_app_settings),
):
    """Health check endpoint with configuration status.

    Does not call the provider; only reports whether calls can be made.
    """
    configured = llm.is_configured
    health_status = {
        "status": "healthy" if configured else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {
            "llm": {
                "status": "healthy" if configured else "unhealthy",
                "message": "Credential configured" if configured else "GEMINI_API_KEY not configured",
                "primary_model": settings.primary_model,
                "fallback_model": settings.fallback_model if settings.has_fallback else None,
            }
        },
    }

    status_code = status.HTTP_200_OK if configured else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
