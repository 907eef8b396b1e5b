"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before settings are read
load_dotenv()

# Add src to path
# main.py is at /app/src/api/main.py
# src is at /app/src, so we go up 2 levels
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import analyze, health, word_tree
from services.analysis_service import RetryPolicy
from utils.config import get_settings
from utils.llm import UNEXPECTED_ERROR_RESPONSE
from utils.logging import setup_structured_logging

settings = get_settings()

# Set up structured JSON logging
setup_structured_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Morpheme Lens API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: report configuration at startup."""
    if not settings.api_key:
        logger.warning("GEMINI_API_KEY not configured; analysis requests will fail")
    logger.info("Model configuration", extra={
        "primary_model": settings.primary_model,
        "fallback_model": settings.fallback_model,
        "fallback_enabled": settings.has_fallback,
        "request_timeout": settings.request_timeout,
    })
    worst_case = RetryPolicy.from_settings(settings).worst_case_timeout
    if settings.request_timeout <= worst_case:
        logger.warning("ANALYZE_REQUEST_TIMEOUT does not cover all retry tiers", extra={
            "request_timeout": settings.request_timeout,
            "worst_case_timeout": worst_case,
        })

    yield  # App runs here


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Sentence morphology analysis backed by a large language model",
    version=VERSION,
    lifespan=lifespan,
)

# CORS configuration for cross-origin requests from the UI
# - If CORS_ORIGINS="*": allow_credentials must be False (browsers don't support credentials with wildcard)
# - If CORS_ORIGINS is a specific list: allow_credentials can be True
if settings.cors_origins == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    # Strip whitespace from each origin to handle "origin1, origin2" format
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"error": "..."}."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 {"error": "..."}."""
    message = "Invalid request body"
    for error in exc.errors():
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            message = str(ctx_error)
            break
    logger.info("Rejected invalid request", extra={
        "path": request.url.path, "error": message,
    })
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    """Last resort: never leak internals, keep the {"error": "..."} shape."""
    logger.error("Unhandled error", extra={
        "path": request.url.path, "error": str(exc), "errorType": type(exc).__name__,
    }, exc_info=True)
    status_code, message = UNEXPECTED_ERROR_RESPONSE
    return JSONResponse(status_code=status_code, content={"error": message})


# Register routes
app.include_router(analyze.router)
app.include_router(word_tree.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Application logs go through structured logging; uvicorn access log is redundant
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
