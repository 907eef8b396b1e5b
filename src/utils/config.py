"""Application settings read from environment variables.

``load_dotenv()`` is called by the entry points before settings are read,
so a local ``.env`` file works the same as real environment variables.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_GEMINI_MODEL = "gemini/gemini-2.5-flash"
FALLBACK_GEMINI_MODEL = "gemini/gemini-2.0-flash"
# Exceeds base + retry + fallback timeouts (25 + 25 + 22 s) with margin
DEFAULT_REQUEST_TIMEOUT = 80.0


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration.

    Attributes:
        api_key: Provider credential (GEMINI_API_KEY). None when unset.
        primary_model: LiteLLM identifier of the primary model.
        fallback_model: LiteLLM identifier of the fallback model. Equal to
            ``primary_model`` disables the fallback tier.
        request_timeout: Hard ceiling in seconds for one analysis request.
        cors_origins: Raw CORS_ORIGINS value ("*" or comma-separated list).
        log_level: Root logger level name.
    """
    api_key: str | None = None
    primary_model: str = DEFAULT_GEMINI_MODEL
    fallback_model: str = FALLBACK_GEMINI_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    cors_origins: str = "*"
    log_level: str = "INFO"

    @property
    def has_fallback(self) -> bool:
        return self.fallback_model != self.primary_model


def _with_provider_prefix(model: str) -> str:
    # Bare Gemini names (as used by Google's SDK) need LiteLLM's provider prefix
    if "/" not in model and model.startswith("gemini"):
        return f"gemini/{model}"
    return model


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    primary = _with_provider_prefix(os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL)
    fallback = _with_provider_prefix(os.getenv("GEMINI_FALLBACK_MODEL") or FALLBACK_GEMINI_MODEL)
    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or None,
        primary_model=primary,
        fallback_model=fallback,
        request_timeout=float(os.getenv("ANALYZE_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)),
        cors_origins=os.getenv("CORS_ORIGINS", "*"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached Settings for the running process."""
    return load_settings()
