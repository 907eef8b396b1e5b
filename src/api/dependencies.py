from functools import lru_cache

from fastapi import Depends

from adapter.external.litellm import LiteLLMAdapter
from port.llm import LLMPort
from services.analysis_service import AnalysisService, RetryPolicy
from utils.config import Settings, get_settings


@lru_cache(maxsize=4)
def _get_litellm_adapter(api_key: str | None) -> LiteLLMAdapter:
    """One adapter per credential, built on first use and shared by all requests."""
    return LiteLLMAdapter(api_key=api_key)


def get_app_settings() -> Settings:
    return get_settings()


def get_llm_port(settings: Settings = Depends(get_app_settings)) -> LLMPort:
    return _get_litellm_adapter(settings.api_key)


def get_analysis_service(
    llm: LLMPort = Depends(get_llm_port),
    settings: Settings = Depends(get_app_settings),
) -> AnalysisService:
    return AnalysisService(llm, RetryPolicy.from_settings(settings))
