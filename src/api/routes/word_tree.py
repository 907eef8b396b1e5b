"""Word derivation tree route.

Endpoints:
- POST /word-tree: List common words derived from a root morpheme
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_app_settings, get_llm_port
from api.models import ErrorResponse, WordTreeRequest, WordTreeResponse
from domain.model.errors import WordTreeError
from port.llm import LLMPort
from services.word_tree_service import generate_word_tree
from utils.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post(
    "/word-tree",
    response_model=WordTreeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def word_tree(
    request: WordTreeRequest,
    llm: LLMPort = Depends(get_llm_port),
    settings: Settings = Depends(get_app_settings),
):
    """Generate the derivation tree of a root morpheme."""
    try:
        result = await generate_word_tree(
            root=request.root,
            word=request.word,
            llm=llm,
            model=settings.primary_model,
        )
    except WordTreeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return WordTreeResponse.from_domain(result)
