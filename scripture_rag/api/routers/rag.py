"""
RAG Router

Semantic search and prompt composition endpoints.
"""

import logging

from fastapi import APIRouter, Depends

from ...rag.language import is_english_query
from ...rag.prompts import PromptComposer
from ...rag.retriever import RetrievalService
from ...rag.vector_store import RetrievalResult
from ..dependencies import get_prompt_composer, get_retrieval_service
from ..schemas import (
    Passage,
    PromptRequest,
    PromptResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def to_passage(result: RetrievalResult) -> Passage:
    return Passage(text=result.text, source=result.source, score=result.score)


@router.post("/search/semantic", response_model=SemanticSearchResponse)
def semantic_search(
    request: SemanticSearchRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service)
):
    """
    Search the scripture corpus by meaning.

    Returns up to `top_k` passages, most relevant first. When the vector
    store or embedding provider is unavailable the result list is simply
    empty.
    """
    logger.info(f"Semantic search: {request.query[:100]}")

    results = retrieval_service.retrieve(request.query, k=request.top_k)

    return SemanticSearchResponse(
        results=[to_passage(r) for r in results],
        results_count=len(results),
        query=request.query
    )


@router.post("/prompt", response_model=PromptResponse)
def build_prompt(
    request: PromptRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
    composer: PromptComposer = Depends(get_prompt_composer)
):
    """
    Build the grounded system prompt for a question.

    Uses the supplied evidence as-is, or retrieves it when none is given.
    """
    if request.evidence is None:
        evidence = retrieval_service.retrieve(request.query)
    else:
        evidence = [
            RetrievalResult(text=p.text, source=p.source, score=p.score)
            for p in request.evidence
        ]

    reply_in_english = request.reply_in_english
    if reply_in_english is None:
        reply_in_english = is_english_query(request.query)

    return PromptResponse(
        system_prompt=composer.compose(request.query, evidence, reply_in_english),
        reply_in_english=reply_in_english,
        evidence_count=len(evidence)
    )
