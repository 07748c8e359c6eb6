"""
FastAPI Dependencies

Process-wide RAG components, created on first request and reused.
Tests replace them through ``app.dependency_overrides``.
"""

from typing import Optional

from ..agent.chat import ScriptureChat
from ..agent.llm_config import get_llm_client
from ..rag.config import RAGConfig, get_rag_config
from ..rag.prompts import PromptComposer
from ..rag.retriever import RetrievalService, create_retrieval_service

_config: Optional[RAGConfig] = None
_retrieval_service: Optional[RetrievalService] = None
_composer: Optional[PromptComposer] = None


def get_config() -> RAGConfig:
    global _config
    if _config is None:
        _config = get_rag_config()
    return _config


def get_retrieval_service() -> RetrievalService:
    """Shared retrieval service (one vector store connection per process)."""
    global _retrieval_service
    if _retrieval_service is None:
        _retrieval_service = create_retrieval_service(get_config())
    return _retrieval_service


def get_prompt_composer() -> PromptComposer:
    global _composer
    if _composer is None:
        _composer = PromptComposer()
    return _composer


def get_scripture_chat() -> ScriptureChat:
    return ScriptureChat(
        retrieval_service=get_retrieval_service(),
        llm_client=get_llm_client(),
        composer=get_prompt_composer()
    )


def shutdown_services() -> None:
    """Close the shared vector store connection."""
    global _retrieval_service
    if _retrieval_service is not None:
        _retrieval_service.vector_store.close()
        _retrieval_service = None
