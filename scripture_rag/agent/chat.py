"""
Grounded chat orchestration.

For each user message: retrieve passages, detect the question's language,
compose the system prompt and ask the chat model. Retrieval failures only
remove the grounding; the answer is still produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..rag.config import RAGConfig
from ..rag.language import is_english_query
from ..rag.prompts import PromptComposer
from ..rag.retriever import RetrievalService, create_retrieval_service
from ..rag.vector_store import RetrievalResult
from .llm_config import LLMClient, get_llm_client

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "I apologize, I cannot respond right now."


@dataclass
class ChatAnswer:
    """Model reply plus the passages it was grounded on."""
    answer: str
    references: List[RetrievalResult] = field(default_factory=list)
    replied_in_english: bool = True


class ScriptureChat:
    """Answers questions with retrieved scripture as context."""

    def __init__(
        self,
        retrieval_service: RetrievalService,
        llm_client: LLMClient,
        composer: Optional[PromptComposer] = None,
        history_limit: Optional[int] = None
    ):
        self.retrieval_service = retrieval_service
        self.llm_client = llm_client
        self.composer = composer or PromptComposer()
        if history_limit is None:
            history_limit = llm_client.settings.chat_history_limit
        self.history_limit = history_limit

    def answer(
        self,
        message: str,
        history: Optional[Sequence[Dict[str, str]]] = None,
        top_k: Optional[int] = None
    ) -> ChatAnswer:
        """
        Answer one user message.

        Args:
            message: The user's question
            history: Earlier messages as {'role', 'content'} dicts, oldest first
            top_k: Number of passages to retrieve

        Returns:
            ChatAnswer
        """
        references = self.retrieval_service.retrieve(message, k=top_k)
        reply_in_english = is_english_query(message)
        system_prompt = self.composer.compose(message, references, reply_in_english)

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(self._recent_history(history))
        messages.append({"role": "user", "content": message})

        response = self.llm_client.complete(messages)
        content = response.choices[0].message.content

        return ChatAnswer(
            answer=content or FALLBACK_ANSWER,
            references=references,
            replied_in_english=reply_in_english
        )

    def _recent_history(self, history: Optional[Sequence[Dict[str, str]]]) -> List[Dict[str, str]]:
        if not history or self.history_limit <= 0:
            return []
        return [
            {"role": m["role"], "content": m["content"]}
            for m in list(history)[-self.history_limit:]
            if m.get("role") in ("user", "assistant") and m.get("content")
        ]


def create_scripture_chat(config: Optional[RAGConfig] = None) -> ScriptureChat:
    """Build a chat orchestrator from environment configuration."""
    return ScriptureChat(
        retrieval_service=create_retrieval_service(config),
        llm_client=get_llm_client()
    )
