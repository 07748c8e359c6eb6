"""
Chat Router

Grounded question answering.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...agent.chat import ScriptureChat
from ..dependencies import get_scripture_chat
from ..schemas import ChatRequest, ChatResponse
from .rag import to_passage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    scripture_chat: ScriptureChat = Depends(get_scripture_chat)
):
    """
    Answer a message, grounded on retrieved scripture passages.

    Conversation history is optional; only the most recent messages are
    forwarded to the model.
    """
    history = [m.model_dump() for m in request.conversation_history or []]

    try:
        result = scripture_chat.answer(request.message, history=history, top_k=request.top_k)
    except Exception as e:
        logger.error(f"Chat completion failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The guide is unavailable right now. Please try again later."
        )

    return ChatResponse(
        answer=result.answer,
        references=[to_passage(r) for r in result.references],
        reply_in_english=result.replied_in_english
    )
