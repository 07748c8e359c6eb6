"""
Agent module for the scripture guide.

Wraps the chat model (through LiteLLM) and grounds each answer with
retrieved scripture passages.
"""

from .llm_config import LLMClient, LLMSettings, get_llm_client
from .chat import ChatAnswer, ScriptureChat, create_scripture_chat

__all__ = [
    "LLMClient",
    "LLMSettings",
    "get_llm_client",
    "ChatAnswer",
    "ScriptureChat",
    "create_scripture_chat",
]
