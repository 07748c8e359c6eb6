"""
API Request/Response Models (Pydantic Schemas)

Defines data validation and serialization for FastAPI endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


# Retrieval
class SemanticSearchRequest(BaseModel):
    """Request for semantic search over the scripture corpus"""

    query: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Search query (semantic, not keyword-based)",
        examples=["What is devotion?"]
    )
    top_k: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Number of results to return (1-10)"
    )


class Passage(BaseModel):
    """Individual retrieved passage"""

    text: str = Field(..., description="Passage text")
    source: str = Field(..., description="Scripture the passage comes from")
    score: float = Field(..., description="Similarity score (higher is more relevant)")


class SemanticSearchResponse(BaseModel):
    """Response from semantic search"""

    results: List[Passage] = Field(..., description="Passages, most relevant first")
    results_count: int = Field(..., description="Number of results returned")
    query: str = Field(..., description="Original query")


# Prompt composition
class PromptRequest(BaseModel):
    """Request to build the grounded system prompt"""

    query: str = Field(..., min_length=1, max_length=2000, description="User question")
    evidence: Optional[List[Passage]] = Field(
        default=None,
        description="Passages to ground on; retrieved automatically when omitted"
    )
    reply_in_english: Optional[bool] = Field(
        default=None,
        description="Force the response language; detected from the query when omitted"
    )


class PromptResponse(BaseModel):
    """Composed system prompt"""

    system_prompt: str = Field(..., description="System instruction for the chat model")
    reply_in_english: bool = Field(..., description="Whether the prompt asks for an English reply")
    evidence_count: int = Field(..., description="Number of passages included")


# Chat
class ConversationMessage(BaseModel):
    """Single message in conversation history"""

    role: str = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="Message content")


class ChatRequest(BaseModel):
    """Request for a grounded chat answer"""

    message: str = Field(..., min_length=1, max_length=2000, description="User message")
    conversation_history: Optional[List[ConversationMessage]] = Field(
        default=None,
        description="Previous conversation messages, oldest first"
    )
    top_k: int = Field(default=3, ge=1, le=10, description="Passages to retrieve")


class ChatResponse(BaseModel):
    """Grounded chat answer"""

    answer: str = Field(..., description="Model reply")
    references: List[Passage] = Field(default_factory=list, description="Passages used as grounding")
    reply_in_english: bool = Field(..., description="Whether the reply language is English")


# Health Check
class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status", examples=["healthy"])
    vector_store: str = Field(..., description="Vector store status", examples=["connected"])
    indexed_chunks: Optional[int] = Field(None, description="Points in the collection")
    version: str = Field(..., description="API version", examples=["0.1.0"])
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Current server time")


# Error Response
class ErrorResponse(BaseModel):
    """Standard error response"""

    detail: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code for client handling")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
