"""
Integration tests for the RAG and chat endpoints.

The retrieval service runs against in-memory Qdrant with a keyword
embedder; the chat model is mocked.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from scripture_rag.agent.chat import ScriptureChat
from scripture_rag.api.dependencies import get_retrieval_service, get_scripture_chat
from scripture_rag.api.main import app
from scripture_rag.rag.chunker import Chunk
from scripture_rag.rag.retriever import RetrievalService
from scripture_rag.rag.vector_store import EmbeddedChunk

PASSAGES = [
    ("Vachanamrut", "Bhakti toward Bhagwan is the highest sadhana."),
    ("Vachanamrut", "Devotion with dharma pleases Bhagwan."),
    ("Swamini Vato", "The river flooded the market."),
    ("Shikshapatri", "Cooking and weather are worldly matters."),
]


@pytest.fixture
def retrieval_service(rag_config, embedding_service, vector_store):
    vector_store.clear()
    for i, (source, text) in enumerate(PASSAGES):
        chunk = Chunk(
            text=text, source=source, chunk_index=i,
            language="english", char_start=0, char_end=len(text)
        )
        vector_store.insert(
            EmbeddedChunk(chunk=chunk, embedding=embedding_service.embed_text(text), document=source)
        )
    return RetrievalService(rag_config, embedding_service, vector_store)


@pytest.fixture
def llm_client():
    client = MagicMock()
    client.settings.chat_history_limit = 10
    client.complete.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="Jay Swaminarayan."))]
    )
    return client


@pytest.fixture
def client(retrieval_service, llm_client):
    """Create test client with in-memory dependencies"""
    app.dependency_overrides[get_retrieval_service] = lambda: retrieval_service
    app.dependency_overrides[get_scripture_chat] = lambda: ScriptureChat(retrieval_service, llm_client)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["vector_store"] == "connected"
        assert data["indexed_chunks"] == len(PASSAGES)

    def test_health_with_store_down(self, client, retrieval_service):
        retrieval_service.vector_store = MagicMock()
        retrieval_service.vector_store.count.side_effect = ConnectionError("unreachable")

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["vector_store"] == "disconnected"
        assert data["indexed_chunks"] is None

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/health"


class TestSemanticSearch:
    """Test suite for /api/v1/search/semantic"""

    def test_search(self, client):
        response = client.post("/api/v1/search/semantic", json={"query": "What is devotion?", "top_k": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["results_count"] == 2
        assert data["query"] == "What is devotion?"
        assert all(r["source"] == "Vachanamrut" for r in data["results"])
        assert data["results"][0]["score"] >= data["results"][1]["score"]

    def test_search_degrades_to_empty(self, client, retrieval_service):
        retrieval_service.vector_store = MagicMock()
        retrieval_service.vector_store.search.side_effect = ConnectionError("unreachable")

        response = client.post("/api/v1/search/semantic", json={"query": "bhakti"})

        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_invalid_top_k(self, client):
        response = client.post("/api/v1/search/semantic", json={"query": "bhakti", "top_k": 0})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_empty_query(self, client):
        response = client.post("/api/v1/search/semantic", json={"query": ""})
        assert response.status_code == 422


class TestPrompt:
    """Test suite for /api/v1/prompt"""

    def test_prompt_with_retrieval(self, client):
        response = client.post("/api/v1/prompt", json={"query": "What is devotion?"})

        assert response.status_code == 200
        data = response.json()
        assert data["reply_in_english"] is True
        assert data["evidence_count"] == 3
        assert "[Reference 1 - Vachanamrut]" in data["system_prompt"]

    def test_prompt_with_given_evidence(self, client):
        response = client.post("/api/v1/prompt", json={
            "query": "ભક્તિ શું છે?",
            "evidence": [{"text": "ભક્તિ", "source": "Swamini Vato", "score": 0.5}],
        })

        data = response.json()
        assert data["evidence_count"] == 1
        assert data["reply_in_english"] is False
        assert '[Reference 1 - Swamini Vato]:\n"ભક્તિ"' in data["system_prompt"]

    def test_prompt_language_override(self, client):
        response = client.post("/api/v1/prompt", json={
            "query": "ભક્તિ શું છે?",
            "evidence": [],
            "reply_in_english": True,
        })

        data = response.json()
        assert data["reply_in_english"] is True
        assert data["evidence_count"] == 0
        assert "RELEVANT SACRED TEXTS" not in data["system_prompt"]


class TestChat:
    """Test suite for /api/v1/chat"""

    def test_chat(self, client, llm_client):
        response = client.post("/api/v1/chat", json={
            "message": "What is devotion?",
            "conversation_history": [
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Jay Swaminarayan"},
            ],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Jay Swaminarayan."
        assert data["reply_in_english"] is True
        assert len(data["references"]) == 3

        messages = llm_client.complete.call_args.args[0]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]

    def test_chat_model_failure(self, client, llm_client):
        llm_client.complete.side_effect = RuntimeError("provider down")

        response = client.post("/api/v1/chat", json={"message": "What is devotion?"})

        assert response.status_code == 502
