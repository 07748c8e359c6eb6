"""Unit tests for grounded chat and the LLM client."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from scripture_rag.agent.chat import FALLBACK_ANSWER, ScriptureChat
from scripture_rag.agent.llm_config import LLMClient, LLMSettings
from scripture_rag.rag.vector_store import RetrievalResult

RESULTS = [
    RetrievalResult(text="ભક્તિ એ જ સાધન છે", source="Vachanamrut", score=0.91),
    RetrievalResult(text="ધર્મ પાળવો", source="Shikshapatri", score=0.84),
]


def completion_response(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


@pytest.fixture
def retrieval_service():
    service = MagicMock()
    service.retrieve.return_value = list(RESULTS)
    return service


@pytest.fixture
def llm_client():
    client = MagicMock()
    client.settings.chat_history_limit = 2
    client.complete.return_value = completion_response("Jay Swaminarayan. Bhakti is...")
    return client


class TestScriptureChat:
    """Tests for ScriptureChat.answer."""

    def test_answer_grounded_in_english(self, retrieval_service, llm_client):
        chat = ScriptureChat(retrieval_service, llm_client)

        result = chat.answer("What is devotion?", top_k=2)

        assert result.answer == "Jay Swaminarayan. Bhakti is..."
        assert result.references == RESULTS
        assert result.replied_in_english is True
        retrieval_service.retrieve.assert_called_once_with("What is devotion?", k=2)

        messages = llm_client.complete.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "[Reference 1 - Vachanamrut]" in messages[0]["content"]
        assert "Respond in English" in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "What is devotion?"}

    def test_gujarati_question(self, retrieval_service, llm_client):
        result = ScriptureChat(retrieval_service, llm_client).answer("ભક્તિ શું છે?")

        assert result.replied_in_english is False
        system_prompt = llm_client.complete.call_args.args[0][0]["content"]
        assert "Respond in Gujarati as the user asked in Gujarati." in system_prompt

    def test_answers_without_grounding(self, retrieval_service, llm_client):
        retrieval_service.retrieve.return_value = []

        result = ScriptureChat(retrieval_service, llm_client).answer("Who are you?")

        assert result.references == []
        system_prompt = llm_client.complete.call_args.args[0][0]["content"]
        assert "RELEVANT SACRED TEXTS" not in system_prompt

    def test_history_trimmed_and_filtered(self, retrieval_service, llm_client):
        history = [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "second"},
            {"role": "system", "content": "ignored"},
            {"role": "user", "content": "third"},
        ]

        ScriptureChat(retrieval_service, llm_client).answer("next", history=history)

        messages = llm_client.complete.call_args.args[0]
        assert [m["content"] for m in messages[1:]] == ["third", "next"]

    def test_empty_completion_falls_back(self, retrieval_service, llm_client):
        llm_client.complete.return_value = completion_response(None)

        result = ScriptureChat(retrieval_service, llm_client).answer("What is dharma?")

        assert result.answer == FALLBACK_ANSWER

    def test_llm_error_propagates(self, retrieval_service, llm_client):
        llm_client.complete.side_effect = RuntimeError("rate limited")

        with pytest.raises(RuntimeError):
            ScriptureChat(retrieval_service, llm_client).answer("What is dharma?")


class TestLLMClient:
    """Tests for the LiteLLM chat client."""

    def test_openai_model_string(self):
        client = LLMClient(LLMSettings(llm_provider="openai", llm_model="gpt-4o-mini"))
        assert client.model == "gpt-4o-mini"

    def test_prefixed_model_string(self):
        client = LLMClient(LLMSettings(llm_provider="anthropic", llm_model="claude-3-haiku"))
        assert client.model == "anthropic/claude-3-haiku"

    @patch("scripture_rag.agent.llm_config.completion")
    def test_complete_defaults(self, mock_completion):
        settings = LLMSettings(
            llm_provider="openai",
            llm_model="gpt-4o-mini",
            openai_api_key="sk-test",
            llm_base_url=None,
        )
        client = LLMClient(settings)

        client.complete([{"role": "user", "content": "hi"}])

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == settings.llm_max_tokens
        assert kwargs["temperature"] == settings.llm_temperature
        assert kwargs["api_key"] == "sk-test"
        assert "api_base" not in kwargs

    @patch("scripture_rag.agent.llm_config.completion")
    def test_complete_overrides(self, mock_completion):
        client = LLMClient(LLMSettings(llm_base_url="http://localhost:4000"))

        client.complete([{"role": "user", "content": "hi"}], temperature=0.0)

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["temperature"] == 0.0
        assert kwargs["api_base"] == "http://localhost:4000"
