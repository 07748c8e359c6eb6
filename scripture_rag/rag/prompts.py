"""
System prompt composition for the scripture guide.

Builds the system instruction handed to the chat model from three parts:
the fixed persona rules, the retrieved passages (most relevant first), and
a response-language instruction. Composition is pure: no I/O, same inputs
give the same prompt.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .language import ENGLISH, is_english_query
from .vector_store import RetrievalResult


@dataclass
class PromptContext:
    """Inputs for one prompt composition."""
    user_query: str
    relevant_results: List[RetrievalResult] = field(default_factory=list)
    response_language: str = ENGLISH

    @property
    def reply_in_english(self) -> bool:
        return self.response_language == ENGLISH


def build_prompt_context(
    query: str,
    results: Sequence[RetrievalResult],
    corpus_language: str = "gujarati",
    k: int = 3
) -> PromptContext:
    """Detect the query language and keep at most k results."""
    return PromptContext(
        user_query=query,
        relevant_results=list(results)[:k],
        response_language=ENGLISH if is_english_query(query) else corpus_language
    )


class PromptComposer:
    """Composes the RAG-grounded system prompt."""

    def __init__(
        self,
        corpus_language: str = "Gujarati",
        assistant_name: str = "Vachanamrut AI"
    ):
        self.corpus_language = corpus_language
        self.assistant_name = assistant_name

    def compose(
        self,
        query: str,
        results: Sequence[RetrievalResult],
        detected_language_is_english: bool
    ) -> str:
        """
        Build the system prompt.

        Args:
            query: User question (not embedded in the prompt; the chat
                model receives it as the user message)
            results: Retrieved passages, most relevant first
            detected_language_is_english: Reply in English when True,
                otherwise in the corpus language

        Returns:
            System prompt string
        """
        return (
            self._persona()
            + self._evidence_block(results)
            + self._language_block(detected_language_is_english)
        )

    def compose_context(self, context: PromptContext) -> str:
        return self.compose(
            context.user_query,
            context.relevant_results,
            context.reply_in_english
        )

    def _evidence_block(self, results: Sequence[RetrievalResult]) -> str:
        if not results:
            return ""

        references = "\n".join(
            f'\n[Reference {i} - {result.source}]:\n"{result.text}"\n'
            for i, result in enumerate(results, start=1)
        )
        return f"""

RELEVANT SACRED TEXTS (from authentic {self.corpus_language} sources):
{references}

IMPORTANT: Use these references to ground your response. Quote or paraphrase from these texts when relevant."""

    def _language_block(self, reply_in_english: bool) -> str:
        if reply_in_english:
            return (
                "\n\nRESPONSE LANGUAGE: The user asked in English. Respond in English, "
                f"but you may include original {self.corpus_language} terms with transliteration "
                f'(e.g., "ભકિત (bhakti)" for key concepts). If quoting from the sacred texts, '
                f"first show the {self.corpus_language} original, then provide an English translation."
            )
        return (
            f"\n\nRESPONSE LANGUAGE: Respond in {self.corpus_language} "
            f"as the user asked in {self.corpus_language}."
        )

    def _persona(self) -> str:
        name = self.assistant_name
        return f"""You are {name}, a divine spiritual guide and companion based on the eternal wisdom of the Vachanamrut and the teachings of Bhagwan Swaminarayan.

YOUR IDENTITY:
- You are NOT ChatGPT, OpenAI, or any other generic AI.
- If asked "Are you ChatGPT?" or "Who are you?", you MUST answer: "I am {name}, a spiritual guide designed to help you find peace and wisdom through the teachings of Bhagwan Swaminarayan."
- You were created to serve satsangis and seekers of truth.

YOUR KNOWLEDGE BASE:
- Your core knowledge comes from the Vachanamrut, Shikshapatri, and Swamini Vato.
- You have access to authentic {self.corpus_language} source texts - use them to provide accurate citations.
- Respond with specific references to Vachanamrut Gadhada Pratham, Gadhada Madhya, etc., when applicable.
- Use analogies and examples as used by Bhagwan Swaminarayan (like the analogy of the fish and water, or the mirror).

TONE & STYLE:
- Compassionate, humble, and respectful (use "Jay Swaminarayan" as a greeting or closing where appropriate).
- Your language should be soothing and elevating.
- Avoid generic AI robotic responses. Speak with the warmth of a sadhu or spiritual mentor.

CUSTOM RULES:
1. Never engage in political or controversial debates unrelated to spirituality.
2. If a user is distressed, offer spiritual consolation from the Vachanamrut.
3. Cite the specific source when quoting from retrieved texts (e.g., "In Vachanamrut Gadhada Pratham 27...").
4. Keep answers concise but profound.
5. Always bring the focus back to Bhagwan, devotion (Bhakti), and Dharma.
6. You have memory of this conversation. Reference previous messages when relevant."""


_default_composer = PromptComposer()


def build_enhanced_prompt(
    query: str,
    results: Sequence[RetrievalResult],
    translate_to_english: bool
) -> str:
    """Compose a system prompt with the default persona."""
    return _default_composer.compose(query, results, translate_to_english)
