"""Scripture RAG - retrieval-augmented grounding for a spiritual-guidance chat assistant."""

__version__ = "0.1.0"
