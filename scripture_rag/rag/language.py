"""
Language detection and source classification.

Both are cheap string heuristics exposed as plain callables so a stronger
classifier can be swapped in without touching the pipeline:

- detect_language(text) -> tag
- classify_source(filename) -> label
"""

import re
from pathlib import PurePath
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

ENGLISH = "english"
UNKNOWN_SOURCE = "Unknown"

_ASCII_LETTER_RE = re.compile(r"[A-Za-z]")

LanguageDetector = Callable[[str], str]
SourceClassifierFn = Callable[[str], str]


def is_english_query(text: str) -> bool:
    """
    Heuristic English check.

    True when ASCII letters make up strictly more than half of all
    characters. Exactly 50% (and the empty string) count as non-English.
    This is a character count, not linguistic analysis.
    """
    if not text:
        return False
    ascii_letters = len(_ASCII_LETTER_RE.findall(text))
    return ascii_letters > len(text) * 0.5


def detect_language(text: str, fallback: str = "gujarati") -> str:
    """Return 'english' for English-looking text, otherwise the corpus language."""
    return ENGLISH if is_english_query(text) else fallback


# Ordered rules: first match wins
DEFAULT_SOURCE_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("vachanamrut",), "Vachanamrut"),
    (("swamini", "vato"), "Swamini Vato"),
    (("shikshapatri",), "Shikshapatri"),
]


class SourceClassifier:
    """Maps a document filename onto one of a fixed set of corpus labels."""

    def __init__(
        self,
        rules: Optional[Sequence[Tuple[Iterable[str], str]]] = None,
        default: str = UNKNOWN_SOURCE
    ):
        """
        Args:
            rules: Ordered (substrings, label) pairs; a rule matches when any
                of its substrings occurs in the lowercased file stem
            default: Label for filenames no rule matches
        """
        rules = DEFAULT_SOURCE_RULES if rules is None else rules
        self.rules = [
            (tuple(s.lower() for s in substrings), label)
            for substrings, label in rules
        ]
        self.default = default

    def classify(self, filename: str) -> str:
        stem = PurePath(filename).stem.lower()
        for substrings, label in self.rules:
            if any(s in stem for s in substrings):
                return label
        return self.default

    __call__ = classify


_default_classifier = SourceClassifier()


def classify_source(filename: str) -> str:
    """Classify a filename with the default corpus rules."""
    return _default_classifier.classify(filename)
