"""
Feature-word tokenizer.

Splits a search term into the normalized words that feature-word statistics
are keyed on: "Sugar-Free Vitamin-C for kids" -> ["sugar", "free", "vitamin", "kids"].
"""
from __future__ import annotations

import re
from typing import List, Optional

# Whitespace plus - _ , . / \ | & + ( ) [ ] { } ' " ! ? ; :
SPLIT_PATTERN = re.compile(r"""[\s\-_,./\\|&+()\[\]{}'"!?;:]+""")
NUMERIC_PATTERN = re.compile(r"^\d+$", re.ASCII)

MIN_WORD_LENGTH = 2
MAX_WORD_LENGTH = 50

STOP_WORDS = frozenset({
    "a", "an", "the", "and", "or", "for", "of", "to", "in", "on", "with", "by",
    "at", "from", "as", "is", "it", "be", "are", "was", "were", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
    "may", "might", "must", "can", "this", "that", "these", "those", "am", "not",
})


def split_to_feature_words(text: Optional[str]) -> List[str]:
    if not text:
        return []

    words = SPLIT_PATTERN.split(str(text).lower())
    return [
        w for w in words
        if MIN_WORD_LENGTH <= len(w) <= MAX_WORD_LENGTH
        and not NUMERIC_PATTERN.match(w)
        and w not in STOP_WORDS
    ]
