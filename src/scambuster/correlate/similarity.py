# src/scambuster/correlate/similarity.py

from typing import Set


def word_set(text: str, min_length: int = 0) -> Set[str]:
    """Lowercased whitespace-separated words strictly longer than min_length."""
    return {w for w in (text or "").lower().split() if len(w) > min_length}


def jaccard(words1: Set[str], words2: Set[str]) -> float:
    """Jaccard index of two word sets; 0.0 when either set is empty."""
    if not words1 or not words2:
        return 0.0
    return len(words1 & words2) / len(words1 | words2)


def text_similarity(text1: str, text2: str, min_word_length: int = 3) -> float:
    """Jaccard similarity over the significant words of two descriptions."""
    return jaccard(word_set(text1, min_word_length), word_set(text2, min_word_length))
