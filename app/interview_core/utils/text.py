"""Small lexical helpers shared by the evaluators and the feedback generator."""

from __future__ import annotations
import re


def count_words(text: str) -> int:
    return len([w for w in (text or "").split() if w])


def keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)


def count_keyword_hits(text: str, keywords: list[str]) -> int:
    """Total whole-word occurrences of every keyword in text."""
    return sum(len(keyword_pattern(kw).findall(text)) for kw in keywords)


def count_keywords_present(text: str, keywords: list[str]) -> int:
    """Number of distinct keywords that appear at least once (substring match)."""
    lower = text.lower()
    return sum(1 for kw in keywords if kw in lower)


def split_sentences(text: str) -> list[str]:
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]


def mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return max(low, min(high, value))
