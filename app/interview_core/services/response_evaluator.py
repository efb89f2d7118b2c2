"""
Purpose: Score a single candidate answer on depth, clarity, completeness and
(technical questions only) technical accuracy, and decide whether the
interviewer should probe with a follow-up.

All scores are surface lexical heuristics clamped to [0, 10]; the evaluator
is pure and keeps no state between calls.

Testing: feed hand-written answers and assert score bands and the
follow-up flag/reason.
"""

from __future__ import annotations
import math
import re
from typing import Optional

from ..models import (
    CandidateResponse,
    InterviewQuestion,
    QuestionType,
    ResponseEvaluation,
)
from ..utils.text import clamp, count_keyword_hits, split_sentences

FOLLOW_UP_THRESHOLD = 6
CLARITY_FOLLOW_UP_THRESHOLD = 4
MIN_WORDS_TECHNICAL = 30
MIN_WORDS_BEHAVIORAL = 50

TECHNICAL_KEYWORDS = [
    "algorithm", "complexity", "performance", "optimization", "architecture",
    "design", "pattern", "implementation", "database", "api", "framework",
    "testing", "deployment", "scalability", "security", "authentication",
    "authorization", "cache", "queue", "microservice", "container", "cloud",
    "distributed", "concurrent", "asynchronous", "synchronous", "protocol",
    "interface", "abstraction", "inheritance", "polymorphism", "encapsulation",
]

STRUCTURE_INDICATORS = [
    "first", "second", "third", "finally", "then", "next", "after",
    "because", "therefore", "however", "additionally", "furthermore",
    "for example", "such as", "specifically", "in particular",
]

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "data structures": ["array", "list", "tree", "graph", "hash", "stack", "queue", "heap", "linked list"],
    "algorithms": ["sort", "search", "traverse", "recursive", "iterative", "complexity", "big o", "time", "space"],
    "system design": ["scalability", "availability", "consistency", "partition", "load balancer", "cache", "database", "microservice"],
    "database": ["sql", "query", "index", "transaction", "normalization", "join", "schema", "optimization"],
    "api development": ["rest", "endpoint", "http", "request", "response", "authentication", "authorization", "versioning"],
    "javascript": ["closure", "promise", "async", "callback", "prototype", "event", "dom", "react", "node"],
    "machine learning": ["model", "training", "feature", "prediction", "classification", "regression", "neural", "accuracy"],
    "statistics": ["mean", "median", "variance", "distribution", "hypothesis", "correlation", "regression", "sample"],
    "infrastructure": ["server", "deployment", "container", "kubernetes", "docker", "cloud", "terraform", "automation"],
    "ui development": ["component", "responsive", "css", "layout", "accessibility", "performance", "render", "state"],
}

_EXAMPLE_RX = re.compile(r"for example|such as|like|specifically|instance")
_PROBLEM_RX = re.compile(r"problem|challenge|issue|difficulty")
_SOLUTION_RX = re.compile(r"solution|approach|resolved|fixed|implemented")
_OUTCOME_RX = re.compile(r"result|outcome|impact|success|improved")


def category_keywords(category: str) -> list[str]:
    """Keyword list for a question category (mutual substring match on the key)."""
    cat = (category or "").lower()
    for key, keywords in CATEGORY_KEYWORDS.items():
        if key in cat or cat in key:
            return keywords
    return TECHNICAL_KEYWORDS[:10]


class ResponseEvaluator:
    def evaluate(
        self, question: InterviewQuestion, response: CandidateResponse
    ) -> ResponseEvaluation:
        depth = self.assess_depth(response, question)
        clarity = self.assess_clarity(response)
        completeness = self.assess_completeness(response, question.expected_elements or [])
        accuracy: Optional[float] = None
        if question.type == QuestionType.TECHNICAL:
            accuracy = self.assess_technical_accuracy(response, question)

        reasons = follow_up_reasons(depth, clarity, completeness, accuracy)
        return ResponseEvaluation(
            question_id=question.id,
            depth_score=depth,
            clarity_score=clarity,
            completeness_score=completeness,
            needs_follow_up=bool(reasons),
            follow_up_reason=", ".join(reasons) if reasons else None,
            technical_accuracy=accuracy,
        )

    def assess_depth(
        self, response: CandidateResponse, question: Optional[InterviewQuestion] = None
    ) -> float:
        text = response.text.lower()
        wc = response.word_count
        min_words = (
            MIN_WORDS_TECHNICAL
            if question is not None and question.type == QuestionType.TECHNICAL
            else MIN_WORDS_BEHAVIORAL
        )

        # length band peaks between 1x and 2x the minimum
        if wc < min_words * 0.5:
            score = 1
        elif wc < min_words:
            score = 3
        elif wc < min_words * 2:
            score = 5
        elif wc < min_words * 3:
            score = 4
        else:
            score = 3

        density = count_keyword_hits(text, TECHNICAL_KEYWORDS) / max(wc / 10, 1)
        if density >= 2:
            score += 5
        elif density >= 1:
            score += 4
        elif density >= 0.5:
            score += 3
        elif density >= 0.2:
            score += 2
        else:
            score += 1

        return clamp(score)

    def assess_clarity(self, response: CandidateResponse) -> float:
        text = response.text.lower()
        wc = response.word_count
        score = 5

        structure = count_keyword_hits(text, STRUCTURE_INDICATORS)
        if structure >= 5:
            score += 3
        elif structure >= 3:
            score += 2
        elif structure >= 1:
            score += 1

        avg_len = wc / max(len(split_sentences(text)), 1)
        if 10 <= avg_len <= 25:
            score += 2
        elif 5 <= avg_len <= 35:
            score += 1

        if wc < 20:
            score -= 2
        if wc > 300 and structure < 3:
            score -= 1

        return clamp(score)

    def assess_completeness(
        self, response: CandidateResponse, expected_elements: list[str]
    ) -> float:
        if not expected_elements:
            return self._completeness_heuristic(response)

        text = response.text.lower()
        covered = 0
        for element in expected_elements:
            el = element.lower()
            if el in text or _partial_match(text, el):
                covered += 1

        ratio = covered / len(expected_elements)
        if ratio == 1.0:
            return 10.0
        return clamp(ratio * 10)

    def assess_technical_accuracy(
        self, response: CandidateResponse, question: InterviewQuestion
    ) -> float:
        text = response.text.lower()
        score = 5

        hits = count_keyword_hits(text, category_keywords(question.category))
        if hits >= 5:
            score += 3
        elif hits >= 3:
            score += 2
        elif hits >= 1:
            score += 1
        else:
            score -= 1

        if _EXAMPLE_RX.search(text):
            score += 2

        return clamp(score)

    @staticmethod
    def needs_follow_up(evaluation: ResponseEvaluation) -> bool:
        return bool(
            follow_up_reasons(
                evaluation.depth_score,
                evaluation.clarity_score,
                evaluation.completeness_score,
                evaluation.technical_accuracy,
            )
        )

    def _completeness_heuristic(self, response: CandidateResponse) -> float:
        text = response.text.lower()
        wc = response.word_count
        score = 5

        p = bool(_PROBLEM_RX.search(text))
        s = bool(_SOLUTION_RX.search(text))
        o = bool(_OUTCOME_RX.search(text))
        if p and s and o:
            score += 3
        elif (p and s) or (s and o):
            score += 2
        elif p or s or o:
            score += 1

        if wc >= 100:
            score += 2
        elif wc >= 50:
            score += 1
        elif wc < 20:
            score -= 2

        return clamp(score)


def follow_up_reasons(
    depth: float,
    clarity: float,
    completeness: float,
    accuracy: Optional[float],
) -> list[str]:
    reasons = []
    if depth < FOLLOW_UP_THRESHOLD:
        reasons.append("insufficient depth")
    if completeness < FOLLOW_UP_THRESHOLD:
        reasons.append("incomplete coverage of key elements")
    if accuracy is not None and accuracy < FOLLOW_UP_THRESHOLD:
        reasons.append("lacking technical detail")
    if clarity < CLARITY_FOLLOW_UP_THRESHOLD:
        reasons.append("unclear explanation")
    return reasons


def _partial_match(text: str, phrase: str) -> bool:
    words = phrase.split()
    threshold = math.ceil(len(words) / 2)
    return sum(1 for w in words if w in text) >= threshold
