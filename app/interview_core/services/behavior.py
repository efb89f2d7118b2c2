"""
Purpose: Classify the candidate's interaction style from their answers and
adapt the interviewer's phrasing to it.

Why: a confused candidate needs guidance, an efficient one needs brevity,
a chatty one needs refocusing, and gaming attempts ("give me the answers")
need a firm explanation of what is possible.

Testing: pure functions over response/interaction lists; no state.
"""

from __future__ import annotations
import re

from ..models import (
    AdaptedResponse,
    BehaviorType,
    CandidateResponse,
    InterviewQuestion,
    UserInteraction,
)

CONFUSION_KEYWORDS = [
    "help",
    "confused",
    "don't understand",
    "not sure",
    "unclear",
    "what do you mean",
    "can you explain",
    "i don't know",
    "unsure",
]

EDGE_CASE_PATTERNS = [
    "skip all questions",
    "give me the answers",
    "just pass me",
    "hack",
    "cheat",
    "bypass",
]

STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "should", "could", "may", "might", "can", "this", "that",
    "these", "those", "i", "you", "he", "she", "it", "we", "they",
}

EFFICIENT_MIN_WORDS = 15
EFFICIENT_MAX_WORDS = 50
CHATTY_MIN_WORDS = 200
OFF_TOPIC_THRESHOLD = 0.3

CONFUSED_RATIO = 0.3
EFFICIENT_RATIO = 0.7
CHATTY_RATIO = 0.5

_STRUCTURE_RX = re.compile(r"[-•*]\s|^\d+\.|^[a-z]\)", re.MULTILINE)
_NON_WORD_RX = re.compile(r"[^\w\s]")


class BehaviorClassifier:
    def classify_behavior(
        self,
        responses: list[CandidateResponse],
        interactions: list[UserInteraction],
    ) -> BehaviorType:
        """First matching rule wins: confused > efficient > chatty > edge-case."""
        if not responses:
            return BehaviorType.STANDARD
        n = len(responses)

        if sum(1 for r in responses if self.detect_confusion(r)) / n > CONFUSED_RATIO:
            return BehaviorType.CONFUSED
        if sum(1 for r in responses if self.detect_efficiency(r)) / n > EFFICIENT_RATIO:
            return BehaviorType.EFFICIENT
        if sum(1 for r in responses if self.detect_verbosity(r)) / n > CHATTY_RATIO:
            return BehaviorType.CHATTY
        if any(self.is_edge_case(i) for i in interactions):
            return BehaviorType.EDGE_CASE
        return BehaviorType.STANDARD

    def detect_confusion(self, response: CandidateResponse) -> bool:
        lower = response.text.lower()
        if any(kw in lower for kw in CONFUSION_KEYWORDS):
            return True
        too_short = response.word_count < 10 and bool(response.text.strip())
        return too_short and response.text.count("?") > 2

    def detect_efficiency(self, response: CandidateResponse) -> bool:
        wc = response.word_count
        if not (EFFICIENT_MIN_WORDS <= wc <= EFFICIENT_MAX_WORDS):
            return False
        if _STRUCTURE_RX.search(response.text):
            return True
        # unknown timing counts as a quick answer
        if response.response_time <= 0:
            return True
        return wc / response.response_time > 0.5

    def detect_verbosity(self, response: CandidateResponse) -> bool:
        if response.word_count > CHATTY_MIN_WORDS:
            return True
        words = response.text.lower().split()
        if not words or response.word_count <= 100:
            return False
        return len(set(words)) / len(words) < 0.5

    def detect_off_topic(
        self, response: CandidateResponse, question: InterviewQuestion
    ) -> bool:
        q_keywords = extract_keywords(question.text)
        r_keywords = extract_keywords(response.text)
        overlap = [
            kw for kw in q_keywords if any(rw in kw or kw in rw for rw in r_keywords)
        ]
        return len(overlap) / max(len(q_keywords), 1) < OFF_TOPIC_THRESHOLD

    @staticmethod
    def is_edge_case(interaction: UserInteraction) -> bool:
        lower = interaction.content.lower()
        return any(p in lower for p in EDGE_CASE_PATTERNS)


def extract_keywords(text: str) -> list[str]:
    cleaned = _NON_WORD_RX.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) > 3 and w not in STOP_WORDS]


_ADAPTATIONS: dict[BehaviorType, tuple[str, str, list[str]]] = {
    BehaviorType.CONFUSED: (
        "Let me help clarify: ",
        "\n\nTake your time, and feel free to ask if you need any part explained further.",
        [
            "Added clarifying guidance",
            "Included step-by-step explanation",
            "Simplified language",
        ],
    ),
    BehaviorType.CHATTY: (
        "Thank you for the detailed response. Let's focus on the key points: ",
        "\n\nFor the next question, try to keep your answer focused on the main points.",
        [
            "Added focus redirect",
            "Encouraged conciseness",
            "Provided structure guidance",
        ],
    ),
    BehaviorType.EDGE_CASE: (
        "I understand what you're trying to do, but that's not possible in this interview format. ",
        "\n\nHere are the valid options:\n"
        "- Answer the current question\n"
        "- Request clarification\n"
        "- End the interview early\n\n"
        "What would you like to do?",
        [
            "Explained system limitations",
            "Offered valid alternatives",
            "Redirected to appropriate actions",
        ],
    ),
}

_ACKNOWLEDGMENTS = {
    BehaviorType.CONFUSED: "I see you might need some help. Let me guide you through this.",
    BehaviorType.EFFICIENT: "Great, concise answer.",
    BehaviorType.CHATTY: "Thank you for the thorough response.",
    BehaviorType.EDGE_CASE: "Let me help you with what's possible here.",
    BehaviorType.STANDARD: "Thank you for your response.",
}

_TRANSITIONS = {
    BehaviorType.CONFUSED: "When you're ready, here's the next question:",
    BehaviorType.EFFICIENT: "Next question:",
    BehaviorType.CHATTY: "Let's move on to the next question:",
    BehaviorType.EDGE_CASE: "Let's continue with the interview. Here's the next question:",
    BehaviorType.STANDARD: "Here's your next question:",
}


class CommunicationAdapter:
    def adapt_response(self, content: str, behavior: BehaviorType) -> AdaptedResponse:
        if behavior == BehaviorType.EFFICIENT:
            lines = [ln for ln in content.split("\n") if ln.strip()]
            return AdaptedResponse(
                content="\n".join(lines[:3]),
                style=behavior,
                adjustments=[
                    "Removed unnecessary explanations",
                    "Kept response concise",
                    "Direct communication",
                ],
            )
        if behavior in _ADAPTATIONS:
            prefix, suffix, adjustments = _ADAPTATIONS[behavior]
            return AdaptedResponse(
                content=prefix + content + suffix,
                style=behavior,
                adjustments=list(adjustments),
            )
        return AdaptedResponse(content=content, style=BehaviorType.STANDARD)

    def get_acknowledgment(self, behavior: BehaviorType) -> str:
        return _ACKNOWLEDGMENTS.get(behavior, _ACKNOWLEDGMENTS[BehaviorType.STANDARD])

    def get_transition(self, behavior: BehaviorType) -> str:
        return _TRANSITIONS.get(behavior, _TRANSITIONS[BehaviorType.STANDARD])
