"""
Purpose: Typed interaction. Questions carry a type badge and any résumé
context; answers are sanitized, clipped and word-counted before they reach
the controller.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional

from ..models import (
    ActionType,
    CandidateResponse,
    FeedbackReport,
    InteractionModeType,
    InterviewAction,
    InterviewQuestion,
    QuestionType,
)
from ..services.security import DEFAULT_MAX_RESPONSE_CHARS, InputGuard
from ..utils.text import count_words
from .formatting import format_feedback


class TextInteractionMode:
    def __init__(self, *, max_response_chars: int = DEFAULT_MAX_RESPONSE_CHARS) -> None:
        self.guard = InputGuard(max_response_chars=max_response_chars)

    def get_mode_type(self) -> InteractionModeType:
        return InteractionModeType.TEXT

    def format_question(self, question: InterviewQuestion) -> str:
        label = "🔧 Technical" if question.type == QuestionType.TECHNICAL else "💬 Behavioral"
        lines = [f"[{label}] {question.text}"]
        if question.resume_context is not None:
            lines += ["", f'📄 Context from your resume: "{question.resume_context.content}"']
        return "\n".join(lines)

    def format_conversational_response(self, content: str) -> str:
        return content

    def format_feedback(self, feedback: FeedbackReport) -> str:
        return format_feedback(feedback)

    def format_interview_action(self, action: InterviewAction) -> str:
        if action.type == ActionType.NEXT_QUESTION:
            return self.format_question(action.question)
        if action.type == ActionType.FOLLOW_UP:
            return f"\n🔍 Follow-up: {action.question.text}"
        if action.type == ActionType.COMPLETE:
            return self.format_feedback(action.feedback)
        if action.type == ActionType.REDIRECT:
            return f"⚠️  {action.message}"
        return "Unknown action"

    def parse_user_input(
        self, question_id: str, raw: str, timestamp: Optional[datetime] = None
    ) -> CandidateResponse:
        text = self.guard.prepare_response(raw)
        return CandidateResponse(
            question_id=question_id,
            text=text,
            timestamp=timestamp or datetime.now(),
            word_count=count_words(text),
        )
