"""
Purpose: Spoken interaction. Questions are phrased for listening, decorative
glyphs are stripped before anything is read aloud, and the written feedback
report is the same one text mode shows.

Audio goes through `SpeechService`; transcripts are parsed exactly like typed
answers.
"""

from __future__ import annotations
import re
from datetime import datetime
from typing import Optional

from ..errors import InteractionModeError
from ..models import (
    ActionType,
    CandidateResponse,
    FeedbackReport,
    InteractionModeType,
    InterviewAction,
    InterviewQuestion,
    QuestionType,
)
from ..services.security import DEFAULT_MAX_RESPONSE_CHARS
from ..services.speech import SpeechService
from .formatting import format_feedback
from .text_mode import TextInteractionMode

_GLYPHS = re.compile("[📊💬🔧📄✨📈🔴🟡🟢💡○✓]")
_RULES = re.compile("═+|─+")

COMPLETION_ANNOUNCEMENT = (
    "Great! We've completed the interview. Here's your detailed feedback report."
)


class VoiceInteractionMode:
    def __init__(
        self,
        speech: Optional[SpeechService] = None,
        *,
        text_to_speech_enabled: bool = True,
        language: str = "en-US",
        max_response_chars: int = DEFAULT_MAX_RESPONSE_CHARS,
    ) -> None:
        self.speech = speech
        self.text_to_speech_enabled = text_to_speech_enabled
        self.language = language
        self._text = TextInteractionMode(max_response_chars=max_response_chars)

    def get_mode_type(self) -> InteractionModeType:
        return InteractionModeType.VOICE

    def format_question(self, question: InterviewQuestion) -> str:
        parts = [
            "Here's a technical question:"
            if question.type == QuestionType.TECHNICAL
            else "Let me ask you a behavioral question:",
            question.text,
        ]
        if question.resume_context is not None:
            parts.append(
                f"I noticed on your resume you mentioned {question.resume_context.content}."
            )
        return " ".join(parts)

    def format_conversational_response(self, content: str) -> str:
        return _RULES.sub("", _GLYPHS.sub("", content))

    def format_feedback(self, feedback: FeedbackReport) -> str:
        return format_feedback(feedback)

    def format_interview_action(self, action: InterviewAction) -> str:
        if action.type == ActionType.NEXT_QUESTION:
            return self.format_question(action.question)
        if action.type == ActionType.FOLLOW_UP:
            return f"Let me follow up on that. {action.question.text}"
        if action.type == ActionType.COMPLETE:
            return f"{COMPLETION_ANNOUNCEMENT}\n\n{self.format_feedback(action.feedback)}"
        if action.type == ActionType.REDIRECT:
            return self.format_conversational_response(action.message)
        return "Unknown action"

    def parse_user_input(
        self, question_id: str, raw: str, timestamp: Optional[datetime] = None
    ) -> CandidateResponse:
        return self._text.parse_user_input(question_id, raw, timestamp)

    # ---------------------------
    # Audio
    # ---------------------------
    def transcribe(self, wav_bytes: bytes) -> str:
        if self.speech is None or not self.speech.available:
            raise InteractionModeError(
                "Speech-to-text is not configured. Please use text mode.", mode="voice"
            )
        return self.speech.transcribe_wav_bytes(wav_bytes)

    def speak(self, text: str) -> bytes:
        """MP3 read-out of `text`; empty when text-to-speech is off."""
        if not self.text_to_speech_enabled or self.speech is None or not self.speech.available:
            return b""
        return self.speech.tts_bytes(self.format_conversational_response(text))
