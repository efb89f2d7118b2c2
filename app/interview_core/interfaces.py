"""
Abstractions for pluggable services. Inversion of control: the controller
depends on these protocols, not on concrete services. Enables fakes/mocks
and future swaps (e.g. a persistent session store).

Common protocols:
- SessionStore: lifecycle contract over session records.
- QuestionGenerator.generate_question_set(...) / generate_follow_up(...)
- Evaluator.evaluate(question, response) -> ResponseEvaluation
- InteractionMode: renders actions and parses raw input (text / voice).

Testing: Use simple fake implementations to test the controller in isolation.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional, Protocol

from .models import (
    BehaviorType,
    CandidateResponse,
    ExperienceLevel,
    FeedbackReport,
    InteractionModeType,
    InterviewAction,
    InterviewQuestion,
    JobRole,
    ResponseEvaluation,
    ResumeAnalysis,
    SessionState,
)


class SessionStore(Protocol):
    def create(
        self,
        role_id_or_name: str,
        level: str,
        interaction_mode: InteractionModeType | str = InteractionModeType.TEXT,
        *,
        drill_topic: Optional[str] = None,
    ) -> str: ...

    def get(self, session_id: str) -> SessionState: ...

    def update_questions(self, session_id: str, questions: list[InterviewQuestion]) -> None: ...

    def add_response(self, session_id: str, response: CandidateResponse) -> None: ...

    def add_evaluation(self, session_id: str, evaluation: ResponseEvaluation) -> None: ...

    def update_behavior(self, session_id: str, behavior: BehaviorType) -> None: ...

    def attach_resume(self, session_id: str, analysis: ResumeAnalysis) -> None: ...

    def start(self, session_id: str) -> None: ...

    def end(self, session_id: str, early: bool = False) -> None: ...

    def exists(self, session_id: str) -> bool: ...

    def delete(self, session_id: str) -> bool: ...

    def list_active(self) -> list[str]: ...


class QuestionGenerator(Protocol):
    def generate_question_set(
        self,
        role: JobRole,
        level: ExperienceLevel,
        resume_analysis: Optional[ResumeAnalysis] = None,
        *,
        drill_topic: Optional[str] = None,
    ) -> list[InterviewQuestion]: ...

    def generate_follow_up(
        self,
        question: InterviewQuestion,
        response: CandidateResponse,
        evaluation: ResponseEvaluation,
    ) -> Optional[InterviewQuestion]: ...


class Evaluator(Protocol):
    def evaluate(
        self, question: InterviewQuestion, response: CandidateResponse
    ) -> ResponseEvaluation: ...


class InteractionMode(Protocol):
    def get_mode_type(self) -> InteractionModeType: ...

    def format_question(self, question: InterviewQuestion) -> str: ...

    def format_conversational_response(self, content: str) -> str: ...

    def format_feedback(self, feedback: FeedbackReport) -> str: ...

    def format_interview_action(self, action: InterviewAction) -> str: ...

    def parse_user_input(
        self, question_id: str, raw: str, timestamp: Optional[datetime] = None
    ) -> CandidateResponse: ...
