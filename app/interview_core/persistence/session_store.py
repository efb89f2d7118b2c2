"""
Purpose: Session records and their lifecycle contract (now in-memory).
Why: one place that enforces the monotonic status machine
initialized -> in-progress -> {completed | ended-early}, so the controller
and UI never mutate status directly.

What is inside (now):
InMemorySessionStore keyed by session id.
Later:
a file or SQLite backed store honoring the same `SessionStore` protocol.

Testing:
In-memory: simple state and transition tests.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Optional

from ..errors import (
    InteractionModeError,
    InvalidStateTransitionError,
    SessionNotFoundError,
    ValidationError,
)
from ..models import (
    BehaviorType,
    CandidateResponse,
    InteractionModeType,
    InterviewQuestion,
    ResponseEvaluation,
    ResumeAnalysis,
    SessionState,
    SessionStatus,
)
from ..roles import RoleCatalog
from ..utils.ids import IdFactory, uuid_ids

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    def __init__(
        self,
        *,
        catalog: Optional[RoleCatalog] = None,
        id_factory: Optional[IdFactory] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.catalog = catalog or RoleCatalog()
        self._next_id = id_factory or uuid_ids()
        self._clock = clock
        self._sessions: dict[str, SessionState] = {}

    def create(
        self,
        role_id_or_name: str,
        level: str,
        interaction_mode: InteractionModeType | str = InteractionModeType.TEXT,
        *,
        drill_topic: Optional[str] = None,
    ) -> str:
        """Validate role/level (case-insensitive) and register a new session."""
        role = self.catalog.get_role(role_id_or_name)
        experience = self.catalog.get_level(level)
        session = SessionState(
            id=self._next_id(),
            role=role,
            experience_level=experience,
            interaction_mode=_mode(interaction_mode),
            start_time=self._clock(),
            drill_topic=drill_topic,
        )
        self._sessions[session.id] = session
        logger.debug("Session %s created for %s/%s", session.id, role.id, experience.level.value)
        return session.id

    def get(self, session_id: str) -> SessionState:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_active(self) -> list[str]:
        return [
            sid for sid, s in self._sessions.items() if not s.status.is_terminal
        ]

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def attach_resume(self, session_id: str, analysis: ResumeAnalysis) -> None:
        session = self.get(session_id)
        self._require(session, SessionStatus.INITIALIZED, "upload resume")
        session.resume_analysis = analysis

    def start(self, session_id: str) -> None:
        session = self.get(session_id)
        self._require(session, SessionStatus.INITIALIZED, "start")
        session.status = SessionStatus.IN_PROGRESS
        session.start_time = self._clock()

    def end(self, session_id: str, early: bool = False) -> None:
        session = self.get(session_id)
        self._require(session, SessionStatus.IN_PROGRESS, "end")
        session.status = SessionStatus.ENDED_EARLY if early else SessionStatus.COMPLETED
        session.end_time = self._clock()

    # ---------------------------
    # Content
    # ---------------------------
    def update_questions(self, session_id: str, questions: list[InterviewQuestion]) -> None:
        ids = [q.id for q in questions]
        if len(ids) != len(set(ids)):
            raise ValidationError(
                "Question ids must be unique within a session", field="questions"
            )
        self.get(session_id).questions = list(questions)

    def add_response(self, session_id: str, response: CandidateResponse) -> None:
        session = self.get(session_id)
        self._require(session, SessionStatus.IN_PROGRESS, "add response")
        self._require_question(session, response.question_id)
        session.responses[response.question_id] = response

    def add_evaluation(self, session_id: str, evaluation: ResponseEvaluation) -> None:
        session = self.get(session_id)
        self._require(session, SessionStatus.IN_PROGRESS, "add evaluation")
        self._require_question(session, evaluation.question_id)
        session.evaluations[evaluation.question_id] = evaluation

    def update_behavior(self, session_id: str, behavior: BehaviorType) -> None:
        self.get(session_id).behavior_type = behavior

    def update_interaction_mode(
        self, session_id: str, mode: InteractionModeType | str
    ) -> None:
        self.get(session_id).interaction_mode = _mode(mode)

    @staticmethod
    def _require(session: SessionState, status: SessionStatus, action: str) -> None:
        if session.status != status:
            raise InvalidStateTransitionError(session.status.value, action, session.id)

    @staticmethod
    def _require_question(session: SessionState, question_id: str) -> None:
        if session.find_question(question_id) is None:
            raise ValidationError(
                f"Unknown question id for session {session.id}: {question_id}",
                field="question_id",
            )


def _mode(value: InteractionModeType | str) -> InteractionModeType:
    try:
        return InteractionModeType(value)
    except ValueError:
        raise InteractionModeError(
            f"Unsupported interaction mode: {value}", mode=str(value)
        ) from None
