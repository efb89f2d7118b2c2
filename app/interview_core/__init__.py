"""
Purpose: One object the UI talks to. `InterviewPrep` wires the session
store, generator, evaluator, behavior classifier, feedback generator and
controller from `Settings`, and logs every lifecycle call.

Errors are logged here and re-raised unchanged; invalid role input is a
WARNING because it is a user mistake, everything else is an ERROR.
"""

from __future__ import annotations
import logging
import random
from contextlib import contextmanager
from datetime import datetime
from typing import BinaryIO, Callable, Iterator, Optional, Union

from .config import Settings, load_settings
from .controller import InterviewController
from .errors import InvalidRoleInputError
from .models import (
    BehaviorType,
    CandidateResponse,
    ContinuationOptions,
    ContinuationPrompt,
    ExperienceLevel,
    InteractionModeType,
    InterviewAction,
    InterviewProgress,
    InterviewQuestion,
    JobRole,
    ResumeAnalysis,
    ResumeDocument,
    SessionState,
)
from .persistence.session_store import InMemorySessionStore
from .roles import RoleCatalog
from .services.behavior import BehaviorClassifier, CommunicationAdapter
from .services.feedback import FeedbackGenerator
from .services.question_generator import DefaultQuestionGenerator
from .services.response_evaluator import ResponseEvaluator
from .services.resume_analyzer import ResumeAnalyzer
from .services.security import InputGuard
from .utils.ids import IdFactory

logger = logging.getLogger(__name__)

__all__ = ["InterviewPrep", "Settings", "load_settings"]


class InterviewPrep:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        rng: Optional[random.Random] = None,
        session_ids: Optional[IdFactory] = None,
        question_ids: Optional[IdFactory] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or Settings()
        if rng is None and self.settings.random_seed is not None:
            rng = random.Random(self.settings.random_seed)

        self.catalog = RoleCatalog()
        self.store = InMemorySessionStore(catalog=self.catalog, id_factory=session_ids, clock=clock)
        self.guard = InputGuard(max_response_chars=self.settings.max_response_chars)
        self.resume_analyzer = ResumeAnalyzer()
        self.controller = InterviewController(
            self.store,
            DefaultQuestionGenerator(rng=rng, id_factory=question_ids),
            ResponseEvaluator(),
            BehaviorClassifier(),
            FeedbackGenerator(),
            adapter=CommunicationAdapter(),
            clock=clock,
            average_question_seconds=self.settings.average_question_seconds,
        )
        logger.info("InterviewPrep initialized")

    @contextmanager
    def _logged(self, action: str, session_id: Optional[str] = None) -> Iterator[None]:
        extra = {"session_id": session_id} if session_id else {}
        try:
            yield
        except InvalidRoleInputError as e:
            logger.warning(
                "Invalid role or level input: %s (options: %s)",
                e.message,
                ", ".join(e.details.get("available_options", [])),
                extra=extra,
            )
            raise
        except Exception:
            logger.exception("Failed to %s", action, extra=extra)
            raise

    def _redacted(self, text: str, session_id: str) -> str:
        text, found = self.guard.redact_pii(text)
        if found:
            logger.info(
                "Redacted %s from candidate input", ", ".join(found), extra={"session_id": session_id}
            )
        return text

    # ---------------------------
    # Catalog
    # ---------------------------
    def get_available_roles(self) -> list[JobRole]:
        return self.catalog.roles()

    def get_available_experience_levels(self) -> list[ExperienceLevel]:
        return self.catalog.levels()

    # ---------------------------
    # Sessions
    # ---------------------------
    def create_session(
        self,
        role_id_or_name: str,
        level: str,
        interaction_mode: Union[InteractionModeType, str] = InteractionModeType.TEXT,
    ) -> str:
        with self._logged("create session"):
            logger.info("Creating session for role: %s, level: %s", role_id_or_name, level)
            session_id = self.store.create(role_id_or_name, level, interaction_mode)
        logger.info("Session created", extra={"session_id": session_id})
        return session_id

    def get_session(self, session_id: str) -> SessionState:
        with self._logged("get session", session_id):
            return self.store.get(session_id)

    def get_active_sessions(self) -> list[str]:
        return self.store.list_active()

    def cleanup_session(self, session_id: str) -> None:
        with self._logged("cleanup session", session_id):
            self.controller.cleanup(session_id)
            self.store.delete(session_id)
        logger.info("Session cleaned up", extra={"session_id": session_id})

    def set_interaction_mode(
        self, session_id: str, mode: Union[InteractionModeType, str]
    ) -> None:
        with self._logged("switch interaction mode", session_id):
            self.store.update_interaction_mode(session_id, mode)

    # ---------------------------
    # Résumé
    # ---------------------------
    def upload_resume(
        self, session_id: str, document: Union[ResumeDocument, str]
    ) -> ResumeAnalysis:
        """Analyze a text résumé against the session role. Only before the interview starts."""
        if isinstance(document, str):
            document = ResumeDocument(content=document)
        with self._logged("upload resume", session_id):
            session = self.store.get(session_id)
            cleaned = ResumeDocument(
                content=self._redacted(self.guard.prepare_resume(document.content), session_id),
                format=document.format,
            )
            analysis = self.resume_analyzer.analyze_for_role(cleaned, session.role)
            self.store.attach_resume(session_id, analysis)
        logger.info(
            "Resume analyzed. Alignment score: %s%%",
            analysis.alignment_score.overall,
            extra={"session_id": session_id},
        )
        return analysis

    def upload_resume_pdf(self, session_id: str, file_like: BinaryIO) -> ResumeAnalysis:
        with self._logged("upload resume", session_id):
            session = self.store.get(session_id)
            analysis = self.resume_analyzer.analyze_pdf_for_role(
                file_like,
                session.role,
                prepare=lambda text: self._redacted(self.guard.prepare_resume(text), session_id),
            )
            self.store.attach_resume(session_id, analysis)
        logger.info(
            "PDF resume analyzed. Alignment score: %s%%",
            analysis.alignment_score.overall,
            extra={"session_id": session_id},
        )
        return analysis

    # ---------------------------
    # Interview
    # ---------------------------
    def start_interview(self, session_id: str) -> InterviewQuestion:
        with self._logged("start interview", session_id):
            question = self.controller.initialize(session_id)
        logger.info(
            "Interview started. First question: %s",
            question.type.value,
            extra={"session_id": session_id},
        )
        return question

    def submit_response(
        self, session_id: str, response: Union[CandidateResponse, str]
    ) -> InterviewAction:
        if isinstance(response, str):
            response = self._redacted(self.guard.prepare_response(response), session_id)
        with self._logged("process response", session_id):
            action = self.controller.process_response(session_id, response)
        logger.info(
            "Response processed. Next action: %s",
            action.type.value,
            extra={"session_id": session_id},
        )
        return action

    def current_question(self, session_id: str) -> Optional[InterviewQuestion]:
        with self._logged("get current question", session_id):
            return self.controller.current_question(session_id)

    def get_progress(self, session_id: str) -> InterviewProgress:
        with self._logged("get progress", session_id):
            return self.controller.get_progress(session_id)

    def get_expected_duration(self, session_id: str) -> float:
        with self._logged("get expected duration", session_id):
            return self.controller.get_expected_duration(session_id)

    def end_interview_early(self, session_id: str) -> InterviewAction:
        with self._logged("end interview early", session_id):
            logger.info("Ending interview early", extra={"session_id": session_id})
            return self.controller.end_early(session_id)

    # ---------------------------
    # Continuation
    # ---------------------------
    def get_continuation_options(self, session_id: str) -> ContinuationPrompt:
        with self._logged("generate continuation options", session_id):
            return self.controller.generate_continuation_prompt(session_id)

    def continue_with_new_session(
        self,
        options: ContinuationOptions,
        interaction_mode: Union[InteractionModeType, str] = InteractionModeType.TEXT,
    ) -> str:
        with self._logged("create continuation session"):
            session_id = self.controller.create_continuation_session(
                options, interaction_mode=interaction_mode
            )
        logger.info(
            "Continuation session created (%s)",
            options.type.value,
            extra={"session_id": session_id},
        )
        return session_id

    # ---------------------------
    # Behavior-aware phrasing
    # ---------------------------
    def get_adapted_response(self, session_id: str, content: str) -> str:
        with self._logged("adapt response", session_id):
            return self.controller.get_adapted_response(session_id, content).content

    def get_acknowledgment(self, session_id: str) -> str:
        with self._logged("get acknowledgment", session_id):
            return self.controller.get_acknowledgment(session_id)

    def get_transition(self, session_id: str) -> str:
        with self._logged("get transition", session_id):
            return self.controller.get_transition(session_id)

    def get_current_behavior_type(self, session_id: str) -> BehaviorType:
        with self._logged("get behavior type", session_id):
            return self.controller.get_current_behavior_type(session_id)
