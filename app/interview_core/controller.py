"""
Purpose: The single orchestration point for an interview session.
It centralizes "one-turn" logic and the session lifecycle (initialize,
process_response, end_early, complete, continuation). Prevents the UI from
knowing how questions, scoring, behavior and feedback work.

Key responsibilities:
- Own the per-session progress cursor and interaction log (InterviewTracking).
- On each answer: record -> evaluate -> reclassify behavior -> decide between
  redirect, follow-up, next question, or completion.
- Produce the feedback report and continuation options once a session ends.

Testing: Pure unit tests with fakes or seeded services: a counter id
factory, a seeded RNG and a fixed clock make every scenario reproducible.
"""

from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from .errors import ContinuationError, InvalidStateTransitionError, ValidationError
from .interfaces import Evaluator, QuestionGenerator, SessionStore
from .models import (
    AdaptedResponse,
    BehaviorType,
    CandidateResponse,
    ContinuationOption,
    ContinuationOptions,
    ContinuationPrompt,
    ContinuationType,
    InteractionModeType,
    InterviewAction,
    InterviewProgress,
    InterviewQuestion,
    InterviewTracking,
    SessionState,
    SessionStatus,
    UserInteraction,
)
from .services.behavior import BehaviorClassifier, CommunicationAdapter
from .services.feedback import FeedbackGenerator
from .utils.text import count_words, mean

logger = logging.getLogger(__name__)

AVERAGE_QUESTION_SECONDS = 3 * 60
OFF_TOPIC_MIN_WORDS = 100
MAX_FOLLOW_UPS = 2
WEAK_CATEGORY_THRESHOLD = 7
MAX_DRILL_OPTIONS = 3

NO_CURRENT_QUESTION = "No current question to answer. Please start the interview first."
QUESTION_NOT_FOUND = "Question not found. Please answer the current question."
ALREADY_ANSWERED = (
    "That question has already been answered. Please answer the current question."
)
OFF_TOPIC = (
    "Your response seems to be off-topic. Please focus on answering the question "
    "asked. Let me repeat the question: "
)
CANNOT_END_EARLY = "Cannot end interview early. Please answer at least one question first."


class InterviewController:
    def __init__(
        self,
        store: SessionStore,
        generator: QuestionGenerator,
        evaluator: Evaluator,
        classifier: BehaviorClassifier,
        feedback: FeedbackGenerator,
        *,
        adapter: Optional[CommunicationAdapter] = None,
        clock: Callable[[], datetime] = datetime.now,
        average_question_seconds: int = AVERAGE_QUESTION_SECONDS,
    ):
        self.store = store
        self.generator = generator
        self.evaluator = evaluator
        self.classifier = classifier
        self.feedback = feedback
        self.adapter = adapter or CommunicationAdapter()
        self._clock = clock
        self.average_question_seconds = average_question_seconds
        self._tracking: dict[str, InterviewTracking] = {}

    def tracking(self, session_id: str) -> InterviewTracking:
        return self._tracking.setdefault(session_id, InterviewTracking())

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def initialize(self, session_id: str) -> InterviewQuestion:
        """Generate and attach the question set, start the session, return question 1."""
        session = self.store.get(session_id)
        if session.status != SessionStatus.INITIALIZED:
            raise InvalidStateTransitionError(session.status.value, "initialize", session_id)
        questions = self.generator.generate_question_set(
            session.role,
            session.experience_level,
            session.resume_analysis,
            drill_topic=session.drill_topic,
        )
        if not questions:
            raise ValidationError(
                f"No questions available for role {session.role.id}", field="role"
            )
        self.store.update_questions(session_id, questions)
        self._tracking[session_id] = InterviewTracking(
            cursor=1, current_question_id=questions[0].id
        )
        self.store.start(session_id)
        logger.info(
            "Interview %s started with %d questions", session_id, len(questions)
        )
        return questions[0]

    def next_question(self, session_id: str) -> Optional[InterviewQuestion]:
        """Question at the cursor (skipping already answered ones), or None."""
        session = self.store.get(session_id)
        track = self.tracking(session_id)
        while track.cursor < len(session.questions):
            question = session.questions[track.cursor]
            track.cursor += 1
            if question.id not in session.responses:
                track.current_question_id = question.id
                return question
        return None

    def process_response(
        self, session_id: str, response: Union[CandidateResponse, str]
    ) -> InterviewAction:
        session = self.store.get(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidStateTransitionError(
                session.status.value, "process response", session_id
            )

        if isinstance(response, str):
            current = self.current_question(session_id)
            if current is None:
                return InterviewAction.redirect(NO_CURRENT_QUESTION)
            response = CandidateResponse(
                question_id=current.id,
                text=response,
                timestamp=self._clock(),
                word_count=count_words(response),
                response_time=self._estimate_response_time(session),
            )

        question = session.find_question(response.question_id)
        if question is None:
            return InterviewAction.redirect(QUESTION_NOT_FOUND)
        if (
            question.id in session.responses
            and question.id != self.tracking(session_id).current_question_id
        ):
            return InterviewAction.redirect(ALREADY_ANSWERED)

        self.store.add_response(session_id, response)
        self.record_interaction(session_id, "response", response.text)
        evaluation = self.evaluator.evaluate(question, response)
        self.store.add_evaluation(session_id, evaluation)
        self._update_behavior(session)

        if response.word_count > OFF_TOPIC_MIN_WORDS and self.classifier.detect_off_topic(
            response, question
        ):
            logger.debug("Off-topic answer for %s in %s", question.id, session_id)
            return InterviewAction.redirect(OFF_TOPIC + question.text)

        if evaluation.needs_follow_up:
            root = self._root_question(session, question)
            if root.follow_up_count < MAX_FOLLOW_UPS:
                follow_up = self.generator.generate_follow_up(root, response, evaluation)
                if follow_up is not None:
                    session.questions.append(follow_up)
                    root.follow_up_count += 1
                    self.tracking(session_id).current_question_id = follow_up.id
                    logger.debug(
                        "Follow-up %s for %s (%s)",
                        follow_up.id,
                        root.id,
                        evaluation.follow_up_reason,
                    )
                    return InterviewAction.follow_up(follow_up)

        if self.should_continue(session_id):
            nxt = self.next_question(session_id)
            if nxt is not None:
                return InterviewAction.next_question(nxt)
        return self.complete(session_id)

    def complete(self, session_id: str) -> InterviewAction:
        session = self.store.get(session_id)
        if session.status == SessionStatus.IN_PROGRESS:
            self.store.end(session_id, early=False)
        report = self.feedback.generate_feedback(session)
        logger.info(
            "Interview %s finished (%s) grade=%s",
            session_id,
            session.status.value,
            report.scores.overall.grade.value,
        )
        return InterviewAction.complete(report)

    def should_continue(self, session_id: str) -> bool:
        session = self.store.get(session_id)
        return (
            session.status == SessionStatus.IN_PROGRESS
            and self.tracking(session_id).cursor < len(session.questions)
        )

    def can_end_early(self, session_id: str) -> bool:
        session = self.store.get(session_id)
        return session.status == SessionStatus.IN_PROGRESS and len(session.responses) > 0

    def end_early(self, session_id: str) -> InterviewAction:
        if not self.can_end_early(session_id):
            return InterviewAction.redirect(CANNOT_END_EARLY)
        self.store.end(session_id, early=True)
        return self.complete(session_id)

    def current_question(self, session_id: str) -> Optional[InterviewQuestion]:
        session = self.store.get(session_id)
        qid = self.tracking(session_id).current_question_id
        return session.find_question(qid) if qid else None

    # ---------------------------
    # Progress
    # ---------------------------
    def get_progress(self, session_id: str) -> InterviewProgress:
        session = self.store.get(session_id)
        primaries = session.primary_questions
        total = len(primaries)
        answered = sum(1 for q in primaries if q.id in session.responses)
        remaining = total - answered
        percent = round(answered / total * 1000) / 10 if total else 0
        eta = None
        if answered > 0 and remaining > 0:
            eta = float(remaining * self.average_question_seconds)
        return InterviewProgress(
            total_questions=total,
            answered_questions=answered,
            current_question_index=self.tracking(session_id).cursor,
            percent_complete=percent,
            estimated_time_remaining=eta,
        )

    def get_expected_duration(self, session_id: str) -> float:
        """Seconds, primary questions only."""
        session = self.store.get(session_id)
        return float(len(session.primary_questions) * self.average_question_seconds)

    # ---------------------------
    # Continuation
    # ---------------------------
    def generate_continuation_prompt(self, session_id: str) -> ContinuationPrompt:
        session = self.store.get(session_id)
        if not session.status.is_terminal:
            raise InvalidStateTransitionError(
                session.status.value, "generate continuation prompt", session_id
            )

        role, level = session.role, session.experience_level
        options = [
            ContinuationOption(
                id="new-round-same",
                label="Start Another Round (Same Role)",
                description=f"Continue practicing for {role.name} at {level.level.value} level",
                continuation_options=ContinuationOptions(
                    type=ContinuationType.NEW_ROUND, role=role, experience_level=level
                ),
            ),
            ContinuationOption(
                id="new-round-different",
                label="Start Another Round (Different Role)",
                description="Practice for a different job role or experience level",
                continuation_options=ContinuationOptions(type=ContinuationType.NEW_ROUND),
            ),
        ]
        for category in self.weak_categories(session)[:MAX_DRILL_OPTIONS]:
            options.append(
                ContinuationOption(
                    id="drill-" + category.lower().replace(" ", "-"),
                    label=f"Drill: {category}",
                    description=f"Focused practice on {category} questions",
                    continuation_options=ContinuationOptions(
                        type=ContinuationType.TOPIC_DRILL,
                        role=role,
                        experience_level=level,
                        drill_topic=category,
                        drill_category=category,
                    ),
                )
            )
        return ContinuationPrompt(
            message="Would you like to continue practicing?", options=options
        )

    @staticmethod
    def weak_categories(session: SessionState) -> list[str]:
        """Categories whose mean core score is below 7, weakest first."""
        per_category: dict[str, list[float]] = {}
        for question in session.questions:
            ev = session.evaluations.get(question.id)
            if ev is None:
                continue
            per_category.setdefault(question.category, []).append(
                (ev.depth_score + ev.clarity_score + ev.completeness_score) / 3
            )
        averages = {cat: mean(scores) for cat, scores in per_category.items()}
        weak = [cat for cat, avg in averages.items() if avg < WEAK_CATEGORY_THRESHOLD]
        return sorted(weak, key=lambda c: averages[c])

    def create_continuation_session(
        self,
        options: ContinuationOptions,
        *,
        interaction_mode: InteractionModeType | str = InteractionModeType.TEXT,
    ) -> str:
        """Create a fresh session; the finished one is left untouched."""
        if options.type == ContinuationType.NEW_ROUND:
            if options.role is None or options.experience_level is None:
                raise ContinuationError("Role and experience level required for new round")
            return self.store.create(
                options.role.id, options.experience_level.level.value, interaction_mode
            )
        if options.type == ContinuationType.TOPIC_DRILL:
            if (
                options.role is None
                or options.experience_level is None
                or not options.drill_topic
            ):
                raise ContinuationError(
                    "Role, experience level, and drill topic required for topic drill"
                )
            return self.store.create(
                options.role.id,
                options.experience_level.level.value,
                interaction_mode,
                drill_topic=options.drill_topic,
            )
        raise ContinuationError("Invalid continuation type")

    # ---------------------------
    # Behavior & phrasing
    # ---------------------------
    def record_interaction(self, session_id: str, kind: str, content: str) -> None:
        self.tracking(session_id).interactions.append(
            UserInteraction(timestamp=self._clock(), type=kind, content=content)
        )

    def get_current_behavior_type(self, session_id: str) -> BehaviorType:
        return self.store.get(session_id).behavior_type

    def get_adapted_response(self, session_id: str, content: str) -> AdaptedResponse:
        return self.adapter.adapt_response(content, self.get_current_behavior_type(session_id))

    def get_acknowledgment(self, session_id: str) -> str:
        return self.adapter.get_acknowledgment(self.get_current_behavior_type(session_id))

    def get_transition(self, session_id: str) -> str:
        return self.adapter.get_transition(self.get_current_behavior_type(session_id))

    def cleanup(self, session_id: str) -> None:
        self._tracking.pop(session_id, None)

    # ---------------------------
    # Internals
    # ---------------------------
    def _update_behavior(self, session: SessionState) -> None:
        behavior = self.classifier.classify_behavior(
            list(session.responses.values()), self.tracking(session.id).interactions
        )
        if behavior != session.behavior_type:
            logger.debug("Session %s behavior -> %s", session.id, behavior.value)
        self.store.update_behavior(session.id, behavior)

    @staticmethod
    def _root_question(session: SessionState, question: InterviewQuestion) -> InterviewQuestion:
        root = question
        while root.parent_question_id is not None:
            parent = session.find_question(root.parent_question_id)
            if parent is None:
                break
            root = parent
        return root

    def _estimate_response_time(self, session: SessionState) -> float:
        """Heuristic seconds since the slot this answer should have started in."""
        expected_start = session.start_time + timedelta(
            seconds=len(session.responses) * self.average_question_seconds
        )
        return max(0.0, (self._clock() - expected_start).total_seconds())
