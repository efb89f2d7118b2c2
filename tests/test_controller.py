import random

import pytest

from interview_core.controller import InterviewController
from interview_core.errors import (
    ContinuationError,
    InvalidStateTransitionError,
    SessionNotFoundError,
    ValidationError,
)
from interview_core.models import (
    ActionType,
    BehaviorType,
    ContinuationOptions,
    ContinuationType,
    QuestionType,
    SessionStatus,
)
from interview_core.services.behavior import BehaviorClassifier
from interview_core.services.feedback import FeedbackGenerator
from interview_core.services.question_generator import DefaultQuestionGenerator
from interview_core.services.response_evaluator import ResponseEvaluator
from interview_core.utils.ids import counter_ids

from conftest import make_question, make_response

STRONG = (
    "First, the hash map computes a hash and uses an array of buckets. "
    "Then collisions are handled by chaining, where each bucket holds a linked list. "
    "For example, the design keeps performance stable because the cache stays small "
    "and the implementation avoids resizing too often."
)
WEAK = "It uses a list."
ELEMENTS = ["chaining", "linked list", "resizing"]


class FixedSetGenerator(DefaultQuestionGenerator):
    """Three known questions; follow-ups come from the real generator."""

    def generate_question_set(self, role, level, resume_analysis=None, *, drill_topic=None):
        return [
            make_question("q-1", expected_elements=ELEMENTS),
            make_question("q-2", category="Algorithms", expected_elements=ELEMENTS),
            make_question(
                "q-3",
                qtype=QuestionType.BEHAVIORAL,
                text="Tell me about a time you fixed a hash map bug.",
                category="Problem Solving",
                expected_elements=ELEMENTS,
            ),
        ]


@pytest.fixture
def fixed(store, clock):
    return InterviewController(
        store,
        FixedSetGenerator(rng=random.Random(1), id_factory=counter_ids("f-")),
        ResponseEvaluator(),
        BehaviorClassifier(),
        FeedbackGenerator(),
        clock=clock,
    )


@pytest.fixture
def sid(store):
    return store.create("software-engineer", "mid")


def test_initialize_with_real_generator(controller, store, sid):
    first = controller.initialize(sid)
    session = store.get(sid)

    assert first.id
    assert first.type in (QuestionType.TECHNICAL, QuestionType.BEHAVIORAL)
    assert session.status == SessionStatus.IN_PROGRESS
    assert 5 <= len(session.questions) <= 10
    assert {q.type for q in session.questions} == {QuestionType.TECHNICAL, QuestionType.BEHAVIORAL}
    assert controller.tracking(sid).cursor == 1


def test_initialize_unknown_session(controller):
    with pytest.raises(SessionNotFoundError):
        controller.initialize("missing")


def test_full_interview_with_strong_answers(fixed, store, sid):
    assert fixed.initialize(sid).id == "q-1"
    assert fixed.get_expected_duration(sid) == 540

    action = fixed.process_response(sid, STRONG)
    assert action.type == ActionType.NEXT_QUESTION
    assert action.question.id == "q-2"

    action = fixed.process_response(sid, STRONG)
    assert action.question.id == "q-3"

    action = fixed.process_response(sid, STRONG)
    assert action.type == ActionType.COMPLETE
    assert action.feedback.session_id == sid
    assert store.get(sid).status == SessionStatus.COMPLETED

    progress = fixed.get_progress(sid)
    assert progress.answered_questions == 3
    assert progress.percent_complete == 100
    assert progress.estimated_time_remaining is None


def test_follow_ups_are_capped_per_primary_question(fixed, store, sid):
    fixed.initialize(sid)

    first = fixed.process_response(sid, WEAK)
    assert first.type == ActionType.FOLLOW_UP
    assert first.question.parent_question_id == "q-1"

    second = fixed.process_response(sid, WEAK)
    assert second.type == ActionType.FOLLOW_UP
    assert second.question.parent_question_id == "q-1"
    assert second.question.follow_up_count == 2

    session = store.get(sid)
    assert session.find_question("q-1").follow_up_count == 2
    assert first.question.id in session.responses

    third = fixed.process_response(sid, WEAK)
    assert third.type == ActionType.NEXT_QUESTION
    assert third.question.id == "q-2"

    progress = fixed.get_progress(sid)
    assert progress.total_questions == 3
    assert progress.answered_questions == 1
    assert progress.percent_complete == 33.3
    assert progress.estimated_time_remaining == 360


def test_unknown_question_redirects_without_recording(fixed, store, sid):
    fixed.initialize(sid)
    action = fixed.process_response(sid, make_response("nope", STRONG))
    assert action.type == ActionType.REDIRECT
    assert action.message == "Question not found. Please answer the current question."
    assert store.get(sid).responses == {}


def test_off_topic_long_answer_repeats_question(fixed, store, sid):
    fixed.initialize(sid)
    rambling = "I really enjoy baking sourdough bread on weekends. " * 14
    action = fixed.process_response(sid, rambling)

    assert action.type == ActionType.REDIRECT
    assert action.message.startswith("Your response seems to be off-topic.")
    assert action.message.endswith("Explain how a hash map handles collisions.")
    assert fixed.current_question(sid).id == "q-1"

    follow = fixed.process_response(sid, STRONG)
    assert follow.question.id == "q-2"


def test_answering_ahead_skips_answered_questions(fixed, sid):
    fixed.initialize(sid)
    action = fixed.process_response(sid, make_response("q-2", STRONG))
    assert action.type == ActionType.NEXT_QUESTION
    assert action.question.id == "q-3"


def test_end_early_needs_one_answer(fixed, store, sid):
    fixed.initialize(sid)
    assert not fixed.can_end_early(sid)
    refused = fixed.end_early(sid)
    assert refused.type == ActionType.REDIRECT
    assert "Cannot end interview early" in refused.message
    assert store.get(sid).status == SessionStatus.IN_PROGRESS

    fixed.process_response(sid, STRONG)
    done = fixed.end_early(sid)
    assert done.type == ActionType.COMPLETE
    assert store.get(sid).status == SessionStatus.ENDED_EARLY

    with pytest.raises(InvalidStateTransitionError):
        fixed.process_response(sid, STRONG)


def test_response_time_is_estimated_from_question_slots(fixed, store, clock, sid):
    fixed.initialize(sid)
    clock.advance(60)
    fixed.process_response(sid, STRONG)
    clock.advance(340)
    fixed.process_response(sid, STRONG)

    responses = store.get(sid).responses
    assert responses["q-1"].response_time == 60
    assert responses["q-2"].response_time == 220


def test_behavior_drives_acknowledgment(fixed, sid):
    fixed.initialize(sid)
    fixed.process_response(sid, "I'm not sure, can you explain what you mean?")
    assert fixed.get_current_behavior_type(sid) == BehaviorType.CONFUSED
    assert fixed.get_acknowledgment(sid).startswith("I see you might need some help")
    assert fixed.get_transition(sid) == "When you're ready, here's the next question:"
    assert fixed.get_adapted_response(sid, "Q").content.startswith("Let me help clarify: Q")


def test_continuation_prompt_offers_drills_for_weak_categories(fixed, store, sid):
    fixed.initialize(sid)
    with pytest.raises(InvalidStateTransitionError):
        fixed.generate_continuation_prompt(sid)

    fixed.process_response(sid, WEAK)
    fixed.end_early(sid)
    prompt = fixed.generate_continuation_prompt(sid)

    assert prompt.message == "Would you like to continue practicing?"
    assert [o.id for o in prompt.options] == [
        "new-round-same",
        "new-round-different",
        "drill-data-structures",
    ]
    drill = prompt.options[2].continuation_options
    assert drill.type == ContinuationType.TOPIC_DRILL
    assert drill.drill_topic == "Data Structures"

    new_sid = fixed.create_continuation_session(drill)
    assert new_sid != sid
    new_session = store.get(new_sid)
    assert new_session.status == SessionStatus.INITIALIZED
    assert new_session.drill_topic == "Data Structures"
    assert store.get(sid).status == SessionStatus.ENDED_EARLY


def test_same_role_continuation(fixed, store, sid):
    fixed.initialize(sid)
    fixed.process_response(sid, STRONG)
    fixed.end_early(sid)
    same = fixed.generate_continuation_prompt(sid).options[0].continuation_options
    new_sid = fixed.create_continuation_session(same)
    assert store.get(new_sid).role.id == "software-engineer"
    assert store.get(new_sid).drill_topic is None


def test_continuation_validation(fixed, catalog):
    role, level = catalog.get_role("software-engineer"), catalog.get_level("mid")
    with pytest.raises(ContinuationError, match="Role and experience level required"):
        fixed.create_continuation_session(ContinuationOptions(ContinuationType.NEW_ROUND))
    with pytest.raises(ContinuationError, match="drill topic required"):
        fixed.create_continuation_session(
            ContinuationOptions(ContinuationType.TOPIC_DRILL, role=role, experience_level=level)
        )
    with pytest.raises(ContinuationError, match="Invalid continuation type"):
        fixed.create_continuation_session(ContinuationOptions("rematch", role, level))


def test_cleanup_drops_tracking(fixed, sid):
    fixed.initialize(sid)
    fixed.cleanup(sid)
    assert fixed.tracking(sid).cursor == 0


def test_initialize_twice_leaves_running_session_untouched(fixed, store, sid):
    fixed.initialize(sid)
    fixed.process_response(sid, STRONG)
    session = store.get(sid)
    questions_before = [q.id for q in session.questions]
    track = fixed.tracking(sid)
    cursor, current, log_size = track.cursor, track.current_question_id, len(track.interactions)

    with pytest.raises(InvalidStateTransitionError):
        fixed.initialize(sid)

    assert [q.id for q in store.get(sid).questions] == questions_before
    assert set(store.get(sid).responses) == {"q-1"}
    track = fixed.tracking(sid)
    assert (track.cursor, track.current_question_id, len(track.interactions)) == (
        cursor,
        current,
        log_size,
    )


def test_answered_question_cannot_be_resubmitted(fixed, store, sid):
    fixed.initialize(sid)
    fixed.process_response(sid, make_response("q-1", STRONG))
    first = store.get(sid).responses["q-1"]

    action = fixed.process_response(sid, make_response("q-1", WEAK))
    assert action.type == ActionType.REDIRECT
    assert "already been answered" in action.message
    assert store.get(sid).responses["q-1"] is first
    assert fixed.current_question(sid).id == "q-2"

    assert fixed.process_response(sid, STRONG).question.id == "q-3"
    assert "q-2" in store.get(sid).responses


class EmptySetGenerator(DefaultQuestionGenerator):
    def generate_question_set(self, role, level, resume_analysis=None, *, drill_topic=None):
        return []


def test_empty_question_set_is_a_validation_error(store, sid):
    controller = InterviewController(
        store,
        EmptySetGenerator(),
        ResponseEvaluator(),
        BehaviorClassifier(),
        FeedbackGenerator(),
    )
    with pytest.raises(ValidationError, match="No questions available"):
        controller.initialize(sid)
    assert store.get(sid).status == SessionStatus.INITIALIZED
