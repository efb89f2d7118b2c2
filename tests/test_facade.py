import logging

import pytest

from interview_core import InterviewPrep, Settings
from interview_core.errors import InvalidRoleInputError, InvalidStateTransitionError
from interview_core.models import ActionType, ContinuationType, SessionStatus
from interview_core.utils.ids import counter_ids

from test_resume_analyzer import RESUME

ANSWER = (
    "First, I would design the API around clear resources. Then I add a cache "
    "in front of the database because reads dominate. For example, in my last "
    "project the algorithm and architecture changes improved performance and "
    "reduced deployment risk."
)


def _prep(seed=11):
    return InterviewPrep(
        Settings(random_seed=seed),
        session_ids=counter_ids("s-"),
        question_ids=counter_ids("q-"),
    )


def test_catalog_passthrough():
    prep = _prep()
    assert len(prep.get_available_roles()) == len(prep.catalog.roles())
    assert [lv.level.value for lv in prep.get_available_experience_levels()] == [
        "entry",
        "mid",
        "senior",
        "lead",
    ]


def test_invalid_role_is_logged_as_warning(caplog):
    prep = _prep()
    with caplog.at_level(logging.WARNING, logger="interview_core"):
        with pytest.raises(InvalidRoleInputError):
            prep.create_session("Astronaut", "mid")
    assert any(
        r.levelno == logging.WARNING and "Invalid role or level input" in r.getMessage()
        for r in caplog.records
    )


def test_full_session_lifecycle():
    prep = _prep()
    sid = prep.create_session("Software Engineer", "mid")
    assert sid == "s-1"

    analysis = prep.upload_resume(sid, RESUME)
    assert analysis.alignment_score.overall > 0
    assert prep.get_session(sid).resume_analysis is analysis

    question = prep.start_interview(sid)
    assert prep.current_question(sid) == question
    assert prep.get_expected_duration(sid) == len(prep.get_session(sid).primary_questions) * 180

    with pytest.raises(InvalidStateTransitionError):
        prep.upload_resume(sid, RESUME)

    action = None
    for _ in range(40):
        action = prep.submit_response(sid, ANSWER)
        if action.type == ActionType.COMPLETE:
            break
    assert action.type == ActionType.COMPLETE
    assert action.feedback.resume_alignment is not None
    assert prep.get_session(sid).status == SessionStatus.COMPLETED
    assert prep.get_progress(sid).percent_complete == 100
    assert sid not in prep.get_active_sessions()

    prompt = prep.get_continuation_options(sid)
    same_role = prompt.options[0].continuation_options
    assert same_role.type == ContinuationType.NEW_ROUND
    new_sid = prep.continue_with_new_session(same_role, "voice")
    assert prep.get_session(new_sid).interaction_mode.value == "voice"
    assert prep.get_active_sessions() == [new_sid]

    prep.cleanup_session(sid)
    assert sid not in prep.store._sessions


def test_end_early_and_phrasing():
    prep = _prep()
    sid = prep.create_session("software-engineer", "entry")
    prep.start_interview(sid)
    assert prep.end_interview_early(sid).type == ActionType.REDIRECT

    prep.submit_response(sid, "I'm not sure, can you explain what you mean?")
    assert prep.get_current_behavior_type(sid).value == "confused"
    assert prep.get_adapted_response(sid, "Q").startswith("Let me help clarify: Q")
    assert prep.get_acknowledgment(sid).startswith("I see you might need some help")
    assert prep.get_transition(sid) == "When you're ready, here's the next question:"

    assert prep.end_interview_early(sid).type == ActionType.COMPLETE
    assert prep.get_session(sid).status == SessionStatus.ENDED_EARLY


def test_same_seed_same_questions():
    texts = []
    for _ in range(2):
        prep = _prep(seed=5)
        sid = prep.create_session("data-scientist", "senior")
        prep.start_interview(sid)
        texts.append([q.text for q in prep.get_session(sid).questions])
    assert texts[0] == texts[1]


def test_set_interaction_mode():
    prep = _prep()
    sid = prep.create_session("software-engineer", "mid")
    prep.set_interaction_mode(sid, "voice")
    assert prep.get_session(sid).interaction_mode.value == "voice"


def test_contact_details_are_redacted_before_storage(caplog):
    prep = _prep()
    sid = prep.create_session("software-engineer", "mid")
    analysis = prep.upload_resume(sid, "jane@example.com\n+1 (555) 123-4567\n" + RESUME)
    raw = analysis.parsed_resume.raw_text
    assert "jane@example.com" not in raw
    assert "[EMAIL]" in raw and "[PHONE]" in raw
    assert "2016 - 2019" in raw

    prep.start_interview(sid)
    with caplog.at_level(logging.INFO, logger="interview_core"):
        prep.submit_response(sid, "Reach me at jane@example.com if the hash map answer is unclear.")
    stored = next(iter(prep.get_session(sid).responses.values()))
    assert stored.text == "Reach me at [EMAIL] if the hash map answer is unclear."
    assert any("Redacted EMAIL" in r.getMessage() for r in caplog.records)
