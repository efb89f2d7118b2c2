import math
import random

import pytest

from interview_core.models import (
    ParsedResume,
    QuestionType,
    ResponseEvaluation,
    ResumeAnalysis,
    Skill,
    Strength,
)
from interview_core.services import question_bank as bank
from interview_core.services.question_generator import (
    DefaultQuestionGenerator,
    extract_technical_mentions,
)
from interview_core.utils.ids import counter_ids

from conftest import make_question, make_response


def seeded(seed: int = 3) -> DefaultQuestionGenerator:
    return DefaultQuestionGenerator(rng=random.Random(seed), id_factory=counter_ids("q-"))


@pytest.mark.parametrize("seed", range(6))
def test_mid_level_set_has_expected_shape(catalog, seed):
    questions = seeded(seed).generate_question_set(
        catalog.get_role("software-engineer"), catalog.get_level("mid")
    )
    technical = [q for q in questions if q.type == QuestionType.TECHNICAL]
    behavioral = [q for q in questions if q.type == QuestionType.BEHAVIORAL]

    assert len(questions) in (7, 8)
    assert len(technical) == math.ceil(len(questions) * 0.6)
    assert behavioral
    assert len({q.id for q in questions}) == len(questions)
    assert len({q.text for q in questions}) == len(questions)
    assert all(1 <= q.difficulty <= 10 for q in questions)


def test_same_seed_same_interview(catalog):
    role, level = catalog.get_role("data-scientist"), catalog.get_level("entry")
    first = [q.text for q in seeded(11).generate_question_set(role, level)]
    second = [q.text for q in seeded(11).generate_question_set(role, level)]
    assert first == second


def test_resume_aware_questions_reference_their_section(catalog):
    analysis = ResumeAnalysis(
        parsed_resume=ParsedResume(raw_text="..."),
        technical_skills=[Skill("Python", "Programming Languages")],
        strengths=[Strength("Relevant Experience", ["Senior Engineer at Acme"], 5)],
    )
    questions = seeded().generate_question_set(
        catalog.get_role("software-engineer"), catalog.get_level("mid"), analysis
    )
    contextual = [q for q in questions if q.resume_context is not None]

    skills = [q for q in contextual if q.resume_context.section == "skills"]
    experience = [q for q in contextual if q.resume_context.section == "experience"]
    assert len(skills) == 2
    assert all("Python" in q.text and q.type == QuestionType.TECHNICAL for q in skills)
    assert len(experience) == 1
    assert experience[0].type == QuestionType.BEHAVIORAL
    assert "Senior Engineer at Acme" in experience[0].text


def test_drill_topic_is_drawn_first(catalog):
    questions = seeded().generate_question_set(
        catalog.get_role("software-engineer"),
        catalog.get_level("entry"),
        drill_topic="Collaboration",
    )
    behavioral = [q for q in questions if q.type == QuestionType.BEHAVIORAL]
    assert len(behavioral) == 2
    assert {q.category for q in behavioral} == {"Collaboration"}


def test_template_difficulty_is_capped_and_clamped():
    template = bank.QuestionTemplate("t", "c", QuestionType.TECHNICAL, 2, ("a",), cap=5)
    assert template.difficulty(8) == 5
    assert bank.QuestionTemplate("t", "c", QuestionType.TECHNICAL, 2).difficulty(10) == 10
    assert bank.QuestionTemplate("t", "c", QuestionType.TECHNICAL, -5).difficulty(3) == 1


def test_follow_up_probes_mentioned_technology():
    parent = make_question(expected_elements=["caching"])
    response = make_response(parent.id, "We used Redis and Docker.")
    evaluation = ResponseEvaluation(parent.id, 3, 5, 2, True, "insufficient depth", 5)

    follow_up = seeded().generate_follow_up(parent, response, evaluation)

    assert "docker" in follow_up.text
    assert follow_up.parent_question_id == parent.id
    assert follow_up.follow_up_count == 1
    assert follow_up.type == parent.type
    assert follow_up.category == parent.category
    assert follow_up.difficulty == parent.difficulty
    assert follow_up.expected_elements == ["caching"]


def test_behavioral_follow_up_uses_reason_family():
    parent = make_question(qtype=QuestionType.BEHAVIORAL, category="Leadership")
    response = make_response(parent.id, "We used Redis.")
    evaluation = ResponseEvaluation(parent.id, 7, 3, 7, True, "unclear explanation")

    follow_up = seeded().generate_follow_up(parent, response, evaluation)
    assert follow_up.text in bank.CLARITY_FOLLOW_UPS


def test_no_follow_up_when_not_needed_or_capped():
    generator = seeded()
    parent = make_question()
    response = make_response(parent.id, "Fine answer.")
    assert generator.generate_follow_up(
        parent, response, ResponseEvaluation(parent.id, 8, 8, 8, False)
    ) is None

    parent.follow_up_count = 2
    assert generator.generate_follow_up(
        parent, response, ResponseEvaluation(parent.id, 1, 1, 1, True, "insufficient depth")
    ) is None


def test_technical_mentions_follow_vocabulary_order():
    text = "I like Rust, Go, Java and Python. JavaScript too."
    assert extract_technical_mentions(text) == ["python", "java", "javascript"]
    assert extract_technical_mentions("nothing technical here") == []
