from __future__ import annotations
import random
from datetime import datetime, timedelta

import pytest

from interview_core.controller import InterviewController
from interview_core.models import CandidateResponse, InterviewQuestion, QuestionType
from interview_core.persistence.session_store import InMemorySessionStore
from interview_core.roles import RoleCatalog
from interview_core.services.behavior import BehaviorClassifier
from interview_core.services.feedback import FeedbackGenerator
from interview_core.services.question_generator import DefaultQuestionGenerator
from interview_core.services.response_evaluator import ResponseEvaluator
from interview_core.utils.ids import counter_ids
from interview_core.utils.text import count_words

T0 = datetime(2024, 5, 1, 9, 0, 0)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_response(question_id: str, text: str, response_time: float = 0.0) -> CandidateResponse:
    return CandidateResponse(
        question_id=question_id,
        text=text,
        timestamp=T0,
        word_count=count_words(text),
        response_time=response_time,
    )


def make_question(
    qid: str = "q-1",
    qtype: QuestionType = QuestionType.TECHNICAL,
    text: str = "Explain how a hash map handles collisions.",
    category: str = "Data Structures",
    expected_elements=None,
) -> InterviewQuestion:
    return InterviewQuestion(
        id=qid,
        type=qtype,
        text=text,
        category=category,
        difficulty=5,
        expected_elements=expected_elements,
    )


@pytest.fixture
def catalog() -> RoleCatalog:
    return RoleCatalog()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(catalog, clock) -> InMemorySessionStore:
    return InMemorySessionStore(catalog=catalog, id_factory=counter_ids("s-"), clock=clock)


@pytest.fixture
def generator() -> DefaultQuestionGenerator:
    return DefaultQuestionGenerator(rng=random.Random(7), id_factory=counter_ids("q-"))


@pytest.fixture
def controller(store, generator, clock) -> InterviewController:
    return InterviewController(
        store,
        generator,
        ResponseEvaluator(),
        BehaviorClassifier(),
        FeedbackGenerator(),
        clock=clock,
    )
