"""
Purpose: Build the initial question set for a role/level (optionally
résumé-aware) and synthesize targeted follow-ups when an answer falls short.
Why: Decouple question logic from orchestration. Enables banks, drills and
deterministic replays.

Randomness (template sampling, phrasing choice, résumé pick, final shuffle)
all flows through one injected `random.Random`, so a seeded generator
produces the same interview every time.

Testing: Deterministic seeds for reproducible sequences; rules per role.
"""

from __future__ import annotations
import math
import random
import re
from typing import Optional

from ..models import (
    CandidateResponse,
    ExperienceLevel,
    InterviewQuestion,
    JobRole,
    Level,
    QuestionType,
    ResponseEvaluation,
    ResumeAnalysis,
    ResumeContext,
)
from ..utils.ids import IdFactory, uuid_ids
from . import question_bank as bank

MAX_FOLLOW_UPS = 2
TECHNICAL_SHARE = 0.6

BASE_QUESTION_COUNT = {
    Level.ENTRY: 5,
    Level.MID: 7,
    Level.SENIOR: 8,
    Level.LEAD: 9,
}


class DefaultQuestionGenerator:
    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self._next_id = id_factory or uuid_ids("q-")

    # ---------------------------
    # Question set
    # ---------------------------
    def generate_question_set(
        self,
        role: JobRole,
        level: ExperienceLevel,
        resume_analysis: Optional[ResumeAnalysis] = None,
        *,
        drill_topic: Optional[str] = None,
    ) -> list[InterviewQuestion]:
        total = self.question_count(level)
        technical_count = math.ceil(total * TECHNICAL_SHARE)
        behavioral_count = total - technical_count

        questions = self._technical_questions(
            role, level, technical_count, resume_analysis, drill_topic
        )
        questions += self._behavioral_questions(
            role, level, behavioral_count, resume_analysis, drill_topic
        )
        return self._shuffle(questions)

    def question_count(self, level: ExperienceLevel) -> int:
        return BASE_QUESTION_COUNT[level.level] + self.rng.randrange(2)

    def _technical_questions(self, role, level, count, resume_analysis, drill_topic):
        questions: list[InterviewQuestion] = []
        if resume_analysis is not None and resume_analysis.technical_skills:
            for _ in range(min(2, count // 2)):
                questions.append(self._resume_skill_question(level, resume_analysis))

        templates = self._select_templates(
            bank.technical_templates(role), count - len(questions), drill_topic
        )
        questions += [self._from_template(t, level) for t in templates]
        return questions

    def _behavioral_questions(self, role, level, count, resume_analysis, drill_topic):
        questions: list[InterviewQuestion] = []
        if resume_analysis is not None and resume_analysis.strengths and count > 0:
            questions.append(self._resume_strength_question(level, resume_analysis))

        templates = self._select_templates(
            bank.behavioral_templates(role), count - len(questions), drill_topic
        )
        questions += [self._from_template(t, level) for t in templates]
        return questions

    def _resume_skill_question(
        self, level: ExperienceLevel, analysis: ResumeAnalysis
    ) -> InterviewQuestion:
        skill = self.rng.choice(analysis.technical_skills)
        return InterviewQuestion(
            id=self._next_id(),
            type=QuestionType.TECHNICAL,
            text=(
                f"I see you have experience with {skill.name}. Can you describe a "
                f"challenging problem you solved using {skill.name} and your approach?"
            ),
            category=skill.category or "Technical Skills",
            difficulty=level.expected_depth,
            resume_context=ResumeContext(
                section="skills",
                content=skill.name,
                relevance=f"References candidate's stated experience with {skill.name}",
            ),
            expected_elements=["problem description", "approach", "solution", "outcome"],
        )

    def _resume_strength_question(
        self, level: ExperienceLevel, analysis: ResumeAnalysis
    ) -> InterviewQuestion:
        strength = self.rng.choice(analysis.strengths)
        evidence = strength.evidence[0] if strength.evidence else strength.area
        return InterviewQuestion(
            id=self._next_id(),
            type=QuestionType.BEHAVIORAL,
            text=(
                f"Your resume mentions {evidence}. Can you walk me through that "
                "experience and what you learned?"
            ),
            category=strength.area,
            difficulty=level.expected_depth,
            resume_context=ResumeContext(
                section="experience",
                content=evidence,
                relevance=f"References candidate's stated experience in {strength.area}",
            ),
            expected_elements=["context", "actions", "challenges", "results", "learning"],
        )

    def _select_templates(
        self,
        templates: list[bank.QuestionTemplate],
        count: int,
        drill_topic: Optional[str],
    ) -> list[bank.QuestionTemplate]:
        """Sample without replacement; drill-topic templates are drawn first."""
        if count <= 0:
            return []
        if drill_topic:
            topic = drill_topic.strip().lower()
            focused = [t for t in templates if t.category.lower() == topic]
            rest = [t for t in templates if t.category.lower() != topic]
            pool = self._shuffle(focused) + self._shuffle(rest)
        else:
            pool = self._shuffle(templates)
        return pool[:count]

    def _from_template(
        self, template: bank.QuestionTemplate, level: ExperienceLevel
    ) -> InterviewQuestion:
        return InterviewQuestion(
            id=self._next_id(),
            type=template.type,
            text=template.text,
            category=template.category,
            difficulty=template.difficulty(level.expected_depth),
            expected_elements=list(template.expected_elements or []) or None,
        )

    def _shuffle(self, items: list) -> list:
        """Fisher-Yates over a copy."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self.rng.randrange(i + 1)
            out[i], out[j] = out[j], out[i]
        return out

    # ---------------------------
    # Follow-ups
    # ---------------------------
    def generate_follow_up(
        self,
        question: InterviewQuestion,
        response: CandidateResponse,
        evaluation: ResponseEvaluation,
    ) -> Optional[InterviewQuestion]:
        if question.follow_up_count >= MAX_FOLLOW_UPS:
            return None
        if not evaluation.needs_follow_up:
            return None

        mentions = extract_technical_mentions(response.text)
        if mentions and question.type == QuestionType.TECHNICAL:
            text = self.rng.choice(bank.TECHNICAL_FOLLOW_UPS).format(t=mentions[0])
        else:
            text = self.rng.choice(_elaboration_family(evaluation.follow_up_reason))

        return InterviewQuestion(
            id=self._next_id(),
            type=question.type,
            text=text,
            category=question.category,
            difficulty=question.difficulty,
            expected_elements=(
                list(question.expected_elements) if question.expected_elements else None
            ),
            parent_question_id=question.id,
            follow_up_count=question.follow_up_count + 1,
        )


def extract_technical_mentions(text: str, limit: int = 3) -> list[str]:
    """Vocabulary terms present in text, in vocabulary order."""
    lower = text.lower()
    found = [
        term
        for term in bank.TECHNICAL_TERMS
        if re.search(r"\b" + re.escape(term) + r"\b", lower)
    ]
    return list(dict.fromkeys(found))[:limit]


def _elaboration_family(reason: Optional[str]) -> list[str]:
    reason = reason or "insufficient detail"
    if "depth" in reason or "technical detail" in reason:
        return bank.DEPTH_FOLLOW_UPS
    if "incomplete" in reason or "coverage" in reason:
        return bank.COMPLETENESS_FOLLOW_UPS
    if "unclear" in reason:
        return bank.CLARITY_FOLLOW_UPS
    return bank.GENERAL_FOLLOW_UPS
