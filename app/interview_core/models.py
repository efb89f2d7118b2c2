"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- Role catalog records (JobRole, QuestionCategory, ExperienceLevel).
- Resume analysis records consumed by the question generator and feedback.
- Session state (questions, responses, evaluations, lifecycle status).
- Interview actions, progress and the scoring/feedback report.

Testing: Trivial; mostly types. Lifecycle rules live in the session store.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class QuestionType(str, Enum):
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"


class SessionStatus(str, Enum):
    INITIALIZED = "initialized"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ENDED_EARLY = "ended-early"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.ENDED_EARLY)


class BehaviorType(str, Enum):
    CONFUSED = "confused"
    EFFICIENT = "efficient"
    CHATTY = "chatty"
    EDGE_CASE = "edge-case"
    STANDARD = "standard"


class InteractionModeType(str, Enum):
    TEXT = "text"
    VOICE = "voice"


class ActionType(str, Enum):
    NEXT_QUESTION = "next-question"
    FOLLOW_UP = "follow-up"
    COMPLETE = "complete"
    REDIRECT = "redirect"


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ContinuationType(str, Enum):
    NEW_ROUND = "new-round"
    TOPIC_DRILL = "topic-drill"


class Level(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"


# ---------------------------
# Role catalog
# ---------------------------
@dataclass(frozen=True)
class QuestionCategory:
    name: str
    weight: float
    technical_focus: bool


@dataclass(frozen=True)
class JobRole:
    id: str
    name: str
    technical_skills: list[str]
    behavioral_competencies: list[str]
    question_categories: list[QuestionCategory]


@dataclass(frozen=True)
class ExperienceLevel:
    level: Level
    years_min: int
    years_max: int
    expected_depth: int


# ---------------------------
# Resume analysis
# ---------------------------
@dataclass
class ResumeDocument:
    content: str
    format: str = "text"


@dataclass
class WorkExperience:
    company: str
    title: str
    duration: str
    description: str
    technologies: list[str] = field(default_factory=list)


@dataclass
class Project:
    name: str
    description: str
    technologies: list[str] = field(default_factory=list)


@dataclass
class ParsedResume:
    raw_text: str
    sections: dict[str, str] = field(default_factory=dict)
    parsed_at: datetime = field(default_factory=datetime.now)
    format: str = "text"


@dataclass
class Skill:
    name: str
    category: str
    proficiency: Optional[str] = None


@dataclass
class Strength:
    area: str
    evidence: list[str]
    relevance: float


@dataclass
class Gap:
    skill: str
    importance: int
    suggestion: str


@dataclass
class AlignmentScore:
    overall: int
    technical: int
    experience: int
    cultural: int


@dataclass
class ResumeAnalysis:
    parsed_resume: ParsedResume
    strengths: list[Strength] = field(default_factory=list)
    technical_skills: list[Skill] = field(default_factory=list)
    gaps: list[Gap] = field(default_factory=list)
    alignment_score: AlignmentScore = field(
        default_factory=lambda: AlignmentScore(0, 0, 0, 0)
    )
    summary: str = ""


# ---------------------------
# Questions & responses
# ---------------------------
@dataclass
class ResumeContext:
    section: str
    content: str
    relevance: str


@dataclass
class InterviewQuestion:
    id: str
    type: QuestionType
    text: str
    category: str
    difficulty: int
    resume_context: Optional[ResumeContext] = None
    expected_elements: Optional[list[str]] = None
    parent_question_id: Optional[str] = None
    follow_up_count: int = 0

    @property
    def is_follow_up(self) -> bool:
        return self.parent_question_id is not None


@dataclass(frozen=True)
class CandidateResponse:
    question_id: str
    text: str
    timestamp: datetime
    word_count: int
    response_time: float = 0.0


@dataclass
class ResponseEvaluation:
    question_id: str
    depth_score: float
    clarity_score: float
    completeness_score: float
    needs_follow_up: bool
    follow_up_reason: Optional[str] = None
    technical_accuracy: Optional[float] = None


@dataclass
class UserInteraction:
    timestamp: datetime
    type: str
    content: str


# ---------------------------
# Session
# ---------------------------
@dataclass
class SessionState:
    id: str
    role: JobRole
    experience_level: ExperienceLevel
    resume_analysis: Optional[ResumeAnalysis] = None
    questions: list[InterviewQuestion] = field(default_factory=list)
    responses: dict[str, CandidateResponse] = field(default_factory=dict)
    evaluations: dict[str, ResponseEvaluation] = field(default_factory=dict)
    behavior_type: BehaviorType = BehaviorType.STANDARD
    interaction_mode: InteractionModeType = InteractionModeType.TEXT
    status: SessionStatus = SessionStatus.INITIALIZED
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    drill_topic: Optional[str] = None

    def find_question(self, question_id: str) -> Optional[InterviewQuestion]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    @property
    def primary_questions(self) -> list[InterviewQuestion]:
        return [q for q in self.questions if not q.is_follow_up]


@dataclass
class InterviewTracking:
    """Controller-owned per-session cursor and interaction log."""

    cursor: int = 0
    current_question_id: Optional[str] = None
    interactions: list[UserInteraction] = field(default_factory=list)


# ---------------------------
# Scoring & feedback
# ---------------------------
@dataclass
class CommunicationScore:
    clarity: float
    articulation: float
    structure: float
    professionalism: float
    total: float
    grade: Grade


@dataclass
class TechnicalScore:
    depth: float
    accuracy: float
    relevance: float
    problem_solving: float
    total: float
    grade: Grade


@dataclass
class OverallScore:
    weighted_total: float
    grade: Grade


@dataclass
class ScoringRubric:
    communication: CommunicationScore
    technical_fit: TechnicalScore
    overall: OverallScore


@dataclass
class Improvement:
    category: str
    observation: str
    suggestion: str
    priority: Priority


@dataclass
class AlignmentFeedback:
    alignment_score: float
    matched_skills: list[Skill] = field(default_factory=list)
    unverified_skills: list[Skill] = field(default_factory=list)
    missing_skills: list[Skill] = field(default_factory=list)
    experience_gaps: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


@dataclass
class QuestionFeedback:
    question: InterviewQuestion
    response: CandidateResponse
    evaluation: ResponseEvaluation
    feedback: str


@dataclass
class FeedbackReport:
    session_id: str
    scores: ScoringRubric
    strengths: list[str]
    improvements: list[Improvement]
    resume_alignment: Optional[AlignmentFeedback]
    question_breakdown: list[QuestionFeedback]
    summary: str


# ---------------------------
# Controller outputs
# ---------------------------
@dataclass
class InterviewAction:
    type: ActionType
    question: Optional[InterviewQuestion] = None
    feedback: Optional[FeedbackReport] = None
    message: Optional[str] = None

    @classmethod
    def next_question(cls, question: InterviewQuestion) -> "InterviewAction":
        return cls(type=ActionType.NEXT_QUESTION, question=question)

    @classmethod
    def follow_up(cls, question: InterviewQuestion) -> "InterviewAction":
        return cls(type=ActionType.FOLLOW_UP, question=question)

    @classmethod
    def complete(cls, feedback: FeedbackReport) -> "InterviewAction":
        return cls(type=ActionType.COMPLETE, feedback=feedback)

    @classmethod
    def redirect(cls, message: str) -> "InterviewAction":
        return cls(type=ActionType.REDIRECT, message=message)


@dataclass
class InterviewProgress:
    total_questions: int
    answered_questions: int
    current_question_index: int
    percent_complete: float
    estimated_time_remaining: Optional[float] = None


@dataclass
class ContinuationOptions:
    type: ContinuationType
    role: Optional[JobRole] = None
    experience_level: Optional[ExperienceLevel] = None
    drill_topic: Optional[str] = None
    drill_category: Optional[str] = None


@dataclass
class ContinuationOption:
    id: str
    label: str
    description: str
    continuation_options: ContinuationOptions


@dataclass
class ContinuationPrompt:
    message: str
    options: list[ContinuationOption]


@dataclass
class AdaptedResponse:
    content: str
    style: BehaviorType
    adjustments: list[str] = field(default_factory=list)
