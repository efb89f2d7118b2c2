"""
Purpose: Turn a finished (or ended-early) session into a scoring rubric and
narrative feedback: strengths, prioritized improvements, optional résumé
alignment, a per-question breakdown and a short summary.
Why: Powers the "Feedback" view and the continuation prompt.

The report is a pure function of the session record; nothing here mutates
state and nothing is persisted.

Testing: build sessions with hand-picked evaluations and assert grades,
improvement categories and summary text.
"""

from __future__ import annotations
from typing import Optional

from ..models import (
    AlignmentFeedback,
    CandidateResponse,
    CommunicationScore,
    FeedbackReport,
    Grade,
    Improvement,
    InterviewQuestion,
    JobRole,
    OverallScore,
    Priority,
    QuestionFeedback,
    ResponseEvaluation,
    ResumeAnalysis,
    ScoringRubric,
    SessionState,
    Skill,
    TechnicalScore,
)
from ..utils.text import clamp, count_keywords_present, mean, split_sentences

COMMUNICATION_WEIGHT = 0.4
TECHNICAL_WEIGHT = 0.6
SECTION_MAX = 40
IMPROVEMENT_THRESHOLD = 7
STRENGTH_THRESHOLD = 8

GRADE_THRESHOLDS = [(90, Grade.A), (80, Grade.B), (70, Grade.C), (60, Grade.D)]

ARTICULATION_TERMS = ["implement", "design", "optimize", "analyze", "evaluate", "develop"]
FILLER_WORDS = ["um", "uh", "like", "you know", "basically", "actually"]
CONNECTORS = ["first", "second", "then", "finally", "because", "therefore", "however"]
CASUAL_PHRASES = ["gonna", "wanna", "kinda", "sorta", "yeah", "nope"]

MIN_RESUME_SUGGESTIONS = 3
GENERIC_RESUME_ADVICE = [
    "Include specific metrics and outcomes from your projects and experiences "
    '(e.g., "Improved performance by 40%", "Led team of 5 engineers").',
    "Use action verbs and technical terminology that matches the job description "
    "to improve ATS compatibility.",
    "Open each experience entry with the outcome you delivered, then the "
    "technologies you used to get there.",
]

GRADE_OPENERS = {
    Grade.A: "Excellent interview performance! You demonstrated strong technical knowledge and communication skills.",
    Grade.B: "Good interview performance. You showed solid understanding with room for some refinement.",
    Grade.C: "Satisfactory interview performance. Focus on the improvement areas to strengthen your candidacy.",
    Grade.D: "Interview performance needs improvement. Review the feedback carefully and practice the suggested areas.",
    Grade.F: "Interview performance requires significant improvement. Consider additional preparation and practice.",
}


def assign_grade(percentage: float) -> Grade:
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return Grade.F


class FeedbackGenerator:
    def generate_feedback(self, session: SessionState) -> FeedbackReport:
        responses = list(session.responses.values())
        evaluations = list(session.evaluations.values())

        communication = self.score_communication(responses, evaluations)
        technical = self.score_technical_fit(responses, evaluations, session.role)
        scores = ScoringRubric(
            communication=communication,
            technical_fit=technical,
            overall=self.calculate_overall_score(communication, technical),
        )

        strengths = self.identify_strengths(scores, evaluations)
        improvements = self.generate_improvements(session.role, scores, evaluations)
        alignment = None
        if session.resume_analysis is not None:
            alignment = self.evaluate_resume_alignment(
                session.resume_analysis, evaluations, responses
            )

        return FeedbackReport(
            session_id=session.id,
            scores=scores,
            strengths=strengths,
            improvements=improvements,
            resume_alignment=alignment,
            question_breakdown=self.question_breakdown(session),
            summary=self.summary(scores, strengths, improvements),
        )

    # ---------------------------
    # Rubric
    # ---------------------------
    def score_communication(
        self,
        responses: list[CandidateResponse],
        evaluations: list[ResponseEvaluation],
    ) -> CommunicationScore:
        if not responses:
            return CommunicationScore(0, 0, 0, 0, 0, Grade.F)

        clarity = mean([e.clarity_score for e in evaluations])
        articulation = mean([_articulation(r) for r in responses])
        structure = mean([_structure(r) for r in responses])
        professionalism = mean([_professionalism(r) for r in responses])
        total = clarity + articulation + structure + professionalism
        return CommunicationScore(
            clarity=clarity,
            articulation=articulation,
            structure=structure,
            professionalism=professionalism,
            total=total,
            grade=assign_grade(total / SECTION_MAX * 100),
        )

    def score_technical_fit(
        self,
        responses: list[CandidateResponse],
        evaluations: list[ResponseEvaluation],
        role: JobRole,
    ) -> TechnicalScore:
        if not responses:
            return TechnicalScore(0, 0, 0, 0, 0, Grade.F)

        depth = mean([e.depth_score for e in evaluations])
        accuracy_scores = [
            e.technical_accuracy for e in evaluations if e.technical_accuracy is not None
        ]
        accuracy = mean(accuracy_scores) if accuracy_scores else depth
        relevance = mean([_relevance(r, role) for r in responses])
        problem_solving = mean([e.completeness_score for e in evaluations])
        total = depth + accuracy + relevance + problem_solving
        return TechnicalScore(
            depth=depth,
            accuracy=accuracy,
            relevance=relevance,
            problem_solving=problem_solving,
            total=total,
            grade=assign_grade(total / SECTION_MAX * 100),
        )

    def calculate_overall_score(
        self, communication: CommunicationScore, technical: TechnicalScore
    ) -> OverallScore:
        comm_pct = communication.total / SECTION_MAX * 100
        tech_pct = technical.total / SECTION_MAX * 100
        weighted = comm_pct * COMMUNICATION_WEIGHT + tech_pct * TECHNICAL_WEIGHT
        return OverallScore(weighted_total=weighted, grade=assign_grade(weighted))

    # ---------------------------
    # Narrative
    # ---------------------------
    def generate_improvements(
        self,
        role: JobRole,
        scores: ScoringRubric,
        evaluations: list[ResponseEvaluation],
    ) -> list[Improvement]:
        comm, tech = scores.communication, scores.technical_fit
        checks = [
            (
                comm.clarity,
                "Communication - Clarity",
                "Responses could be clearer and more direct",
                "Structure your answers with clear topic sentences and logical flow. "
                "Use transition words to connect ideas.",
                Priority.HIGH,
            ),
            (
                comm.articulation,
                "Communication - Articulation",
                "Word choice and expression could be more precise",
                "Use specific technical terminology where appropriate. "
                "Practice explaining complex concepts in simple terms.",
                Priority.MEDIUM,
            ),
            (
                comm.structure,
                "Communication - Structure",
                "Responses lack consistent organization",
                "Use frameworks like STAR (Situation, Task, Action, Result) for behavioral "
                "questions. For technical questions, state the problem, explain your "
                "approach, then discuss the solution.",
                Priority.HIGH,
            ),
            (
                comm.professionalism,
                "Communication - Professionalism",
                "Tone or language could be more professional",
                "Maintain a professional tone throughout. Avoid casual language and ensure "
                "responses are appropriate for a formal interview setting.",
                Priority.MEDIUM,
            ),
            (
                tech.depth,
                "Technical - Depth",
                "Responses lack sufficient technical depth",
                "Provide more detailed explanations of technical concepts. "
                "Discuss trade-offs, alternatives, and implementation details.",
                Priority.HIGH,
            ),
            (
                tech.accuracy,
                "Technical - Accuracy",
                "Technical accuracy needs improvement",
                "Review fundamental concepts for your role. Use precise technical "
                "terminology and ensure your explanations are technically sound.",
                Priority.HIGH,
            ),
            (
                tech.relevance,
                "Technical - Relevance",
                "Responses could be more relevant to the role",
                f"Focus on skills and experiences directly related to {role.name}. "
                "Highlight relevant technologies and methodologies.",
                Priority.MEDIUM,
            ),
            (
                tech.problem_solving,
                "Technical - Problem Solving",
                "Problem-solving approach could be more comprehensive",
                "Walk through your thought process step-by-step. Discuss how you identify "
                "problems, evaluate options, and implement solutions.",
                Priority.HIGH,
            ),
        ]
        improvements = [
            Improvement(category, observation, suggestion, priority)
            for score, category, observation, suggestion, priority in checks
            if score < IMPROVEMENT_THRESHOLD
        ]

        follow_ups = sum(1 for e in evaluations if e.needs_follow_up)
        if follow_ups / max(len(evaluations), 1) > 0.5:
            improvements.append(
                Improvement(
                    "Response Completeness",
                    "Many responses required follow-up questions",
                    "Provide more complete initial answers. Anticipate what the interviewer "
                    "might want to know and address it proactively.",
                    Priority.HIGH,
                )
            )
        return improvements

    def identify_strengths(
        self, scores: ScoringRubric, evaluations: list[ResponseEvaluation]
    ) -> list[str]:
        comm, tech = scores.communication, scores.technical_fit
        candidates = [
            (comm.clarity, "Clear and direct communication style"),
            (comm.articulation, "Strong articulation and word choice"),
            (comm.structure, "Well-structured and organized responses"),
            (comm.professionalism, "Professional and appropriate tone throughout"),
            (tech.depth, "Demonstrated deep technical knowledge"),
            (tech.accuracy, "Technically accurate and precise explanations"),
            (tech.relevance, "Highly relevant experience and skills for the role"),
            (tech.problem_solving, "Strong problem-solving and analytical skills"),
        ]
        strengths = [text for score, text in candidates if score >= STRENGTH_THRESHOLD]

        # ratio-based strengths need at least one evaluation to mean anything
        if evaluations:
            n = len(evaluations)
            strong = sum(
                1
                for e in evaluations
                if e.depth_score >= 8 and e.clarity_score >= 8 and e.completeness_score >= 8
            )
            if strong >= n * 0.7:
                strengths.append("Consistently strong performance across all questions")
            if sum(1 for e in evaluations if e.needs_follow_up) <= n * 0.2:
                strengths.append("Provided complete answers with minimal need for follow-up")

        if not strengths and scores.overall.weighted_total >= 70:
            strengths.append("Solid overall interview performance")
        return strengths

    def evaluate_resume_alignment(
        self,
        analysis: ResumeAnalysis,
        evaluations: list[ResponseEvaluation],
        responses: list[CandidateResponse],
    ) -> AlignmentFeedback:
        by_question = {e.question_id: e for e in evaluations}

        matched: list[Skill] = []
        for skill in analysis.technical_skills:
            needle = skill.name.lower()
            mentioning = [r for r in responses if needle in r.text.lower()]
            depths = [
                by_question[r.question_id].depth_score
                for r in mentioning
                if r.question_id in by_question
            ]
            if depths and mean(depths) >= 5:
                matched.append(skill)

        matched_names = {s.name for s in matched}
        unverified = [s for s in analysis.technical_skills if s.name not in matched_names]
        missing = [Skill(name=g.skill, category="missing") for g in analysis.gaps]
        experience_gaps = _experience_gaps(analysis, evaluations)

        return AlignmentFeedback(
            alignment_score=analysis.alignment_score.overall,
            matched_skills=matched,
            unverified_skills=unverified,
            missing_skills=missing,
            experience_gaps=experience_gaps,
            suggestions=_resume_suggestions(
                analysis.alignment_score.overall,
                matched,
                unverified,
                missing,
                experience_gaps,
                evaluations,
            ),
        )

    def question_breakdown(self, session: SessionState) -> list[QuestionFeedback]:
        breakdown = []
        for question in session.questions:
            response = session.responses.get(question.id)
            evaluation = session.evaluations.get(question.id)
            if response is None or evaluation is None:
                continue
            breakdown.append(
                QuestionFeedback(
                    question=question,
                    response=response,
                    evaluation=evaluation,
                    feedback=question_feedback(question, evaluation),
                )
            )
        return breakdown

    def summary(
        self,
        scores: ScoringRubric,
        strengths: list[str],
        improvements: list[Improvement],
    ) -> str:
        grade = scores.overall.grade
        parts = [
            f"Overall Performance: {grade.value} ({scores.overall.weighted_total:.1f}/100)",
            "",
            GRADE_OPENERS[grade],
            "",
        ]
        if strengths:
            parts.append("Key Strengths:")
            parts += [f"• {s}" for s in strengths[:3]]
            parts.append("")

        high = [i for i in improvements if i.priority == Priority.HIGH]
        if high:
            parts.append("Priority Areas for Improvement:")
            parts += [f"• {i.category}: {i.suggestion}" for i in high[:3]]
        return "\n".join(parts)


def question_feedback(
    question: InterviewQuestion, evaluation: ResponseEvaluation
) -> str:
    avg = (
        evaluation.depth_score + evaluation.clarity_score + evaluation.completeness_score
    ) / 3
    if avg >= 8:
        parts = ["Strong response."]
    elif avg >= 6:
        parts = ["Good response."]
    else:
        parts = ["Response needs improvement."]

    if evaluation.depth_score < 6:
        parts.append("Consider providing more technical depth and detail.")
    if evaluation.clarity_score < 6:
        parts.append("Work on making your explanation clearer and more structured.")
    if evaluation.completeness_score < 6:
        parts.append("Address all aspects of the question more thoroughly.")
    if evaluation.technical_accuracy is not None and evaluation.technical_accuracy < 6:
        parts.append("Review the technical concepts to ensure accuracy.")
    if evaluation.depth_score >= 8:
        parts.append("Excellent technical depth demonstrated.")
    if evaluation.clarity_score >= 8:
        parts.append("Very clear and well-articulated response.")
    return " ".join(parts)


def _articulation(response: CandidateResponse) -> float:
    text = response.text.lower()
    score = 5
    ratio = len(set(text.split())) / max(response.word_count, 1)
    if ratio > 0.7:
        score += 2
    elif ratio > 0.5:
        score += 1
    if any(term in text for term in ARTICULATION_TERMS):
        score += 2
    if count_keywords_present(text, FILLER_WORDS) > 3:
        score -= 1
    return clamp(score)


def _structure(response: CandidateResponse) -> float:
    text = response.text.lower()
    score = 5
    connectors = count_keywords_present(text, CONNECTORS)
    if connectors >= 3:
        score += 3
    elif connectors == 2:
        score += 2
    elif connectors == 1:
        score += 1
    sentences = len(split_sentences(text))
    if sentences >= 4:
        score += 2
    elif sentences >= 2:
        score += 1
    return clamp(score)


def _professionalism(response: CandidateResponse) -> float:
    text = response.text.lower()
    score = 8 - count_keywords_present(text, CASUAL_PHRASES)
    if response.word_count < 15:
        score -= 2
    if response.word_count > 10 and not any(c.isupper() for c in response.text):
        score -= 1
    return clamp(score)


def _relevance(response: CandidateResponse, role: JobRole) -> float:
    text = response.text.lower()
    skills = sum(1 for s in role.technical_skills if s.lower() in text)
    competencies = sum(1 for c in role.behavioral_competencies if c.lower() in text)
    return clamp(5 + min(skills, 3) + min(competencies, 2))


def _experience_gaps(
    analysis: ResumeAnalysis, evaluations: list[ResponseEvaluation]
) -> list[str]:
    gaps = [g.suggestion for g in analysis.gaps if g.importance >= 7]
    accuracies = [e.technical_accuracy for e in evaluations if e.technical_accuracy is not None]
    if accuracies and mean(accuracies) < 6:
        gaps.append(
            "Interview responses suggest technical knowledge may be less deep than "
            "resume indicates. Consider strengthening practical experience."
        )
    if evaluations and mean([e.completeness_score for e in evaluations]) < 6:
        gaps.append(
            "Responses lacked completeness, suggesting resume may overstate breadth of "
            "experience. Focus on depth over breadth."
        )
    return gaps


def _resume_suggestions(
    alignment: float,
    matched: list[Skill],
    unverified: list[Skill],
    missing: list[Skill],
    experience_gaps: list[str],
    evaluations: list[ResponseEvaluation],
) -> list[str]:
    suggestions: list[str] = []
    if alignment < 50:
        suggestions.append(
            "Your resume shows limited alignment with this role. Consider tailoring your "
            "resume to highlight relevant experience and skills for this position."
        )
    elif alignment < 70:
        suggestions.append(
            "Your resume has moderate alignment with this role. Focus on emphasizing "
            "relevant technical skills and projects that match the job requirements."
        )

    if matched:
        names = ", ".join(s.name for s in matched[:3])
        suggestions.append(
            f"You successfully demonstrated {len(matched)} skill(s) from your resume "
            f"({names}). Make sure these are prominently featured."
        )
    if unverified:
        names = ", ".join(s.name for s in unverified[:3])
        suggestions.append(
            f"Skills listed on resume but not demonstrated in interview: {names}. "
            "Either remove these or be prepared to discuss them in detail."
        )
    if missing:
        names = ", ".join(s.name for s in missing[:3])
        suggestions.append(
            f"Key skills missing from your resume: {names}. Consider gaining experience "
            "in these areas or adding them if you have relevant experience."
        )

    depth = sum(e.depth_score for e in evaluations) / max(len(evaluations), 1)
    if depth < 6:
        suggestions.append(
            "Your interview responses lacked technical depth. Ensure your resume includes "
            "specific examples, metrics, and outcomes that demonstrate deep expertise."
        )
    elif depth >= 8:
        suggestions.append(
            "You demonstrated strong technical depth in the interview. Make sure your "
            "resume reflects this expertise with detailed project descriptions and "
            "quantifiable achievements."
        )

    if experience_gaps:
        suggestions.append(experience_gaps[0])

    for advice in GENERIC_RESUME_ADVICE:
        if len(suggestions) >= MIN_RESUME_SUGGESTIONS:
            break
        suggestions.append(advice)
    return suggestions
