"""
Shared written feedback report. Both interaction modes deliver the same
detailed report so results read identically whether the interview was
typed or spoken.
"""

from __future__ import annotations

from ..models import FeedbackReport, Improvement, Priority

HEAVY_RULE = "═" * 55
LIGHT_RULE = "─" * 53

PRIORITY_MARKERS = [
    (Priority.HIGH, "High Priority:", "🔴"),
    (Priority.MEDIUM, "Medium Priority:", "🟡"),
    (Priority.LOW, "Low Priority:", "🟢"),
]


def _section(title: str) -> list[str]:
    return [title, LIGHT_RULE]


def _improvement_lines(items: list[Improvement], marker: str) -> list[str]:
    out = []
    for imp in items:
        out += [
            f"  {marker} {imp.category}",
            f"     {imp.observation}",
            f"     💡 {imp.suggestion}",
            "",
        ]
    return out


def format_feedback(feedback: FeedbackReport) -> str:
    scores = feedback.scores
    comm, tech, overall = scores.communication, scores.technical_fit, scores.overall

    lines = [HEAVY_RULE, "           INTERVIEW FEEDBACK REPORT", HEAVY_RULE, ""]

    lines += _section("📊 OVERALL PERFORMANCE")
    lines += [f"Grade: {overall.grade.value}", f"Score: {overall.weighted_total:.1f}/100", ""]

    lines += _section("💬 COMMUNICATION SKILLS")
    lines += [
        f"Overall Grade: {comm.grade.value} ({comm.total:g}/40)",
        f"  • Clarity: {comm.clarity:.1f}/10",
        f"  • Articulation: {comm.articulation:.1f}/10",
        f"  • Structure: {comm.structure:.1f}/10",
        f"  • Professionalism: {comm.professionalism:.1f}/10",
        "",
    ]

    lines += _section("🔧 TECHNICAL FIT")
    lines += [
        f"Overall Grade: {tech.grade.value} ({tech.total:g}/40)",
        f"  • Depth: {tech.depth:.1f}/10",
        f"  • Accuracy: {tech.accuracy:.1f}/10",
        f"  • Relevance: {tech.relevance:.1f}/10",
        f"  • Problem Solving: {tech.problem_solving:.1f}/10",
        "",
    ]

    if feedback.strengths:
        lines += _section("✨ STRENGTHS")
        lines += [f"  ✓ {s}" for s in feedback.strengths]
        lines.append("")

    if feedback.improvements:
        lines += _section("📈 AREAS FOR IMPROVEMENT")
        for priority, heading, marker in PRIORITY_MARKERS:
            group = [i for i in feedback.improvements if i.priority == priority]
            if group:
                lines.append(heading)
                lines += _improvement_lines(group, marker)

    alignment = feedback.resume_alignment
    if alignment is not None:
        lines += _section("📄 RESUME ALIGNMENT")
        lines += [f"Alignment Score: {alignment.alignment_score:.1f}/100", ""]
        if alignment.matched_skills:
            lines.append("Skills Demonstrated:")
            lines += [f"  ✓ {s.name}" for s in alignment.matched_skills]
            lines.append("")
        if alignment.missing_skills:
            lines.append("Skills to Add:")
            lines += [f"  ○ {s.name}" for s in alignment.missing_skills]
            lines.append("")
        if alignment.suggestions:
            lines.append("Resume Improvement Suggestions:")
            lines += [f"  • {s}" for s in alignment.suggestions]
            lines.append("")

    lines += _section("📝 SUMMARY")
    lines += [feedback.summary, "", HEAVY_RULE]
    return "\n".join(lines)
