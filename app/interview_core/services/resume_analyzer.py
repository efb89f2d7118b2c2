"""
Purpose: Parse a plain-text (or PDF) résumé into sections, skills,
experience and projects, then score how well it lines up with a job role.
Why: résumé-aware questions and the résumé-alignment part of the feedback
report both consume the resulting `ResumeAnalysis`.

Malformed or empty input never fails the session: the analyzer degrades to
a minimal low-alignment record and the interview continues with generic
role-based questions.

Testing: sample résumé strings per role; an empty document must produce
the minimal record.
"""

from __future__ import annotations
import logging
import re
from typing import BinaryIO, Callable, Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..errors import ResumeParsingError
from ..models import (
    AlignmentScore,
    Gap,
    JobRole,
    ParsedResume,
    Project,
    ResumeAnalysis,
    ResumeDocument,
    Skill,
    Strength,
    WorkExperience,
)

logger = logging.getLogger(__name__)

SECTION_PATTERNS: dict[str, list[str]] = {
    "summary": ["summary", "profile", "objective", "about"],
    "experience": ["experience", "work history", "employment", "work experience"],
    "education": ["education", "academic", "qualifications"],
    "skills": ["skills", "technical skills", "competencies", "expertise"],
    "projects": ["projects", "portfolio", "work samples"],
    "achievements": ["achievements", "accomplishments", "awards", "honors"],
    "certifications": ["certifications", "certificates", "licenses"],
}
MAX_HEADER_CHARS = 50

SKILL_CATEGORIES: dict[str, list[str]] = {
    "Programming Languages": [
        "python", "java", "javascript", "typescript", "c++", "c#",
        "ruby", "go", "rust", "php", "swift", "kotlin",
    ],
    "Frameworks": [
        "react", "angular", "vue", "django", "flask", "spring",
        "express", "node", "next.js", "nest.js",
    ],
    "Databases": ["sql", "mysql", "postgresql", "mongodb", "redis", "dynamodb", "cassandra", "oracle"],
    "Cloud": ["aws", "azure", "gcp", "cloud", "docker", "kubernetes", "terraform"],
    "Tools": ["git", "jenkins", "jira", "confluence", "webpack", "babel", "gradle", "maven"],
    "Data Science": [
        "machine learning", "deep learning", "tensorflow", "pytorch",
        "scikit-learn", "pandas", "numpy", "r",
    ],
    "Soft Skills": ["leadership", "communication", "agile", "scrum", "team", "collaboration"],
}

COMMON_SKILLS: list[tuple[str, str]] = [
    ("Python", "Programming Languages"),
    ("JavaScript", "Programming Languages"),
    ("TypeScript", "Programming Languages"),
    ("Java", "Programming Languages"),
    ("React", "Frameworks"),
    ("Node.js", "Frameworks"),
    ("SQL", "Databases"),
    ("AWS", "Cloud"),
    ("Docker", "Cloud"),
    ("Git", "Tools"),
]

COMMON_TECH = [
    "Python", "JavaScript", "TypeScript", "Java", "C++", "C#", "Ruby", "Go",
    "React", "Angular", "Vue", "Django", "Flask", "Spring", "Express",
    "SQL", "MySQL", "PostgreSQL", "MongoDB", "Redis",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes",
    "Git", "Jenkins", "CI/CD",
]

_DURATION_RX = re.compile(r"\d{4}|\d{1,2}/\d{4}|present|current", re.IGNORECASE)
_BULLET_RX = re.compile(r"^[•\-*]\s*")
_BLOCK_SPLIT_RX = re.compile(r"\n\s*\n+")

DEGRADED_SUMMARY = (
    "Resume parsing encountered errors. Analysis is limited. "
    "Please ensure your resume is properly formatted."
)


def extract_pdf_text(file_like: BinaryIO) -> str:
    try:
        reader = PdfReader(file_like)
    except PdfReadError as e:
        raise ResumeParsingError("Could not read PDF resume", original_error=str(e))
    parts = []
    for page in reader.pages:
        txt = page.extract_text() or ""
        if txt.strip():
            parts.append(txt)
    return "\n\n".join(parts).strip()


def _blocks(section: str) -> list[list[str]]:
    out = []
    for entry in _BLOCK_SPLIT_RX.split(section):
        if len(entry.strip()) < 20:
            continue
        lines = [ln.strip() for ln in entry.split("\n") if ln.strip()]
        if lines:
            out.append(lines)
    return out


def _mentions(text: str, term: str) -> bool:
    """Whole-token match; keeps "R" out of "leadership" and "Go" out of "good"."""
    return re.search(r"(?<!\w)" + re.escape(term.lower()) + r"(?!\w)", text.lower()) is not None


def _technologies(text: str) -> list[str]:
    return list(dict.fromkeys(t for t in COMMON_TECH if _mentions(text, t)))


class ResumeParser:
    def parse(self, document: ResumeDocument) -> ParsedResume:
        if not (document.content or "").strip():
            raise ResumeParsingError("Failed to parse resume document: empty content")
        return ParsedResume(
            raw_text=document.content,
            sections=self.extract_sections(document.content),
            format=document.format,
        )

    def extract_sections(self, content: str) -> dict[str, str]:
        """Split on short lines containing a known header keyword."""
        sections: dict[str, str] = {}
        current, buf = "header", []
        for raw in content.split("\n"):
            line = raw.strip()
            lower = line.lower()
            key = None
            if len(line) < MAX_HEADER_CHARS:
                key = next(
                    (k for k, pats in SECTION_PATTERNS.items() if any(p in lower for p in pats)),
                    None,
                )
            if key is not None:
                if buf:
                    sections[current] = "\n".join(buf).strip()
                current, buf = key, []
            elif line or buf:
                # blank lines separate entries within a section
                buf.append(line)
        if buf:
            sections[current] = "\n".join(buf).strip()
        return sections

    def extract_skills(self, parsed: ParsedResume) -> list[Skill]:
        section = parsed.sections.get("skills", "")
        if not section:
            return [
                Skill(name, cat) for name, cat in COMMON_SKILLS if _mentions(parsed.raw_text, name)
            ]

        return [
            Skill(name=kw[:1].upper() + kw[1:], category=category)
            for category, keywords in SKILL_CATEGORIES.items()
            for kw in keywords
            if _mentions(section, kw)
        ]

    def extract_experience(self, parsed: ParsedResume) -> list[WorkExperience]:
        experiences = []
        for lines in _blocks(parsed.sections.get("experience", "")):
            first = lines[0]
            company, title = "Unknown Company", first
            if " at " in first:
                title, company = (p.strip() for p in first.split(" at ", 1))
            elif " - " in first:
                company, title = (p.strip() for p in first.split(" - ", 1))
            duration = next((ln for ln in lines if _DURATION_RX.search(ln)), "")
            description = "\n".join(lines[1:])
            experiences.append(
                WorkExperience(
                    company=company,
                    title=title,
                    duration=duration,
                    description=description,
                    technologies=_technologies(description),
                )
            )
        return experiences

    def extract_projects(self, parsed: ParsedResume) -> list[Project]:
        return [
            Project(
                name=lines[0],
                description="\n".join(lines[1:]),
                technologies=_technologies("\n".join(lines)),
            )
            for lines in _blocks(parsed.sections.get("projects", ""))
        ]

    def extract_achievements(self, parsed: ParsedResume) -> list[str]:
        section = parsed.sections.get("achievements", "")
        cleaned = (_BULLET_RX.sub("", ln).strip() for ln in section.split("\n"))
        return [c for c in cleaned if len(c) >= 10]


def _overlaps(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


class ResumeAnalyzer:
    def __init__(self, parser: ResumeParser | None = None) -> None:
        self.parser = parser or ResumeParser()

    def analyze_for_role(self, document: ResumeDocument, role: JobRole) -> ResumeAnalysis:
        try:
            parsed = self.parser.parse(document)
        except ResumeParsingError as e:
            logger.warning("Resume parsing failed, using minimal analysis: %s", e)
            return minimal_analysis(document, role)

        skills = self.parser.extract_skills(parsed)
        experience = self.parser.extract_experience(parsed)
        projects = self.parser.extract_projects(parsed)

        strengths = self.identify_strengths(role, skills, experience, projects)
        gaps = self.identify_gaps(role, skills)
        alignment = self.calculate_alignment(role, skills, experience)
        return ResumeAnalysis(
            parsed_resume=parsed,
            strengths=strengths,
            technical_skills=skills,
            gaps=gaps,
            alignment_score=alignment,
            summary=_summary(strengths, gaps, alignment),
        )

    def analyze_pdf_for_role(
        self,
        file_like: BinaryIO,
        role: JobRole,
        prepare: Optional[Callable[[str], str]] = None,
    ) -> ResumeAnalysis:
        """`prepare` cleans the extracted text before parsing."""
        try:
            text = extract_pdf_text(file_like)
        except ResumeParsingError as e:
            logger.warning("PDF extraction failed, using minimal analysis: %s", e)
            text = ""
        if prepare is not None and text:
            text = prepare(text)
        return self.analyze_for_role(ResumeDocument(content=text, format="pdf"), role)

    def identify_strengths(
        self,
        role: JobRole,
        skills: list[Skill],
        experience: list[WorkExperience],
        projects: list[Project],
    ) -> list[Strength]:
        strengths = []
        role_skills = role.technical_skills

        matched = [s for s in skills if any(_overlaps(rs, s.name) for rs in role_skills)]
        if matched:
            strengths.append(
                Strength(
                    area="Technical Skills",
                    evidence=[s.name for s in matched],
                    relevance=min(10, len(matched) / len(role_skills) * 10),
                )
            )

        def relevant(techs: list[str]) -> bool:
            return any(t.lower() in rs.lower() for t in techs for rs in role_skills)

        relevant_exp = [e for e in experience if relevant(e.technologies)]
        if relevant_exp:
            strengths.append(
                Strength(
                    area="Relevant Experience",
                    evidence=[f"{e.title} at {e.company}" for e in relevant_exp],
                    relevance=min(10, len(relevant_exp) / len(experience) * 10),
                )
            )

        relevant_proj = [p for p in projects if relevant(p.technologies)]
        if relevant_proj:
            strengths.append(
                Strength(
                    area="Project Experience",
                    evidence=[p.name for p in relevant_proj],
                    relevance=min(10, len(relevant_proj) / len(projects) * 10),
                )
            )
        return strengths

    def identify_gaps(self, role: JobRole, skills: list[Skill]) -> list[Gap]:
        names = [s.name for s in skills]
        return [
            Gap(
                skill=rs,
                importance=7,
                suggestion=(
                    f"Consider adding {rs} to your skillset or highlighting relevant "
                    "experience with this technology."
                ),
            )
            for rs in role.technical_skills
            if not any(_overlaps(n, rs) for n in names)
        ]

    def calculate_alignment(
        self, role: JobRole, skills: list[Skill], experience: list[WorkExperience]
    ) -> AlignmentScore:
        matched = [
            s for s in skills if any(_overlaps(rs, s.name) for rs in role.technical_skills)
        ]
        technical = len(matched) / len(role.technical_skills) * 100 if role.technical_skills else 0
        exp_score = min(100, len(experience) * 25)
        cultural = 70
        overall = technical * 0.5 + exp_score * 0.3 + cultural * 0.2
        return AlignmentScore(
            overall=round(overall),
            technical=round(technical),
            experience=round(exp_score),
            cultural=cultural,
        )


def minimal_analysis(document: ResumeDocument, role: JobRole) -> ResumeAnalysis:
    """Low-alignment stand-in used when the résumé cannot be parsed."""
    return ResumeAnalysis(
        parsed_resume=ParsedResume(raw_text=document.content or "", format=document.format),
        gaps=[
            Gap(
                skill=rs,
                importance=8,
                suggestion=f"Consider adding {rs} to your resume or gaining experience in this area.",
            )
            for rs in role.technical_skills
        ],
        alignment_score=AlignmentScore(0, 0, 0, 0),
        summary=DEGRADED_SUMMARY,
    )


def _summary(strengths: list[Strength], gaps: list[Gap], alignment: AlignmentScore) -> str:
    parts = [f"Overall alignment score: {alignment.overall}%"]
    if strengths:
        parts.append(f"Key strengths identified: {', '.join(s.area for s in strengths)}.")
    else:
        parts.append("Limited alignment with role requirements detected.")
    if gaps:
        parts.append(f"{len(gaps)} skill gap(s) identified for improvement.")
    else:
        parts.append("Strong technical alignment with role requirements.")
    return " ".join(parts)
