"""
Purpose: Static catalog of supported job roles and experience levels.
Why: session creation accepts loose user input ("Software Engineer",
"software-engineer", " MID ") and must resolve it to canonical records or
fail with the list of valid options.
"""

from __future__ import annotations
from typing import Optional

from .errors import InvalidRoleInputError
from .models import ExperienceLevel, JobRole, Level, QuestionCategory


PREDEFINED_ROLES: list[JobRole] = [
    JobRole(
        id="software-engineer",
        name="Software Engineer",
        technical_skills=[
            "Data Structures",
            "Algorithms",
            "System Design",
            "Programming Languages",
            "Testing",
            "Version Control",
            "Debugging",
            "Code Review",
        ],
        behavioral_competencies=[
            "Problem Solving",
            "Collaboration",
            "Communication",
            "Adaptability",
            "Time Management",
            "Learning Agility",
        ],
        question_categories=[
            QuestionCategory("Coding", 0.4, True),
            QuestionCategory("System Design", 0.3, True),
            QuestionCategory("Behavioral", 0.2, False),
            QuestionCategory("Problem Solving", 0.1, True),
        ],
    ),
    JobRole(
        id="product-manager",
        name="Product Manager",
        technical_skills=[
            "Product Strategy",
            "Market Analysis",
            "User Research",
            "Data Analysis",
            "Roadmap Planning",
            "Metrics & KPIs",
            "A/B Testing",
            "Technical Literacy",
        ],
        behavioral_competencies=[
            "Leadership",
            "Stakeholder Management",
            "Communication",
            "Decision Making",
            "Prioritization",
            "Influence",
            "Customer Empathy",
        ],
        question_categories=[
            QuestionCategory("Product Strategy", 0.3, True),
            QuestionCategory("Execution", 0.25, False),
            QuestionCategory("Leadership", 0.25, False),
            QuestionCategory("Analytics", 0.2, True),
        ],
    ),
    JobRole(
        id="data-scientist",
        name="Data Scientist",
        technical_skills=[
            "Machine Learning",
            "Statistics",
            "Python/R",
            "SQL",
            "Data Visualization",
            "Feature Engineering",
            "Model Evaluation",
            "Big Data Technologies",
            "Deep Learning",
        ],
        behavioral_competencies=[
            "Analytical Thinking",
            "Communication",
            "Business Acumen",
            "Collaboration",
            "Curiosity",
            "Problem Solving",
        ],
        question_categories=[
            QuestionCategory("Machine Learning", 0.35, True),
            QuestionCategory("Statistics", 0.25, True),
            QuestionCategory("Coding", 0.2, True),
            QuestionCategory("Behavioral", 0.2, False),
        ],
    ),
    JobRole(
        id="frontend-engineer",
        name="Frontend Engineer",
        technical_skills=[
            "HTML/CSS",
            "JavaScript/TypeScript",
            "React/Vue/Angular",
            "Responsive Design",
            "Web Performance",
            "Accessibility",
            "State Management",
            "Testing",
            "Build Tools",
        ],
        behavioral_competencies=[
            "Attention to Detail",
            "User Empathy",
            "Collaboration",
            "Communication",
            "Problem Solving",
            "Adaptability",
        ],
        question_categories=[
            QuestionCategory("UI Development", 0.35, True),
            QuestionCategory("JavaScript", 0.3, True),
            QuestionCategory("Design & UX", 0.2, True),
            QuestionCategory("Behavioral", 0.15, False),
        ],
    ),
    JobRole(
        id="backend-engineer",
        name="Backend Engineer",
        technical_skills=[
            "API Design",
            "Database Design",
            "System Architecture",
            "Security",
            "Performance Optimization",
            "Microservices",
            "Cloud Services",
            "Testing",
            "DevOps",
        ],
        behavioral_competencies=[
            "Problem Solving",
            "Collaboration",
            "Communication",
            "Reliability",
            "Scalability Mindset",
            "Learning Agility",
        ],
        question_categories=[
            QuestionCategory("System Design", 0.35, True),
            QuestionCategory("API Development", 0.3, True),
            QuestionCategory("Database", 0.2, True),
            QuestionCategory("Behavioral", 0.15, False),
        ],
    ),
    JobRole(
        id="devops-engineer",
        name="DevOps Engineer",
        technical_skills=[
            "CI/CD",
            "Infrastructure as Code",
            "Cloud Platforms",
            "Containerization",
            "Monitoring & Logging",
            "Scripting",
            "Security",
            "Networking",
            "Automation",
        ],
        behavioral_competencies=[
            "Problem Solving",
            "Collaboration",
            "Communication",
            "Reliability",
            "Process Improvement",
            "Incident Management",
        ],
        question_categories=[
            QuestionCategory("Infrastructure", 0.35, True),
            QuestionCategory("Automation", 0.3, True),
            QuestionCategory("Troubleshooting", 0.2, True),
            QuestionCategory("Behavioral", 0.15, False),
        ],
    ),
]

EXPERIENCE_LEVELS: list[ExperienceLevel] = [
    ExperienceLevel(Level.ENTRY, 0, 2, 3),
    ExperienceLevel(Level.MID, 2, 5, 6),
    ExperienceLevel(Level.SENIOR, 5, 10, 8),
    ExperienceLevel(Level.LEAD, 10, 100, 10),
]


class RoleCatalog:
    def __init__(
        self,
        roles: Optional[list[JobRole]] = None,
        levels: Optional[list[ExperienceLevel]] = None,
    ) -> None:
        self._roles = list(roles if roles is not None else PREDEFINED_ROLES)
        self._levels = list(levels if levels is not None else EXPERIENCE_LEVELS)

    def roles(self) -> list[JobRole]:
        return list(self._roles)

    def levels(self) -> list[ExperienceLevel]:
        return list(self._levels)

    def role_names(self) -> list[str]:
        return [r.name for r in self._roles]

    def level_names(self) -> list[str]:
        return [lv.level.value for lv in self._levels]

    def get_role(self, role_id_or_name: str) -> JobRole:
        """Resolve by exact id, then by case-insensitive trimmed display name."""
        raw = role_id_or_name or ""
        for role in self._roles:
            if role.id == raw:
                return role
        needle = raw.strip().lower()
        for role in self._roles:
            if role.id == needle or role.name.lower() == needle:
                return role
        raise InvalidRoleInputError(
            f'Invalid role name: "{raw}". Please select from available options.',
            self.role_names(),
        )

    def get_level(self, level: str) -> ExperienceLevel:
        needle = (level or "").strip().lower()
        for lv in self._levels:
            if lv.level.value == needle:
                return lv
        raise InvalidRoleInputError(
            f'Invalid experience level: "{level}". Please select from available options.',
            self.level_names(),
        )

    def is_valid_role(self, role_id_or_name: str) -> bool:
        try:
            self.get_role(role_id_or_name)
        except InvalidRoleInputError:
            return False
        return True

    def is_valid_level(self, level: str) -> bool:
        try:
            self.get_level(level)
        except InvalidRoleInputError:
            return False
        return True
