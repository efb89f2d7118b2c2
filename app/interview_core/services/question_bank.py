"""
Static question templates, keyed by role id.

Difficulty is expressed relative to the level's expected depth; `cap`
bounds the result for questions that should stay approachable.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..models import JobRole, QuestionType


@dataclass(frozen=True)
class QuestionTemplate:
    text: str
    category: str
    type: QuestionType
    difficulty_offset: int = 0
    expected_elements: Optional[tuple[str, ...]] = None
    cap: int = 10

    def difficulty(self, expected_depth: int) -> int:
        return max(1, min(expected_depth + self.difficulty_offset, self.cap, 10))


def _tech(text, category, offset, elements, cap=10) -> QuestionTemplate:
    return QuestionTemplate(text, category, QuestionType.TECHNICAL, offset, tuple(elements), cap)


def _beh(text, category, offset, elements) -> QuestionTemplate:
    return QuestionTemplate(text, category, QuestionType.BEHAVIORAL, offset, tuple(elements))


TECHNICAL_TEMPLATES: dict[str, list[QuestionTemplate]] = {
    "software-engineer": [
        _tech(
            "Explain the difference between a stack and a queue. When would you use each?",
            "Data Structures", 0, ["stack", "queue", "LIFO", "FIFO", "use cases"], cap=5,
        ),
        _tech(
            "How would you design a URL shortening service like bit.ly?",
            "System Design", 2, ["database", "hashing", "scalability", "API"],
        ),
        _tech(
            "What is the time complexity of common sorting algorithms? "
            "Which would you choose for different scenarios?",
            "Algorithms", 0, ["O(n log n)", "quicksort", "mergesort", "trade-offs"],
        ),
        _tech(
            "Explain how you would implement a thread-safe singleton pattern.",
            "Coding", 1, ["thread safety", "synchronization", "lazy initialization"],
        ),
        _tech(
            "Describe your approach to debugging a production issue that only occurs intermittently.",
            "Problem Solving", 0, ["logging", "monitoring", "reproduction", "root cause"],
        ),
    ],
    "product-manager": [
        _tech(
            "How would you prioritize features for the next product release?",
            "Product Strategy", 0, ["user value", "business impact", "effort", "framework"],
        ),
        _tech(
            "Walk me through how you would measure the success of a new feature.",
            "Analytics", 0, ["metrics", "KPIs", "baseline", "goals"],
        ),
        _tech(
            "How do you conduct user research to validate product assumptions?",
            "Product Strategy", -1, ["interviews", "surveys", "usability testing", "data analysis"],
        ),
        _tech(
            "Explain how you would design an A/B test for a new checkout flow.",
            "Analytics", 1, ["hypothesis", "metrics", "sample size", "variants"],
        ),
    ],
    "data-scientist": [
        _tech(
            "Explain the bias-variance tradeoff in machine learning.",
            "Machine Learning", 0, ["bias", "variance", "overfitting", "underfitting"],
        ),
        _tech(
            "How would you handle missing data in a dataset?",
            "Statistics", -1, ["imputation", "deletion", "analysis", "impact"],
        ),
        _tech(
            "Describe the process of feature engineering for a predictive model.",
            "Machine Learning", 0,
            ["feature selection", "transformation", "domain knowledge", "validation"],
        ),
        _tech(
            "What evaluation metrics would you use for a classification problem with imbalanced classes?",
            "Machine Learning", 1, ["precision", "recall", "F1", "ROC-AUC", "class imbalance"],
        ),
        _tech(
            "Explain how you would optimize a SQL query that is running slowly.",
            "Coding", 0, ["indexes", "query plan", "joins", "optimization"],
        ),
    ],
    "frontend-engineer": [
        _tech(
            "Explain the virtual DOM and how React uses it for performance optimization.",
            "JavaScript", 0, ["virtual DOM", "reconciliation", "diffing", "performance"],
        ),
        _tech(
            "How would you implement responsive design for a complex web application?",
            "UI Development", -1, ["media queries", "flexbox", "grid", "mobile-first"],
        ),
        _tech(
            "What are the key principles of web accessibility and how do you implement them?",
            "Design & UX", 0, ["ARIA", "semantic HTML", "keyboard navigation", "screen readers"],
        ),
        _tech(
            "Describe your approach to optimizing web performance and load times.",
            "UI Development", 1, ["lazy loading", "code splitting", "caching", "metrics"],
        ),
    ],
    "backend-engineer": [
        _tech(
            "How would you design a RESTful API for a social media platform?",
            "API Development", 0, ["REST", "endpoints", "authentication", "versioning"],
        ),
        _tech(
            "Explain the CAP theorem and its implications for distributed systems.",
            "System Design", 2,
            ["consistency", "availability", "partition tolerance", "trade-offs"],
        ),
        _tech(
            "What strategies would you use to optimize database queries for a high-traffic application?",
            "Database", 1,
            ["indexing", "caching", "query optimization", "connection pooling"],
        ),
        _tech(
            "How do you ensure API security and prevent common vulnerabilities?",
            "API Development", 0,
            ["authentication", "authorization", "SQL injection", "rate limiting"],
        ),
    ],
    "devops-engineer": [
        _tech(
            "Explain the principles of Infrastructure as Code and your experience with tools like Terraform.",
            "Infrastructure", 0, ["IaC", "declarative", "version control", "automation"],
        ),
        _tech(
            "How would you design a CI/CD pipeline for a microservices application?",
            "Automation", 1, ["CI/CD", "testing", "deployment", "rollback"],
        ),
        _tech(
            "Describe your approach to monitoring and alerting for production systems.",
            "Troubleshooting", 0, ["metrics", "logs", "alerts", "dashboards"],
        ),
        _tech(
            "What is container orchestration and how does Kubernetes solve scaling challenges?",
            "Infrastructure", 1, ["containers", "orchestration", "scaling", "Kubernetes"],
        ),
    ],
}

COMMON_BEHAVIORAL_TEMPLATES: list[QuestionTemplate] = [
    _beh(
        "Tell me about a time when you had to work with a difficult team member. How did you handle it?",
        "Collaboration", 0, ["situation", "action", "result", "conflict resolution"],
    ),
    _beh(
        "Describe a situation where you had to learn a new technology or skill quickly. "
        "What was your approach?",
        "Learning Agility", -1, ["learning strategy", "resources", "application", "outcome"],
    ),
    _beh(
        "Give me an example of a time when you had to make a difficult decision with incomplete information.",
        "Decision Making", 1, ["context", "analysis", "decision", "outcome"],
    ),
    _beh(
        "Tell me about a project that failed or didn't meet expectations. What did you learn?",
        "Adaptability", 0, ["failure", "reflection", "learning", "improvement"],
    ),
]


def technical_templates(role: JobRole) -> list[QuestionTemplate]:
    return list(TECHNICAL_TEMPLATES.get(role.id, []))


def behavioral_templates(role: JobRole) -> list[QuestionTemplate]:
    templates = list(COMMON_BEHAVIORAL_TEMPLATES)
    for competency in role.behavioral_competencies[:3]:
        lower = competency.lower()
        templates.append(
            _beh(
                f"Describe a situation where you demonstrated strong {lower} skills.",
                competency, 0, ["situation", "action", "result", lower],
            )
        )
    return templates


TECHNICAL_TERMS = [
    "react", "angular", "vue", "node", "express", "django", "flask",
    "spring", "kubernetes", "docker", "aws", "azure", "gcp",
    "postgresql", "mongodb", "redis", "elasticsearch", "kafka",
    "graphql", "rest", "grpc", "microservices", "serverless",
    "terraform", "ansible", "jenkins", "github actions", "gitlab ci",
    "python", "java", "javascript", "typescript", "go", "rust",
    "machine learning", "deep learning", "neural network", "tensorflow",
    "pytorch", "scikit-learn", "pandas", "numpy", "spark",
    "sql", "nosql", "api", "authentication", "authorization",
    "oauth", "jwt", "websocket", "http", "tcp", "udp",
]

TECHNICAL_FOLLOW_UPS = [
    "You mentioned {t}. Can you explain how you used {t} specifically in that context?",
    "Interesting that you used {t}. What were the key challenges you faced with {t}?",
    "Can you dive deeper into your experience with {t}? What alternatives did you consider?",
    "Tell me more about your {t} implementation. What design decisions did you make?",
    "You brought up {t}. How did you handle scalability/performance with {t}?",
    "Can you elaborate on the {t} architecture you designed? What were the trade-offs?",
]

DEPTH_FOLLOW_UPS = [
    "Can you provide more detail about your approach?",
    "Could you elaborate on the technical aspects of your solution?",
    "Can you walk me through your thought process in more depth?",
    "What specific steps did you take to solve this problem?",
    "Can you explain the technical implementation in more detail?",
]

COMPLETENESS_FOLLOW_UPS = [
    "Can you tell me more about the outcome and results?",
    "What was the impact of your solution?",
    "Can you describe the full context and how you approached it?",
    "What challenges did you face and how did you overcome them?",
    "Can you provide a more complete picture of the situation?",
]

CLARITY_FOLLOW_UPS = [
    "Can you clarify what you mean by that?",
    "Could you explain that in a different way?",
    "Can you break that down into simpler terms?",
    "I want to make sure I understand - can you rephrase that?",
    "Can you provide a concrete example to illustrate your point?",
]

GENERAL_FOLLOW_UPS = [
    "Can you tell me more about that?",
    "Could you expand on your answer?",
    "Can you provide more details?",
    "I'd like to hear more about your experience with this.",
    "Can you elaborate on that point?",
]
