# projects_analyzer.py
# Tier 7: Projects (16 metrics, 15 points)
#
# Works from structured projects when present, otherwise from the
# projects section of the raw text.

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from resume_models import Project, ResumeData, TierScore, build_tier_score
from scoring_tables import ALL_TECH_KEYWORDS, DEFAULT_TIER_WEIGHTS

logger = logging.getLogger(__name__)

PROJECT_TECH_KEYWORDS = ALL_TECH_KEYWORDS + [
    "jest", "mocha", "cypress", "selenium", "junit", "pytest", "testing",
    "machine learning", "ml", "ai", "tensorflow", "pytorch", "nlp", "deep learning",
    "agile", "scrum", "kanban",
]

COMPLEXITY_INDICATORS = [
    "architecture", "scalable", "distributed", "microservices", "machine learning", "ai",
    "algorithm", "optimization", "real-time", "concurrent",
]
SCALE_INDICATORS = [
    "enterprise", "production", "million", "thousands", "large-scale", "company-wide", "organization",
]

PROJECTS_SECTION = re.compile(
    r"\bprojects?\b[\s\S]*?(?=\b(?:education|certifications?|skills|work\s*experience|experience|"
    r"achievements?|references?)\b|$)",
    re.IGNORECASE,
)
TEXT_BULLET = re.compile(r"[-•]\s*[A-Z][^•\n]+")
PROJECT_TITLE = re.compile(
    r"(?:^|\n)([a-z][a-z ]+(?:system|app|application|platform|tool|dashboard|website|portal|api|service|"
    r"engine|manager|tracker|analyzer|management|analytics|automation|integration|processing))",
    re.IGNORECASE,
)
IMPACT_PATTERN = re.compile(
    r"\d+%|\d+\s*(?:users?|downloads?|requests?|transactions?|customers?)|reduced|increased|improved|optimized",
    re.IGNORECASE,
)
OPEN_SOURCE_PATTERN = re.compile(r"\b(?:open.?source|github|contribution|contributor|pull request|pr|fork)\b", re.I)
PORTFOLIO_PATTERN = re.compile(r"\b(?:github\.com|gitlab\.com|portfolio|demo|live)\b", re.IGNORECASE)
TEAM_PATTERN = re.compile(
    r"\b(?:team of \d+|\d+ (?:developers?|engineers?|members?)|collaborated|cross-functional)\b", re.IGNORECASE
)
TANGIBLE_PATTERN = re.compile(
    r"\b(?:launched|deployed|shipped|released|delivered|completed|built|created|developed)\b", re.IGNORECASE
)
PERSONAL_PATTERN = re.compile(r"\b(?:personal|side|hobby|self-taught|independent)\b", re.IGNORECASE)
WORK_PATTERN = re.compile(r"\b(?:company|client|enterprise|production|work|professional)\b", re.IGNORECASE)
SIDE_PROJECT_PATTERN = re.compile(r"\b(?:side project|personal project|hobby|weekend|hackathon)\b", re.I)
ONGOING_PATTERN = re.compile(r"\b(?:current|ongoing|present)\b", re.IGNORECASE)

REPETITION_STOPWORDS = {
    "the", "and", "but", "for", "with", "from", "was", "are", "were", "been", "have", "has", "had",
    "does", "did", "will", "would", "could", "should", "may", "might", "must", "that", "which",
    "who", "whom", "this", "these", "those", "its", "you", "they", "she", "your", "our", "their",
    "his", "her", "using", "into", "through", "during", "before", "after", "above", "below",
    "between", "under", "over", "out", "off", "about", "than", "then", "also", "just", "only",
    "both", "each", "all", "any", "some", "not", "more", "most", "other", "such", "own", "same",
    "new", "first", "last", "long", "great", "little", "old", "right", "big", "high", "different",
    "small", "large", "next", "early", "young", "important", "few", "public", "bad", "able", "per",
    "via", "etc", "based", "across", "within", "along", "including",
}


@dataclass
class ProjectMetrics:
    project_presence: bool = False
    project_count: int = 0
    description_depth: float = 0
    tech_relevance: float = 50
    impact_metrics: bool = False
    complexity_level: float = 30
    open_source: bool = False
    portfolio_link: bool = False
    team_size_indicated: bool = False
    project_scale: float = 30
    project_recency: bool = False
    role_relevance: float = 50
    tangible_outcomes: bool = False
    personal_vs_work: str = "unknown"
    side_projects: bool = False
    word_repetition_score: float = 100
    repeated_words: List[str] = field(default_factory=list)


@dataclass
class ProjectsResult:
    tier_score: TierScore
    metrics: ProjectMetrics


def _mentions(term: str, text: str) -> bool:
    return bool(re.search(r"(?<![\w])" + re.escape(term) + r"(?![\w])", text))


def word_repetition(bullets: List[str]) -> Tuple[float, List[str]]:
    """100 means no repetition; each word seen 3+ times costs 10 per extra use."""
    words = re.findall(r"\b[a-z]{3,}\b", " ".join(bullets).lower())
    counts = Counter(w for w in words if w not in REPETITION_STOPWORDS)

    repeated = []
    penalty = 0
    for word, count in counts.items():
        if count >= 3:
            repeated.append(f"{word} ({count}x)")
            penalty += (count - 2) * 10

    if repeated:
        logger.debug("Word repetition detected: %s", ", ".join(repeated))
    return max(0, 100 - penalty), repeated


def _project_text(projects: List[Project], lower: str) -> Tuple[str, List[str]]:
    bullets = [b for p in projects for b in p.bullets]
    text = " ".join(f"{p.title} {' '.join(p.bullets)} {p.description or ''}" for p in projects).lower()

    if not projects and "project" in lower:
        section = PROJECTS_SECTION.search(lower)
        if section:
            text = section.group(0)
            # the lowered text loses capitals, so bullets come from glyph lines only
            found = re.findall(r"[-•]\s*[a-z][^•\n]+", text)
            if found:
                bullets = [re.sub(r"^[-•]\s*", "", b).strip() for b in found]
    return text, bullets


def analyze_projects(
    resume_text: str, data: ResumeData, job_description: Optional[str] = None
) -> ProjectMetrics:
    lower = (resume_text or "").lower()
    jd_lower = (job_description or "").lower()
    projects = data.projects
    text, bullets = _project_text(projects, lower)
    m = ProjectMetrics()

    m.project_presence = bool(projects) or bool(re.search(r"\bprojects?\b", lower))
    m.project_count = len(projects)
    if not projects and len(text) > 50:
        titles = PROJECT_TITLE.findall(text)
        m.project_count = min(len(titles), 5) if titles else 1

    avg_bullets = len(bullets) / len(projects) if projects else 0
    m.description_depth = min(100, avg_bullets * 25)

    project_tech = [t for t in PROJECT_TECH_KEYWORDS if _mentions(t, text)]
    if jd_lower:
        jd_tech = [t for t in PROJECT_TECH_KEYWORDS if _mentions(t, jd_lower)]
        matches = sum(1 for t in jd_tech if t in project_tech)
        m.tech_relevance = min(100, matches / len(jd_tech) * 70 + 30) if jd_tech else 60
        if len(project_tech) >= 5:
            m.tech_relevance = min(100, m.tech_relevance + 15)
    else:
        m.tech_relevance = min(100, len(project_tech) * 12 + 30)

    m.impact_metrics = any(IMPACT_PATTERN.search(b) for b in bullets)
    m.complexity_level = min(100, sum(1 for c in COMPLEXITY_INDICATORS if _mentions(c, text)) * 15 + 30)
    m.open_source = bool(OPEN_SOURCE_PATTERN.search(text))
    m.portfolio_link = any(p.github_url for p in projects) or bool(PORTFOLIO_PATTERN.search(lower))
    m.team_size_indicated = bool(TEAM_PATTERN.search(text))
    m.project_scale = min(100, sum(1 for s in SCALE_INDICATORS if s in text) * 20 + 30)

    year = datetime.now().year
    m.project_recency = any(str(y) in text for y in (year, year - 1, year - 2)) or bool(ONGOING_PATTERN.search(text))

    if jd_lower:
        role_words = [w for w in jd_lower.split() if len(w) > 5]
        hits = sum(1 for w in role_words if w in text)
        m.role_relevance = min(100, hits / max(1, len(role_words)) * 100 + 20)

    m.tangible_outcomes = bool(TANGIBLE_PATTERN.search(text))

    personal = bool(PERSONAL_PATTERN.search(text))
    work = bool(WORK_PATTERN.search(text))
    if personal and work:
        m.personal_vs_work = "mixed"
    elif personal:
        m.personal_vs_work = "personal"
    elif work:
        m.personal_vs_work = "work"

    m.side_projects = bool(SIDE_PROJECT_PATTERN.search(text))
    m.word_repetition_score, m.repeated_words = word_repetition(bullets)
    return m


def score_projects(m: ProjectMetrics) -> float:
    score = 0.0
    if m.project_presence:
        score += 2
    score += min(3, m.project_count)
    score += m.description_depth / 100 * 2
    score += m.tech_relevance / 100 * 3
    if m.tangible_outcomes:
        score += 1.5

    if m.impact_metrics:
        score += 1
    score += m.complexity_level / 100
    score += m.role_relevance / 100 * 0.75

    # bonus signals
    if m.open_source:
        score += 0.25
    if m.portfolio_link:
        score += 0.25
    if m.team_size_indicated:
        score += 0.1
    score += m.project_scale / 100 * 0.25
    if m.project_recency:
        score += 0.25
    if m.personal_vs_work == "mixed":
        score += 0.1
    if m.side_projects:
        score += 0.1

    score -= (100 - m.word_repetition_score) / 100 * 2
    return max(0.0, min(15.0, score))


def passed_checks(m: ProjectMetrics) -> List[bool]:
    return [
        m.project_presence,
        m.project_count >= 2,
        m.description_depth >= 50,
        m.tech_relevance >= 60,
        m.impact_metrics,
        m.complexity_level >= 50,
        m.open_source,
        m.portfolio_link,
        m.team_size_indicated,
        m.project_scale >= 50,
        m.project_recency,
        m.role_relevance >= 60,
        m.tangible_outcomes,
        m.personal_vs_work != "unknown",
        m.side_projects,
        m.word_repetition_score >= 70,
    ]


def project_issues(m: ProjectMetrics) -> List[str]:
    issues = []
    if m.word_repetition_score < 70 and m.repeated_words:
        issues.append(f"Avoid word repetition: {', '.join(m.repeated_words[:3])}")
    if not m.project_presence:
        issues.append("Add a projects section to showcase your work")
    if m.project_count < 2:
        issues.append("Include at least 2-3 relevant projects")
    if m.description_depth < 50:
        issues.append("Add more detail to project descriptions")
    if m.tech_relevance < 60:
        issues.append("Highlight technologies relevant to target role")
    if not m.impact_metrics:
        issues.append("Add quantified impact/results to projects")
    if not m.portfolio_link:
        issues.append("Include GitHub or portfolio links")
    if not m.project_recency:
        issues.append("Add recent projects to show current skills")
    if not m.tangible_outcomes:
        issues.append("Describe tangible outcomes for each project")
    return issues[:3]


class ProjectsAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> ProjectsResult:
        metrics = analyze_projects(resume_text, resume_data or ResumeData(), job_description)
        checks = passed_checks(metrics)
        tier = build_tier_score(
            tier_number=7,
            tier_name="Projects",
            score=score_projects(metrics),
            max_score=15,
            weight=DEFAULT_TIER_WEIGHTS["projects"],
            metrics_passed=sum(checks),
            metrics_total=len(checks),
            top_issues=project_issues(metrics),
        )
        return ProjectsResult(tier_score=tier, metrics=metrics)
