# quality_analyzer.py
# Writing quality across detected sections
#
# Bullet clarity, metric usage, verb strength, tech-stack completeness,
# grammar tallies and date consistency.

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from section_detector import count_words, extract_bullet_lines
from scoring_tables import STRONG_ACTION_VERBS, TECH_STACK_CATEGORIES

QUALITY_STRONG_VERBS = STRONG_ACTION_VERBS[:33]
QUALITY_WEAK_VERBS = [
    "responsible", "duties", "worked", "helped", "assisted",
    "involved", "participated", "contributed", "supported", "handled",
]

TECH_ROLE_KEYWORDS = [
    "engineer", "developer", "programmer", "architect", "devops", "software",
    "frontend", "backend", "fullstack", "data scientist", "analyst", "qa",
    "sre", "technical", "it",
]

CLARITY_METRIC_PATTERN = re.compile(
    r"\d+[%$]?|\b(?:increased|decreased|improved|reduced|generated|saved)\b.*?\d+", re.IGNORECASE
)
MONEY_PATTERN = re.compile(r"\$|USD|revenue|cost|budget", re.IGNORECASE)
TIME_PATTERN = re.compile(r"\b(?:hours?|days?|weeks?|months?|years?)\b", re.IGNORECASE)

GRAMMAR_PATTERNS = [
    re.compile(r"\bi\s", re.IGNORECASE),
    re.compile(r"\bme\s", re.IGNORECASE),
    re.compile(r"\bmy\s", re.IGNORECASE),
    re.compile(r"\s{2,}"),
    re.compile(r"[.]{2,}"),
    re.compile(r"[,]{2,}"),
    re.compile(r"\s[.]"),
    re.compile(r"[a-z][A-Z]"),
]
PAST_TENSE = re.compile(r"\b\w+ed\b", re.IGNORECASE)
PRESENT_TENSE = re.compile(r"\b(?:manage|develop|create|lead|work|handle)s?\b", re.IGNORECASE)

DATE_FORMATS = [
    re.compile(r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\b"),
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b\d{4}\s*-\s*\d{4}\b"),
    re.compile(
        r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December)\s+\d{4}\b"
    ),
]

SKILL_CATEGORY_PATTERN = re.compile(r"programming|technical|languages|frameworks|tools|databases", re.IGNORECASE)


@dataclass
class QualityMetrics:
    bullet_clarity_score: float = 0
    metrics_usage_ratio: float = 0
    action_verb_ratio: float = 0
    weak_verb_count: int = 0
    tech_stack_completeness: float = 0
    grammar_issues: int = 0
    dates_consistent: bool = True
    section_scores: Dict[str, int] = field(default_factory=dict)
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return dict(self.__dict__)


def _bullet_clarity(bullet: str) -> int:
    score = 100
    words = bullet.split()
    lower = bullet.lower()

    if len(words) < 6:
        score -= 20
    elif len(words) > 12:
        score -= 15

    first = words[0].lower().strip(",.;:") if words else ""
    if first not in QUALITY_STRONG_VERBS:
        score -= 25
    if CLARITY_METRIC_PATTERN.search(bullet):
        score += 15
    if any(re.search(r"\b" + w + r"\b", lower) for w in QUALITY_WEAK_VERBS):
        score -= 20
    if not bullet[:1].isupper():
        score -= 10
    if not bullet.rstrip().endswith((".", "!")):
        score -= 5

    return max(0, min(100, score))


def _has_usage_metric(bullet: str) -> bool:
    return (
        bool(re.search(r"\d", bullet))
        or "%" in bullet
        or bool(MONEY_PATTERN.search(bullet))
        or bool(TIME_PATTERN.search(bullet))
    )


def _is_tech_role(target_role: Optional[str]) -> bool:
    if not target_role:
        return True
    lower = target_role.lower()
    return any(re.search(r"\b" + re.escape(k) + r"\b", lower) for k in TECH_ROLE_KEYWORDS)


def tech_stack_completeness(text: str, target_role: Optional[str] = None) -> float:
    if not _is_tech_role(target_role):
        return 85
    lower = text.lower()
    total = 0.0
    for weight, keywords in TECH_STACK_CATEGORIES.values():
        found = sum(1 for k in keywords if re.search(r"(?<![\w+#.])" + re.escape(k) + r"(?![\w+#])", lower))
        total += weight * min(found / 3, 1)
    return round(total, 1)


def count_grammar_issues(text: str) -> int:
    issues = sum(len(p.findall(text)) for p in GRAMMAR_PATTERNS)
    if len(PAST_TENSE.findall(text)) > 5 and len(PRESENT_TENSE.findall(text)) > 5:
        issues += 5
    return issues


def dates_consistent(text: str) -> bool:
    used = sum(1 for p in DATE_FORMATS if p.search(text))
    return used <= 1


def _section_scores(sections: Dict[str, str]) -> Dict[str, int]:
    scores: Dict[str, int] = {}
    for name, content in sections.items():
        score = 100
        words = count_words(content)
        if name == "summary" and (words < 20 or words > 100):
            score -= 15
        if name == "experience" and words < 50:
            score -= 25
        if name in ("experience", "projects") and not extract_bullet_lines(content):
            score -= 30
        if name == "skills" and not SKILL_CATEGORY_PATTERN.search(content):
            score -= 10
        scores[name] = max(score, 0)
    return scores


def analyze_section_quality(sections: Dict[str, str], target_role: Optional[str] = None) -> QualityMetrics:
    m = QualityMetrics()
    full_text = "\n".join(sections.values())

    bullets = []
    for name in ("experience", "projects"):
        bullets.extend(extract_bullet_lines(sections.get(name, "")))

    if bullets:
        m.bullet_clarity_score = round(sum(_bullet_clarity(b) for b in bullets) / len(bullets), 1)
        m.metrics_usage_ratio = sum(1 for b in bullets if _has_usage_metric(b)) / len(bullets)
        strong = sum(1 for b in bullets if b.split() and b.split()[0].lower() in QUALITY_STRONG_VERBS)
        m.action_verb_ratio = strong / len(bullets)

    lower = full_text.lower()
    m.weak_verb_count = sum(len(re.findall(r"\b" + w + r"\b", lower)) for w in QUALITY_WEAK_VERBS)
    m.tech_stack_completeness = tech_stack_completeness(full_text, target_role)
    m.grammar_issues = count_grammar_issues(full_text)
    m.dates_consistent = dates_consistent(full_text)
    m.section_scores = _section_scores(sections)

    if m.bullet_clarity_score < 70:
        m.insights.append(
            "Improve bullet point clarity by starting with strong action verbs and including quantified results"
        )
    if m.metrics_usage_ratio < 0.5:
        m.insights.append(
            "Add more quantified achievements (numbers, percentages, dollar amounts) to demonstrate impact"
        )
    if m.action_verb_ratio < 0.7:
        m.insights.append(
            "Replace weak verbs (responsible, duties, worked) with strong action verbs (achieved, developed, led)"
        )
    if m.tech_stack_completeness < 60:
        m.insights.append("Include more relevant technical skills and technologies for your target role")
    if m.grammar_issues > 5:
        m.insights.append(
            "Review for grammar issues, avoid first-person language, and ensure consistent verb tense"
        )
    if not m.dates_consistent:
        m.insights.append(
            'Use consistent date formatting throughout your resume (e.g., "Jan 2023" or "January 2023")'
        )

    return m
