# experience_analyzer.py
# Tier 3: Experience bullet quality
#
# Scores experience bullets on impact:
# - Strong action verb openings
# - Quantified results (percentages, money, counts, durations)
# - Achievement vs responsibility framing
# - Business impact vocabulary

import re
from dataclasses import dataclass, field
from typing import Dict, List

from resume_models import TierScore, build_tier_score
from scoring_tables import (
    ACHIEVEMENT_INDICATORS,
    BUSINESS_IMPACT_KEYWORDS,
    DEFAULT_TIER_WEIGHTS,
    RESPONSIBILITY_INDICATORS,
    STRONG_ACTION_VERBS,
    WEAK_VERBS,
)

METRIC_PATTERNS = [
    re.compile(r"\d+%"),
    re.compile(r"\$[\d,]+"),
    re.compile(r"\d+[kK]\+?"),
    re.compile(r"\d+[mM]\+?"),
    re.compile(r"\d+\s*(?:hours?|days?|weeks?|months?|years?)", re.IGNORECASE),
    re.compile(r"\d+\s*(?:people|users|customers|clients|employees|team members?)", re.IGNORECASE),
    re.compile(r"\d+\s*(?:projects?|applications?|systems?|features?)", re.IGNORECASE),
    re.compile(r"(?:increased|improved|reduced|decreased|grew|boosted|enhanced)\s+(?:by\s+)?\d+", re.IGNORECASE),
]

WEAK_BULLET_PATTERNS = [
    (re.compile(r"^responsible for", re.IGNORECASE), 'Avoid starting bullets with "Responsible for"'),
    (re.compile(r"^duties included", re.IGNORECASE), 'Avoid starting bullets with "Duties included"'),
    (re.compile(r"^worked on", re.IGNORECASE), 'Replace "Worked on" with specific action verbs'),
    (re.compile(r"^helped", re.IGNORECASE), 'Replace "Helped" with specific contributions'),
    (re.compile(r"^assisted", re.IGNORECASE), 'Replace "Assisted" with specific actions taken'),
]

EXPERIENCE_HEADER_SECTION = re.compile(
    r"^[ \t]*(?:work\s+experience|professional\s+experience|experience|employment|career\s+history)[ \t]*:?[ \t]*$"
    r"[\s\S]*?(?=^[ \t]*(?:education|projects?|skills|certifications?|achievements?|references?)\b|\Z)",
    re.IGNORECASE | re.MULTILINE,
)
EXPERIENCE_SECTION_PATTERN = re.compile(
    r"\b(?:work\s+experience|professional\s+experience|experience|employment|career\s+history)\b"
    r"[\s\S]*?(?=\b(?:education|projects?|skills|certifications?|achievements?|references?)\b|\Z)",
    re.IGNORECASE,
)

BULLET_GLYPH_PATTERNS = [
    re.compile(r"^\s*[-•*]\s+(.+)$", re.MULTILINE),
    re.compile(r"^\s*[▪▫■□]\s+(.+)$", re.MULTILINE),
    re.compile(r"^\s*[►▶]\s+(.+)$", re.MULTILINE),
    re.compile(r"^\s*\d+\.\s+(.+)$", re.MULTILINE),
]

BULLET_PREFIX = re.compile(r"^\s*[-•*▪▫■□►▶\d.]\s*")


@dataclass
class ExperienceMetrics:
    bullet_impact_score: float = 0
    metrics_usage_ratio: float = 0
    action_verb_ratio: float = 0
    achievement_vs_responsibility_ratio: float = 0.5
    quantified_bullets_percentage: float = 0
    strong_action_verbs_count: int = 0
    total_bullets: int = 0
    issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return dict(self.__dict__)


@dataclass
class ExperienceTierResult:
    tier_score: TierScore
    metrics: ExperienceMetrics


# ==============================================
# EXTRACTION
# ==============================================

def extract_experience_section(text: str) -> str:
    # a header line wins over "experience" mentioned in running text
    match = EXPERIENCE_HEADER_SECTION.search(text or "") or EXPERIENCE_SECTION_PATTERN.search(text or "")
    return match.group(0) if match else ""


def extract_experience_bullets(section: str) -> List[str]:
    bullets: List[str] = []
    for pattern in BULLET_GLYPH_PATTERNS:
        for match in pattern.findall(section):
            cleaned = BULLET_PREFIX.sub("", match).strip()
            if len(cleaned) > 15 and cleaned not in bullets:
                bullets.append(cleaned)

    if bullets:
        return bullets

    # No glyph bullets: fall back to content lines below the header
    lines = section.split("\n")[1:]
    for line in lines:
        cleaned = line.strip()
        if len(cleaned) > 15 and cleaned not in bullets:
            bullets.append(cleaned)
    return bullets


def has_metric(bullet: str) -> bool:
    return any(p.search(bullet) for p in METRIC_PATTERNS)


def starts_with_strong_verb(bullet: str) -> bool:
    words = bullet.lower().split()
    return bool(words) and words[0].strip(",.;:") in STRONG_ACTION_VERBS


def score_bullet_impact(bullet: str) -> int:
    lower = bullet.lower()
    score = 0
    if starts_with_strong_verb(bullet):
        score += 30
    if has_metric(bullet):
        score += 25
    if any(ind in lower for ind in ACHIEVEMENT_INDICATORS):
        score += 20
    if not any(ind in lower for ind in RESPONSIBILITY_INDICATORS):
        score += 15
    if any(kw in lower for kw in BUSINESS_IMPACT_KEYWORDS):
        score += 10
    return min(score, 100)


def _classify_bullet(bullet: str) -> str:
    lower = bullet.lower()
    if any(ind in lower for ind in ACHIEVEMENT_INDICATORS) or has_metric(bullet):
        return "achievement"
    words = lower.split()
    first = words[0].strip(",.;:") if words else ""
    if any(ind in lower for ind in RESPONSIBILITY_INDICATORS) or first in WEAK_VERBS:
        return "responsibility"
    return "neutral"


# ==============================================
# ANALYSIS
# ==============================================

def analyze_bullets(bullets: List[str]) -> ExperienceMetrics:
    metrics = ExperienceMetrics(total_bullets=len(bullets))

    if not bullets:
        metrics.issues.append("No bullet points found in experience section")
        return metrics

    impact_scores = [score_bullet_impact(b) for b in bullets]
    metrics.bullet_impact_score = round(sum(impact_scores) / len(impact_scores), 1)

    with_metrics = sum(1 for b in bullets if has_metric(b))
    metrics.metrics_usage_ratio = with_metrics / len(bullets)
    metrics.quantified_bullets_percentage = round(with_metrics / len(bullets) * 100)

    strong = sum(1 for b in bullets if starts_with_strong_verb(b))
    metrics.strong_action_verbs_count = strong
    metrics.action_verb_ratio = strong / len(bullets)

    kinds = [_classify_bullet(b) for b in bullets]
    achievements = kinds.count("achievement")
    responsibilities = kinds.count("responsibility")
    if achievements + responsibilities > 0:
        metrics.achievement_vs_responsibility_ratio = achievements / (achievements + responsibilities)

    if len(bullets) < 3:
        metrics.issues.append("Too few bullet points - aim for 3-5 per role")
    if metrics.metrics_usage_ratio < 0.3:
        metrics.issues.append("Less than 30% of bullets contain quantified results")
    if metrics.action_verb_ratio < 0.5:
        metrics.issues.append("Less than 50% of bullets start with strong action verbs")
    if metrics.achievement_vs_responsibility_ratio < 0.6:
        metrics.issues.append("Too many responsibility-focused bullets - focus more on achievements")

    for pattern, issue in WEAK_BULLET_PATTERNS:
        found = sum(1 for b in bullets if pattern.search(b))
        if found:
            metrics.issues.append(f"{issue} (found in {found} bullets)")

    return metrics


def analyze_experience(text: str) -> ExperienceMetrics:
    """Locate the experience section in raw text and score its bullets"""
    section = extract_experience_section(text)
    return analyze_bullets(extract_experience_bullets(section))


def suggest_bullet_improvements(bullets: List[str]) -> List[str]:
    suggestions: List[str] = []
    for bullet in bullets:
        lower = bullet.lower()
        if lower.startswith("responsible for"):
            task = bullet[len("responsible for"):].strip()
            suggestions.append(f"Managed {task} resulting in [specific outcome/metric]")
        elif lower.startswith("worked on"):
            task = bullet[len("worked on"):].strip()
            suggestions.append(f"Developed {task} that [specific impact/result]")
        elif lower.startswith("helped"):
            task = bullet[len("helped"):].strip()
            suggestions.append(f"Collaborated to {task}, achieving [specific result]")
        if len(suggestions) >= 3:
            break
    return suggestions


class ExperienceAnalyzer:
    """Tier 3 wrapper producing a 100-point TierScore"""

    TIER_NUMBER = 3
    TIER_NAME = "Experience"
    MAX_SCORE = 100

    @staticmethod
    def analyze(resume_text: str, bullets: List[str] = None) -> ExperienceTierResult:
        metrics = analyze_bullets(bullets) if bullets else analyze_experience(resume_text)

        score = (
            metrics.bullet_impact_score
            + metrics.metrics_usage_ratio * 100
            + metrics.action_verb_ratio * 100
        ) / 3

        tier = build_tier_score(
            tier_number=ExperienceAnalyzer.TIER_NUMBER,
            tier_name=ExperienceAnalyzer.TIER_NAME,
            score=min(score, ExperienceAnalyzer.MAX_SCORE),
            max_score=ExperienceAnalyzer.MAX_SCORE,
            weight=DEFAULT_TIER_WEIGHTS["experience"],
            metrics_passed=0 if metrics.issues else 1,
            metrics_total=1,
            top_issues=metrics.issues,
        )
        return ExperienceTierResult(tier_score=tier, metrics=metrics)
