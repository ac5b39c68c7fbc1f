# normal_mode_scoring.py
# Input quality gate, candidate-level weights and score adjustment
#
# The quality gate runs before any tier analysis so that empty or
# truncated input gets a low, honest score instead of a neutral one.

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from resume_models import ResumeData, TierScore
from scoring_tables import (
    CONFIDENCE_BANDS,
    FRESHER_BONUS,
    LOWEST_MATCH_BAND,
    MATCH_BANDS,
    MIN_WORD_COUNT,
    NORMALIZED_WEIGHTS,
    QUALITY_BANDS,
    QUALITY_MULTIPLIERS,
)
from section_detector import PHONE_PATTERN, detect_sections

logger = logging.getLogger(__name__)

SECTION_KEYWORD_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"\b(?:experience|work\s*experience|employment|professional\s*experience)\b",
        r"\b(?:education|academic|qualifications)\b",
        r"\b(?:skills|technical\s*skills|core\s*competencies)\b",
        r"\b(?:projects|personal\s*projects|academic\s*projects)\b",
        r"\b(?:certifications?|certificates?|licenses?)\b",
        r"\b(?:summary|objective|profile|about\s*me)\b",
        r"\b(?:achievements?|awards?|honors?)\b",
        r"\b(?:publications?|research)\b",
        r"\b(?:languages?|interests?|hobbies?)\b",
    )
]

EMAIL = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
SKILLS_HEADER = re.compile(r"\b(?:skills|technical\s*skills|core\s*competencies)\b", re.IGNORECASE)
SKILL_HINTS = re.compile(r"\b(?:javascript|python|java|react|node|sql|aws|docker|git)\b", re.IGNORECASE)
EDUCATION_HEADER = re.compile(r"\b(?:education|academic|qualifications)\b", re.IGNORECASE)
DEGREE = re.compile(
    r"\b(?:bachelor|master|b\.?s\.?|m\.?s\.?|b\.?e\.?|m\.?e\.?|b\.?tech|m\.?tech|mba|phd)\b", re.IGNORECASE
)
EXPERIENCE_HEADER = re.compile(r"\b(?:experience|work\s*experience|employment)\b", re.IGNORECASE)
JOB_VERBS = re.compile(r"\b(?:worked|developed|managed|led|created|implemented|designed)\b", re.IGNORECASE)
PROJECTS_HEADER = re.compile(r"\b(?:projects|personal\s*projects|academic\s*projects)\b", re.IGNORECASE)
TEXT_BULLET = re.compile(r"^\s*[•\-*]\s", re.MULTILINE)

TEXT_SKILLS = [
    "javascript", "typescript", "python", "java", "c++", "c#", "go", "rust", "ruby", "php",
    "react", "angular", "vue", "node", "express", "django", "flask", "spring",
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch",
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "git", "jira", "agile", "scrum", "rest", "graphql", "api",
    "html", "css", "sass", "tailwind", "bootstrap",
    "machine learning", "tensorflow", "pytorch", "pandas", "numpy",
    "tableau", "power bi", "excel", "sql",
]

QUALITY_EXPLANATIONS = {
    "excellent": "Full scoring applied - excellent input quality",
    "good": "Minor quality adjustment applied",
    "fair": "Quality adjustment applied - some content missing",
    "poor": "Significant quality adjustment - incomplete resume",
    "invalid": "Major quality penalty - resume appears invalid or empty",
}


@dataclass
class InputQualityAssessment:
    is_valid: bool
    quality: str  # excellent | good | fair | poor | invalid
    quality_score: int
    rubric_quality: str
    issues: List[str] = field(default_factory=list)
    content_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class ScoreAdjustment:
    base_score: float
    quality_multiplier: float
    candidate_level_bonus: int
    final_score: int
    explanation: str


# ==============================================
# CONTENT SIGNALS
# ==============================================

def count_sections(text: str) -> int:
    return sum(1 for p in SECTION_KEYWORD_PATTERNS if p.search(text))


def has_contact_info(text: str) -> bool:
    return bool(EMAIL.search(text) or PHONE_PATTERN.search(text))


def has_skills(text: str, data: ResumeData) -> bool:
    if data.skills:
        return any(group.entries for group in data.skills)
    return bool(SKILLS_HEADER.search(text) or SKILL_HINTS.search(text))


def has_education(text: str, data: ResumeData) -> bool:
    return bool(data.education) or bool(EDUCATION_HEADER.search(text) or DEGREE.search(text))


def has_experience(text: str, data: ResumeData) -> bool:
    if data.work_experience:
        return any(job.bullets for job in data.work_experience)
    return bool(EXPERIENCE_HEADER.search(text) and JOB_VERBS.search(text))


def has_projects(text: str, data: ResumeData) -> bool:
    if data.projects:
        return any(p.bullets for p in data.projects)
    return bool(PROJECTS_HEADER.search(text))


def count_bullet_points(text: str, data: ResumeData) -> int:
    structured = len(data.all_bullets())
    return max(structured, len(TEXT_BULLET.findall(text)))


def count_unique_skills(text: str, data: ResumeData) -> int:
    skills = {s.lower() for s in data.all_skills()}
    lower = text.lower()
    for skill in TEXT_SKILLS:
        if re.search(r"(?<![\w])" + re.escape(skill) + r"(?![\w+#])", lower):
            skills.add(skill)
    return len(skills)


def _band(score: int, bands, default: str) -> str:
    for threshold, label in bands:
        if score >= threshold:
            return label
    return default


def rubric_score(m: Dict[str, Any]) -> int:
    score = 0

    words = m["word_count"]
    if words >= 400:
        score += 20
    elif words >= 200:
        score += 15
    elif words >= 100:
        score += 10
    elif words >= MIN_WORD_COUNT:
        score += 5

    score += 5 if m["has_contact_info"] else 0
    score += 8 if m["has_skills"] else 0
    score += 5 if m["has_education"] else 0
    score += 7 if m["has_experience"] else 0
    score += 5 if m["has_projects"] else 0

    bullets = m["bullet_count"]
    score += 15 if bullets >= 10 else 10 if bullets >= 5 else 5 if bullets >= 2 else 0
    skills = m["unique_skill_count"]
    score += 15 if skills >= 10 else 10 if skills >= 5 else 5 if skills >= 2 else 0

    sections = m["section_count"]
    score += 20 if sections >= 5 else 15 if sections >= 3 else 10 if sections >= 2 else 5 if sections >= 1 else 0
    return score


def assess_input_quality(
    text: str, resume_data: Optional[ResumeData] = None, user_type: Optional[str] = None
) -> InputQualityAssessment:
    """Grade raw input before scoring; never raises."""
    text = text or ""
    data = resume_data or ResumeData()

    word_count = len(text.split())
    metrics = {
        "word_count": word_count,
        "section_count": max(count_sections(text), len(detect_sections(text).present_sections)),
        "has_contact_info": has_contact_info(text),
        "has_skills": has_skills(text, data),
        "has_education": has_education(text, data),
        "has_experience": has_experience(text, data),
        "has_projects": has_projects(text, data),
        "bullet_count": count_bullet_points(text, data),
        "unique_skill_count": count_unique_skills(text, data),
        "user_type": user_type,
    }

    issues = []
    if word_count < MIN_WORD_COUNT:
        issues.append(f"Resume text too short (< {MIN_WORD_COUNT} words)")
    if word_count < 100:
        issues.append("Resume appears incomplete")
    if not metrics["has_contact_info"]:
        issues.append("Missing contact information")
    if not (metrics["has_skills"] or metrics["has_experience"] or metrics["has_projects"]):
        issues.append("No substantive content detected")
    if metrics["section_count"] < 2:
        issues.append("Missing standard resume sections")

    score = rubric_score(metrics)
    rubric_quality = _band(score, QUALITY_BANDS, "invalid")
    valid = word_count >= MIN_WORD_COUNT and rubric_quality != "invalid"

    return InputQualityAssessment(
        is_valid=valid,
        quality=rubric_quality if valid else "invalid",
        quality_score=score,
        rubric_quality=rubric_quality,
        issues=issues,
        content_metrics=metrics,
    )


# ==============================================
# WEIGHTS
# ==============================================

def get_normalized_weights(level: str) -> Dict[str, float]:
    # CandidateLevel members hash by name, so look up by value
    key = getattr(level, "value", level)
    return dict(NORMALIZED_WEIGHTS.get(key, NORMALIZED_WEIGHTS["mid"]))


def apply_normalized_weights(tier_scores: Dict[str, TierScore], level: str) -> Dict[str, TierScore]:
    """Re-weight tiers for the candidate level; percentages are left as they are."""
    weights = get_normalized_weights(level)
    out: Dict[str, TierScore] = {}
    for key, tier in tier_scores.items():
        if tier is None or not isinstance(tier.percentage, (int, float)):
            logger.warning("Skipping tier %s without a numeric percentage", key)
            continue
        weight = weights.get(key, tier.weight)
        out[key] = dataclasses.replace(
            tier, weight=weight, weighted_contribution=round(tier.percentage * weight / 100, 2)
        )
    return out


# ==============================================
# ADJUSTMENT & BANDS
# ==============================================

def calculate_adjusted_score(base: float, quality: InputQualityAssessment, level: str) -> ScoreAdjustment:
    multiplier = QUALITY_MULTIPLIERS[quality.quality][0]
    explanation = QUALITY_EXPLANATIONS[quality.quality]

    bonus = 0
    m = quality.content_metrics
    if (
        level == "fresher"
        and quality.quality != "invalid"
        and m.get("has_projects")
        and m.get("unique_skill_count", 0) >= 5
    ):
        bonus = FRESHER_BONUS
        explanation += " | Fresher bonus applied for strong projects/skills"

    final = max(0, min(100, round(base * multiplier + bonus)))
    return ScoreAdjustment(
        base_score=base,
        quality_multiplier=multiplier,
        candidate_level_bonus=bonus,
        final_score=final,
        explanation=explanation,
    )


def calculate_aligned_confidence(score: float) -> str:
    return _band(score, CONFIDENCE_BANDS, "Low")


def get_aligned_match_band(score: float) -> str:
    for threshold, band, _ in MATCH_BANDS:
        if score >= threshold:
            return band
    return LOWEST_MATCH_BAND[0]


def get_aligned_interview_probability(score: float) -> str:
    for threshold, _, probability in MATCH_BANDS:
        if score >= threshold:
            return probability
    return LOWEST_MATCH_BAND[1]
