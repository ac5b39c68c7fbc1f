# evidence_locked_scorer.py
# Evidence-locked scoring policy
#
# Every component score must be backed by at least one evidence snippet
# from the resume. Components without evidence are blocked and excluded
# from the overall score rather than guessed.

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from hybrid_matcher import HybridMatch, match_jd_to_resume
from role_classifier import RoleClassification, classify_role

ROLE_WEIGHT_MATRIX: Dict[str, Dict[str, float]] = {
    "ops-data-entry": {
        "MS Office": 1.5, "Accuracy": 1.4, "SLAs": 1.3, "Documentation": 1.2,
        "Data Entry": 1.5, "Technical Skills": 0.6,
    },
    "software-dev": {
        "Technical Skills": 1.4, "APIs": 1.3, "System Design": 1.3, "Code Quality": 1.2,
        "MS Office": 0.7, "Data Entry": 0.5,
    },
    "data-analytics": {
        "SQL": 1.4, "Data Analysis": 1.4, "Visualization": 1.3, "Statistics": 1.2, "Python/R": 1.3,
    },
    "ai-ml": {
        "ML Models": 1.5, "Python": 1.4, "Data Science": 1.4, "Algorithms": 1.3, "Research": 1.2,
    },
    "devops-cloud": {
        "CI/CD": 1.5, "Cloud": 1.4, "Infrastructure": 1.3, "Automation": 1.3, "Monitoring": 1.2,
    },
}

YEARS_PATTERN = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)", re.IGNORECASE)
METRIC_TOKEN_PATTERN = re.compile(r"\b\d+[\d,]*(?:\.\d+)?(?:%|x|K|M|B)?")
BULLET_LINE_PATTERN = re.compile(r"^[•\-–—►▸]\s+")
PAST_TENSE_LEAD = re.compile(r"^[A-Z][a-z]+ed\s+")
CAPS_HEADER_PATTERN = re.compile(r"^[A-Z\s]{3,}$", re.MULTILINE)
DATE_RANGE_PATTERN = re.compile(
    r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\s*[-–—]\s*"
    r"(?:Present|(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4})\b"
)
BULLET_GLYPH_LINE = re.compile(r"^\s*[•\-–—►▸]\s+", re.MULTILINE)


@dataclass
class EvidenceSource:
    type: str  # resume | jd | semantic_match
    snippet: str
    confidence: float
    location: Optional[str] = None


@dataclass
class ScoredComponent:
    name: str
    score: int
    max_score: int
    evidence: List[EvidenceSource]
    explanation: str

    @property
    def has_evidence(self) -> bool:
        return len(self.evidence) > 0


@dataclass
class EvidenceLockedScore:
    overall: int
    components: List[ScoredComponent]
    evidence_summary: Dict[str, int]
    blocked_scores: List[str] = field(default_factory=list)
    grade: str = "poor"

    def to_dict(self) -> Dict:
        return {
            "overall": self.overall,
            "grade": self.grade,
            "components": [
                {
                    "name": c.name,
                    "score": c.score,
                    "max_score": c.max_score,
                    "explanation": c.explanation,
                    "has_evidence": c.has_evidence,
                    "evidence": [e.__dict__ for e in c.evidence],
                }
                for c in self.components
            ],
            "evidence_summary": self.evidence_summary,
            "blocked_scores": self.blocked_scores,
        }


def map_role_type(role_type: str) -> str:
    if role_type in ("backend", "frontend", "fullstack", "mobile"):
        return "software-dev"
    if role_type == "devops":
        return "devops-cloud"
    if role_type == "data":
        return "data-analytics"
    if role_type == "ai-ml":
        return "ai-ml"
    return "ops-data-entry"


def skill_weight(keywords: List[str], weights: Dict[str, float]) -> float:
    best = 1.0
    for keyword in keywords:
        for skill, weight in weights.items():
            if skill.lower() in keyword.lower():
                best = max(best, weight)
    return best


def _source(match: HybridMatch, confidence: Optional[float] = None) -> EvidenceSource:
    return EvidenceSource(
        type="semantic_match" if match.match_type == "semantic" else "resume",
        snippet=match.evidence,
        location=match.matched_bullet.section if match.matched_bullet else None,
        confidence=match.confidence if confidence is None else confidence,
    )


# ==============================================
# COMPONENTS
# ==============================================

def score_technical_skills(matches: List[HybridMatch], weights: Dict[str, float]) -> ScoredComponent:
    technical = [m for m in matches if m.requirement.category == "technical" and m.match_type != "none"]
    evidence = [_source(m) for m in technical]

    total_weight = 0.0
    weighted = 0.0
    for m in technical:
        w = skill_weight(m.requirement.keywords, weights)
        total_weight += w
        weighted += m.hybrid_score * w
    score = weighted / total_weight * 100 if total_weight else 0

    semantic = sum(1 for e in evidence if e.type == "semantic_match")
    return ScoredComponent(
        name="Technical Skills",
        score=round(score),
        max_score=100,
        evidence=evidence,
        explanation=(
            f"Found {len(technical)} technical skill matches with {semantic} semantic matches"
            if evidence else "No technical skills evidence found in resume"
        ),
    )


def score_experience(resume_text: str, job_description: str, matches: List[HybridMatch]) -> ScoredComponent:
    experience = [m for m in matches if m.requirement.category == "experience" and m.match_type != "none"]
    jd_years = YEARS_PATTERN.findall(job_description)
    resume_years = YEARS_PATTERN.findall(resume_text)

    evidence: List[EvidenceSource] = []
    if resume_years:
        evidence.append(EvidenceSource(
            type="resume",
            snippet=f"{len(resume_years)} experience entries with years mentioned",
            confidence=0.9,
        ))
    evidence.extend(_source(m) for m in experience)

    score = min(100, len(experience) / max(1, len(jd_years)) * 100)
    return ScoredComponent(
        name="Experience Match",
        score=round(score),
        max_score=100,
        evidence=evidence,
        explanation=f"Found {len(experience)} experience matches" if evidence else "No experience evidence found",
    )


def score_quantification(resume_text: str) -> ScoredComponent:
    bullets = [
        line.strip() for line in re.split(r"\n+", resume_text)
        if BULLET_LINE_PATTERN.match(line.strip()) or PAST_TENSE_LEAD.match(line.strip())
    ]
    evidence = [
        EvidenceSource(type="resume", snippet=b[:100], confidence=0.95)
        for b in bullets if METRIC_TOKEN_PATTERN.search(b)
    ]
    score = min(100, len(evidence) / max(len(bullets), 1) * 200)
    return ScoredComponent(
        name="Quantified Achievements",
        score=round(score),
        max_score=100,
        evidence=evidence,
        explanation=(
            f"Found {len(evidence)} quantified achievements in {len(bullets)} bullets"
            if evidence else "No quantified metrics found in resume"
        ),
    )


def score_keywords(matches: List[HybridMatch], weights: Dict[str, float]) -> ScoredComponent:
    # a keyword only counts when it sits in an action bullet with some substance
    validated = [
        m for m in matches
        if m.match_type != "none"
        and m.matched_bullet is not None
        and PAST_TENSE_LEAD.match(m.matched_bullet.text)
        and len(m.matched_bullet.text) > 30
    ]
    evidence = [
        _source(m, m.confidence * skill_weight(m.requirement.keywords, weights)) for m in validated
    ]
    must_have = max(1, sum(1 for m in matches if m.requirement.priority == "must-have"))
    score = min(100, len(validated) / must_have * 100)
    return ScoredComponent(
        name="Keyword Match",
        score=round(score),
        max_score=100,
        evidence=evidence,
        explanation=(
            f"Found {len(validated)} contextually valid keyword matches"
            if evidence else "No keyword evidence with proper context found"
        ),
    )


def score_formatting(resume_text: str) -> ScoredComponent:
    evidence: List[EvidenceSource] = []
    score = 100

    if CAPS_HEADER_PATTERN.search(resume_text):
        evidence.append(EvidenceSource("resume", "Section headers detected in ALL CAPS format", 1.0))
    else:
        score -= 30

    dates = DATE_RANGE_PATTERN.findall(resume_text)
    if dates:
        evidence.append(EvidenceSource("resume", f"{len(dates)} properly formatted dates found", 0.95))
    else:
        score -= 20

    if BULLET_GLYPH_LINE.search(resume_text):
        evidence.append(EvidenceSource("resume", "Bullet points detected with consistent formatting", 0.9))
    else:
        score -= 25

    return ScoredComponent(
        name="Formatting",
        score=max(0, score),
        max_score=100,
        evidence=evidence,
        explanation=(
            f"Formatting validated: {len(evidence)} formatting elements found"
            if evidence else "No proper formatting evidence found"
        ),
    )


# ==============================================
# AGGREGATION
# ==============================================

def evidence_summary(components: List[ScoredComponent]) -> Dict[str, int]:
    summary = {"total_evidence": 0, "resume_evidence": 0, "jd_evidence": 0, "semantic_evidence": 0}
    for component in components:
        for e in component.evidence:
            summary["total_evidence"] += 1
            if e.type == "resume":
                summary["resume_evidence"] += 1
            elif e.type == "jd":
                summary["jd_evidence"] += 1
            elif e.type == "semantic_match":
                summary["semantic_evidence"] += 1
    return summary


def overall_score(components: List[ScoredComponent]) -> int:
    if not components:
        return 0
    total_max = sum(c.max_score for c in components)
    return round(sum(c.score for c in components) / total_max * 100) if total_max else 0


def determine_grade(score: float) -> str:
    if score >= 90:
        return "excellent"
    if score >= 75:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"


def score_with_evidence(
    resume_text: str,
    job_description: str,
    role_classification: Optional[RoleClassification] = None,
) -> EvidenceLockedScore:
    resume_text = resume_text or ""
    job_description = job_description or ""

    matching = match_jd_to_resume(job_description, resume_text)
    role = role_classification or classify_role(job_description)
    weights = ROLE_WEIGHT_MATRIX.get(map_role_type(role.role_type), {})

    candidates = [
        score_technical_skills(matching.matches, weights),
        score_experience(resume_text, job_description, matching.matches),
        score_quantification(resume_text),
        score_keywords(matching.matches, weights),
        score_formatting(resume_text),
    ]

    components = [c for c in candidates if c.has_evidence]
    blocked = [f"{c.name} (no evidence)" for c in candidates if not c.has_evidence]
    overall = overall_score(components)

    return EvidenceLockedScore(
        overall=overall,
        components=components,
        evidence_summary=evidence_summary(components),
        blocked_scores=blocked,
        grade=determine_grade(overall),
    )


def generate_evidence_report(result: EvidenceLockedScore) -> str:
    s = result.evidence_summary
    lines = [
        "=== EVIDENCE-LOCKED SCORING REPORT ===",
        f"Overall Score: {result.overall}/100 ({result.grade.upper()})",
        "",
        "EVIDENCE SUMMARY:",
        f"  Total Evidence: {s['total_evidence']}",
        f"  Resume Evidence: {s['resume_evidence']}",
        f"  JD Evidence: {s['jd_evidence']}",
        f"  Semantic Matches: {s['semantic_evidence']}",
        "",
        "COMPONENT SCORES:",
    ]
    for c in result.components:
        lines.append(f"\n{c.name}: {c.score}/{c.max_score}")
        lines.append(f"  {c.explanation}")
        if c.evidence:
            lines.append(f"  Evidence ({len(c.evidence)} items):")
            for i, e in enumerate(c.evidence[:3], 1):
                lines.append(f"    {i}. [{e.type}] {e.snippet[:60]}...")

    if result.blocked_scores:
        lines.append("\nBLOCKED SCORES (No Evidence):")
        for blocked in result.blocked_scores:
            lines.append(f"  - {blocked}")

    return "\n".join(lines)
