# enhanced_scoring_service.py
# Multi-tier resume scoring - aggregator
#
# Pipeline:
#   input quality gate -> candidate level -> 11 tier analyzers (each guarded)
#   -> role / level weights -> Big 5 critical metrics -> weighted score
#   + red flag penalty -> quality adjustment -> bands and report
#
# A failing analyzer never fails the run: it is logged, replaced by a 20%
# fallback tier and listed in analyzer_errors.

import dataclasses
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from candidate_level import FRESHER_USER_TYPES, detect_candidate_level, is_fresher_role
from experience_analyzer import (
    ExperienceAnalyzer,
    extract_experience_bullets,
    extract_experience_section,
    suggest_bullet_improvements,
)
from education_analyzer import EducationCertificationAnalyzer
from fit_analyzers import CompetitiveAnalyzer, CultureFitAnalyzer, QualitativeAnalyzer
from normal_mode_scoring import (
    InputQualityAssessment,
    apply_normalized_weights,
    assess_input_quality,
    calculate_adjusted_score,
    calculate_aligned_confidence,
    get_aligned_interview_probability,
    get_aligned_match_band,
)
from projects_analyzer import ProjectsAnalyzer
from quality_analyzer import analyze_section_quality
from red_flag_detector import RedFlagDetector, RedFlagResult
from resume_models import (
    CandidateLevel,
    CriticalMetrics,
    CriticalMetricScore,
    FormatIssue,
    MissingKeyword,
    OrderIssue,
    RedFlag,
    ResumeData,
    ScoringInput,
    ScoringResult,
    TierScore,
    build_tier_score,
)
from scoring_tables import (
    ALL_TECH_KEYWORDS,
    CRITICAL_STATUS_BANDS,
    DEFAULT_TIER_WEIGHTS,
    RUBRIC_VERSION,
    TABLES_VERSION,
    TIER_DEFINITIONS,
)
from section_detector import detect_sections, get_section_insights
from skills_keywords_analyzer import SkillsKeywordsAnalyzer
from structure_analyzers import BasicStructureAnalyzer, BasicStructureInput, ContentStructureAnalyzer

logger = logging.getLogger(__name__)

# key -> (max_score, metrics_total), used for fallback tiers
TIER_LIMITS: Dict[str, Tuple[int, int]] = {
    "basic_structure": (20, 20),
    "content_structure": (25, 25),
    "experience": (100, 1),
    "education": (10, 8),
    "certifications": (10, 10),
    "skills_keywords": (40, 40),
    "projects": (15, 16),
    "red_flags": (30, 30),
    "competitive": (15, 15),
    "culture_fit": (20, 20),
    "qualitative": (10, 10),
}
FALLBACK_PERCENTAGE = 20

FRESHER_PRIORITY = [
    "skills_keywords", "education", "certifications", "projects", "content_structure",
    "basic_structure", "experience", "qualitative", "culture_fit", "competitive", "red_flags",
]
EXPERIENCED_PRIORITY = [
    "experience", "skills_keywords", "content_structure", "projects", "basic_structure",
    "education", "certifications", "competitive", "culture_fit", "qualitative", "red_flags",
]
HIDDEN_FOR_FRESHERS = ("competitive", "culture_fit")

ALIGNMENT_TERMS = ALL_TECH_KEYWORDS + [
    "tableau", "power bi", "excel", "sas", "spss", "pandas", "numpy", "spark", "hadoop",
    "kafka", "airflow", "snowflake", "bigquery", "looker", "etl", "machine learning",
    "data science", "analytics", "statistics", "visualization", "dashboard", "api", "rest",
    "graphql", "linux", "bash", "ci/cd", "devops", "agile", "scrum", "jira",
]
QUANTIFIED_BULLET = re.compile(
    r"\d+%|\$\d+|\d+\s*(?:users?|customers?|clients?|projects?|team|people|million|k\b)", re.IGNORECASE
)
WEAK_OPENING = re.compile(r"^(?:Worked on|Helped with|Responsible for)", re.IGNORECASE)

INCOMPLETE_RESUME_FLAG = RedFlag(
    id=1,
    type="formatting",
    name="Incomplete Resume",
    severity="critical",
    penalty=-20,
    description="Resume appears incomplete or improperly formatted",
    recommendation="Upload a complete resume with all standard sections",
)


def critical_status(percentage: float) -> str:
    for threshold, status in CRITICAL_STATUS_BANDS:
        if percentage >= threshold:
            return status
    return "poor"


def _critical(score_ratio: float, max_score: int, details: str) -> CriticalMetricScore:
    percentage = score_ratio * 100
    return CriticalMetricScore(
        score=round(score_ratio * max_score, 2),
        max_score=max_score,
        percentage=round(percentage),
        status=critical_status(percentage),
        details=details,
    )


def fallback_tier(key: str) -> TierScore:
    number, name = TIER_DEFINITIONS[key]
    max_score, metrics_total = TIER_LIMITS[key]
    return build_tier_score(
        tier_number=number,
        tier_name=name,
        score=max_score * FALLBACK_PERCENTAGE / 100,
        max_score=max_score,
        weight=DEFAULT_TIER_WEIGHTS[key],
        metrics_passed=metrics_total * FALLBACK_PERCENTAGE // 100,
        metrics_total=metrics_total,
        top_issues=[f"{name} analysis incomplete - limited data available"],
        fallback=True,
    )


def fresher_experience_tier() -> TierScore:
    return build_tier_score(
        tier_number=3,
        tier_name="Experience",
        score=0,
        max_score=TIER_LIMITS["experience"][0],
        weight=0,
        metrics_passed=0,
        metrics_total=TIER_LIMITS["experience"][1],
        top_issues=["Experience not required for this job role (Fresher)"],
    )


def experience_bullets(text: str, data: ResumeData) -> List[str]:
    bullets = [b for job in data.work_experience for b in job.bullets if b and b.strip()]
    if bullets:
        return bullets
    return extract_experience_bullets(extract_experience_section(text))


def _terms_in(text: str) -> set:
    lower = text.lower()
    return {
        t for t in ALIGNMENT_TERMS
        if re.search(r"(?<![\w])" + re.escape(t) + r"(?![\w+#])", lower)
    }


# ==============================================
# BIG 5 CRITICAL METRICS
# ==============================================

def jd_keywords_match(rate: float) -> CriticalMetricScore:
    return _critical(rate / 100, 5, f"{rate}% of JD keywords found in resume")


def technical_skills_alignment(text: str, job_description: Optional[str]) -> CriticalMetricScore:
    if not job_description:
        return _critical(0.5, 5, "No JD provided for comparison")
    jd_tech = _terms_in(job_description)
    if not jd_tech:
        return _critical(0.5, 5, "No technical skills found in JD")
    matches = len(jd_tech & _terms_in(text))
    return _critical(matches / len(jd_tech), 5, f"{matches}/{len(jd_tech)} technical skills match JD")


def quantified_results(bullets: List[str]) -> CriticalMetricScore:
    if not bullets:
        return _critical(0, 3, "No work experience to analyze")
    quantified = sum(1 for b in bullets if QUANTIFIED_BULLET.search(b))
    return _critical(quantified / len(bullets), 3, f"{quantified}/{len(bullets)} bullets have metrics")


def job_title_relevance(data: ResumeData, job_description: Optional[str]) -> CriticalMetricScore:
    titles = [job.role.lower() for job in data.work_experience if job.role]
    if not job_description or not titles:
        return _critical(0.5, 3, "Cannot assess title relevance")
    jd = job_description.lower()
    relevant = [t for t in titles if any(len(w) > 3 and w in jd for w in t.split())]
    return _critical(len(relevant) / len(titles), 3, f"{len(relevant)}/{len(titles)} titles relevant to JD")


def experience_relevance(bullets: List[str], job_description: Optional[str]) -> CriticalMetricScore:
    if not job_description:
        return _critical(0.5, 3, "Cannot assess experience relevance")
    if not bullets:
        return _critical(0, 3, "No experience bullets found")
    jd = job_description.lower()
    relevant = [
        b for b in bullets
        if sum(1 for w in b.lower().split() if len(w) > 4 and w in jd) >= 2
    ]
    return _critical(len(relevant) / len(bullets), 3, f"{len(relevant)}/{len(bullets)} bullets relevant to JD")


def calculate_critical_metrics(
    text: str, data: ResumeData, job_description: Optional[str], keyword_rate: float
) -> CriticalMetrics:
    bullets = experience_bullets(text, data)
    parts = [
        jd_keywords_match(keyword_rate),
        technical_skills_alignment(text, job_description),
        quantified_results(bullets),
        job_title_relevance(data, job_description),
        experience_relevance(bullets, job_description),
    ]
    return CriticalMetrics(*parts, total_critical_score=round(sum(p.score for p in parts), 2))


def empty_critical_metrics() -> CriticalMetrics:
    parts = [_critical(0, m, "Cannot assess") for m in (5, 5, 3, 3, 3)]
    return CriticalMetrics(*parts, total_critical_score=0)


# ==============================================
# REPORT
# ==============================================

def _tiers(tier_scores: Dict[str, TierScore]) -> List[TierScore]:
    return list(tier_scores.values())


def build_breakdown(tier_scores: Dict[str, TierScore], fresher_role: bool) -> List[Dict[str, Any]]:
    priority = FRESHER_PRIORITY if fresher_role else EXPERIENCED_PRIORITY
    rows = []
    for key, tier in tier_scores.items():
        if fresher_role and key in HIDDEN_FOR_FRESHERS:
            continue
        if key == "experience" and fresher_role:
            details = "Experience section not required for fresher roles"
        elif tier.top_issues:
            details = tier.top_issues[0]
        elif tier.percentage >= 80:
            details = "Excellent"
        elif tier.percentage >= 70:
            details = "Good"
        elif tier.percentage >= 60:
            details = "Fair"
        else:
            details = "Needs improvement"
        rows.append({
            "key": key,
            "name": tier.tier_name,
            "weight_pct": tier.weight,
            "score": tier.score,
            "max_score": tier.max_score,
            "percentage": tier.percentage,
            "contribution": tier.weighted_contribution,
            "details": details,
            "priority": priority.index(key) + 1 if key in priority else len(priority),
            "role_type": "fresher" if fresher_role else "experienced",
        })
    return sorted(rows, key=lambda r: r["priority"])


def generate_actions(
    tier_scores: Dict[str, TierScore], red_flags: List[RedFlag], missing: List[MissingKeyword]
) -> List[str]:
    actions = [t.top_issues[0] for t in _tiers(tier_scores) if t.percentage < 70 and t.top_issues]
    actions.extend(f.recommendation for f in red_flags[:3])
    critical = [k for k in missing if k.tier == "critical"][:2]
    actions.extend(f'Add "{k.keyword}" to {k.suggested_placement}' for k in critical)
    return actions[:10]


def generate_example_rewrites(data: ResumeData) -> Dict[str, Dict[str, str]]:
    if not data.work_experience or not data.work_experience[0].bullets:
        return {}
    first = data.work_experience[0].bullets[0]
    return {
        "experience": {
            "original": first,
            "improved": f"{WEAK_OPENING.sub('Led', first)} resulting in measurable impact",
            "explanation": "Start with action verb and add quantified results",
        }
    }


def generate_notes(tier_scores: Dict[str, TierScore], auto_reject_risk: bool) -> List[str]:
    notes = []
    if auto_reject_risk:
        notes.append("Auto-reject risk: Multiple critical red flags detected")
    low = [t for t in _tiers(tier_scores) if t.percentage < 50]
    if low:
        notes.append(f"{len(low)} tier(s) need significant improvement")
    fallbacks = [t.tier_name for t in _tiers(tier_scores) if t.fallback]
    if fallbacks:
        notes.append(f"Partial analysis: {', '.join(fallbacks)}")
    return notes


def generate_analysis(
    score: int, band: str, tier_scores: Dict[str, TierScore], critical: CriticalMetrics
) -> str:
    strong = [t.tier_name for t in _tiers(tier_scores) if t.percentage >= 80]
    weak = [t.tier_name for t in _tiers(tier_scores) if t.percentage < 60]
    analysis = f"Overall score: {score}/100 ({band}). "
    if strong:
        analysis += f"Strong in: {', '.join(strong)}. "
    if weak:
        analysis += f"Needs improvement: {', '.join(weak)}. "
    analysis += f"Big 5 score: {critical.total_critical_score}/{critical.max_critical_score:g}."
    return analysis


def identify_strengths(tier_scores: Dict[str, TierScore]) -> List[str]:
    return [f"{t.tier_name}: {t.percentage}%" for t in _tiers(tier_scores) if t.percentage >= 75][:5]


def identify_improvements(tier_scores: Dict[str, TierScore]) -> List[str]:
    weak = sorted((t for t in _tiers(tier_scores) if t.percentage < 70), key=lambda t: t.percentage)
    return [f"{t.tier_name}: {t.percentage}%" for t in weak][:5]


def generate_recommendations(tier_scores: Dict[str, TierScore], red_flags: List[RedFlag]) -> List[str]:
    recommendations = [
        f"[{t.tier_name}] {t.top_issues[0]}"
        for t in _tiers(tier_scores) if t.percentage < 70 and t.top_issues
    ]
    serious = [f for f in red_flags if f.severity in ("critical", "high")][:3]
    recommendations.extend(f"[Red Flag] {f.recommendation}" for f in serious)
    return recommendations[:10]


# ==============================================
# SERVICE
# ==============================================

class EnhancedScoringService:

    @staticmethod
    def score(inp: ScoringInput) -> ScoringResult:
        text = inp.resume_text or ""
        data = inp.resume_data or ResumeData()
        jd = inp.job_description or None

        quality = assess_input_quality(text, data, inp.user_type)
        logger.info(
            "Input quality: %s (score %s, valid=%s)", quality.quality, quality.quality_score, quality.is_valid
        )
        if not quality.is_valid:
            return EnhancedScoringService.insufficient_input(quality, inp)

        level_result = detect_candidate_level(text, data)
        level = level_result.level
        if inp.user_type in FRESHER_USER_TYPES:
            level = CandidateLevel.FRESHER
        elif inp.user_type == "experienced" and level == CandidateLevel.FRESHER:
            level = CandidateLevel.MID
        fresher_role = is_fresher_role(level, jd, inp.user_type)
        logger.info(
            "Candidate level: %s (confidence %s, fresher role=%s)", level.value, level_result.confidence, fresher_role
        )

        errors: List[str] = []

        def guarded(key: str, run: Callable[[], Any], fallback: Callable[[], Any]) -> Any:
            try:
                return run()
            except Exception:
                logger.exception("%s analysis failed", TIER_DEFINITIONS[key][1])
                errors.append(key)
                return fallback()

        basic = guarded("basic_structure", lambda: BasicStructureAnalyzer.analyze(BasicStructureInput(
            resume_text=text,
            filename=inp.filename,
            file_size_kb=inp.file_size_kb,
            extraction_mode=inp.extraction_mode,
            page_count=inp.page_count,
            has_tables=inp.has_tables,
            has_graphics=inp.has_graphics,
            has_multiple_columns=inp.has_multiple_columns,
            has_colors=inp.has_colors,
        )), lambda: None)
        content = guarded("content_structure", lambda: ContentStructureAnalyzer.analyze(text, data), lambda: None)

        if fresher_role:
            experience_tier = fresher_experience_tier()
        else:
            structured = [b for job in data.work_experience for b in job.bullets]
            experience_tier = guarded(
                "experience",
                lambda: ExperienceAnalyzer.analyze(text, structured or None).tier_score,
                lambda: fallback_tier("experience"),
            )

        skills = guarded("skills_keywords", lambda: SkillsKeywordsAnalyzer.analyze(text, data, jd), lambda: None)
        education = guarded("education", lambda: EducationCertificationAnalyzer.analyze(text, data, jd), lambda: None)
        projects = guarded("projects", lambda: ProjectsAnalyzer.analyze(text, data, jd).tier_score,
                           lambda: fallback_tier("projects"))
        red_flags = guarded("red_flags", lambda: RedFlagDetector.analyze(text, data, jd), lambda: RedFlagResult(
            tier_score=fallback_tier("red_flags"), red_flags=[], total_penalty=0, auto_reject_risk=False,
        ))
        competitive = guarded("competitive", lambda: CompetitiveAnalyzer.analyze(text, data, jd).tier_score,
                              lambda: fallback_tier("competitive"))
        culture = guarded("culture_fit", lambda: CultureFitAnalyzer.analyze(text, data, jd).tier_score,
                          lambda: fallback_tier("culture_fit"))
        qualitative = guarded("qualitative", lambda: QualitativeAnalyzer.analyze(text, data, jd).tier_score,
                              lambda: fallback_tier("qualitative"))

        if education is None:
            # one analyzer produces both tiers
            errors.append("certifications")

        tier_scores: Dict[str, TierScore] = {
            "basic_structure": basic.tier_score if basic else fallback_tier("basic_structure"),
            "content_structure": content.tier_score if content else fallback_tier("content_structure"),
            "experience": experience_tier,
            "education": education.education if education else fallback_tier("education"),
            "certifications": education.certifications if education else fallback_tier("certifications"),
            "skills_keywords": skills.tier_score if skills else fallback_tier("skills_keywords"),
            "projects": projects,
            "red_flags": red_flags.tier_score,
            "competitive": competitive,
            "culture_fit": culture,
            "qualitative": qualitative,
        }

        # weights follow the detected level; a fresher role only neutralizes the experience tier
        tier_scores = apply_normalized_weights(tier_scores, level)

        keyword_rate = skills.keyword_match_rate if skills else 0
        critical = calculate_critical_metrics(text, data, jd, keyword_rate)

        base = EnhancedScoringService.weighted_score(tier_scores, red_flags.total_penalty)
        adjustment = calculate_adjusted_score(base, quality, level)
        final = adjustment.final_score
        logger.info("Score adjustment: base %s -> %s (%s)", base, final, adjustment.explanation)

        sections = detect_sections(text)
        writing = analyze_section_quality(sections.sections, inp.job_title or data.target_role)
        band = get_aligned_match_band(final)
        missing: List[MissingKeyword] = skills.missing_keywords if skills else []
        order_issues: List[OrderIssue] = content.order_issues if content else []
        format_issues: List[FormatIssue] = basic.format_issues if basic else []

        report = {
            "overall": final,
            "match_band": band,
            "interview_probability_range": get_aligned_interview_probability(final),
            "confidence": calculate_aligned_confidence(final),
            "rubric_version": RUBRIC_VERSION,
            "tables_version": TABLES_VERSION,
            "weighting_mode": "JD" if jd else "GENERAL",
            "extraction_mode": inp.extraction_mode.value,
            "job_title": inp.job_title or data.target_role,
            "candidate_level": level.value,
            "candidate_level_signals": level_result.signals,
            "is_fresher_role": fresher_role,
            "breakdown": build_breakdown(tier_scores, fresher_role),
            "missing_keywords": [k.keyword for k in missing],
            "actions": generate_actions(tier_scores, red_flags.red_flags, missing),
            "example_rewrites": generate_example_rewrites(data),
            "bullet_suggestions": suggest_bullet_improvements(experience_bullets(text, data)),
            "notes": generate_notes(tier_scores, red_flags.auto_reject_risk),
            "analysis": generate_analysis(final, band, tier_scores, critical),
            "key_strengths": identify_strengths(tier_scores),
            "improvement_areas": identify_improvements(tier_scores),
            "recommendations": generate_recommendations(tier_scores, red_flags.red_flags),
            "tier_scores": {k: t.to_dict() for k, t in tier_scores.items()},
            "critical_metrics": critical.to_dict(),
            "red_flags": [f.to_dict() for f in red_flags.red_flags],
            "red_flag_penalty": red_flags.total_penalty,
            "auto_reject_risk": red_flags.auto_reject_risk,
            "missing_keywords_enhanced": [k.to_dict() for k in missing],
            "section_order_issues": [o.to_dict() for o in order_issues],
            "format_issues": [f.to_dict() for f in format_issues],
            "writing_quality": writing.to_dict(),
            "section_insights": get_section_insights(sections),
            "score_adjustment": dataclasses.asdict(adjustment),
            "analyzer_errors": errors,
        }
        return ScoringResult(status="ok", score=report, quality=quality.to_dict())

    @staticmethod
    def weighted_score(tier_scores: Dict[str, TierScore], red_flag_penalty: int) -> int:
        """Weighted tier sum plus the (negative) red flag penalty, clamped to 0-100."""
        total = sum(t.weighted_contribution for key, t in tier_scores.items() if key != "red_flags")
        return max(0, min(100, round(total + red_flag_penalty)))

    @staticmethod
    def insufficient_input(quality: InputQualityAssessment, inp: ScoringInput) -> ScoringResult:
        m = quality.content_metrics
        base = quality.quality_score * 0.4
        if m["has_contact_info"]:
            base += 3
        if m["has_skills"]:
            base += 5
        if m["has_education"]:
            base += 3
        if m["word_count"] > 100:
            base += 5
        final = max(0, min(35, round(base)))

        report = {
            "overall": final,
            "match_band": get_aligned_match_band(final),
            "interview_probability_range": get_aligned_interview_probability(final),
            "confidence": "Low",
            "rubric_version": RUBRIC_VERSION,
            "tables_version": TABLES_VERSION,
            "weighting_mode": "GENERAL",
            "extraction_mode": inp.extraction_mode.value,
            "job_title": inp.job_title,
            "candidate_level": None,
            "is_fresher_role": False,
            "breakdown": [],
            "missing_keywords": [],
            "actions": (
                ["Resume appears incomplete or invalid"]
                + quality.issues[:3]
                + ["Please upload a complete resume with standard sections"]
            ),
            "example_rewrites": {},
            "notes": [
                f"Input quality: {quality.quality}",
                f"Word count: {m['word_count']}",
                f"Sections detected: {m['section_count']}",
            ],
            "analysis": f"Resume quality assessment: {quality.quality}. {'. '.join(quality.issues)}",
            "key_strengths": [],
            "improvement_areas": list(quality.issues),
            "recommendations": [
                "Ensure resume has standard sections (Experience, Education, Skills)",
                "Add contact information (email, phone)",
                "Include relevant work experience or projects",
                "List technical and soft skills",
            ],
            "tier_scores": {},
            "critical_metrics": empty_critical_metrics().to_dict(),
            "red_flags": [INCOMPLETE_RESUME_FLAG.to_dict()],
            "red_flag_penalty": INCOMPLETE_RESUME_FLAG.penalty,
            "auto_reject_risk": True,
            "missing_keywords_enhanced": [],
            "section_order_issues": [],
            "format_issues": [
                FormatIssue(
                    type="content",
                    description="Resume content is insufficient for proper analysis",
                    severity="high",
                ).to_dict()
            ],
            "score_adjustment": None,
            "analyzer_errors": [],
        }
        return ScoringResult(
            status="insufficient_input",
            score=report,
            quality=quality.to_dict(),
            reason="; ".join(quality.issues) or "Resume content is insufficient for analysis",
        )
