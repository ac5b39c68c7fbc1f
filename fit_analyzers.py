# fit_analyzers.py
# Tier 9: Competitive (15 metrics, 15 points)
# Tier 10: Culture Fit (20 metrics, 20 points)
# Tier 11: Qualitative (10 metrics, 10 points)
#
# Each metric is a 0-100 signal or a boolean. A metric table maps the
# metric to its point weight and the value it must reach to count as
# passed (None for booleans).

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from resume_models import ResumeData, TierScore, WorkExperience, build_tier_score
from scoring_tables import DEFAULT_TIER_WEIGHTS
from section_detector import extract_bullet_lines

Metrics = Dict[str, Union[float, bool]]


@dataclass
class FitResult:
    tier_score: TierScore
    metrics: Metrics


def _found(keywords: List[str], *texts: str) -> int:
    return sum(1 for k in keywords if any(k in t for t in texts))


def _scaled(keywords: List[str], per: float, base: float, *texts: str) -> float:
    return min(100, _found(keywords, *texts) * per + base)


def _overlap(keywords: List[str], text: str, jd: str, bonus: float, default: float = 70) -> float:
    """Share of JD-side keywords also present in the resume, plus a bonus."""
    jd_side = [k for k in keywords if k in jd]
    if not jd_side:
        return default
    matches = sum(1 for k in jd_side if k in text)
    return min(100, matches / len(jd_side) * 100 + bonus)


def _weighted(metrics: Metrics, table: Dict[str, Tuple[float, Optional[float]]], cap: float) -> Tuple[float, int]:
    score = 0.0
    passed = 0
    for name, (weight, threshold) in table.items():
        value = metrics[name]
        if threshold is None:
            score += weight if value else 0
            passed += 1 if value else 0
        else:
            score += value / 100 * weight
            passed += 1 if value >= threshold else 0
    return min(cap, score), passed


def _bullets(text: str, data: ResumeData) -> List[str]:
    return data.all_bullets() or extract_bullet_lines(text)


def _tier(number: int, name: str, key: str, score: float, max_score: int, passed: int, total: int,
          issues: List[str]) -> TierScore:
    return build_tier_score(
        tier_number=number,
        tier_name=name,
        score=score,
        max_score=max_score,
        weight=DEFAULT_TIER_WEIGHTS[key],
        metrics_passed=passed,
        metrics_total=total,
        top_issues=issues[:3],
    )


# ==============================================
# TIER 9: COMPETITIVE
# ==============================================

SENIOR_TITLE_PATTERN = re.compile(r"\b(?:senior|lead|principal|staff|director|manager|head|vp|chief)\b", re.I)
JD_SENIORITY_PATTERN = re.compile(r"\b(?:senior|lead|principal|staff|director|manager)\b", re.IGNORECASE)
PROGRESSION_LEVELS = ["junior", "mid", "senior", "lead", "principal", "staff", "manager", "director"]

SPECIALIZATIONS = [
    "frontend", "backend", "fullstack", "devops", "data", "machine learning",
    "security", "mobile", "cloud", "infrastructure", "platform", "embedded",
]
ADVANTAGE_SIGNALS = [
    "patent", "published", "speaker", "conference", "award", "recognition",
    "top performer", "exceeded", "promoted", "fast-track", "high performer",
    "achieved", "delivered", "improved", "increased", "reduced", "optimized",
    "led", "managed", "built", "developed", "implemented", "launched",
    "spearheaded", "drove", "transformed", "scaled", "automated",
]
MODERN_TECH = [
    "kubernetes", "docker", "terraform", "aws", "azure", "gcp", "microservices",
    "graphql", "typescript", "react", "vue", "next.js", "rust", "go", "ai", "ml",
    "ci/cd", "devops", "agile", "scrum", "cloud-native", "serverless",
    "python", "java", "javascript", "node", "spring", "django", "flask",
    "mongodb", "postgresql", "redis", "elasticsearch", "kafka", "spark",
    "jenkins", "github", "gitlab", "api", "rest", "sql", "nosql",
    "machine learning", "deep learning", "data science", "analytics",
]
INDUSTRIES = [
    "fintech", "healthcare", "e-commerce", "saas", "startup", "enterprise",
    "banking", "insurance", "retail", "media", "gaming", "education",
]
NETWORK_SIGNALS = [
    "linkedin", "network", "community", "mentor", "mentee", "volunteer",
    "speaker", "organizer", "contributor", "member", "association",
]

COMPETITIVE_FLAGS = {
    "unique_value_prop": r"\b(?:unique|specialized|expert|pioneer|innovator|leader in|only|first)\b",
    "geographic_flexibility": r"\b(?:remote|hybrid|relocate|willing to travel|flexible location|work from anywhere)\b",
    "availability_indicated": r"\b(?:available|immediate|notice period|start date|currently available)\b",
    "contract_experience": r"\b(?:contract|freelance|consultant|consulting|independent)\b",
    "international_experience": r"\b(?:international|global|multinational|overseas|abroad|cross-border)\b",
    "diversity_indicators": r"\b(?:diversity|inclusion|dei|equity|belonging|underrepresented|erg|employee resource)\b",
}

COMPETITIVE_WEIGHTS: Dict[str, Tuple[float, Optional[float]]] = {
    "years_match": (2.5, 70),
    "salary_alignment": (1.5, 70),
    "career_trajectory": (2, 60),
    "specialization_depth": (2, 60),
    "competitive_advantage": (1.5, 50),
    "unique_value_prop": (1, None),
    "trend_alignment": (2, 60),
    "market_fit": (1.5, 60),
    "compensation_fit": (0.25, 70),
    "geographic_flexibility": (0.25, None),
    "availability_indicated": (0.25, None),
    "contract_experience": (0.25, None),
    "international_experience": (0.25, None),
    "diversity_indicators": (0.1, None),
    "referral_strength": (0.25, 50),
}


def years_match(jobs: List[WorkExperience], jd_lower: str) -> float:
    found = re.search(r"(\d+)\+?\s*years?", jd_lower)
    required = int(found.group(1)) if found else 3
    # two years per listed role
    candidate = len(jobs) * 2
    if candidate >= required:
        return 100
    if candidate >= required * 0.7:
        return 70
    if candidate >= required * 0.5:
        return 50
    return 30


def salary_alignment(jobs: List[WorkExperience], jd_lower: str) -> float:
    senior_titles = sum(1 for j in jobs if SENIOR_TITLE_PATTERN.search(j.role))
    jd_senior = bool(JD_SENIORITY_PATTERN.search(jd_lower))
    if jd_senior and senior_titles:
        return 85
    if not jd_senior and not senior_titles:
        return 80
    if senior_titles:
        return 70
    return 60


def _level(title: str) -> int:
    for index, level in enumerate(PROGRESSION_LEVELS):
        if level in title:
            return index
    return -1


def career_trajectory(jobs: List[WorkExperience]) -> float:
    """Roles are listed most recent first; each step up the ladder adds 15."""
    if len(jobs) < 2:
        return 50
    titles = [j.role.lower() for j in jobs]
    score = 50
    for i in range(1, len(titles)):
        older, newer = _level(titles[i]), _level(titles[i - 1])
        if older >= 0 and newer > older:
            score += 15
    return min(100, score)


class CompetitiveAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> FitResult:
        data = resume_data or ResumeData()
        text = (resume_text or "").lower()
        jd = (job_description or "").lower()
        jobs = data.work_experience

        salary = salary_alignment(jobs, jd)
        metrics: Metrics = {
            "years_match": years_match(jobs, jd),
            "salary_alignment": salary,
            "career_trajectory": career_trajectory(jobs),
            "specialization_depth": _overlap(SPECIALIZATIONS, text, jd, 20),
            "competitive_advantage": _scaled(ADVANTAGE_SIGNALS, 10, 40, text),
            "trend_alignment": _scaled(MODERN_TECH, 6, 30, text),
            "market_fit": _overlap(INDUSTRIES, text, jd, 30),
            "compensation_fit": salary,
            "referral_strength": _scaled(NETWORK_SIGNALS, 12, 20, text),
        }
        for name, pattern in COMPETITIVE_FLAGS.items():
            metrics[name] = bool(re.search(pattern, text, re.IGNORECASE))

        score, passed = _weighted(metrics, COMPETITIVE_WEIGHTS, 15)

        issues = []
        if metrics["years_match"] < 70:
            issues.append("Experience level may not match JD requirements")
        if metrics["career_trajectory"] < 60:
            issues.append("Show clearer career progression")
        if metrics["specialization_depth"] < 60:
            issues.append("Highlight specialization relevant to role")
        if metrics["trend_alignment"] < 60:
            issues.append("Add modern technologies and practices")
        if metrics["market_fit"] < 60:
            issues.append("Emphasize industry-relevant experience")
        if not metrics["unique_value_prop"]:
            issues.append("Add unique value proposition or differentiators")

        tier = _tier(9, "Competitive", "competitive", score, 15, passed, len(COMPETITIVE_WEIGHTS), issues)
        return FitResult(tier_score=tier, metrics=metrics)


# ==============================================
# TIER 10: CULTURE FIT
# ==============================================

CULTURE_KEYWORDS = [
    "collaborative", "innovative", "fast-paced", "startup", "agile", "dynamic",
    "inclusive", "diverse", "growth", "learning", "ownership", "autonomy",
]
VALUE_KEYWORDS = [
    "integrity", "excellence", "quality", "customer", "impact", "growth",
    "innovation", "collaboration", "respect", "accountability",
]
WORK_STYLES = [
    ["independent", "self-directed", "autonomous", "self-starter"],
    ["team", "collaborative", "cross-functional", "partnership"],
    ["process", "methodology", "framework", "systematic"],
    ["agile", "adaptive", "flexible", "dynamic"],
]

# metric -> (keywords, points per keyword, base)
CULTURE_SIGNALS: Dict[str, Tuple[List[str], float, float]] = {
    "collaboration": ([
        "collaborated", "partnered", "worked with", "cross-functional", "team",
        "stakeholder", "coordinated", "aligned", "facilitated", "together",
        "with", "alongside", "supported", "assisted", "contributed", "joined",
        "engineers", "developers", "designers", "managers", "clients", "customers",
    ], 8, 35),
    "learning_agility": ([
        "learned", "self-taught", "certification", "course", "training", "upskill",
        "new technology", "adopted", "mastered", "quickly", "fast learner",
    ], 12, 20),
    "leadership": ([
        "led", "managed", "directed", "supervised", "mentored", "coached",
        "spearheaded", "drove", "championed", "owned", "responsible for",
        "oversaw", "guided", "coordinated", "organized", "planned", "executed",
        "delivered", "achieved", "accomplished", "completed", "built", "developed",
    ], 8, 35),
    "risk_tolerance": ([
        "startup", "early-stage", "greenfield", "new initiative", "pioneered",
        "first", "experimental", "prototype", "mvp", "innovation",
    ], 12, 30),
    "communication": ([
        "presented", "communicated", "documented", "wrote", "published",
        "stakeholder", "client-facing", "executive", "report", "proposal",
    ], 10, 20),
    "initiative": ([
        "initiated", "proposed", "identified", "proactively", "volunteered",
        "self-directed", "took ownership", "drove", "launched", "started",
    ], 12, 20),
    "feedback_response": ([
        "feedback", "improved", "iterated", "refined", "adapted", "adjusted",
        "responsive", "incorporated", "learned from", "retrospective",
    ], 12, 30),
    "customer_mindset": ([
        "customer", "client", "user", "stakeholder", "end-user", "ux",
        "user experience", "satisfaction", "feedback", "support",
    ], 10, 20),
    "innovation": ([
        "innovated", "created", "designed", "invented", "developed", "built",
        "new", "novel", "improved", "optimized", "automated", "streamlined",
        "implemented", "introduced", "pioneered", "transformed", "modernized",
        "solution", "architecture", "system", "platform", "framework", "tool",
    ], 7, 35),
    "bias_to_action": ([
        "delivered", "shipped", "launched", "completed", "achieved", "executed",
        "implemented", "deployed", "released", "accomplished",
        "built", "created", "developed", "designed", "engineered", "automated",
        "optimized", "improved", "enhanced", "reduced", "increased", "streamlined",
    ], 8, 35),
    "continuous_improvement": ([
        "improved", "optimized", "enhanced", "reduced", "increased", "streamlined",
        "automated", "refactored", "upgraded", "modernized",
        "faster", "better", "efficient", "performance", "scalable", "reliable",
        "quality", "accuracy", "productivity", "cost", "time", "savings",
    ], 8, 35),
    "resilience": ([
        "challenge", "overcome", "resolved", "troubleshoot", "debug", "fixed",
        "recovered", "adapted", "pivoted", "crisis", "pressure", "deadline",
    ], 10, 30),
}

CULTURE_FLAGS = {
    "remote_capability": r"\b(?:remote|distributed|virtual|work from home|wfh|async|asynchronous)\b",
    "distributed_team": r"\b(?:distributed|global team|cross-timezone|international team|remote team)\b",
    "data_driven": r"\b(?:data-driven|metrics|analytics|kpi|measure|a/b test|experiment)\b",
    "mentoring": r"\b(?:mentor|coach|train|onboard|guide|develop talent|grow team)\b",
    "ethics": r"\b(?:ethics|integrity|compliance|governance|responsible|sustainable)\b",
}

CULTURE_WEIGHTS: Dict[str, Tuple[float, Optional[float]]] = {
    "culture_alignment": (1.5, 60),
    "work_style": (1.5, 60),
    "collaboration": (2, 60),
    "learning_agility": (1.5, 60),
    "leadership": (2, 50),
    "communication": (2, 60),
    "initiative": (2, 60),
    "bias_to_action": (2, 60),
    "continuous_improvement": (2, 60),
    "innovation": (1.5, 60),
    "customer_mindset": (1, 50),
    "risk_tolerance": (0.25, 50),
    "feedback_response": (0.5, 50),
    "values_alignment": (0.5, 60),
    "remote_capability": (0.25, None),
    "distributed_team": (0.25, None),
    "data_driven": (0.25, None),
    "mentoring": (0.25, None),
    "ethics": (0.1, None),
    "resilience": (0.5, 50),
}


class CultureFitAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> FitResult:
        data = resume_data or ResumeData()
        text = (resume_text or "").lower()
        jd = (job_description or "").lower()
        bullets = " ".join(data.all_bullets()).lower()

        work_style = 50 + sum(12 for style in WORK_STYLES if any(k in text for k in style))
        metrics: Metrics = {
            "culture_alignment": _overlap(CULTURE_KEYWORDS, text, jd, 20),
            "work_style": min(100, work_style),
            "values_alignment": _overlap(VALUE_KEYWORDS, text, jd, 20),
        }
        for name, (keywords, per, base) in CULTURE_SIGNALS.items():
            metrics[name] = _scaled(keywords, per, base, text, bullets)
        for name, pattern in CULTURE_FLAGS.items():
            metrics[name] = bool(re.search(pattern, text, re.IGNORECASE))

        score, passed = _weighted(metrics, CULTURE_WEIGHTS, 20)

        issues = []
        if metrics["collaboration"] < 60:
            issues.append("Add more collaboration examples")
        if metrics["leadership"] < 50:
            issues.append("Highlight leadership experiences")
        if metrics["communication"] < 60:
            issues.append("Show communication skills")
        if metrics["initiative"] < 60:
            issues.append("Demonstrate initiative and ownership")
        if metrics["learning_agility"] < 60:
            issues.append("Show continuous learning")
        if metrics["bias_to_action"] < 60:
            issues.append("Emphasize delivery and results")

        tier = _tier(10, "Culture Fit", "culture_fit", score, 20, passed, len(CULTURE_WEIGHTS), issues)
        return FitResult(tier_score=tier, metrics=metrics)


# ==============================================
# TIER 11: QUALITATIVE
# ==============================================

THEME_KEYWORDS = ["software", "data", "product", "design", "engineering", "development"]
GENERIC_PHRASES = [
    "responsible for", "worked on", "helped with", "assisted in",
    "various", "multiple", "several", "many",
]
ACHIEVEMENT_SIGNALS = [
    re.compile(p) for p in (
        r"\d+%", r"\$\d+", r"increased", r"decreased", r"reduced", r"improved",
        r"saved", r"generated", r"achieved", r"exceeded", r"delivered", r"launched",
    )
]
OPENING_VERBS = ["led", "developed", "created", "managed", "designed", "built", "implemented"]
INDUSTRY_TERMS = [
    "sprint", "agile", "scrum", "kanban", "ci/cd", "devops", "microservices",
    "api", "rest", "graphql", "saas", "b2b", "b2c", "mvp", "kpi", "okr",
]
JD_FILLER_WORDS = {"about", "their", "would", "should", "could", "which", "where"}

QUALITATIVE_WEIGHTS: Dict[str, Tuple[float, Optional[float]]] = {
    "narrative_coherence": (1.5, 60),
    "authenticity": (1.5, 60),
    "achievement_density": (1, 50),
    "communication_quality": (1, 70),
    "presentation_polish": (1, 70),
    "specificity": (1, 60),
    "jd_relevance": (1, 60),
    "motivation_clarity": (0.5, 50),
    "insider_knowledge": (1, 50),
    "future_potential": (0.5, 50),
}


def narrative_coherence(data: ResumeData, text: str) -> float:
    score = 50
    jobs = data.work_experience
    if len(jobs) >= 2:
        score += 15
        for prev, curr in zip(jobs, jobs[1:]):
            role, prev_role = curr.role.lower(), prev.role.lower()
            if any(t in role for t in ("senior", "lead", "manager")) or "junior" in prev_role:
                score += 15
                break
    if data.summary or data.career_objective:
        score += 10
    if any(text.count(theme) >= 3 for theme in THEME_KEYWORDS):
        score += 10
    return min(100, score)


def authenticity(bullets: List[str], text: str) -> float:
    score = 50
    if re.search(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b", " ".join(bullets)):
        score += 15
    with_metrics = sum(1 for b in bullets if re.search(r"\d+%|\$\d+|\d+\s*(?:users?|customers?|projects?)", b))
    score += min(20, with_metrics * 5)
    score -= sum(1 for p in GENERIC_PHRASES if p in text) * 3
    return max(20, min(100, score))


def achievement_density(bullets: List[str]) -> float:
    if not bullets:
        return 30
    hits = sum(1 for b in bullets if any(p.search(b.lower()) for p in ACHIEVEMENT_SIGNALS))
    return min(100, hits / len(bullets) * 100 + 20)


def communication_quality(original: str, bullets: List[str]) -> float:
    score = 70
    if original[:1].isupper():
        score += 5
    if all(b[:1] == b[:1].upper() for b in bullets):
        score += 10
    openers = sum(1 for b in bullets if any(b.lower().startswith(v) for v in OPENING_VERBS))
    score += min(15, openers / max(1, len(bullets)) * 20)
    return min(100, score)


def presentation_polish(original: str, data: ResumeData) -> float:
    score = 60
    for present in (
        data.email, data.phone, data.linkedin, data.work_experience,
        data.education, data.skills, data.summary,
    ):
        if present:
            score += 5
    if 300 <= len(original.split()) <= 800:
        score += 5
    return min(100, score)


def specificity(bullets: List[str], text: str) -> float:
    score = 40
    if re.search(r"\b(?:react|angular|vue|python|java|aws|docker|kubernetes|sql|mongodb)\b", text):
        score += 15
    score += min(25, sum(1 for b in bullets if re.search(r"\b\d+\b", b)) * 5)
    outcome = re.compile(r"resulted in|leading to|which|enabling|allowing", re.IGNORECASE)
    score += min(20, sum(1 for b in bullets if outcome.search(b)) * 5)
    return min(100, score)


def jd_relevance(text: str, jd: str) -> float:
    if not jd:
        return 70
    words = {w for w in jd.split() if len(w) > 4 and w not in JD_FILLER_WORDS}
    if not words:
        return min(100, 50 + 10)
    return min(100, sum(1 for w in words if w in text) / len(words) * 100 + 10)


def motivation_clarity(data: ResumeData, text: str) -> float:
    score = 50
    if data.career_objective or data.summary:
        score += 20
    if any(k in text for k in ("passionate", "driven", "dedicated", "committed", "enthusiastic", "love")):
        score += 15
    if any(k in text for k in ("seeking", "looking for", "goal", "aspire", "aim", "objective")):
        score += 15
    return min(100, score)


def insider_knowledge(text: str, jd: str) -> float:
    score = 50 + min(30, sum(1 for t in INDUSTRY_TERMS if t in text) * 5)
    if jd:
        jd_terms = [t for t in INDUSTRY_TERMS if t in jd]
        if jd_terms:
            score += sum(1 for t in jd_terms if t in text) / len(jd_terms) * 20
    return min(100, score)


def future_potential(data: ResumeData, text: str) -> float:
    score = 50
    if len(data.work_experience) >= 2:
        score += 10
    if any(k in text for k in ("learning", "growing", "developing", "expanding", "certification")):
        score += 15
    if any(k in text for k in ("led", "managed", "mentored", "coached", "trained")):
        score += 15
    year = datetime.now().year
    if str(year) in text or str(year - 1) in text:
        score += 10
    return min(100, score)


class QualitativeAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> FitResult:
        data = resume_data or ResumeData()
        original = resume_text or ""
        text = original.lower()
        jd = (job_description or "").lower()
        bullets = _bullets(original, data)

        metrics: Metrics = {
            "narrative_coherence": narrative_coherence(data, text),
            "authenticity": authenticity(bullets, text),
            "achievement_density": achievement_density(bullets),
            "communication_quality": communication_quality(original, bullets),
            "presentation_polish": presentation_polish(original, data),
            "specificity": specificity(bullets, text),
            "jd_relevance": jd_relevance(text, jd),
            "motivation_clarity": motivation_clarity(data, text),
            "insider_knowledge": insider_knowledge(text, jd),
            "future_potential": future_potential(data, text),
        }
        score, passed = _weighted(metrics, QUALITATIVE_WEIGHTS, 10)

        issues = []
        if metrics["authenticity"] < 60:
            issues.append("Add more specific, authentic details")
        if metrics["achievement_density"] < 50:
            issues.append("Include more quantified achievements")
        if metrics["specificity"] < 60:
            issues.append("Be more specific with technologies and outcomes")
        if metrics["narrative_coherence"] < 60:
            issues.append("Create a clearer career narrative")
        if metrics["jd_relevance"] < 60:
            issues.append("Align content more closely with job requirements")
        if metrics["communication_quality"] < 70:
            issues.append("Improve writing clarity and consistency")

        tier = _tier(11, "Qualitative", "qualitative", score, 10, passed, len(QUALITATIVE_WEIGHTS), issues)
        return FitResult(tier_score=tier, metrics=metrics)
