# red_flag_detector.py
# Tier 8: Red Flags (30 metrics, penalty based)
#
# Employment flags are numbered from 1, skills flags from 11 and
# formatting flags from 21. The tier score is 30 minus the total penalty;
# it carries no weight and feeds the final score as a direct deduction.

import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from resume_models import RedFlag, ResumeData, TierScore, build_tier_score
from scoring_tables import AUTO_REJECT_CRITICAL_FLAGS, DEFAULT_TIER_WEIGHTS, RED_FLAG_PENALTIES

MAX_SCORE = 30
METRICS_TOTAL = 30
GROUP_START_IDS = {"employment": 1, "skills": 11, "formatting": 21}

# key -> (name, severity, description, recommendation)
FLAG_DEFINITIONS: Dict[str, Tuple[str, str, str, str]] = {
    "employment_gap": (
        "Unexplained Employment Gap", "high",
        "{count} gap(s) > 6 months detected",
        "Add explanation for employment gaps (education, freelance, etc.)",
    ),
    "job_hopping": (
        "Job Hopping Pattern", "high",
        "{count} positions with < 1 year tenure",
        "Highlight achievements and reasons for transitions",
    ),
    "title_inflation": (
        "Potential Title Inflation", "critical",
        "Job titles may be inflated beyond actual responsibilities",
        "Ensure titles accurately reflect your role",
    ),
    "conflicting_dates": (
        "Conflicting Dates", "medium",
        "Overlapping or inconsistent employment dates",
        "Review and correct date ranges",
    ),
    "vague_responsibilities": (
        "Vague Responsibilities", "low",
        "Job descriptions lack specific details",
        "Add specific achievements and metrics",
    ),
    "no_progression": (
        "No Career Progression", "medium",
        "No visible career advancement over time",
        "Highlight promotions, increased responsibilities",
    ),
    "layoff_pattern": (
        "Potential Layoff Pattern", "medium",
        "Multiple short-term positions may indicate layoffs",
        "Address employment stability in cover letter",
    ),
    "recent_changes": (
        "Recent Frequent Job Changes", "medium",
        "Multiple job changes in recent years",
        "Explain reasons for recent transitions",
    ),
    "company_names_in_skills": (
        "Company Names in Skills", "critical",
        "Company names found in skills section (Wipro, Kyndryl, EY GDS, etc.)",
        "Remove all company names from skills - they cause ATS keyword stuffing flags",
    ),
    "domains_as_languages": (
        "Domains Listed as Programming Languages", "critical",
        "Non-programming domains (BI, AI, Data Analytics) listed as programming languages",
        "Move domains like BI, AI, Data Analytics to separate Domains section",
    ),
    "soft_skills_in_technical": (
        "Soft Skills in Technical Categories", "high",
        "Soft skills (teamwork, communication) mixed with technical tools",
        "Move soft skills to Core Competencies section",
    ),
    "keyword_stuffing": (
        "Keyword Stuffing", "critical",
        "Excessive repetition of keywords detected",
        "Use keywords naturally throughout resume",
    ),
    "unsubstantiated_claims": (
        "Unsubstantiated Claims", "medium",
        "Claims without supporting evidence",
        "Back up claims with specific examples and metrics",
    ),
    "skills_without_context": (
        "Skills Without Context", "low",
        "Skills listed without demonstration in experience",
        "Show skills in action within job descriptions",
    ),
    "outdated_technologies": (
        "Outdated Technologies", "medium",
        "Resume emphasizes outdated technologies",
        "Highlight current, in-demand technologies",
    ),
    "irrelevant_skills": (
        "Irrelevant Skills Emphasized", "low",
        "Skills not aligned with job requirements",
        "Tailor skills section to match JD",
    ),
    "shallow_skills": (
        "Shallow Skill Presentation", "low",
        "Skills listed without proficiency levels",
        "Indicate expertise level for key skills",
    ),
    "generic_language": (
        "Generic Language", "low",
        "Overuse of generic phrases",
        "Replace generic terms with specific achievements",
    ),
    "missing_domain_knowledge": (
        "Missing Domain Knowledge", "medium",
        "Key domain terms from JD not present",
        "Add relevant industry terminology",
    ),
    "unverifiable_claims": (
        "Unverifiable Claims", "medium",
        "Claims that cannot be verified",
        "Focus on demonstrable achievements",
    ),
    "skill_decay": (
        "Potential Skill Decay", "low",
        "No recent certifications or learning",
        "Add recent courses, certifications, or projects",
    ),
    "grammar_errors": (
        "Grammar/Spelling Errors", "high",
        "Grammar or spelling errors detected",
        "Proofread carefully or use grammar tools",
    ),
    "inconsistent_formatting": (
        "Inconsistent Formatting", "medium",
        "Inconsistent bullet styles, fonts, or spacing",
        "Use consistent formatting throughout",
    ),
    "ats_parsing_issues": (
        "ATS Parsing Issues", "high",
        "Format may cause ATS parsing problems",
        "Use simple, ATS-friendly formatting",
    ),
    "length_issues": (
        "Length Issues", "low",
        "Resume may be too long or too short",
        "Aim for 1-2 pages with relevant content",
    ),
    "contact_issues": (
        "Contact Information Issues", "high",
        "Missing or incomplete contact information",
        "Include email, phone, and LinkedIn",
    ),
    "section_header_issues": (
        "Section Header Issues", "medium",
        "Missing or unclear section headers",
        "Use clear, standard section headers",
    ),
    "whitespace_issues": (
        "Whitespace Issues", "low",
        "Poor use of whitespace",
        "Balance content with appropriate spacing",
    ),
    "presentation_issues": (
        "Presentation Issues", "low",
        "Overall presentation could be improved",
        "Review layout and visual hierarchy",
    ),
}

COMPANY_NAMES = [
    "wipro", "kyndryl", "ey gds", "tcs", "infosys", "cognizant", "accenture",
    "capgemini", "hcl", "tech mahindra", "mindtree", "ltts", "persistent",
    "mphasis", "zensar", "cyient",
]
NON_LANGUAGE_DOMAINS = [
    "bi", "data & analytics", "ai", "testing", "full-stack", "sdlc",
    "full-stack development", "testing & quality engineering", "data analytics",
    "business intelligence",
]
SOFT_SKILLS = [
    "analytical thinking", "debugging mindset", "good communication", "teamwork",
    "problem-solving", "collaboration", "leadership",
]
SENIORITY_KEYWORDS = ["junior", "senior", "lead", "principal", "manager", "director"]

TITLE_INFLATION_PATTERNS = [
    re.compile(r"\bCEO\b.*\b(?:startup|small|1-10|solo)", re.IGNORECASE),
    re.compile(r"\bCTO\b.*\b(?:startup|small|1-10|solo)", re.IGNORECASE),
    re.compile(r"\bVP\b.*\b(?:startup|small|1-10)", re.IGNORECASE),
    re.compile(r"\bDirector\b.*\b(?:intern|junior|entry)", re.IGNORECASE),
]
CLAIM_PATTERN = re.compile(
    r"\b(?:best|top|leading|expert|guru|ninja|rockstar|world-class|industry-leading|cutting-edge)\b",
    re.IGNORECASE,
)
UNVERIFIABLE_PATTERNS = [
    re.compile(r"\b(?:always|never|perfect)\b|100%", re.IGNORECASE),
    re.compile(r"\b(?:guaranteed|proven)\b.*\b(?:results|success)\b", re.IGNORECASE),
]
OUTDATED_PATTERN = re.compile(
    r"\b(?:cobol|fortran|pascal|delphi|vb6|visual basic 6|flash|actionscript|silverlight|jquery)\b", re.I
)
MODERN_PATTERN = re.compile(r"\b(?:react|vue|angular|typescript|python|go|rust|kubernetes|docker)\b", re.I)
GENERIC_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"team player", r"hard worker", r"detail-oriented", r"self-starter",
        r"go-getter", r"think outside the box", r"synergy", r"leverage",
    )
]
GRAMMAR_PATTERNS = [
    re.compile(r"[ \t]{2,}"),
    re.compile(r"[.]{2,}"),
    re.compile(r"\bi\b(?!['’])"),
    re.compile(r"[ \t][,.:;]"),
]
BULLET_STYLE = re.compile(r"^\s*([•\-*‣◦])", re.MULTILINE)
BOX_CHARS = re.compile(r"[│┃┆┇┊┋─-╿]")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
CAPS_HEADER = re.compile(r"^[A-Z][A-Z \t]+:?$", re.MULTILINE)
SECTION_STOP = r"(?=\n[A-Z][A-Za-z ]+:|\n\n|$)"


@dataclass
class RedFlagResult:
    tier_score: TierScore
    red_flags: List[RedFlag]
    total_penalty: int
    auto_reject_risk: bool


# ==============================================
# DATE HELPERS
# ==============================================

def start_year(value: str) -> Optional[int]:
    years = [int(y) for y in re.findall(r"\d{4}", value or "")]
    return min(years) if years else None


def end_year(value: str) -> Optional[int]:
    if re.search(r"present|current|now", value or "", re.IGNORECASE):
        return datetime.now().year
    years = [int(y) for y in re.findall(r"\d{4}", value or "")]
    return max(years) if years else None


def tenure_months(value: str) -> int:
    start, end = start_year(value), end_year(value)
    if not start or not end:
        return 12
    return max(1, (end - start) * 12 + 6)


# ==============================================
# EMPLOYMENT
# ==============================================

def employment_gaps(data: ResumeData) -> List[int]:
    """Gaps in months between consecutive roles, most recent role first."""
    gaps = []
    jobs = data.work_experience
    for newer, older in zip(jobs, jobs[1:]):
        newer_start, older_end = start_year(newer.year), end_year(older.year)
        if newer_start and older_end and newer_start > older_end:
            months = (newer_start - older_end) * 12
            if months > 2:
                gaps.append(months)
    return gaps


def short_tenures(data: ResumeData) -> int:
    return sum(1 for job in data.work_experience if tenure_months(job.year) < 12)


def conflicting_dates(data: ResumeData) -> bool:
    jobs = data.work_experience
    for newer, older in zip(jobs, jobs[1:]):
        newer_start, older_end = start_year(newer.year), end_year(older.year)
        if newer_start and older_end and newer_start < older_end:
            return True
    return False


def vague_responsibilities(data: ResumeData) -> bool:
    bullets = [b for job in data.work_experience for b in job.bullets]
    vague = [
        b for b in bullets
        if re.search(r"various|multiple|different|several|many|some", b, re.IGNORECASE) and not re.search(r"\d", b)
    ]
    return len(vague) > len(bullets) * 0.3


def no_progression(data: ResumeData) -> bool:
    if len(data.work_experience) < 3:
        return False
    titles = [job.role.lower() for job in data.work_experience]
    for prev, title in zip(titles, titles[1:]):
        if any(k in title and k not in prev for k in SENIORITY_KEYWORDS):
            return False
    return True


def recent_frequent_changes(data: ResumeData) -> bool:
    if len(data.work_experience) < 3:
        return False
    cutoff = datetime.now().year - 3
    recent = [job for job in data.work_experience if (start_year(job.year) or 0) >= cutoff]
    return len(recent) >= 3


# ==============================================
# SKILLS
# ==============================================

def _section(pattern: str, text: str) -> Optional[str]:
    found = re.search(pattern + r"[\s\S]*?" + SECTION_STOP, text, re.IGNORECASE)
    return found.group(0).lower() if found else None


def company_names_in_skills(text: str) -> bool:
    section = _section(r"(?:technical skills?|skills?|tools?\s*&?\s*technologies?)", text)
    return bool(section) and any(re.search(r"\b" + re.escape(c) + r"\b", section) for c in COMPANY_NAMES)


def domains_as_languages(text: str) -> bool:
    section = _section(r"programming languages?:", text)
    return bool(section) and any(re.search(r"\b" + re.escape(d) + r"\b", section) for d in NON_LANGUAGE_DOMAINS)


def soft_skills_in_technical(text: str) -> bool:
    section = _section(r"(?:technical skills?|tools?\s*&?\s*technologies?|programming languages?)", text)
    return bool(section) and any(s in section for s in SOFT_SKILLS)


def keyword_stuffing(text: str) -> bool:
    counts = Counter(w for w in text.lower().split() if len(w) > 4)
    return bool(counts) and max(counts.values()) > 15


def skills_without_context(data: ResumeData) -> bool:
    skills = [s.lower() for s in data.all_skills()]
    if not skills or not data.work_experience:
        return False
    bullets = " ".join(b for job in data.work_experience for b in job.bullets).lower()
    unproven = [s for s in skills if s not in bullets]
    return len(unproven) > len(skills) * 0.5


def irrelevant_skills(data: ResumeData, job_description: str) -> bool:
    skills = data.all_skills()
    if not skills:
        return False
    jd = job_description.lower()
    relevant = [s for s in skills if s.lower() in jd]
    return len(relevant) < len(skills) * 0.3


def shallow_skills(data: ResumeData) -> bool:
    return len(data.skills) == 1 and len(data.skills[0].entries) > 20


def missing_domain_knowledge(text: str, job_description: str) -> bool:
    terms = list(dict.fromkeys(re.findall(r"\b[A-Z][a-z]+(?:[A-Z][a-z]+)+\b", job_description)))[:10]
    if not terms:
        return False
    lower = text.lower()
    return sum(1 for t in terms if t.lower() in lower) < len(terms) * 0.3


def skill_decay(data: ResumeData) -> bool:
    titles = data.certification_titles()
    if not titles:
        return False
    recent_cutoff = datetime.now().year - 3
    years = [int(y) for y in re.findall(r"\b(20\d{2})\b", " ".join(titles))]
    return not any(y >= recent_cutoff for y in years)


# ==============================================
# FORMATTING
# ==============================================

def grammar_errors(text: str) -> bool:
    return sum(len(p.findall(text)) for p in GRAMMAR_PATTERNS) > 5


def inconsistent_formatting(text: str) -> bool:
    return len(set(BULLET_STYLE.findall(text))) > 2


def length_issues(text: str) -> bool:
    words = len(text.split())
    return words < 200 or words > 1500


def contact_issues(text: str) -> bool:
    return not EMAIL_PATTERN.search(text) or not PHONE_PATTERN.search(text)


def whitespace_issues(text: str) -> bool:
    lines = text.split("\n")
    ratio = sum(1 for line in lines if not line.strip()) / len(lines)
    return ratio < 0.05 or ratio > 0.4


def presentation_issues(text: str) -> bool:
    lines = text.split("\n")
    return sum(1 for line in lines if len(line) > 120) > len(lines) * 0.2


# ==============================================
# DETECTOR
# ==============================================

Check = Tuple[str, Callable[[], object]]


def _employment_checks(text: str, data: ResumeData) -> List[Check]:
    gaps = [g for g in employment_gaps(data) if g > 6]
    shorts = short_tenures(data)
    return [
        ("employment_gap", lambda: len(gaps) if gaps else 0),
        ("job_hopping", lambda: shorts if shorts >= 3 else 0),
        ("title_inflation", lambda: any(p.search(text) for p in TITLE_INFLATION_PATTERNS)),
        ("conflicting_dates", lambda: conflicting_dates(data)),
        ("vague_responsibilities", lambda: vague_responsibilities(data)),
        ("no_progression", lambda: no_progression(data)),
        ("layoff_pattern", lambda: shorts >= 4),
        ("recent_changes", lambda: recent_frequent_changes(data)),
    ]


def _skills_checks(text: str, data: ResumeData, jd: Optional[str]) -> List[Check]:
    return [
        ("company_names_in_skills", lambda: company_names_in_skills(text)),
        ("domains_as_languages", lambda: domains_as_languages(text)),
        ("soft_skills_in_technical", lambda: soft_skills_in_technical(text)),
        ("keyword_stuffing", lambda: keyword_stuffing(text)),
        ("unsubstantiated_claims", lambda: CLAIM_PATTERN.search(text)),
        ("skills_without_context", lambda: skills_without_context(data)),
        ("outdated_technologies", lambda: OUTDATED_PATTERN.search(text) and not MODERN_PATTERN.search(text)),
        ("irrelevant_skills", lambda: bool(jd) and irrelevant_skills(data, jd)),
        ("shallow_skills", lambda: shallow_skills(data)),
        ("generic_language", lambda: sum(1 for p in GENERIC_PATTERNS if p.search(text)) >= 3),
        ("missing_domain_knowledge", lambda: bool(jd) and missing_domain_knowledge(text, jd)),
        ("unverifiable_claims", lambda: any(p.search(text) for p in UNVERIFIABLE_PATTERNS)),
        ("skill_decay", lambda: skill_decay(data)),
    ]


def _formatting_checks(text: str) -> List[Check]:
    return [
        ("grammar_errors", lambda: grammar_errors(text)),
        ("inconsistent_formatting", lambda: inconsistent_formatting(text)),
        ("ats_parsing_issues", lambda: BOX_CHARS.search(text)),
        ("length_issues", lambda: length_issues(text)),
        ("contact_issues", lambda: contact_issues(text)),
        ("section_header_issues", lambda: len(CAPS_HEADER.findall(text)) < 3),
        ("whitespace_issues", lambda: whitespace_issues(text)),
        ("presentation_issues", lambda: presentation_issues(text)),
    ]


def make_flag(flag_id: int, flag_type: str, key: str, count: int = 0) -> RedFlag:
    name, severity, description, recommendation = FLAG_DEFINITIONS[key]
    return RedFlag(
        id=flag_id,
        type=flag_type,
        name=name,
        severity=severity,
        penalty=RED_FLAG_PENALTIES[key],
        description=description.format(count=count),
        recommendation=recommendation,
    )


def red_flag_tier(flags: List[RedFlag]) -> TierScore:
    total = abs(sum(f.penalty for f in flags))
    worst_first = sorted(flags, key=lambda f: f.penalty)
    return build_tier_score(
        tier_number=8,
        tier_name="Red Flags",
        score=max(0, MAX_SCORE - total),
        max_score=MAX_SCORE,
        weight=DEFAULT_TIER_WEIGHTS["red_flags"],
        metrics_passed=max(0, METRICS_TOTAL - len(flags)),
        metrics_total=METRICS_TOTAL,
        top_issues=[f.description for f in worst_first[:5]],
    )


class RedFlagDetector:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> RedFlagResult:
        text = resume_text or ""
        data = resume_data or ResumeData()

        groups = [
            ("employment", _employment_checks(text, data)),
            ("skills", _skills_checks(text, data, job_description)),
            ("formatting", _formatting_checks(text)),
        ]

        flags: List[RedFlag] = []
        next_id = 1
        for flag_type, checks in groups:
            next_id = max(next_id, GROUP_START_IDS[flag_type])
            for key, check in checks:
                hit = check()
                if hit:
                    count = hit if isinstance(hit, int) and not isinstance(hit, bool) else 0
                    flags.append(make_flag(next_id, flag_type, key, count))
                    next_id += 1

        critical = sum(1 for f in flags if f.severity == "critical")
        return RedFlagResult(
            tier_score=red_flag_tier(flags),
            red_flags=flags,
            total_penalty=sum(f.penalty for f in flags),
            auto_reject_risk=critical >= AUTO_REJECT_CRITICAL_FLAGS,
        )
