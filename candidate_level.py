# candidate_level.py
# Candidate level inference (fresher / junior / mid / senior)
#
# Works without a job description: the level comes from work history,
# explicit fresher wording, internships, projects and graduation recency.
# is_fresher_role() layers the user type and JD wording on top.

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from resume_models import CandidateLevel, ResumeData

FRESHER_INDICATORS = [
    "fresher", "fresh graduate", "recent graduate", "entry level", "entry-level",
    "no experience", "seeking first", "looking for first", "aspiring", "beginner",
    "final year", "graduating", "new graduate", "campus placement", "internship only",
]

JD_FRESHER_KEYWORDS = [
    "fresher", "freshers", "entry level", "graduate", "new grad", "campus hire",
    "trainee", "intern", "0-1 years", "0–1 years", "0-2 years", "0–2 years",
    "no experience required", "recent graduate", "entry-level", "junior", "graduate program",
]

FRESHER_USER_TYPES = ("fresher", "student")

TEXT_YEARS_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience"),
    re.compile(r"experience\s*:?\s*(\d+)\+?\s*years?"),
    re.compile(r"(\d+)\+?\s*years?\s*(?:in|of|working)"),
]
JD_YEARS_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s+(?:of\s+)?(?:work\s+|professional\s+|relevant\s+)?experience"),
    re.compile(r"minimum\s+(\d+)\+?\s*years?"),
    re.compile(r"at\s+least\s+(\d+)\+?\s*years?"),
]
RANGE_PATTERN = re.compile(r"(\d{4})\s*[-–]\s*(\d{4}|present|current|now)", re.IGNORECASE)
DURATION_PATTERN = re.compile(r"(\d+)\s*(year|month)", re.IGNORECASE)
INTERN_PATTERN = re.compile(r"\bintern(?:ship)?s?\b", re.IGNORECASE)


def mentions(term: str, text: str) -> bool:
    """Whole-word match, so "intern" never hits "internal"."""
    return bool(re.search(r"\b" + re.escape(term) + r"\b", text))


@dataclass
class CandidateLevelResult:
    level: CandidateLevel
    confidence: int
    signals: List[str] = field(default_factory=list)
    total_years_experience: float = 0.0


def total_experience_years(data: ResumeData) -> float:
    """Sum of role durations; accepts "2019 - 2022", "2021 - Present" or "18 months"."""
    months = 0
    this_year = datetime.now().year
    for job in data.work_experience:
        span = job.year or ""
        found = RANGE_PATTERN.search(span)
        if found:
            end = found.group(2)
            end_year = this_year if not end.isdigit() else int(end)
            months += (end_year - int(found.group(1))) * 12
            continue
        found = DURATION_PATTERN.search(span)
        if found:
            value = int(found.group(1))
            months += value * 12 if found.group(2).lower().startswith("year") else value
    return months / 12


def years_from_text(lower: str) -> int:
    years = 0
    for pattern in TEXT_YEARS_PATTERNS:
        found = pattern.search(lower)
        if found:
            years = max(years, int(found.group(1)))
    return years


def has_recent_education(data: ResumeData, lower: str) -> bool:
    this_year = datetime.now().year
    for edu in data.education:
        found = re.search(r"\d{4}", edu.year or "")
        if found and this_year - int(found.group(0)) <= 2:
            return True

    for year in (this_year, this_year - 1, this_year - 2):
        phrases = (f"graduated {year}", f"class of {year}", f"batch {year}", f"{year} graduate")
        if any(p in lower for p in phrases):
            return True
    return False


def only_internships(data: ResumeData) -> bool:
    jobs = data.work_experience
    return bool(jobs) and all(
        INTERN_PATTERN.search(job.role or "") or INTERN_PATTERN.search(job.company or "") for job in jobs
    )


def detect_candidate_level(resume_text: str, resume_data: Optional[ResumeData] = None) -> CandidateLevelResult:
    data = resume_data or ResumeData()
    lower = (resume_text or "").lower()
    signals = []

    fresher_wording = any(mentions(ind, lower) for ind in FRESHER_INDICATORS)
    if fresher_wording:
        signals.append("Fresher indicator found in text")

    if data.work_experience:
        years = total_experience_years(data)
        signals.append(f"{years:.1f} years of experience detected")
    else:
        years = years_from_text(lower)
        if years == 0:
            signals.append("No work experience section found")

    interns = only_internships(data)
    if interns:
        signals.append("Only internship experience found")

    if len(data.projects) >= 3 and years < 2:
        signals.append("Strong project portfolio (fresher signal)")

    recent_grad = has_recent_education(data, lower)
    if recent_grad:
        signals.append("Recent education detected")

    if fresher_wording or (years < 1 and (interns or recent_grad)):
        level, confidence = CandidateLevel.FRESHER, 95 if fresher_wording else 85
    elif years < 2 or interns:
        level, confidence = CandidateLevel.FRESHER, 75
    elif years < 4:
        level, confidence = CandidateLevel.JUNIOR, 80
    elif years < 8:
        level, confidence = CandidateLevel.MID, 85
    else:
        level, confidence = CandidateLevel.SENIOR, 90

    return CandidateLevelResult(level=level, confidence=confidence, signals=signals, total_years_experience=years)


def required_years(job_description: str) -> Optional[int]:
    jd = job_description.lower()
    for pattern in JD_YEARS_PATTERNS:
        found = pattern.search(jd)
        if found:
            return int(found.group(1))
    return None


def is_fresher_role(
    level: CandidateLevel,
    job_description: Optional[str] = None,
    user_type: Optional[str] = None,
) -> bool:
    """Whether experience should be scored neutrally for this candidate."""
    if user_type in FRESHER_USER_TYPES:
        return True
    if user_type == "experienced":
        return False
    if level == CandidateLevel.FRESHER:
        return True

    if job_description:
        jd = job_description.lower()
        if any(mentions(k, jd) for k in JD_FRESHER_KEYWORDS):
            return True
        years = required_years(jd)
        if years is not None and years >= 2:
            return False

    return level == CandidateLevel.JUNIOR
