# education_analyzer.py
# Tiers 4 and 5: Education and Certifications
#
# Two ten-point tiers scored from structured data when present,
# falling back to text patterns otherwise.

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from resume_models import ResumeData, TierScore, build_tier_score
from scoring_tables import (
    CERT_CATEGORIES,
    DEFAULT_TIER_WEIGHTS,
    KNOWN_CERT_PROVIDERS,
    PRESTIGIOUS_INSTITUTIONS,
    RELEVANT_DEGREE_FIELDS,
)

DEGREE_PATTERN = re.compile(
    r"\b(bachelor|master|phd|b\.?s\.?|m\.?s\.?|b\.?e\.?|m\.?e\.?|mba|degree)\b", re.IGNORECASE
)
GPA_PATTERN = re.compile(r"\bgpa\b|cgpa|\d\.\d{1,2}\s*/\s*4", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"\b(20\d{2}|19\d{2})\b")
HONORS_PATTERN = re.compile(
    r"cum laude|magna|summa|honors|dean.?s list|distinction|gold medal|first class", re.IGNORECASE
)
COURSEWORK_PATTERN = re.compile(r"coursework|courses|relevant courses|key courses", re.IGNORECASE)
CERT_DATE_PATTERN = re.compile(r"\b(20\d{2}|expires?|valid|issued)\b", re.IGNORECASE)

# Certifications older than this many years are not considered current
CERT_CURRENCY_YEARS = 7


@dataclass
class EducationMetrics:
    degree_present: bool = False
    degree_type: str = "unknown"
    degree_relevance: int = 50
    institution_prestige: int = 60
    gpa_present: bool = False
    graduation_date_present: bool = False
    honors_present: bool = False
    coursework_present: bool = False
    multiple_degrees: bool = False
    education_format: int = 70


@dataclass
class CertificationMetrics:
    count: int = 0
    relevance: int = 0
    currency: bool = False
    credibility: int = 0
    cloud: bool = False
    security: bool = False
    project_management: bool = False
    language: bool = False
    dates_present: bool = False
    format_ok: bool = False


@dataclass
class EducationCertificationResult:
    education: TierScore
    certifications: TierScore
    education_metrics: EducationMetrics
    certification_metrics: CertificationMetrics
    combined_score: float
    combined_max: int = 20
    issues: List[str] = field(default_factory=list)


# ==============================================
# EDUCATION
# ==============================================

def _degree_type(degree: str) -> str:
    d = degree.lower()
    if "phd" in d or "doctorate" in d:
        return "phd"
    if "master" in d or "m.s" in d or "m.e" in d or "mba" in d:
        return "masters"
    if "bachelor" in d or "b.s" in d or "b.e" in d or "b.tech" in d:
        return "bachelors"
    if "associate" in d or "diploma" in d:
        return "associate"
    return "unknown"


def _prestige(schools: List[str]) -> int:
    best = 60
    for school in schools:
        s = school.lower()
        if any(re.search(r"\b" + re.escape(p) + r"\b", s) for p in PRESTIGIOUS_INSTITUTIONS):
            return 95
        if re.search(r"university|college|institute|school", s):
            best = max(best, 75)
        elif len(school.strip()) > 3:
            best = max(best, 70)
    return best


def analyze_education_metrics(
    text: str, data: ResumeData, job_description: Optional[str] = None
) -> EducationMetrics:
    m = EducationMetrics()
    entries = data.education
    degrees_text = " ".join(e.degree for e in entries)

    m.degree_present = bool(entries) or bool(DEGREE_PATTERN.search(text))
    m.degree_type = _degree_type(degrees_text or " ".join(DEGREE_PATTERN.findall(text)))

    if job_description and entries:
        jd_lower = job_description.lower()
        combined = " ".join(f"{e.degree} {e.field or ''}" for e in entries).lower()
        if any(f in combined or f in jd_lower for f in RELEVANT_DEGREE_FIELDS):
            m.degree_relevance = 85

    m.institution_prestige = _prestige([e.school for e in entries])
    m.gpa_present = any(e.cgpa for e in entries) or bool(GPA_PATTERN.search(text))
    m.graduation_date_present = any(e.year for e in entries) or bool(YEAR_PATTERN.search(text))
    m.honors_present = bool(HONORS_PATTERN.search(text))
    m.coursework_present = bool(COURSEWORK_PATTERN.search(text))
    m.multiple_degrees = len(entries) > 1

    if entries:
        complete = all(e.degree and e.school and e.year for e in entries)
        m.education_format = 90 if complete else 60

    return m


def score_education(m: EducationMetrics) -> float:
    if not m.degree_present:
        return 0.0

    score = {"phd": 2, "masters": 2, "bachelors": 1.5}.get(m.degree_type, 1)

    if m.degree_relevance >= 85:
        score += 1.5
    elif m.degree_relevance >= 50:
        score += 1
    else:
        score += 0.5

    if m.education_format >= 90:
        score += 1
    elif m.education_format >= 60:
        score += 0.5

    if m.gpa_present:
        score += 0.5

    return min(score, 5) * 2


def education_issues(m: EducationMetrics) -> List[str]:
    issues = []
    if not m.degree_present:
        issues.append("No education/degree information found - add your educational background")
        return issues
    if m.degree_type == "unknown":
        issues.append("Degree type not clearly specified - mention Bachelor/Master/PhD explicitly")
    if m.degree_relevance < 60:
        issues.append("Education field may not align with target role - highlight relevant coursework")
    if not m.graduation_date_present:
        issues.append("Missing graduation year - add completion date to education")
    if m.education_format < 70:
        issues.append("Education format incomplete - include degree, institution, and year")
    if not m.gpa_present:
        issues.append("Consider adding GPA/CGPA if above 3.0/7.0")
    return issues


# ==============================================
# CERTIFICATIONS
# ==============================================

def _is_current(text: str) -> bool:
    this_year = datetime.now().year
    for year in YEAR_PATTERN.findall(text):
        if this_year - CERT_CURRENCY_YEARS <= int(year) <= this_year:
            return True
    return False


def analyze_certification_metrics(
    text: str, data: ResumeData, job_description: Optional[str] = None
) -> CertificationMetrics:
    certs = [c for c in data.certification_titles() if c]
    lowered = [c.lower() for c in certs]
    joined = " ".join(lowered)
    m = CertificationMetrics(count=len(certs))

    if job_description and certs:
        jd_words = {w for w in re.findall(r"\b\w+\b", job_description.lower()) if len(w) > 4}
        matches = sum(1 for c in lowered if any(w in c for w in jd_words))
        m.relevance = min(100, round(matches / len(certs) * 100 + 30))

    m.currency = _is_current(joined + " " + (text or ""))
    if certs:
        credible = sum(1 for c in lowered if any(p in c for p in KNOWN_CERT_PROVIDERS))
        m.credibility = round(credible / len(certs) * 100)

    m.cloud = any(k in joined for k in CERT_CATEGORIES["cloud"])
    m.security = any(k in joined for k in CERT_CATEGORIES["security"])
    m.project_management = any(k in joined for k in CERT_CATEGORIES["project_management"])
    m.language = any(k in joined for k in CERT_CATEGORIES["language"])
    m.dates_present = bool(certs) and bool(CERT_DATE_PATTERN.search(joined))
    m.format_ok = bool(certs) and all(len(c) > 5 for c in certs)
    return m


def score_certifications(m: CertificationMetrics) -> float:
    if m.count == 0:
        return 0.0

    score = 3 + min(2, (m.count - 1) * 0.5)
    score += m.relevance / 100 * 2
    score += m.credibility / 100 * 1.5
    if m.cloud:
        score += 0.5
    if m.security:
        score += 0.25
    if m.project_management:
        score += 0.25
    if m.language:
        score += 0.1
    if m.currency:
        score += 0.25
    if m.dates_present:
        score += 0.1
    if m.format_ok:
        score += 0.1
    return min(score, 10)


def certification_issues(m: CertificationMetrics, has_jd: bool) -> List[str]:
    if m.count == 0:
        return ["No certifications found - consider adding relevant industry certifications"]
    issues = []
    if has_jd and m.relevance < 50:
        issues.append("Certifications may not be relevant to target role")
    if not m.currency:
        issues.append("Certification dates missing or outdated - add recent certifications")
    if m.credibility < 50:
        issues.append("Add certifications from recognized providers (AWS, Microsoft, Google, etc.)")
    if not m.dates_present:
        issues.append("Add issue/expiry dates to certifications")
    return issues


class EducationCertificationAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
    ) -> EducationCertificationResult:
        data = resume_data or ResumeData()
        edu = analyze_education_metrics(resume_text or "", data, job_description)
        cert = analyze_certification_metrics(resume_text or "", data, job_description)

        edu_score = score_education(edu)
        cert_score = score_certifications(cert)
        edu_issues = education_issues(edu)
        cert_issues = certification_issues(cert, bool(job_description))

        edu_checks = [
            edu.degree_present,
            edu.degree_type != "unknown",
            edu.degree_relevance >= 60,
            edu.institution_prestige >= 70,
            edu.gpa_present,
            edu.graduation_date_present,
            edu.honors_present or edu.coursework_present,
            edu.education_format >= 70,
        ]
        cert_checks = [
            cert.count > 0,
            cert.relevance >= 50,
            cert.currency,
            cert.credibility >= 50,
            cert.cloud,
            cert.security,
            cert.project_management,
            cert.language,
            cert.dates_present,
            cert.format_ok,
        ]

        education_tier = build_tier_score(
            tier_number=4,
            tier_name="Education",
            score=edu_score,
            max_score=10,
            weight=DEFAULT_TIER_WEIGHTS["education"],
            metrics_passed=sum(edu_checks),
            metrics_total=len(edu_checks),
            top_issues=edu_issues,
        )
        certification_tier = build_tier_score(
            tier_number=5,
            tier_name="Certifications",
            score=cert_score,
            max_score=10,
            weight=DEFAULT_TIER_WEIGHTS["certifications"],
            metrics_passed=sum(cert_checks),
            metrics_total=len(cert_checks),
            top_issues=cert_issues,
        )

        return EducationCertificationResult(
            education=education_tier,
            certifications=certification_tier,
            education_metrics=edu,
            certification_metrics=cert,
            combined_score=round(edu_score + cert_score, 2),
            issues=edu_issues + cert_issues,
        )
