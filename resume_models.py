# resume_models.py
# Data model for the multi-tier scoring engine
#
# - Structured resume input (pydantic) validated once at the API boundary
# - Immutable result records (dataclasses) shared by every analyzer
# - Explicit ScoringResult status instead of a silent neutral number

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


# ==============================================
# ENUMERATIONS
# ==============================================

class ExtractionMode(str, Enum):
    TEXT = "TEXT"
    OCR = "OCR"
    HYBRID = "HYBRID"


class CandidateLevel(str, Enum):
    FRESHER = "fresher"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


KEYWORD_TIER_COLORS = {
    "critical": "red",
    "important": "orange",
    "nice_to_have": "yellow",
}


# ==============================================
# STRUCTURED INPUT (validated at the boundary)
# ==============================================

class _ResumeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Education(_ResumeModel):
    degree: str = ""
    school: str = ""
    year: str = ""
    cgpa: Optional[str] = None
    location: Optional[str] = None
    field: Optional[str] = None


class WorkExperience(_ResumeModel):
    role: str = ""
    company: str = ""
    year: str = ""
    bullets: List[str] = Field(default_factory=list)
    location: Optional[str] = None


class Project(_ResumeModel):
    title: str = ""
    bullets: List[str] = Field(default_factory=list)
    github_url: Optional[str] = Field(default=None, alias="githubUrl")
    description: Optional[str] = None
    tech_stack: Optional[List[str]] = Field(default=None, alias="techStack")


class Skill(_ResumeModel):
    category: str = ""
    entries: List[str] = Field(default_factory=list, alias="list")

    @property
    def count(self) -> int:
        return len(self.entries)


class Certification(_ResumeModel):
    title: str = ""
    description: str = ""


class ResumeData(_ResumeModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    linkedin: str = ""
    github: str = ""
    location: Optional[str] = None
    target_role: Optional[str] = Field(default=None, alias="targetRole")
    summary: Optional[str] = None
    career_objective: Optional[str] = Field(default=None, alias="careerObjective")
    education: List[Education] = Field(default_factory=list)
    work_experience: List[WorkExperience] = Field(default_factory=list, alias="workExperience")
    projects: List[Project] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    certifications: List[Union[Certification, str]] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)

    def certification_titles(self) -> List[str]:
        """Certifications may be bare strings or title/description records"""
        return [c if isinstance(c, str) else c.title for c in self.certifications]

    def all_bullets(self) -> List[str]:
        bullets = [b for exp in self.work_experience for b in exp.bullets]
        bullets.extend(b for p in self.projects for b in p.bullets)
        return bullets

    def all_skills(self) -> List[str]:
        return [s for group in self.skills for s in group.entries]


class ResumeDataError(ValueError):
    """Raised when structured resume data fails validation"""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


def parse_resume_data(raw: Union[None, Dict[str, Any], ResumeData]) -> ResumeData:
    """Validate raw structured data; None yields an empty ResumeData"""
    if raw is None:
        return ResumeData()
    if isinstance(raw, ResumeData):
        return raw
    try:
        return ResumeData.model_validate(raw)
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]
        raise ResumeDataError("Invalid resume data", errors=errors) from e


# ==============================================
# RESULT RECORDS
# ==============================================

@dataclass(frozen=True)
class TierScore:
    tier_number: int
    tier_name: str
    score: float
    max_score: float
    percentage: float
    weight: float
    weighted_contribution: float
    metrics_passed: int
    metrics_total: int
    top_issues: List[str] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier_number": self.tier_number,
            "tier_name": self.tier_name,
            "score": self.score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "weight": self.weight,
            "weighted_contribution": self.weighted_contribution,
            "metrics_passed": self.metrics_passed,
            "metrics_total": self.metrics_total,
            "top_issues": list(self.top_issues),
            "fallback": self.fallback,
        }


def build_tier_score(
    tier_number: int,
    tier_name: str,
    score: float,
    max_score: float,
    weight: float,
    metrics_passed: int,
    metrics_total: int,
    top_issues: Optional[List[str]] = None,
    fallback: bool = False,
) -> TierScore:
    """percentage and weighted_contribution are always derived, never passed in"""
    percentage = round(score / max_score * 100) if max_score > 0 else 0
    return TierScore(
        tier_number=tier_number,
        tier_name=tier_name,
        score=round(score, 2),
        max_score=max_score,
        percentage=percentage,
        weight=weight,
        weighted_contribution=round(percentage * weight / 100, 2),
        metrics_passed=metrics_passed,
        metrics_total=metrics_total,
        top_issues=list(top_issues or [])[:5],
        fallback=fallback,
    )


@dataclass
class MetricResult:
    score: float
    max_score: float
    passed: bool
    details: str


@dataclass
class CriticalMetricScore:
    score: float
    max_score: float
    percentage: int
    status: str
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "status": self.status,
            "details": self.details,
        }


@dataclass
class CriticalMetrics:
    jd_keywords_match: CriticalMetricScore
    technical_skills_alignment: CriticalMetricScore
    quantified_results_presence: CriticalMetricScore
    job_title_relevance: CriticalMetricScore
    experience_relevance: CriticalMetricScore
    total_critical_score: float
    max_critical_score: float = 19

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jd_keywords_match": self.jd_keywords_match.to_dict(),
            "technical_skills_alignment": self.technical_skills_alignment.to_dict(),
            "quantified_results_presence": self.quantified_results_presence.to_dict(),
            "job_title_relevance": self.job_title_relevance.to_dict(),
            "experience_relevance": self.experience_relevance.to_dict(),
            "total_critical_score": self.total_critical_score,
            "max_critical_score": self.max_critical_score,
        }


@dataclass
class RedFlag:
    id: int
    type: str
    name: str
    severity: str
    penalty: int
    description: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class MissingKeyword:
    keyword: str
    tier: str
    impact: int
    suggested_placement: str

    @property
    def color(self) -> str:
        return KEYWORD_TIER_COLORS[self.tier]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "tier": self.tier,
            "impact": self.impact,
            "suggested_placement": self.suggested_placement,
            "color": self.color,
        }


@dataclass
class FormatIssue:
    type: str
    description: str
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class OrderIssue:
    section: str
    current_position: int
    expected_position: int
    penalty: int

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


# ==============================================
# ENGINE INPUT / OUTPUT
# ==============================================

@dataclass
class ScoringInput:
    resume_text: str
    resume_data: ResumeData = field(default_factory=ResumeData)
    job_description: Optional[str] = None
    job_title: Optional[str] = None
    extraction_mode: ExtractionMode = ExtractionMode.TEXT
    filename: Optional[str] = None
    user_type: Optional[str] = None
    # layout hints from the upload, when known
    page_count: Optional[int] = None
    file_size_kb: Optional[float] = None
    has_tables: bool = False
    has_graphics: bool = False
    has_multiple_columns: bool = False
    has_colors: Optional[bool] = None


@dataclass
class ScoringResult:
    """status is 'ok' or 'insufficient_input'; score is always populated"""
    status: str
    score: Dict[str, Any]
    quality: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "reason": self.reason,
            "quality": self.quality,
            **self.score,
        }
