# formatting_analyzer.py
# ATS formatting compatibility with graduated penalties
#
# Layout problems are graded Minor / Moderate / Severe by how badly they
# disrupt ATS parsing, instead of a flat pass/fail deduction.

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

from resume_models import ExtractionMode

logger = logging.getLogger(__name__)

# issue type -> penalty per severity
FORMATTING_PENALTIES: Dict[str, Dict[str, int]] = {
    "textboxes": {"Minor": 1, "Moderate": 3, "Severe": 7},
    "multi_column": {"Minor": 2, "Moderate": 4, "Severe": 8},
    "tables": {"Minor": 1, "Moderate": 3, "Severe": 6},
    "graphics": {"Minor": 2, "Moderate": 5, "Severe": 9},
    "colors": {"Minor": 1, "Moderate": 2, "Severe": 4},
    "fonts": {"Minor": 1, "Moderate": 2, "Severe": 3},
}
DEFAULT_PENALTIES = {"Minor": 1, "Moderate": 3, "Severe": 6}

SEVERITY_ORDER = {"Severe": 3, "Moderate": 2, "Minor": 1}

RECOMMENDATIONS: Dict[str, List[str]] = {
    "multi_column": [
        "Convert to single-column layout for better ATS compatibility",
        "Ensure content flows logically from top to bottom",
    ],
    "tables": [
        "Replace tables with simple text formatting using bullet points",
        "Use consistent spacing instead of table borders",
    ],
    "textboxes": [
        "Remove textboxes and integrate content into main document flow",
        "Use standard section headers instead of textbox titles",
    ],
    "graphics": [
        "Remove graphics, icons, and images for ATS compatibility",
        "Replace visual elements with text descriptions if necessary",
    ],
    "colors": [
        "Use black text on white background only",
        "Remove colored text, backgrounds, and highlighting",
    ],
    "fonts": [
        "Use standard fonts like Arial, Calibri, or Times New Roman",
        "Maintain consistent font size (10-12pt for body text)",
    ],
    "spacing": [
        "Use consistent line spacing (1.0 or 1.15)",
        "Maintain proper margins (0.5-1 inch on all sides)",
    ],
    "headers": [
        "Use standard section headers (EXPERIENCE, EDUCATION, SKILLS)",
        "Ensure headers are clearly distinguishable but ATS-friendly",
    ],
}

WHITESPACE_RUN = re.compile(r"\s{5,}")
UNUSUAL_CHAR = re.compile(r"[^\w\s\-.,;:!?()\[\]{}'\"@#$%^&*+=<>/\\|`~]", re.ASCII)
CAPS_LINE = re.compile(r"^[A-Z][A-Z \t]+$", re.MULTILINE)


@dataclass
class DocumentLayout:
    text: str
    extraction_mode: ExtractionMode = ExtractionMode.TEXT
    column_count: int = 1
    textbox_count: int = 0
    table_count: int = 0


@dataclass
class FormattingIssue:
    type: str
    severity: str  # Minor | Moderate | Severe
    description: str
    penalty: int
    recommendation: str
    ats_impact: str


@dataclass
class PenaltyAssessment:
    total_penalty: int = 0
    penalties_by_type: Dict[str, int] = field(default_factory=dict)
    severity_breakdown: Dict[str, int] = field(
        default_factory=lambda: {"Minor": 0, "Moderate": 0, "Severe": 0}
    )


@dataclass
class FormattingAssessment:
    overall_score: int
    issues: List[FormattingIssue]
    penalties: PenaltyAssessment
    ats_compatibility: str  # High | Medium | Low
    recommendations: List[str] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> Dict:
        return {
            "overall_score": self.overall_score,
            "ats_compatibility": self.ats_compatibility,
            "issues": [i.__dict__ for i in self.issues],
            "penalties": self.penalties.__dict__,
            "recommendations": self.recommendations,
            "fallback": self.fallback,
        }


def penalty_for(issue_type: str, severity: str) -> int:
    return FORMATTING_PENALTIES.get(issue_type, DEFAULT_PENALTIES)[severity]


def _issue(issue_type: str, severity: str, description: str, recommendation: str, impact: str) -> FormattingIssue:
    return FormattingIssue(
        type=issue_type,
        severity=severity,
        description=description,
        penalty=penalty_for(issue_type, severity),
        recommendation=recommendation,
        ats_impact=impact,
    )


# ==============================================
# DETECTION
# ==============================================

def detect_layout_issues(document: DocumentLayout) -> List[FormattingIssue]:
    issues = []

    if document.column_count > 1:
        severity = "Severe" if document.column_count > 2 else "Moderate"
        issues.append(_issue(
            "multi_column", severity,
            f"Document uses {document.column_count}-column layout",
            "Convert to single-column layout for better ATS parsing",
            "Multi-column layouts can cause content to be read out of order by ATS systems",
        ))

    if document.textbox_count > 0:
        n = document.textbox_count
        severity = "Severe" if n > 3 else "Moderate" if n > 1 else "Minor"
        issues.append(_issue(
            "textboxes", severity,
            f"Document contains {n} textbox(es)",
            "Remove textboxes and integrate content into main text flow",
            "Textboxes may not be parsed correctly or may be ignored entirely",
        ))

    if document.table_count > 0:
        n = document.table_count
        severity = "Severe" if n > 2 else "Moderate" if n > 1 else "Minor"
        issues.append(_issue(
            "tables", severity,
            f"Document contains {n} table(s)",
            "Replace tables with bullet points and consistent formatting",
            "Tables can cause parsing errors and content misalignment",
        ))

    if document.extraction_mode == ExtractionMode.OCR:
        issues.append(_issue(
            "graphics", "Severe",
            "Resume appears to be image-based (scanned or screenshot)",
            "Use a text-based PDF or Word document instead of images",
            "Image-based resumes cannot be parsed by most ATS systems",
        ))

    return issues


def detect_text_issues(text: str) -> List[FormattingIssue]:
    issues = []

    if WHITESPACE_RUN.search(text):
        issues.append(_issue(
            "spacing", "Minor",
            "Excessive whitespace detected",
            "Use consistent, standard spacing",
            "Excessive spacing can interfere with content parsing",
        ))

    if len(UNUSUAL_CHAR.findall(text)) > 5:
        issues.append(_issue(
            "fonts", "Moderate",
            "Unusual characters detected (possible font/encoding issues)",
            "Use standard fonts and avoid special characters",
            "Special characters may not be recognized by ATS systems",
        ))

    headers = CAPS_LINE.findall(text)
    if any(len(h) < 3 or len(h) > 30 for h in headers):
        issues.append(_issue(
            "headers", "Minor",
            "Inconsistent header formatting detected",
            "Use consistent, standard section headers",
            "Inconsistent headers may not be recognized as section dividers",
        ))

    return issues


# ==============================================
# SCORING
# ==============================================

def calculate_penalties(issues: List[FormattingIssue]) -> PenaltyAssessment:
    assessment = PenaltyAssessment()
    for issue in issues:
        assessment.total_penalty += issue.penalty
        assessment.penalties_by_type[issue.type] = assessment.penalties_by_type.get(issue.type, 0) + issue.penalty
        assessment.severity_breakdown[issue.severity] += issue.penalty
    return assessment


def assess_ats_compatibility(score: int, issues: List[FormattingIssue]) -> str:
    if any(i.severity == "Severe" for i in issues):
        return "Low"
    if sum(1 for i in issues if i.severity == "Moderate") > 2:
        return "Low"
    if score >= 85:
        return "High"
    if score >= 70:
        return "Medium"
    return "Low"


def generate_recommendations(issues: List[FormattingIssue]) -> List[str]:
    types = {i.type for i in issues}
    recommendations = []
    for issue_type, lines in RECOMMENDATIONS.items():
        if issue_type in types:
            recommendations.extend(lines)
    if any(i.severity == "Severe" for i in issues):
        recommendations.insert(
            0, "Consider generating a new ATS-friendly resume to address critical formatting issues"
        )
    return recommendations


def analyze_formatting(document: DocumentLayout) -> FormattingAssessment:
    try:
        issues = detect_layout_issues(document) + detect_text_issues(document.text or "")
        penalties = calculate_penalties(issues)
        score = max(0, min(100, 100 - penalties.total_penalty))
        return FormattingAssessment(
            overall_score=score,
            issues=issues,
            penalties=penalties,
            ats_compatibility=assess_ats_compatibility(score, issues),
            recommendations=generate_recommendations(issues),
        )
    except Exception:
        logger.exception("Formatting analysis failed")
        return FormattingAssessment(
            overall_score=50,
            issues=[],
            penalties=PenaltyAssessment(),
            ats_compatibility="Medium",
            fallback=True,
        )


def validate_assessment(assessment: FormattingAssessment) -> List[str]:
    """Consistency violations in an assessment; empty when valid."""
    violations = []
    if not 0 <= assessment.overall_score <= 100:
        violations.append("Overall score is out of valid range (0-100)")

    total = assessment.penalties.total_penalty
    if abs(sum(i.penalty for i in assessment.issues) - total) > 0.1:
        violations.append("Penalty calculation mismatch")
    if abs(sum(assessment.penalties.severity_breakdown.values()) - total) > 0.1:
        violations.append("Severity breakdown does not match total penalty")

    if any(i.severity == "Severe" for i in assessment.issues) and assessment.ats_compatibility != "Low":
        violations.append("ATS compatibility should be Low when severe issues are present")
    return violations


def improvement_priority(issues: List[FormattingIssue]) -> List[FormattingIssue]:
    return sorted(issues, key=lambda i: (-SEVERITY_ORDER[i.severity], -i.penalty))


def generate_summary(assessment: FormattingAssessment) -> str:
    if not assessment.issues:
        return (
            f"Excellent formatting! Your resume has no detected formatting issues and scores "
            f"{assessment.overall_score}/100 with {assessment.ats_compatibility} ATS compatibility."
        )

    severe = sum(1 for i in assessment.issues if i.severity == "Severe")
    moderate = sum(1 for i in assessment.issues if i.severity == "Moderate")
    minor = sum(1 for i in assessment.issues if i.severity == "Minor")

    lines = [f"Formatting Score: {assessment.overall_score}/100 ({assessment.ats_compatibility} ATS Compatibility)", ""]
    if severe:
        lines.append(f"{severe} severe issue(s) detected that significantly impact ATS compatibility.")
    if moderate:
        lines.append(f"{moderate} moderate issue(s) that may affect parsing accuracy.")
    if minor:
        lines.append(f"{minor} minor issue(s) with minimal impact.")
    first = "severe" if severe else "moderate" if moderate else "minor"
    lines.append("")
    lines.append(f"Priority: Address {first} issues first for maximum improvement.")
    return "\n".join(lines)
