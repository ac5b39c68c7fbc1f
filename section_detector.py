# section_detector.py
# Resume section detection
#
# - Locates the header block and the eight canonical sections
# - Counts words and bullets per section
# - Reports order deviations against the ATS-friendly canonical order

import re
from dataclasses import dataclass, field
from typing import Dict, List

from resume_models import OrderIssue
from scoring_tables import CANONICAL_SECTION_ORDER, CRITICAL_SECTIONS

# ==============================================
# PATTERNS
# ==============================================

SECTION_HEADER_PATTERNS: Dict[str, str] = {
    "header": r"^\s*(?:contact|personal\s+info|header)",
    "summary": r"^\s*(?:professional\s+summary|summary|profile|about\s+me|career\s+objective|objective)",
    "skills": r"^\s*(?:skills|technical\s+skills|core\s+competencies|technologies|expertise)",
    "experience": r"^\s*(?:work\s+experience|professional\s+experience|experience|employment|career\s+history)",
    "projects": r"^\s*(?:projects?|portfolio|key\s+projects|notable\s+projects)",
    "education": r"^\s*(?:education|academic\s+background|qualifications)",
    "certifications": r"^\s*(?:certifications?|licenses?|credentials)",
    "achievements": r"^\s*(?:achievements?|accomplishments?|awards?|honors?)",
}

_COMPILED_HEADERS = {
    name: re.compile(pattern, re.IGNORECASE) for name, pattern in SECTION_HEADER_PATTERNS.items()
}

PHONE_PATTERN = re.compile(r"(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}|\d{3}[-.\s]\d{4}")
LOCATION_PATTERN = re.compile(r"\b(?:city|state|country|address)\b|,\s*[A-Z]{2}\b", re.IGNORECASE)
NAME_PATTERN = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+")

BULLET_PATTERNS = [
    r"^\s*[-•*]\s+(.+)$",
    r"^\s*[▪▫■□]\s+(.+)$",
    r"^\s*[►▶]\s+(.+)$",
    r"^\s*\d+\.\s+(.+)$",
    r"^\s*[a-zA-Z]\.\s+(.+)$",
]

MAX_HEADER_LINE_LENGTH = 50
HEADER_SCAN_LINES = 10


@dataclass
class SectionAnalysis:
    present_sections: List[str]
    missing_sections: List[str]
    section_order_correct: bool
    section_positions: Dict[str, int]
    word_counts: Dict[str, int]
    bullet_counts: Dict[str, int]
    order_issues: List[OrderIssue] = field(default_factory=list)
    sections: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "present_sections": list(self.present_sections),
            "missing_sections": list(self.missing_sections),
            "section_order_correct": self.section_order_correct,
            "section_positions": dict(self.section_positions),
            "word_counts": dict(self.word_counts),
            "bullet_counts": dict(self.bullet_counts),
            "order_issues": [i.to_dict() for i in self.order_issues],
        }


# ==============================================
# HELPERS
# ==============================================

def match_section_header(line: str):
    """Return the canonical section name a line introduces, or None"""
    stripped = line.strip()
    if not stripped or len(stripped) > MAX_HEADER_LINE_LENGTH:
        return None
    for name, pattern in _COMPILED_HEADERS.items():
        if pattern.match(stripped):
            return name
    return None


def _is_header_line(line: str, index: int) -> bool:
    lower = line.lower()
    if "@" in line:
        return True
    if PHONE_PATTERN.search(line):
        return True
    if "linkedin" in lower or "github" in lower:
        return True
    if LOCATION_PATTERN.search(line):
        return True
    if index < 3 and NAME_PATTERN.match(line) and len(line.split()) <= 4:
        return True
    return False


def count_words(text: str) -> int:
    cleaned = re.sub(r"[^\w\s'-]", " ", text)
    return len([t for t in cleaned.split() if re.search(r"[A-Za-z]", t)])


def extract_bullet_lines(text: str) -> List[str]:
    found: List[str] = []
    for pattern in BULLET_PATTERNS:
        for match in re.findall(pattern, text, re.MULTILINE):
            bullet = match.strip()
            if len(bullet) > 10 and bullet not in found:
                found.append(bullet)
    return found


def count_bullets(text: str) -> int:
    return len(extract_bullet_lines(text))


# ==============================================
# DETECTION
# ==============================================

def split_sections(text: str) -> Dict[str, str]:
    """Split resume text into canonical sections keyed by name, in order of appearance"""
    lines = (text or "").split("\n")
    sections: Dict[str, List[str]] = {}

    # Header block from the first non-empty lines
    header_lines: List[str] = []
    non_empty = [l.strip() for l in lines if l.strip()][:HEADER_SCAN_LINES]
    for i, line in enumerate(non_empty):
        if match_section_header(line):
            break
        if _is_header_line(line, i):
            header_lines.append(line)
        elif header_lines:
            break
    if header_lines:
        sections["header"] = header_lines

    current = None
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        name = match_section_header(line)
        if name:
            current = name
            sections.setdefault(name, [])
            continue
        if current and line not in header_lines:
            sections[current].append(raw)

    return {name: "\n".join(body) for name, body in sections.items() if body}


def detect_sections(text: str) -> SectionAnalysis:
    sections = split_sections(text)
    present = list(sections.keys())
    missing = [s for s in CANONICAL_SECTION_ORDER if s not in sections]

    positions = {name: i for i, name in enumerate(present)}
    word_counts = {name: count_words(body) for name, body in sections.items()}
    bullet_counts = {name: count_bullets(body) for name, body in sections.items()}

    order_issues: List[OrderIssue] = []
    for i, name in enumerate(present):
        canonical_index = CANONICAL_SECTION_ORDER.index(name)
        expected = len([s for s in CANONICAL_SECTION_ORDER[:canonical_index] if s in sections])
        if expected != i:
            order_issues.append(OrderIssue(
                section=name,
                current_position=i,
                expected_position=expected,
                penalty=abs(expected - i) * 2,
            ))

    return SectionAnalysis(
        present_sections=present,
        missing_sections=missing,
        section_order_correct=not order_issues,
        section_positions=positions,
        word_counts=word_counts,
        bullet_counts=bullet_counts,
        order_issues=order_issues,
        sections=sections,
    )


def get_section_insights(analysis: SectionAnalysis) -> List[str]:
    insights: List[str] = []

    critical_missing = [s for s in analysis.missing_sections if s in CRITICAL_SECTIONS]
    if critical_missing:
        insights.append(
            f"Critical sections missing: {', '.join(critical_missing)}. These are essential for ATS parsing."
        )

    optional_missing = [
        s for s in analysis.missing_sections if s not in CRITICAL_SECTIONS and s != "header"
    ]
    if optional_missing:
        insights.append(f"Consider adding: {', '.join(optional_missing)} to strengthen your resume.")

    if not analysis.section_order_correct:
        recommended = [s for s in CANONICAL_SECTION_ORDER if s in analysis.present_sections]
        insights.append(
            f"Section order could be improved. Recommended order: {' → '.join(recommended)}"
        )
        for issue in analysis.order_issues[:3]:
            insights.append(
                f'Move "{issue.section}" section to position {issue.expected_position + 1} '
                f"for better ATS compatibility"
            )

    total_words = sum(analysis.word_counts.values())
    experience_words = analysis.word_counts.get("experience", 0)
    if "experience" in analysis.present_sections and total_words > 0:
        if experience_words / total_words < 0.4:
            insights.append(
                "Experience section should be the largest part of your resume (40-50% of total content)"
            )

    if analysis.word_counts.get("summary", 0) > 100:
        insights.append(
            "Summary section is quite long. Consider condensing to 50-75 words for better impact"
        )

    if "experience" in analysis.present_sections and analysis.bullet_counts.get("experience", 0) < 3:
        insights.append(
            "Experience section needs more bullet points to showcase your achievements effectively"
        )

    return insights
