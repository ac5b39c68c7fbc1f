# structure_analyzers.py
# Tier 1 (Basic Structure) and Tier 2 (Content Structure)
#
# Tier 1: file metadata, length, typography, visual layout (20 metrics)
# Tier 2: sections, contact details, summary, dates, bullets (25 metrics)
#
# Every metric is worth one point; failed metric details become the
# tier's top issues.

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from resume_models import (
    ExtractionMode,
    FormatIssue,
    MetricResult,
    OrderIssue,
    ResumeData,
    TierScore,
    build_tier_score,
)
from scoring_tables import DEFAULT_TIER_WEIGHTS

ATS_FRIENDLY_FONTS = [
    "arial", "calibri", "cambria", "garamond", "georgia", "helvetica",
    "times new roman", "trebuchet", "verdana", "tahoma", "book antiqua",
]

IDEAL_PAGE_COUNT = (1, 2)
IDEAL_WORD_COUNT = (400, 800)
IDEAL_FILE_SIZE_KB = (50, 500)
IDEAL_WHITESPACE_RATIO = (0.15, 0.35)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")


def _ok(details: str, score: float = 1) -> MetricResult:
    return MetricResult(score=score, max_score=1, passed=True, details=details)


def _fail(details: str, score: float = 0.5) -> MetricResult:
    return MetricResult(score=score, max_score=1, passed=False, details=details)


def tier_from_metrics(
    metrics: Dict[str, MetricResult], tier_number: int, tier_name: str, weight_key: str
) -> TierScore:
    values = list(metrics.values())
    total = sum(m.score for m in values)
    max_score = sum(m.max_score for m in values)
    return build_tier_score(
        tier_number=tier_number,
        tier_name=tier_name,
        score=total,
        max_score=max_score,
        weight=DEFAULT_TIER_WEIGHTS[weight_key],
        metrics_passed=sum(1 for m in values if m.passed),
        metrics_total=len(values),
        top_issues=[m.details for m in values if not m.passed],
    )


# ==============================================
# TIER 1: BASIC STRUCTURE
# ==============================================

@dataclass
class BasicStructureInput:
    resume_text: str
    filename: Optional[str] = None
    file_size_kb: Optional[float] = None
    extraction_mode: ExtractionMode = ExtractionMode.TEXT
    page_count: Optional[int] = None
    has_tables: bool = False
    has_graphics: bool = False
    has_multiple_columns: bool = False
    has_colors: Optional[bool] = None


@dataclass
class BasicStructureResult:
    tier_score: TierScore
    format_issues: List[FormatIssue]
    metrics: Dict[str, MetricResult]


class BasicStructureAnalyzer:

    @staticmethod
    def analyze(inp: BasicStructureInput) -> BasicStructureResult:
        text = inp.resume_text or ""
        metrics: Dict[str, MetricResult] = {
            # File & name
            "filename_format": BasicStructureAnalyzer._filename_format(inp.filename),
            "file_size": BasicStructureAnalyzer._file_size(inp.file_size_kb),
            "format_type": BasicStructureAnalyzer._format_type(inp.extraction_mode, inp.filename),
            "name_consistency": BasicStructureAnalyzer._name_consistency(text, inp.filename),
            "version_naming": BasicStructureAnalyzer._version_naming(inp.filename),
            # Length & structure
            "page_count": BasicStructureAnalyzer._page_count(inp.page_count, text),
            "word_count": BasicStructureAnalyzer._word_count(text),
            "whitespace_ratio": BasicStructureAnalyzer._whitespace_ratio(text),
            "margins": BasicStructureAnalyzer._margins(text),
            "line_spacing": BasicStructureAnalyzer._line_spacing(text),
            # Typography; sizes and weights are not visible in extracted text
            "font_choice": BasicStructureAnalyzer._font_choice(text),
            "body_font_size": _ok("Use 10-12pt for body text", 0.75),
            "header_font_size": _ok("Use 14-16pt for headers", 0.75),
            "font_consistency": BasicStructureAnalyzer._font_consistency(text),
            "font_weight_style": _ok("Use bold for headers, regular for body", 0.75),
            # Color & visual
            "text_color": _ok("Black text - ATS optimal") if inp.has_colors is False
            else _ok("Use black text for ATS compatibility", 0.75),
            "accent_colors": _fail("Minimize color usage for ATS") if inp.has_colors
            else _ok("Minimal accent colors - good for ATS"),
            "tables_graphics": BasicStructureAnalyzer._tables_graphics(inp),
            "background": _ok("Use white background"),
            "visual_hierarchy": BasicStructureAnalyzer._visual_hierarchy(text),
        }

        return BasicStructureResult(
            tier_score=tier_from_metrics(metrics, 1, "Basic Structure", "basic_structure"),
            format_issues=BasicStructureAnalyzer._format_issues(inp),
            metrics=metrics,
        )

    @staticmethod
    def _filename_format(filename: Optional[str]) -> MetricResult:
        if not filename:
            return _fail("Filename not provided")
        proper = re.match(r"^[a-z]+[_-]?[a-z]*[_-]?resume", filename, re.IGNORECASE)
        bad = re.search(r"resume\s*\(\d+\)|copy|final|v\d|draft", filename, re.IGNORECASE)
        if proper and not bad:
            return _ok("Professional filename format")
        if bad:
            return _fail('Avoid version numbers or "copy" in filename', 0)
        return _fail("Use format: FirstName_LastName_Resume.pdf")

    @staticmethod
    def _file_size(size_kb: Optional[float]) -> MetricResult:
        if not size_kb:
            return _ok("File size not available", 0.5)
        low, high = IDEAL_FILE_SIZE_KB
        if low <= size_kb <= high:
            return _ok(f"File size {size_kb:.0f}KB is optimal")
        if size_kb > high:
            return _fail(f"File size {size_kb:.0f}KB is too large (max 500KB)")
        return _fail(f"File size {size_kb:.0f}KB may be too small")

    @staticmethod
    def _format_type(mode: ExtractionMode, filename: Optional[str]) -> MetricResult:
        if mode == ExtractionMode.OCR:
            return _fail("Image-based PDF detected - not ATS-friendly", 0)
        name = (filename or "").lower()
        if name.endswith(".pdf") or name.endswith(".docx"):
            return _ok("ATS-friendly format (PDF/DOCX)")
        return _fail("Use PDF or DOCX format for best ATS compatibility")

    @staticmethod
    def _name_consistency(text: str, filename: Optional[str]) -> MetricResult:
        if not filename:
            return _ok("Cannot verify name consistency", 0.5)
        words = re.split(r"\s+", re.sub(r"[_-]", " ", filename))
        first_line = text.split("\n")[0].lower()
        if any(len(w) > 2 and w.lower() in first_line for w in words):
            return _ok("Name in filename matches resume")
        return _fail("Ensure filename contains your name")

    @staticmethod
    def _version_naming(filename: Optional[str]) -> MetricResult:
        if filename and re.search(r"v\d|version|final|draft|\(\d+\)|copy", filename, re.IGNORECASE):
            return _fail("Remove version numbers from filename", 0)
        return _ok("No version naming issues")

    @staticmethod
    def _page_count(page_count: Optional[int], text: str) -> MetricResult:
        pages = page_count or math.ceil(len(text) / 3000)
        low, high = IDEAL_PAGE_COUNT
        if low <= pages <= high:
            return _ok(f"{pages} page(s) - optimal length")
        if pages > high:
            return _fail(f"{pages} pages - consider condensing to 1-2 pages")
        return _fail("Resume may be too short")

    @staticmethod
    def _word_count(text: str) -> MetricResult:
        count = len(text.split())
        low, high = IDEAL_WORD_COUNT
        if low <= count <= high:
            return _ok(f"{count} words - optimal length")
        if count < low:
            return _fail(f"{count} words - add more detail")
        return _fail(f"{count} words - consider condensing")

    @staticmethod
    def _whitespace_ratio(text: str) -> MetricResult:
        ratio = len(re.findall(r"\s", text)) / len(text) if text else 0
        low, high = IDEAL_WHITESPACE_RATIO
        if low <= ratio <= high:
            return _ok("Good whitespace balance")
        if ratio < low:
            return _fail("Text may be too dense - add spacing")
        return _fail("Too much whitespace - add content")

    @staticmethod
    def _margins(text: str) -> MetricResult:
        lines = text.split("\n")
        long_lines = sum(1 for l in lines if len(l) > 100)
        if long_lines / len(lines) < 0.1:
            return _ok("Margins appear appropriate")
        return _fail("Consider wider margins for readability")

    @staticmethod
    def _line_spacing(text: str) -> MetricResult:
        singles = text.count("\n")
        ratio = text.count("\n\n") / singles if singles else 0
        if 0.1 <= ratio <= 0.4:
            return _ok("Good line spacing")
        return _fail("Adjust line spacing for better readability")

    @staticmethod
    def _font_choice(text: str) -> MetricResult:
        lower = text.lower()
        if any(font in lower for font in ATS_FRIENDLY_FONTS):
            return _ok("ATS-friendly font detected")
        return _ok("Use Arial, Calibri, or Times New Roman", 0.75)

    @staticmethod
    def _font_consistency(text: str) -> MetricResult:
        glyphs = {m.strip()[0] for m in re.findall(r"^\s*[•\-*]", text, re.MULTILINE)}
        if len(glyphs) <= 1:
            return _ok("Consistent formatting detected")
        return _fail("Use consistent bullet styles")

    @staticmethod
    def _tables_graphics(inp: BasicStructureInput) -> MetricResult:
        found = []
        if inp.has_tables:
            found.append("tables")
        if inp.has_graphics:
            found.append("graphics")
        if inp.has_multiple_columns:
            found.append("multiple columns")
        if not found:
            return _ok("No tables/graphics - ATS friendly")
        return _fail(f"Remove {', '.join(found)} for ATS compatibility", 0)

    @staticmethod
    def _visual_hierarchy(text: str) -> MetricResult:
        headers = re.findall(r"^[A-Z][A-Z\s]+:?$", text, re.MULTILINE)
        if len(headers) >= 3:
            return _ok("Clear section headers detected")
        return _fail("Add clear section headers")

    @staticmethod
    def _format_issues(inp: BasicStructureInput) -> List[FormatIssue]:
        issues = []
        if inp.extraction_mode == ExtractionMode.OCR:
            issues.append(FormatIssue("image", "Resume is image-based (scanned) - ATS cannot parse", "high"))
        if inp.has_tables:
            issues.append(FormatIssue("table", "Tables detected - may cause ATS parsing issues", "medium"))
        if inp.has_multiple_columns:
            issues.append(FormatIssue("multi_column", "Multiple columns detected - ATS may read incorrectly", "high"))
        if inp.has_graphics:
            issues.append(FormatIssue("graphics", "Graphics/images detected - not parsed by ATS", "medium"))
        if inp.has_colors:
            issues.append(FormatIssue("color", "Colors detected - may not render in ATS", "low"))
        return issues


# ==============================================
# TIER 2: CONTENT STRUCTURE
# ==============================================

CONTENT_SECTION_PATTERNS = {
    "contact": re.compile(r"^(contact|personal\s*info)", re.IGNORECASE | re.MULTILINE),
    "summary": re.compile(r"^(summary|profile|objective|about)", re.IGNORECASE | re.MULTILINE),
    "skills": re.compile(r"^(skills|technical\s*skills|core\s*competencies)", re.IGNORECASE | re.MULTILINE),
    "experience": re.compile(
        r"^(experience|work\s*experience|employment|professional\s*experience)", re.IGNORECASE | re.MULTILINE
    ),
    "projects": re.compile(r"^(projects|personal\s*projects|key\s*projects)", re.IGNORECASE | re.MULTILINE),
    "education": re.compile(r"^(education|academic|qualifications)", re.IGNORECASE | re.MULTILINE),
    "certifications": re.compile(r"^(certifications?|licenses?|credentials)", re.IGNORECASE | re.MULTILINE),
    "additional": re.compile(r"^(additional|other|interests|hobbies|volunteer)", re.IGNORECASE | re.MULTILINE),
}

EXPECTED_SECTION_ORDER = [
    "contact", "summary", "skills", "experience",
    "projects", "education", "certifications", "additional",
]
REQUIRED_SECTIONS = ["experience", "education", "skills"]
RECOMMENDED_SECTIONS = ["summary", "projects", "certifications"]

ROLE_WORDS = re.compile(
    r"engineer|developer|manager|analyst|designer|specialist|consultant|architect|lead|senior|"
    r"software|data|product|project|technical",
    re.IGNORECASE,
)
SUMMARY_SPECIFICS = re.compile(
    r"\d+\s*(years?|months?|\+)|[A-Z][a-z]+(?:JS|\.js|\.py|SQL|AWS|Azure)|"
    r"python|java|react|node|angular|vue|docker|kubernetes|agile|scrum",
    re.IGNORECASE,
)
SUMMARY_METRICS = re.compile(
    r"\d+%|\$\d+|\d+\s*(users?|clients?|projects?|team|years?|applications?|systems?)", re.IGNORECASE
)
SUMMARY_LIKE_OPENING = re.compile(
    r"seeking|passionate|experienced|skilled|professional|dedicated|results-driven", re.IGNORECASE
)
TEXT_DATE_FORMATS = [
    re.compile(r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{4}\s*-\s*\d{4}\b"),
    re.compile(r"\b\d{4}\s*-\s*Present\b", re.IGNORECASE),
]


@dataclass
class SectionInfo:
    name: str
    position: int
    expected_position: int
    is_correctly_placed: bool = False


@dataclass
class ContentStructureResult:
    tier_score: TierScore
    section_info: List[SectionInfo]
    order_issues: List[OrderIssue]
    metrics: Dict[str, MetricResult] = field(default_factory=dict)


def _first_year(value: str) -> int:
    match = re.search(r"\d{4}", value or "")
    return int(match.group(0)) if match else 0


class ContentStructureAnalyzer:

    @staticmethod
    def analyze(resume_text: str, resume_data: Optional[ResumeData] = None) -> ContentStructureResult:
        text = resume_text or ""
        data = resume_data or ResumeData()
        info = ContentStructureAnalyzer.detect_sections(text)
        order_issues = [
            OrderIssue(
                section=s.name,
                current_position=s.position,
                expected_position=s.expected_position,
                penalty=-1,
            )
            for s in info if not s.is_correctly_placed
        ]
        summary = data.summary or data.career_objective

        metrics: Dict[str, MetricResult] = {}
        metrics.update(ContentStructureAnalyzer._organization(text, info))
        metrics.update(ContentStructureAnalyzer._contact(text, data))
        metrics.update(ContentStructureAnalyzer._summary(text, data, summary))
        metrics.update(ContentStructureAnalyzer._dates(text, data))
        metrics.update(ContentStructureAnalyzer._bullets(text, data))

        return ContentStructureResult(
            tier_score=tier_from_metrics(metrics, 2, "Content Structure", "content_structure"),
            section_info=info,
            order_issues=order_issues,
            metrics=metrics,
        )

    @staticmethod
    def detect_sections(text: str) -> List[SectionInfo]:
        found: List[SectionInfo] = []
        for line in text.split("\n"):
            stripped = line.strip()
            for name, pattern in CONTENT_SECTION_PATTERNS.items():
                if pattern.match(stripped):
                    found.append(SectionInfo(
                        name=name,
                        position=len(found),
                        expected_position=EXPECTED_SECTION_ORDER.index(name),
                    ))
                    break
        for i, section in enumerate(found):
            section.is_correctly_placed = section.position == section.expected_position or (
                i > 0 and found[i - 1].expected_position < section.expected_position
            )
        return found

    @staticmethod
    def _organization(text: str, info: List[SectionInfo]) -> Dict[str, MetricResult]:
        names = [s.name for s in info]
        out: Dict[str, MetricResult] = {}

        if len(info) >= 5:
            out["section_headers"] = _ok(f"{len(info)} clear section headers")
        elif len(info) >= 3:
            out["section_headers"] = _fail(f"Only {len(info)} sections - add more")
        else:
            out["section_headers"] = _fail("Missing clear section headers", 0)

        placed = sum(1 for s in info if s.is_correctly_placed)
        ratio = placed / len(info) if info else 0
        if ratio >= 0.8:
            out["section_order"] = _ok("Sections in optimal order")
        elif ratio >= 0.5:
            out["section_order"] = _fail("Some sections out of order")
        else:
            out["section_order"] = _fail("Reorder sections for ATS", 0)

        has_required = all(s in names for s in REQUIRED_SECTIONS)
        recommended = sum(1 for s in RECOMMENDED_SECTIONS if s in names)
        if has_required and recommended >= 2:
            out["section_completeness"] = _ok("All key sections present")
        elif has_required:
            out["section_completeness"] = _ok("Required sections present", 0.75)
        else:
            out["section_completeness"] = _fail("Missing required sections")

        headers = re.findall(r"^[A-Z][A-Za-z\s]+:?$", text, re.MULTILINE)
        if not headers:
            out["section_consistency"] = _fail("No headers detected")
        else:
            caps = sum(1 for h in headers if h == h.upper())
            title = sum(1 for h in headers if h != h.upper() and h != h.lower())
            if max(caps, title) / len(headers) >= 0.8:
                out["section_consistency"] = _ok("Consistent header formatting")
            else:
                out["section_consistency"] = _fail("Inconsistent header formatting")

        missing = [s for s in REQUIRED_SECTIONS if s not in names]
        if missing:
            out["missing_sections"] = _fail(f"Missing: {', '.join(missing)}", 0)
        else:
            out["missing_sections"] = _ok("No missing required sections")
        return out

    @staticmethod
    def _contact(text: str, data: ResumeData) -> Dict[str, MetricResult]:
        top = "\n".join(text.split("\n")[:10])
        return {
            "email_present": _ok("Email address present") if data.email or EMAIL_PATTERN.search(text)
            else _fail("Add email address", 0),
            "phone_present": _ok("Phone number present") if data.phone or PHONE_PATTERN.search(text)
            else _fail("Add phone number", 0),
            "linkedin_present": _ok("LinkedIn profile present")
            if data.linkedin or re.search(r"linkedin\.com/in/[\w-]+", text, re.IGNORECASE)
            else _fail("Add LinkedIn profile URL"),
            "location_present": _ok("Location present")
            if data.location or re.search(r"\b[A-Z][a-z]+,?\s*[A-Z]{2}\b", text)
            else _fail("Add city/state location"),
            "contact_placement": _ok("Contact info at top")
            if EMAIL_PATTERN.search(top) and PHONE_PATTERN.search(top)
            else _fail("Move contact info to top"),
        }

    @staticmethod
    def _summary(text: str, data: ResumeData, summary: Optional[str]) -> Dict[str, MetricResult]:
        present = (
            bool(summary)
            or bool(re.search(r"^(summary|profile|objective|about|career)", text, re.IGNORECASE | re.MULTILINE))
            or bool(SUMMARY_LIKE_OPENING.search(text[:500]))
        )
        out = {
            "summary_presence": _ok("Professional summary present") if present
            else _fail("Add professional summary"),
        }
        if not summary:
            out["summary_relevance"] = _fail("No summary to analyze")
            out["summary_length"] = _fail("No summary")
            out["summary_specificity"] = _fail("No summary")
            out["summary_metrics"] = _fail("No summary")
            return out

        out["summary_relevance"] = _ok("Summary mentions target role") if ROLE_WORDS.search(summary) \
            else _ok("Summary present", 0.75)

        words = len(summary.split())
        if 40 <= words <= 60:
            out["summary_length"] = _ok(f"{words} words - optimal length")
        elif 30 <= words < 40:
            out["summary_length"] = _ok(f"{words} words - slightly short", 0.85)
        elif 60 < words <= 80:
            out["summary_length"] = _ok(f"{words} words - slightly long", 0.85)
        elif 20 <= words < 30:
            out["summary_length"] = _ok("Summary could be longer (aim for 40-60 words)", 0.7)
        elif words < 20:
            out["summary_length"] = _fail("Summary too short (aim for 40-60 words)")
        else:
            out["summary_length"] = _ok("Summary too long (aim for 40-60 words)", 0.7)

        out["summary_specificity"] = _ok("Summary has specific details") if SUMMARY_SPECIFICS.search(summary) \
            else _ok("Summary present", 0.75)
        out["summary_metrics"] = _ok("Summary includes metrics") if SUMMARY_METRICS.search(summary) \
            else _ok("Summary present", 0.75)
        return out

    @staticmethod
    def _dates(text: str, data: ResumeData) -> Dict[str, MetricResult]:
        out: Dict[str, MetricResult] = {}
        formats = sum(1 for p in TEXT_DATE_FORMATS if p.search(text))
        out["date_consistency"] = _ok("Consistent date format") if formats <= 2 \
            else _fail("Use consistent date format (e.g., Jan 2020)")

        jobs = data.work_experience
        ordered = all(
            _first_year(jobs[i].year) <= _first_year(jobs[i - 1].year) for i in range(1, len(jobs))
        )
        if len(jobs) < 2:
            out["chronological_order"] = _ok("Chronological order OK")
        elif ordered:
            out["chronological_order"] = _ok("Reverse chronological order")
        else:
            out["chronological_order"] = _fail("Order experience by most recent first", 0)

        year = datetime.now().year
        cleaned = re.sub(r"expected|anticipated", "", text, flags=re.IGNORECASE)
        if re.search(rf"\b({year + 1}|{year + 2})\b", cleaned):
            out["date_validity"] = _fail("Remove future dates", 0)
        else:
            out["date_validity"] = _ok("All dates valid")

        if not jobs:
            out["current_role_date"] = _fail("No work experience")
        elif re.search(r"present|current|now", jobs[0].year, re.IGNORECASE):
            out["current_role_date"] = _ok("Current role marked as Present")
        else:
            out["current_role_date"] = _fail('Mark current role with "Present"')

        if not data.education:
            out["education_dates"] = _fail("No education listed")
        elif any(re.search(r"\d{4}", e.year) for e in data.education):
            out["education_dates"] = _ok("Education dates present")
        else:
            out["education_dates"] = _fail("Add graduation year")
        return out

    @staticmethod
    def _bullets(text: str, data: ResumeData) -> Dict[str, MetricResult]:
        out: Dict[str, MetricResult] = {}
        jobs = data.work_experience

        if not jobs:
            out["bullet_count_per_job"] = _fail("No work experience")
        else:
            avg = sum(len(j.bullets) for j in jobs) / len(jobs)
            if 3 <= avg <= 6:
                out["bullet_count_per_job"] = _ok(f"Avg {avg:.1f} bullets per job")
            elif avg < 3:
                out["bullet_count_per_job"] = _fail("Add more bullet points (3-6 per job)")
            else:
                out["bullet_count_per_job"] = _fail("Too many bullets - prioritize top achievements")

        bullets = [b for j in jobs for b in j.bullets]
        if not bullets:
            out["bullet_length"] = _fail("No bullets found")
        else:
            counts = [len(b.split()) for b in bullets]
            avg_words = sum(counts) / len(counts)
            in_range = sum(1 for c in counts if 8 <= c <= 22) / len(counts) * 100
            if in_range >= 70 and 8 <= avg_words <= 18:
                out["bullet_length"] = _ok(f"Avg {avg_words:.0f} words/bullet - optimal")
            elif in_range >= 50:
                out["bullet_length"] = _ok(f"Avg {avg_words:.0f} words/bullet - good", 0.75)
            else:
                out["bullet_length"] = _fail("Aim for 10-18 words per bullet")

        glyphs = re.findall(r"^\s*[•\-*‣◦⁃]", text, re.MULTILINE)
        styles = {g.strip()[0] for g in glyphs}
        if glyphs and len(styles) == 1:
            out["bullet_format"] = _ok("Consistent bullet format")
        elif len(styles) > 1:
            out["bullet_format"] = _fail("Use consistent bullet style")
        else:
            out["bullet_format"] = _fail("Use bullet points for achievements")

        friendly = len(re.findall(r"^\s*[•\-*]", text, re.MULTILINE))
        total = len(re.findall(r"^\s*[•\-*‣◦⁃●○]", text, re.MULTILINE))
        if total == 0:
            out["bullet_parsing"] = _fail("No bullets detected")
        elif friendly / total >= 0.9:
            out["bullet_parsing"] = _ok("ATS-friendly bullet characters")
        else:
            out["bullet_parsing"] = _fail("Use standard bullets (•, -, *)")

        paragraphs = re.split(r"\n\n+", text)
        if any(len(p.split()) > 50 for p in paragraphs):
            out["paragraph_usage"] = _fail("Break long paragraphs into bullets")
        else:
            out["paragraph_usage"] = _ok("No long paragraphs")
        return out
