# bullet_length_fixer.py
# ATS bullet length enforcement
#
# Bullets longer than 120 characters are compressed, split in two, or
# aggressively shortened. Metric tokens (numbers, percentages, currency)
# are tracked so callers can see whether a fix dropped one.

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from resume_models import ResumeData

MAX_BULLET_LENGTH = 120
MIN_BULLET_LENGTH = 30

FILLER_PHRASES = [
    "in order to", "was responsible for", "helped to", "worked on", "participated in",
    "involved in", "contributed to", "tasked with", "assigned to", "worked with",
    "collaborated with team to", "worked closely with",
]

VERBOSE_REPLACEMENTS = [
    ("utilized", "used"),
    ("implemented a solution to", "solved"),
    ("in an effort to", "to"),
    ("with the goal of", "to"),
    ("for the purpose of", "to"),
    ("was able to", ""),
    ("successfully", ""),
    ("effectively", ""),
    ("efficiently", ""),
    ("helped in", "aided"),
    ("worked together with", "with"),
    ("made improvements to", "improved"),
    ("conducted analysis on", "analyzed"),
    ("performed testing of", "tested"),
    ("carried out", "executed"),
    ("took part in", "participated in"),
]

# boundary patterns, tried in order
SPLIT_POINTS = [
    re.compile(r"\.\s+(?=[A-Z])"),
    re.compile(r",\s+(?=(?:resulting in|achieving|leading to|improving)\b)", re.IGNORECASE),
    re.compile(r",\s+(?=(?:which|that)\b)", re.IGNORECASE),
    re.compile(r"\s+(?=(?:while|and|resulting in|achieving)\b)", re.IGNORECASE),
]

METRIC_TOKEN = re.compile(r"\$?\d+(?:,\d{3})*(?:\.\d+)?(?:\s*[KMB]\b|x\b|%)?", re.IGNORECASE)
ACTION_LEAD = re.compile(r"^[A-Z][a-z]+ed\s+")


@dataclass
class BulletViolation:
    location: str
    section: str
    index: int
    bullet: str
    length: int
    excess: int


@dataclass
class BulletFix:
    strategy: str  # none | compress | split
    before: str
    after: List[str]
    length_before: int
    length_after: List[int]
    metrics_preserved: bool
    star_preserved: bool
    location: str = ""


@dataclass
class BulletLengthAnalysis:
    total_bullets: int
    violations: List[BulletViolation]
    fixes_applied: List[BulletFix] = field(default_factory=list)
    stats_before_after: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "total_bullets": self.total_bullets,
            "violations": [v.__dict__ for v in self.violations],
            "fixes_applied": [f.__dict__ for f in self.fixes_applied],
            "stats_before_after": self.stats_before_after,
        }


def _iter_bullets(data: ResumeData):
    for i, job in enumerate(data.work_experience):
        for j, bullet in enumerate(job.bullets):
            yield "work_experience", i, j, bullet
    for i, project in enumerate(data.projects):
        for j, bullet in enumerate(project.bullets):
            yield "projects", i, j, bullet


def scan_bullets(resume_data: ResumeData) -> BulletLengthAnalysis:
    violations = []
    lengths = []
    for section, item_index, bullet_index, bullet in _iter_bullets(resume_data):
        lengths.append(len(bullet))
        if len(bullet) > MAX_BULLET_LENGTH:
            violations.append(BulletViolation(
                location=f"{section}[{item_index}].bullets[{bullet_index}]",
                section=section,
                index=bullet_index,
                bullet=bullet,
                length=len(bullet),
                excess=len(bullet) - MAX_BULLET_LENGTH,
            ))

    return BulletLengthAnalysis(
        total_bullets=len(lengths),
        violations=violations,
        stats_before_after={
            "avg_length": {"before": round(sum(lengths) / len(lengths)) if lengths else 0, "after": 0},
            "max_length": {"before": max(lengths, default=0), "after": 0},
            "violation_count": {"before": len(violations), "after": 0},
        },
    )


# ==============================================
# REWRITING
# ==============================================

def _tidy(text: str) -> str:
    text = re.sub(r"\s+", " ", text).strip()
    text = re.sub(r"\s*,\s*(?!\d)", ", ", text)
    text = re.sub(r"\s+\.", ".", text)
    return text.strip(" ,")


def compress_bullet(bullet: str) -> str:
    compressed = bullet
    for phrase in FILLER_PHRASES:
        compressed = re.sub(r"\b" + re.escape(phrase) + r"\b", "", compressed, flags=re.IGNORECASE)
    for verbose, concise in VERBOSE_REPLACEMENTS:
        compressed = re.sub(r"\b" + re.escape(verbose) + r"\b", concise, compressed, flags=re.IGNORECASE)
    return _tidy(compressed)


def aggressive_compress(bullet: str) -> str:
    compressed = re.sub(r"\b(?:very|really|quite|extremely|highly)\s+", "", bullet, flags=re.IGNORECASE)
    compressed = re.sub(r"\b(in|on|at|to|for) the\b", r"\1", compressed, flags=re.IGNORECASE)
    compressed = re.sub(r"\b(?:and|as well as)\b", "&", compressed, flags=re.IGNORECASE)
    compressed = re.sub(r"\s+", " ", compressed).strip()
    if len(compressed) > MAX_BULLET_LENGTH:
        sentences = re.split(r"\.\s+", compressed)
        if len(sentences) > 1:
            compressed = sentences[0] + "."
    return compressed[:MAX_BULLET_LENGTH]


def _finish(part: str) -> str:
    part = part.strip()
    if part and not part[0].isupper():
        part = part[0].upper() + part[1:]
    if part and not part.endswith("."):
        part += "."
    return part


def _fits(part: str) -> bool:
    return MIN_BULLET_LENGTH <= len(part) <= MAX_BULLET_LENGTH


def split_bullet(bullet: str) -> List[str]:
    for pattern in SPLIT_POINTS:
        for match in pattern.finditer(bullet):
            first = bullet[:match.start()].strip()
            if pattern is SPLIT_POINTS[0]:
                first += "."
            second = _finish(bullet[match.end():])
            if _fits(first) and _fits(second):
                return [first, second]

    midpoint = len(bullet) // 2
    comma = bullet.find(",", max(0, midpoint - 20))
    if 0 < comma < midpoint + 20:
        first = bullet[:comma + 1].strip()
        second = _finish(bullet[comma + 1:])
        if _fits(first) and _fits(second):
            return [first, second]

    return [bullet]


# ==============================================
# VALIDATION
# ==============================================

def extract_metric_tokens(text: str) -> List[str]:
    return [m.group(0).replace(",", "").replace(" ", "").lower() for m in METRIC_TOKEN.finditer(text)]


def metrics_preserved(original: str, fixed: List[str]) -> bool:
    """Every metric token of the original must survive in the joined output."""
    joined = " ".join(fixed).replace(",", "").lower()
    joined_tokens = set(extract_metric_tokens(" ".join(fixed)))
    return all(t in joined_tokens or t in joined for t in extract_metric_tokens(original))


def star_preserved(original: str, fixed: List[str]) -> bool:
    def has_action(text: str) -> bool:
        return bool(ACTION_LEAD.match(text.strip()))

    def has_metric(text: str) -> bool:
        return bool(re.search(r"\d", text))

    return (
        has_action(original) == any(has_action(f) for f in fixed)
        and has_metric(original) == any(has_metric(f) for f in fixed)
    )


def fix_long_bullet(bullet: str) -> BulletFix:
    if len(bullet) <= MAX_BULLET_LENGTH:
        return BulletFix(
            strategy="none",
            before=bullet,
            after=[bullet],
            length_before=len(bullet),
            length_after=[len(bullet)],
            metrics_preserved=True,
            star_preserved=True,
        )

    strategy = "compress"
    compressed = compress_bullet(bullet)
    if len(compressed) <= MAX_BULLET_LENGTH:
        after = [compressed]
    else:
        parts = split_bullet(compressed)
        if len(parts) == 2:
            after = parts
            strategy = "split"
        else:
            after = [aggressive_compress(compressed)]

    return BulletFix(
        strategy=strategy,
        before=bullet,
        after=after,
        length_before=len(bullet),
        length_after=[len(b) for b in after],
        metrics_preserved=metrics_preserved(bullet, after),
        star_preserved=star_preserved(bullet, after),
    )


def apply_fixes(resume_data: ResumeData, analysis: BulletLengthAnalysis) -> ResumeData:
    """Return a fixed copy of resume_data; fills analysis fixes and after-stats."""
    fixed = resume_data.model_copy(deep=True)
    fixes = []

    # later indices first so inserted split bullets do not shift pending ones
    pending: List[Tuple[BulletViolation, BulletFix]] = []
    for violation in analysis.violations:
        fix = fix_long_bullet(violation.bullet)
        fix.location = violation.location
        fixes.append(fix)
        pending.append((violation, fix))

    for violation, fix in sorted(pending, key=lambda p: (p[0].location.split(".")[0], -p[0].index)):
        match = re.match(r"(\w+)\[(\d+)\]\.bullets\[(\d+)\]", violation.location)
        if not match:
            continue
        section, item_index, bullet_index = match.group(1), int(match.group(2)), int(match.group(3))
        items = getattr(fixed, section)
        if item_index >= len(items) or bullet_index >= len(items[item_index].bullets):
            continue
        items[item_index].bullets[bullet_index:bullet_index + 1] = fix.after

    after = scan_bullets(fixed)
    analysis.fixes_applied = fixes
    analysis.stats_before_after["avg_length"]["after"] = after.stats_before_after["avg_length"]["before"]
    analysis.stats_before_after["max_length"]["after"] = after.stats_before_after["max_length"]["before"]
    analysis.stats_before_after["violation_count"]["after"] = len(after.violations)
    return fixed


def violation_summary(analysis: BulletLengthAnalysis) -> Dict:
    violations = analysis.violations
    return {
        "has_violations": bool(violations),
        "count": len(violations),
        "sections": sorted({v.section for v in violations}),
        "avg_excess": round(sum(v.excess for v in violations) / len(violations)) if violations else 0,
    }


def generate_fix_report(analysis: BulletLengthAnalysis) -> str:
    stats = analysis.stats_before_after
    lines = [
        "=== ATS BULLET LENGTH ANALYSIS ===",
        f"Total Bullets: {analysis.total_bullets}",
        f"Violations Found: {stats['violation_count']['before']}",
        f"Violations After Fix: {stats['violation_count']['after']}",
        "",
        "STATISTICS:",
        f"  Avg Length: {stats['avg_length']['before']} -> {stats['avg_length']['after']} chars",
        f"  Max Length: {stats['max_length']['before']} -> {stats['max_length']['after']} chars",
    ]

    if analysis.fixes_applied:
        lines.append("")
        lines.append("FIXES APPLIED:")
        for i, fix in enumerate(analysis.fixes_applied, 1):
            lines.append(f"\n{i}. Location: {fix.location}")
            lines.append(f"   Strategy: {fix.strategy.upper()}")
            lines.append(f"   Length: {fix.length_before} -> {', '.join(str(n) for n in fix.length_after)} chars")
            lines.append(f"   Metrics Preserved: {'yes' if fix.metrics_preserved else 'no'}")
            lines.append(f"   STAR Preserved: {'yes' if fix.star_preserved else 'no'}")
            lines.append(f"   Before: {fix.before[:80]}...")
            for j, bullet in enumerate(fix.after, 1):
                lines.append(f"   After {j}: {bullet[:80]}{'...' if len(bullet) > 80 else ''}")

    remaining = stats["violation_count"]["after"]
    if remaining == 0:
        lines.append("\nALL BULLETS NOW COMPLY WITH ATS LENGTH REQUIREMENTS")
    else:
        lines.append(f"\n{remaining} VIOLATIONS REMAIN")
    return "\n".join(lines)
