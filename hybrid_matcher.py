# hybrid_matcher.py
# Literal + semantic matching of JD requirements to resume bullets
#
# Semantic similarity is a TF-IDF cosine (scikit-learn) over normalized
# tokens, blended with literal keyword overlap:
#   hybrid = 0.6 * semantic + 0.4 * literal

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS, TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

SEMANTIC_WEIGHT = 0.6
LITERAL_WEIGHT = 0.4
HYBRID_THRESHOLD = 0.65
SEMANTIC_THRESHOLD = 0.70
LITERAL_THRESHOLD = 0.5

MAX_REQUIREMENTS = 50

STOPWORDS = ENGLISH_STOP_WORDS.union({"using", "use", "etc"})

REQUIREMENT_TECH_KEYWORDS = [
    "python", "java", "javascript", "typescript", "react", "angular", "vue", "node.js",
    "express", "django", "flask", "spring", "aws", "azure", "gcp", "docker", "kubernetes",
    "postgresql", "mongodb", "mysql", "redis", "kafka", "rabbitmq", "microservices",
    "rest", "graphql", "api", "ci/cd", "jenkins", "git", "agile", "scrum",
]

TECHNICAL_PATTERNS = [
    re.compile(r"\b(?:experience|proficiency|knowledge|skills?)\s+(?:in|with|of)\s+(.+)", re.IGNORECASE),
    re.compile(r"\b(?:must|should)\s+(?:have|know|understand)\s+(.+)", re.IGNORECASE),
    re.compile(r"\b(?:required|preferred)\s*:\s*(.+)", re.IGNORECASE),
    re.compile(r"\b(\w+(?:\.\w+|/\w+)*(?:\s+\d+)?)\s+(?:experience|proficiency|knowledge)", re.IGNORECASE),
]
EXPERIENCE_PATTERNS = [
    re.compile(r"(\d+\+?)\s*(?:years?|yrs?)\s+(?:of\s+)?experience", re.IGNORECASE),
    re.compile(r"experience\s+(?:in|with)\s+(.+?)(?:\.|,|\n|$)", re.IGNORECASE),
]
SOFT_SKILL_PATTERNS = [
    re.compile(r"\b(leadership|communication|collaboration|problem[- ]solving|teamwork|adaptability)\b", re.IGNORECASE),
    re.compile(r"\b(?:strong|excellent|good)\s+(communication|analytical|interpersonal)\s+skills", re.IGNORECASE),
]


# ==============================================
# SIMILARITY
# ==============================================

def tokenize(text: str) -> List[str]:
    tokens = re.findall(r"[a-z0-9][a-z0-9+#./-]*", (text or "").lower())
    return [t.strip(".-/") for t in tokens if t.strip(".-/") and t not in STOPWORDS]


def similarity_matrix(queries: List[str], documents: List[str]) -> List[List[float]]:
    """TF-IDF cosine similarity in [0, 1]; rows are queries, columns documents.

    One vectorizer is fitted over both sides so IDF reflects the whole corpus.
    """
    if not queries or not documents or not any(tokenize(t) for t in queries + documents):
        return [[0.0] * len(documents) for _ in queries]
    vectorizer = TfidfVectorizer(tokenizer=tokenize, token_pattern=None, lowercase=False)
    matrix = vectorizer.fit_transform(queries + documents)
    scores = pairwise_cosine(matrix[:len(queries)], matrix[len(queries):])
    return [[max(0.0, min(1.0, float(s))) for s in row] for row in scores]


def cosine_similarity(a: str, b: str) -> float:
    return similarity_matrix([a or ""], [b or ""])[0][0]


def literal_score(keywords: List[str], text: str) -> float:
    if not keywords:
        return 0.0
    lower = text.lower()
    return sum(1 for k in keywords if k.lower() in lower) / len(keywords)


# ==============================================
# RECORDS
# ==============================================

@dataclass
class Requirement:
    id: str
    text: str
    category: str  # technical | experience | soft-skill | general
    keywords: List[str]
    priority: str  # must-have | nice-to-have


@dataclass
class ResumeBullet:
    text: str
    section: str
    index: int


@dataclass
class HybridMatch:
    requirement: Requirement
    matched_bullet: Optional[ResumeBullet] = None
    semantic_score: float = 0.0
    literal_score: float = 0.0
    hybrid_score: float = 0.0
    evidence: str = ""
    match_type: str = "none"

    @property
    def confidence(self) -> float:
        return self.hybrid_score


@dataclass
class MatchingResult:
    matches: List[HybridMatch]
    overall_coverage: float
    unmatched_requirements: List[Requirement] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)


# ==============================================
# EXTRACTION
# ==============================================

def extract_requirement_keywords(text: str) -> List[str]:
    lower = text.lower()
    keywords = [k for k in REQUIREMENT_TECH_KEYWORDS if k in lower]
    for word in re.findall(r"\b[A-Za-z][A-Za-z0-9.+#-]*\b", text):
        if len(word) >= 4 and word[0].isupper() and word.lower() not in keywords and word not in keywords:
            keywords.append(word)
    return keywords[:10]


def extract_requirements(job_description: str) -> List[Requirement]:
    requirements: List[Requirement] = []
    for index, line in enumerate(re.split(r"\n+", job_description or "")):
        text = line.strip()
        if len(text) < 10:
            continue

        priority = "must-have" if re.search(r"\b(?:must|required|essential|critical)\b", text, re.IGNORECASE) \
            else "nice-to-have"
        if any(p.search(text) for p in TECHNICAL_PATTERNS):
            category = "technical"
        elif any(p.search(text) for p in EXPERIENCE_PATTERNS):
            category = "experience"
        elif any(p.search(text) for p in SOFT_SKILL_PATTERNS):
            category = "soft-skill"
        else:
            category = "general"

        keywords = extract_requirement_keywords(text)
        if keywords or len(text) > 20:
            requirements.append(Requirement(
                id=f"req-{index}", text=text, category=category, keywords=keywords, priority=priority,
            ))
    return requirements[:MAX_REQUIREMENTS]


def extract_resume_bullets(resume_text: str) -> List[ResumeBullet]:
    bullets: List[ResumeBullet] = []
    section = "general"
    for line in re.split(r"\n+", resume_text or ""):
        text = line.strip()
        if re.match(r"^[A-Z\s]{3,}$", text) and len(text) < 50:
            section = text.lower()
            continue
        if re.match(r"^[•\-–—►▸]\s+", text) or re.match(r"^[A-Z][a-z]+ed\s+", text):
            bullets.append(ResumeBullet(re.sub(r"^[•\-–—►▸]\s+", "", text), section, len(bullets)))
        elif len(text) > 30 and re.search(r"[a-z]", text):
            bullets.append(ResumeBullet(text, section, len(bullets)))
    return bullets


# ==============================================
# MATCHING
# ==============================================

def determine_match_type(semantic: float, literal: float, hybrid: float) -> str:
    if hybrid < HYBRID_THRESHOLD:
        return "none"
    if semantic >= SEMANTIC_THRESHOLD and literal < LITERAL_THRESHOLD:
        return "semantic"
    if literal >= LITERAL_THRESHOLD and semantic < SEMANTIC_THRESHOLD:
        return "literal"
    if semantic >= SEMANTIC_THRESHOLD and literal >= LITERAL_THRESHOLD:
        return "hybrid"
    return "none"


def find_best_match(
    requirement: Requirement,
    bullets: List[ResumeBullet],
    semantic_scores: Optional[List[float]] = None,
) -> HybridMatch:
    if semantic_scores is None:
        semantic_scores = similarity_matrix([requirement.text], [b.text for b in bullets])[0]
    best = HybridMatch(requirement=requirement)
    for bullet, semantic in zip(bullets, semantic_scores):
        literal = literal_score(requirement.keywords, bullet.text)
        hybrid = semantic * SEMANTIC_WEIGHT + literal * LITERAL_WEIGHT
        if hybrid > best.hybrid_score:
            best = HybridMatch(
                requirement=requirement,
                matched_bullet=bullet,
                semantic_score=semantic,
                literal_score=literal,
                hybrid_score=hybrid,
                evidence=bullet.text,
                match_type=determine_match_type(semantic, literal, hybrid),
            )
    return best


def match_jd_to_resume(job_description: str, resume_text: str) -> MatchingResult:
    requirements = extract_requirements(job_description)
    bullets = extract_resume_bullets(resume_text)
    semantic = similarity_matrix([r.text for r in requirements], [b.text for b in bullets])
    matches = [find_best_match(r, bullets, scores) for r, scores in zip(requirements, semantic)]

    matched = [m for m in matches if m.match_type != "none"]
    summary = {
        "total_requirements": len(matches),
        "matched": len(matched),
        "unmatched": len(matches) - len(matched),
        "semantic_matches": sum(1 for m in matches if m.match_type == "semantic"),
        "literal_matches": sum(1 for m in matches if m.match_type == "literal"),
        "hybrid_matches": sum(1 for m in matches if m.match_type == "hybrid"),
    }
    return MatchingResult(
        matches=matches,
        overall_coverage=len(matched) / len(matches) if matches else 0.0,
        unmatched_requirements=[m.requirement for m in matches if m.match_type == "none"],
        summary=summary,
    )


def identify_skill_gaps(result: MatchingResult) -> Dict:
    critical = [r for r in result.unmatched_requirements if r.priority == "must-have"]
    nice = [r for r in result.unmatched_requirements if r.priority == "nice-to-have"]
    must_have_total = sum(1 for m in result.matches if m.requirement.priority == "must-have")
    return {
        "critical_gaps": critical,
        "nice_to_have_gaps": nice,
        "gap_percentage": len(critical) / must_have_total if must_have_total else 0.0,
    }


def generate_match_report(result: MatchingResult) -> str:
    lines = [
        "=== HYBRID MATCHING REPORT ===",
        f"Coverage: {result.overall_coverage * 100:.1f}%",
        "",
        "SUMMARY:",
        f"  Total Requirements: {result.summary.get('total_requirements', 0)}",
        f"  Matched: {result.summary.get('matched', 0)}",
        f"  Unmatched: {result.summary.get('unmatched', 0)}",
        f"  Semantic Matches: {result.summary.get('semantic_matches', 0)}",
        f"  Literal Matches: {result.summary.get('literal_matches', 0)}",
        f"  Hybrid Matches: {result.summary.get('hybrid_matches', 0)}",
    ]

    top = sorted((m for m in result.matches if m.match_type != "none"), key=lambda m: -m.hybrid_score)[:10]
    if top:
        lines.append("")
        lines.append("TOP MATCHES:")
        for i, m in enumerate(top, 1):
            lines.append(f"{i}. [{m.match_type.upper()}] {m.requirement.text[:60]}")
            lines.append(
                f"   Hybrid: {m.hybrid_score * 100:.1f}% | Semantic: {m.semantic_score * 100:.1f}% "
                f"| Literal: {m.literal_score * 100:.1f}%"
            )
            lines.append(f"   Evidence: {m.evidence[:80]}")

    if result.unmatched_requirements:
        lines.append("")
        lines.append("UNMATCHED REQUIREMENTS:")
        for i, r in enumerate(result.unmatched_requirements[:5], 1):
            lines.append(f"  {i}. {r.text[:80]}")

    return "\n".join(lines)
