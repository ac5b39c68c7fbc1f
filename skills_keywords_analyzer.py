# skills_keywords_analyzer.py
# Tier 6: Skills & Keywords (40 metrics)
#
# - Skills organization (5)
# - Technical skills (15)
# - Soft skill evidence (10)
# - Keyword matching against the job description (10)
#
# Also extracts JD keywords and ranks the ones missing from the resume.

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from hybrid_matcher import cosine_similarity
from resume_models import MetricResult, MissingKeyword, ResumeData, TierScore
from scoring_tables import (
    ALL_TECH_KEYWORDS,
    CLOUD_PLATFORMS,
    DATABASES,
    DEVOPS_TOOLS,
    FRAMEWORKS,
    PROGRAMMING_LANGUAGES,
)
from structure_analyzers import tier_from_metrics

MAX_MISSING_KEYWORDS = 50
KEYWORD_IMPACT = {"critical": 10, "important": 6, "nice_to_have": 3}

# ==============================================
# JD KEYWORD EXTRACTION TABLES
# ==============================================

ADDITIONAL_TECH_PATTERNS = [
    # Data & analytics
    r"\b(tableau|power bi|looker|data visualization|etl|data pipeline|spark|hadoop|kafka|airflow)\b",
    # Testing
    r"\b(jest|mocha|cypress|selenium|junit|pytest|testing|unit test|integration test|e2e)\b",
    # Security
    r"\b(oauth|jwt|ssl|tls|encryption|authentication|authorization|security|sso|saml)\b",
    # Methodologies
    r"\b(agile|scrum|kanban|waterfall|lean|sprint|standup|retrospective)\b",
    # Tools
    r"\b(jira|confluence|slack|trello|asana|notion|figma|sketch|adobe)\b",
    # Architecture
    r"\b(microservices|monolith|event-driven|cqrs|ddd|clean architecture|solid)\b",
    # Mobile
    r"\b(ios|android|react native|flutter|xamarin|mobile|responsive)\b",
    # AI/ML
    r"\b(machine learning|ml|ai|tensorflow|pytorch|scikit-learn|nlp|deep learning|neural network)\b",
]

INVALID_TERM_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in [
        r"^(Key|Required|Preferred|Minimum|Basic|Strong|Good|Excellent|Must|Should|Will|Can|Our|The|And|For|With|You|Are)$",
        r"Responsibilities", r"Qualifications", r"Requirements", r"Skills$", r"Education$",
        r"Experience$", r"Performance", r"Knowledge$", r"Expertise", r"Fundamentals",
        r"About\s*(Us|The|Company)", r"Benefits", r"Overview", r"Description", r"Summary",
        r"Duties", r"Role", r"Position", r"Job\s*Title", r"Apply", r"Submit", r"Contact",
        r"Location", r"Salary", r"Compensation", r"Work\s*(From|Remote|Hybrid)", r"Full\s*Time",
        r"Part\s*Time", r"Contract", r"Permanent", r"Internship", r"Entry\s*Level", r"Senior",
        r"Junior", r"Lead", r"Manager", r"Director", r"Contribute", r"Analyze", r"Maintain",
        r"Collaborate", r"Explore", r"Continuously", r"Minimum",
    ]
]

COMMON_JD_WORDS = {
    "the", "and", "for", "with", "you", "are", "will", "can", "our", "this", "that", "from",
    "have", "has", "been", "what", "when", "where", "which", "who", "why", "how", "all", "each",
    "more", "most", "other", "some", "such", "only", "also", "into", "over", "about", "support",
    "work", "working", "team", "teams", "company", "business", "client", "clients", "customer",
    "customers", "project", "projects", "product", "products", "service", "services", "solution",
    "solutions", "system", "systems", "process", "processes", "development", "develop", "build",
    "building", "create", "design", "implement", "implementation", "manage", "management",
    "deliver", "delivery", "ensure", "provide", "include", "including", "ability", "able",
    "strong", "excellent", "good", "great", "best", "high", "new", "first", "current", "year",
    "years", "time", "level", "area", "areas", "field", "industry", "market", "world", "global",
    "digital", "technology", "technologies", "technical", "software", "data", "information",
    "understanding", "learning", "training", "degree", "bachelor", "master", "certification",
    "professional", "engineer", "engineers", "developer", "developers", "analyst", "architect",
    "designer", "candidate", "candidates", "people", "environment", "culture", "values",
    "mission", "goals", "results", "impact", "growth", "success", "quality", "standards",
    "opportunity", "opportunities", "career", "program", "strategy", "framework", "frameworks",
    "architecture", "practices", "tools", "features", "job", "tasks", "responsibility", "computer",
    "science", "programming", "database", "testing", "sprint", "teamwork", "analytical",
    "debugging", "communication", "internship", "collaborative",
}

EXCLUDED_ACRONYMS = {
    "THE", "AND", "FOR", "WITH", "YOU", "ARE", "WILL", "CAN", "OUR", "USA", "UK", "EU", "HR",
    "CEO", "CFO", "COO", "CTO", "VP", "SVP", "EVP", "MD", "GM", "PM", "AM", "FM", "TV", "PC",
    "IT", "IS", "AS", "AT", "BY", "DO", "GO", "IF", "IN", "NO", "OF", "ON", "OR", "SO", "TO",
    "UP", "WE", "BE", "HE", "ME", "MY", "AN", "US",
}

# key -> (pattern, pass details, fail details, fail score, fail still counts as passed)
EVIDENCE_CHECKS: List[Tuple[str, str, str, str, float, bool]] = [
    ("data_tools", r"pandas|numpy|spark|hadoop|tableau|power bi|excel|sql|etl",
     "Data tools present", "Consider adding data tools", 0.5, False),
    ("api_knowledge", r"\bapi\b|rest|graphql|soap|webhook|endpoint",
     "API knowledge demonstrated", "Add API experience", 0.5, False),
    ("version_control", r"\bgit\b|github|gitlab|bitbucket|svn|version control",
     "Version control listed", "Add Git/version control", 0, False),
    ("testing_tools", r"jest|mocha|pytest|junit|selenium|cypress|testing|unit test|tdd",
     "Testing experience present", "Add testing experience", 0.5, False),
    ("agile_methodology", r"agile|scrum|kanban|sprint|jira|confluence|standup",
     "Agile methodology mentioned", "Add Agile/Scrum experience", 0.5, False),
    ("system_design", r"system design|architecture|microservices|scalab|distributed|high availability",
     "System design mentioned", "Consider adding architecture experience", 0.5, False),
    ("ai_ml_tools", r"machine learning|\bml\b|\bai\b|tensorflow|pytorch|scikit|neural|nlp|deep learning|llm|gpt",
     "AI/ML skills present", "AI/ML skills optional", 0.5, True),
    ("soft_skills_keywords", r"leadership|communication|teamwork|problem.solving|analytical|creative",
     "Soft skills mentioned", "Add soft skills keywords", 0.5, False),
]

SOFT_SKILL_CHECKS: List[Tuple[str, str, str, str]] = [
    ("leadership_evidence", r"\bled\b|managed|directed|supervised|mentored|coached|team of|headed",
     "Leadership evidence found", "Add leadership examples"),
    ("communication_evidence", r"presented|communicated|collaborated|stakeholder|client-facing|documentation",
     "Communication skills shown", "Add communication examples"),
    ("problem_solving_evidence", r"solved|resolved|debugged|troubleshoot|optimized|improved|fixed",
     "Problem-solving demonstrated", "Add problem-solving examples"),
    ("collaboration_evidence", r"collaborated|partnered|cross-functional|team|worked with|coordinated",
     "Collaboration shown", "Add collaboration examples"),
    ("initiative_evidence", r"initiated|launched|pioneered|introduced|proposed|created|built",
     "Initiative demonstrated", "Show initiative examples"),
    ("adaptability_evidence", r"adapted|transitioned|learned|pivoted|flexible|diverse|multiple",
     "Adaptability shown", "Show adaptability"),
    ("customer_focus_evidence", r"customer|client|user|stakeholder|feedback|satisfaction|support",
     "Customer focus shown", "Add customer focus examples"),
    ("attention_to_detail_evidence", r"detail|quality|accuracy|precision|thorough|meticulous|review",
     "Attention to detail shown", "Show attention to detail"),
    ("domain_expertise_evidence", r"expert|specialist|deep knowledge|extensive experience|domain",
     "Domain expertise shown", "Highlight domain expertise"),
    ("training_mentoring_evidence", r"trained|mentored|coached|onboarded|taught|guided|developed team",
     "Training/mentoring shown", "Add mentoring examples"),
]


@dataclass
class SkillsKeywordsResult:
    tier_score: TierScore
    metrics: Dict[str, MetricResult]
    missing_keywords: List[MissingKeyword] = field(default_factory=list)
    keyword_match_rate: int = 100
    jd_keywords: List[str] = field(default_factory=list)


def _ok(details: str, score: float = 1) -> MetricResult:
    return MetricResult(score=score, max_score=1, passed=True, details=details)


def _fail(details: str, score: float = 0.5) -> MetricResult:
    return MetricResult(score=score, max_score=1, passed=False, details=details)


def _found(keywords: List[str], lower_text: str) -> List[str]:
    return [k for k in keywords if k.lower() in lower_text]


# ==============================================
# JD KEYWORDS
# ==============================================

def extract_jd_keywords(job_description: Optional[str]) -> List[str]:
    """Ordered, de-duplicated keywords; earlier entries are treated as more critical"""
    if not job_description:
        return []

    jd_lower = job_description.lower()
    keywords: List[str] = [k for k in ALL_TECH_KEYWORDS if k in jd_lower]

    for pattern in ADDITIONAL_TECH_PATTERNS:
        keywords.extend(m.lower() for m in re.findall(pattern, jd_lower))

    for term in re.findall(r"\b[A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+)*\b", job_description):
        if len(term) < 3 or len(term) > 25:
            continue
        if any(p.search(term) for p in INVALID_TERM_PATTERNS):
            continue
        if re.search(r"[a-z][A-Z]", term) and " " not in term and "." not in term:
            continue
        if term.lower() in COMMON_JD_WORDS:
            continue
        keywords.append(term)

    keywords.extend(a for a in re.findall(r"\b[A-Z]{2,5}\b", job_description) if a not in EXCLUDED_ACRONYMS)

    seen = set()
    ordered = []
    for k in keywords:
        if k not in seen:
            seen.add(k)
            ordered.append(k)
    return ordered


def classify_keyword_tier(index: int, total: int) -> str:
    if index < total / 3:
        return "critical"
    if index < total * 2 / 3:
        return "important"
    return "nice_to_have"


def suggest_placement(keyword: str) -> str:
    k = keyword.lower()
    if k in PROGRAMMING_LANGUAGES or k in FRAMEWORKS:
        return "Skills section - Technical Skills"
    if k in CLOUD_PLATFORMS or k in DEVOPS_TOOLS:
        return "Skills section - Tools & Platforms"
    if k in DATABASES:
        return "Skills section - Databases"
    return "Experience section - relevant bullet points"


def find_missing_keywords(resume_text: str, jd_keywords: List[str]) -> List[MissingKeyword]:
    lower = resume_text.lower()
    missing = []
    for i, keyword in enumerate(jd_keywords):
        if keyword.lower() in lower:
            continue
        tier = classify_keyword_tier(i, len(jd_keywords))
        missing.append(MissingKeyword(
            keyword=keyword,
            tier=tier,
            impact=KEYWORD_IMPACT[tier],
            suggested_placement=suggest_placement(keyword),
        ))
    return missing[:MAX_MISSING_KEYWORDS]


def keyword_match_rate(resume_text: str, jd_keywords: List[str]) -> int:
    if not jd_keywords:
        return 100
    lower = resume_text.lower()
    matches = sum(1 for k in jd_keywords if k.lower() in lower)
    return round(matches / len(jd_keywords) * 100)


# ==============================================
# ANALYZER
# ==============================================

class SkillsKeywordsAnalyzer:

    @staticmethod
    def analyze(
        resume_text: str,
        resume_data: Optional[ResumeData] = None,
        job_description: Optional[str] = None,
        jd_keywords: Optional[List[str]] = None,
    ) -> SkillsKeywordsResult:
        text = resume_text or ""
        data = resume_data or ResumeData()
        keywords = jd_keywords if jd_keywords is not None else extract_jd_keywords(job_description)
        rate = keyword_match_rate(text, keywords)

        metrics: Dict[str, MetricResult] = {}
        metrics.update(SkillsKeywordsAnalyzer._organization(text, data, job_description))
        metrics.update(SkillsKeywordsAnalyzer._technical(text, keywords))
        metrics.update(SkillsKeywordsAnalyzer._soft_skills(text))
        metrics.update(SkillsKeywordsAnalyzer._keyword_matching(text, keywords, rate))

        return SkillsKeywordsResult(
            tier_score=tier_from_metrics(metrics, 6, "Skills & Keywords", "skills_keywords"),
            metrics=metrics,
            missing_keywords=find_missing_keywords(text, keywords),
            keyword_match_rate=rate,
            jd_keywords=keywords,
        )

    @staticmethod
    def _organization(text: str, data: ResumeData, job_description: Optional[str]) -> Dict[str, MetricResult]:
        out: Dict[str, MetricResult] = {}
        groups = data.skills

        out["skills_section_presence"] = _ok("Skills section present") if groups \
            else _fail("Add a dedicated skills section", 0)

        if len(groups) >= 3:
            out["skills_categorization"] = _ok("Skills well categorized")
        elif len(groups) == 2:
            out["skills_categorization"] = _fail("Add more skill categories")
        else:
            out["skills_categorization"] = _fail("Categorize skills by type", 0)

        if not groups or not job_description:
            out["skills_relevance"] = _ok("Cannot assess relevance", 0.5)
        else:
            skills = [s.lower() for s in data.all_skills()]
            jd_lower = job_description.lower()
            ratio = sum(1 for s in skills if s in jd_lower) / len(skills) if skills else 0
            if ratio >= 0.5:
                out["skills_relevance"] = _ok("Skills highly relevant to JD")
            elif ratio >= 0.25:
                out["skills_relevance"] = _fail("Improve skill relevance")
            else:
                out["skills_relevance"] = _fail("Skills not aligned with JD", 0)

        first = groups[0].category.lower() if groups else ""
        if any(w in first for w in ("technical", "programming", "languages")):
            out["skills_hierarchy"] = _ok("Skills properly prioritized")
        elif groups:
            out["skills_hierarchy"] = _fail("Put technical skills first")
        else:
            out["skills_hierarchy"] = _fail("No skills section", 0)

        out["skills_format"] = _ok("Skills formatted correctly") \
            if re.search(r"skills?:?\s*[\w\s,]+", text, re.IGNORECASE) else _fail("Format skills as list")
        return out

    @staticmethod
    def _technical(text: str, keywords: List[str]) -> Dict[str, MetricResult]:
        lower = text.lower()
        out: Dict[str, MetricResult] = {}

        langs = [l for l in PROGRAMMING_LANGUAGES if re.search(r"(?<![\w+#])" + re.escape(l) + r"(?![\w+#])", lower)]
        if len(langs) >= 3:
            out["programming_languages"] = _ok(f"{len(langs)} languages listed")
        elif langs:
            out["programming_languages"] = _fail("Add more programming languages")
        else:
            out["programming_languages"] = _fail("List programming languages", 0)

        if not keywords:
            out["jd_tech_match"] = _ok("No JD keywords to match", 0.5)
            out["critical_skills"] = _ok("No JD to analyze", 0.5)
        else:
            tech = [k for k in keywords if any(t in k.lower() for t in ALL_TECH_KEYWORDS)]
            ratio = len(_found(tech, lower)) / len(tech) if tech else 1
            if ratio >= 0.7:
                out["jd_tech_match"] = _ok("Strong JD tech match")
            elif ratio >= 0.4:
                out["jd_tech_match"] = _fail("Improve JD tech alignment")
            else:
                out["jd_tech_match"] = _fail("Missing key JD technologies", 0)

            critical = keywords[: -(-len(keywords) // 3)]
            ratio = len(_found(critical, lower)) / len(critical)
            if ratio >= 0.8:
                out["critical_skills"] = _ok("Critical skills covered")
            elif ratio >= 0.5:
                out["critical_skills"] = _fail("Missing some critical skills")
            else:
                out["critical_skills"] = _fail("Missing critical JD skills", 0)

        frameworks = _found(FRAMEWORKS, lower)
        if len(frameworks) >= 2:
            out["frameworks"] = _ok(f"{len(frameworks)} frameworks listed")
        elif frameworks:
            out["frameworks"] = _fail("Add more frameworks")
        else:
            out["frameworks"] = _fail("List relevant frameworks", 0)

        databases = _found(DATABASES, lower)
        if len(databases) >= 2:
            out["databases"] = _ok(f"{len(databases)} databases listed")
        elif databases:
            out["databases"] = _fail("Add more database experience")
        else:
            out["databases"] = _fail("List database experience", 0)

        cloud = _found(CLOUD_PLATFORMS, lower)
        out["cloud_platforms"] = _ok(f"Cloud: {', '.join(cloud)}") if cloud \
            else _fail("Add cloud platform experience")

        devops = _found(DEVOPS_TOOLS, lower)
        if len(devops) >= 2:
            out["devops_tools"] = _ok(f"{len(devops)} DevOps tools")
        elif devops:
            out["devops_tools"] = _fail("Add more DevOps tools")
        else:
            out["devops_tools"] = _fail("Consider adding DevOps skills")

        for key, pattern, ok_details, fail_details, fail_score, fail_passes in EVIDENCE_CHECKS:
            if re.search(pattern, text, re.IGNORECASE):
                out[key] = _ok(ok_details)
            elif fail_passes:
                out[key] = _ok(fail_details, fail_score)
            else:
                out[key] = _fail(fail_details, fail_score)
        return out

    @staticmethod
    def _soft_skills(text: str) -> Dict[str, MetricResult]:
        return {
            key: _ok(ok_details) if re.search(pattern, text, re.IGNORECASE) else _fail(fail_details)
            for key, pattern, ok_details, fail_details in SOFT_SKILL_CHECKS
        }

    @staticmethod
    def _keyword_matching(text: str, keywords: List[str], rate: int) -> Dict[str, MetricResult]:
        names = [
            "exact_keyword_match", "semantic_keyword_match", "related_keyword_match",
            "critical_keyword_coverage", "important_keyword_coverage", "nice_to_have_keyword_coverage",
            "keyword_distribution", "keyword_context", "keyword_density", "keyword_placement",
        ]
        if not keywords:
            return {name: _ok("No JD keywords", 0.5) for name in names}

        lower = text.lower()
        out: Dict[str, MetricResult] = {}
        n = len(keywords)
        first_cut = -(-n // 3)
        second_cut = -(-n * 2 // 3)

        if rate >= 70:
            out["exact_keyword_match"] = _ok(f"{rate}% exact match")
        elif rate >= 50:
            out["exact_keyword_match"] = _fail(f"{rate}% - improve match")
        else:
            out["exact_keyword_match"] = _fail(f"{rate}% - low match", 0)

        similarity = cosine_similarity(text, " ".join(keywords))
        out["semantic_keyword_match"] = _ok("Strong semantic overlap with JD") if similarity >= 0.5 \
            else _ok("Semantic matching assessed", 0.75)
        out["related_keyword_match"] = _ok("Related keywords assessed", 0.75)

        critical = keywords[:first_cut]
        ratio = len(_found(critical, lower)) / len(critical)
        if ratio >= 0.8:
            out["critical_keyword_coverage"] = _ok("Critical keywords covered")
        elif ratio >= 0.5:
            out["critical_keyword_coverage"] = _fail("Missing critical keywords")
        else:
            out["critical_keyword_coverage"] = _fail("Many critical keywords missing", 0)

        important = keywords[first_cut:second_cut]
        ratio = len(_found(important, lower)) / len(important) if important else 1
        out["important_keyword_coverage"] = _ok("Important keywords covered") if ratio >= 0.6 \
            else _fail("Add more important keywords")

        nice = keywords[second_cut:]
        ratio = len(_found(nice, lower)) / len(nice) if nice else 1
        out["nice_to_have_keyword_coverage"] = _ok("Nice-to-have keywords present") if ratio >= 0.4 \
            else _ok("Some nice-to-have missing", 0.5)

        found = _found(keywords, lower)
        blocks = [b.lower() for b in re.split(r"\n{2,}", text)]
        spread = sum(1 for k in found if sum(1 for b in blocks if k.lower() in b) >= 2)
        ratio = spread / len(found) if found else 0
        out["keyword_distribution"] = _ok("Keywords well distributed") if ratio >= 0.3 \
            else _fail("Distribute keywords across sections")

        contextual = sum(
            1 for k in found
            if re.search(r"\b" + re.escape(k.lower()) + r"\b.{10,}", text, re.IGNORECASE)
        )
        ratio = contextual / len(found) if found else 0
        out["keyword_context"] = _ok("Keywords used in context") if ratio >= 0.5 \
            else _fail("Use keywords in context")

        words = lower.split()
        occurrences = sum(1 for k in keywords for w in words if k.lower() in w)
        density = occurrences / len(words) * 100 if words else 0
        if 2 <= density <= 5:
            out["keyword_density"] = _ok(f"{density:.1f}% density - optimal")
        elif density < 2:
            out["keyword_density"] = _fail("Increase keyword usage")
        else:
            out["keyword_density"] = _fail("Reduce keyword density")

        first_third = lower[: len(text) // 3]
        ratio = len(_found(critical, first_third)) / len(critical)
        out["keyword_placement"] = _ok("Keywords placed strategically") if ratio >= 0.5 \
            else _fail("Place key terms earlier")
        return out
