# scoring_tables.py
# Centralized lookup tables for the multi-tier scoring engine
#
# Every analyzer reads its verbs, technology lists, weights, bands and
# penalties from here. Bump TABLES_VERSION whenever a table changes so
# stored analyses can be traced back to the tables that produced them.

from typing import Dict, List, Tuple

TABLES_VERSION = "2024.2"
RUBRIC_VERSION = "2.0-220metrics"

# ==============================================
# TIERS
# ==============================================

# key -> (tier_number, display name)
TIER_DEFINITIONS: Dict[str, Tuple[int, str]] = {
    "basic_structure": (1, "Basic Structure"),
    "content_structure": (2, "Content Structure"),
    "experience": (3, "Experience"),
    "education": (4, "Education"),
    "certifications": (5, "Certifications"),
    "skills_keywords": (6, "Skills & Keywords"),
    "projects": (7, "Projects"),
    "red_flags": (8, "Red Flags"),
    "competitive": (9, "Competitive"),
    "culture_fit": (10, "Culture Fit"),
    "qualitative": (11, "Qualitative"),
}

DEFAULT_TIER_WEIGHTS: Dict[str, float] = {
    "basic_structure": 8,
    "content_structure": 10,
    "experience": 25,
    "education": 6,
    "certifications": 4,
    "skills_keywords": 25,
    "projects": 8,
    "red_flags": 0,
    "competitive": 6,
    "culture_fit": 4,
    "qualitative": 4,
}

# Candidate-level weight tables; each row sums to 100
NORMALIZED_WEIGHTS: Dict[str, Dict[str, float]] = {
    "fresher": {
        "skills_keywords": 35, "experience": 0, "education": 18, "projects": 20,
        "certifications": 8, "basic_structure": 6, "content_structure": 6,
        "competitive": 3, "culture_fit": 2, "qualitative": 2,
    },
    "junior": {
        "skills_keywords": 30, "experience": 12, "education": 12, "projects": 16,
        "certifications": 6, "basic_structure": 7, "content_structure": 8,
        "competitive": 4, "culture_fit": 3, "qualitative": 2,
    },
    "mid": {
        "skills_keywords": 25, "experience": 25, "education": 6, "projects": 10,
        "certifications": 5, "basic_structure": 8, "content_structure": 10,
        "competitive": 5, "culture_fit": 3, "qualitative": 3,
    },
    "senior": {
        "skills_keywords": 22, "experience": 30, "education": 4, "projects": 8,
        "certifications": 4, "basic_structure": 8, "content_structure": 10,
        "competitive": 7, "culture_fit": 4, "qualitative": 3,
    },
}

# ==============================================
# INPUT QUALITY & ADJUSTMENT
# ==============================================

QUALITY_MULTIPLIERS: Dict[str, Tuple[float, str]] = {
    "excellent": (1.0, "Complete resume with all sections"),
    "good": (0.95, "Good resume with minor gaps"),
    "fair": (0.85, "Resume missing some important content"),
    "poor": (0.70, "Resume has significant gaps"),
    "invalid": (0.40, "Resume appears incomplete or invalid"),
}

QUALITY_BANDS: List[Tuple[int, str]] = [
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
    (20, "poor"),
]

FRESHER_BONUS = 5
MIN_WORD_COUNT = 50

# ==============================================
# BANDS
# ==============================================

MATCH_BANDS: List[Tuple[int, str, str]] = [
    (90, "Excellent Match", "75-90%"),
    (80, "Very Good Match", "60-75%"),
    (70, "Good Match", "45-60%"),
    (60, "Fair Match", "30-45%"),
    (50, "Below Average", "15-30%"),
    (40, "Poor Match", "8-15%"),
    (30, "Very Poor", "3-8%"),
    (20, "Inadequate", "1-3%"),
]
LOWEST_MATCH_BAND = ("Minimal Match", "0-1%")

CONFIDENCE_BANDS: List[Tuple[int, str]] = [
    (75, "High"),
    (60, "Medium"),
]

CRITICAL_STATUS_BANDS: List[Tuple[int, str]] = [
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
]

# ==============================================
# RED FLAGS
# ==============================================

RED_FLAG_PENALTIES: Dict[str, int] = {
    "employment_gap": -3,
    "job_hopping": -3,
    "title_inflation": -5,
    "conflicting_dates": -2,
    "vague_responsibilities": -1,
    "no_progression": -2,
    "layoff_pattern": -2,
    "recent_changes": -2,
    "company_names_in_skills": -5,
    "domains_as_languages": -4,
    "soft_skills_in_technical": -3,
    "keyword_stuffing": -5,
    "unsubstantiated_claims": -2,
    "skills_without_context": -1,
    "outdated_technologies": -2,
    "irrelevant_skills": -1,
    "shallow_skills": -1,
    "generic_language": -1,
    "missing_domain_knowledge": -2,
    "unverifiable_claims": -2,
    "skill_decay": -1,
    "grammar_errors": -3,
    "inconsistent_formatting": -2,
    "ats_parsing_issues": -3,
    "length_issues": -1,
    "contact_issues": -3,
    "section_header_issues": -2,
    "whitespace_issues": -1,
    "presentation_issues": -1,
}

AUTO_REJECT_CRITICAL_FLAGS = 3

# ==============================================
# VERBS & BULLET LANGUAGE
# ==============================================

STRONG_ACTION_VERBS = [
    "achieved", "accelerated", "accomplished", "advanced", "analyzed", "architected",
    "built", "created", "delivered", "designed", "developed", "drove", "enhanced",
    "established", "executed", "generated", "implemented", "improved", "increased",
    "initiated", "launched", "led", "managed", "optimized", "orchestrated",
    "pioneered", "reduced", "resolved", "scaled", "spearheaded", "streamlined",
    "transformed", "upgraded", "automated", "collaborated", "coordinated",
    "facilitated", "mentored", "negotiated", "presented", "supervised",
]

WEAK_VERBS = [
    "responsible", "duties", "worked", "helped", "assisted", "involved",
    "participated", "contributed", "supported", "handled", "performed",
    "maintained", "operated", "utilized", "used", "did", "was", "were",
]

RESPONSIBILITY_INDICATORS = [
    "responsible for", "duties included", "tasks involved", "job responsibilities",
    "daily tasks", "routine work", "assigned to", "required to", "expected to",
]

ACHIEVEMENT_INDICATORS = [
    "achieved", "accomplished", "delivered", "exceeded", "improved", "increased",
    "reduced", "saved", "generated", "won", "earned", "awarded", "recognized",
    "promoted", "selected", "chosen", "resulted in", "led to", "contributed to",
]

BUSINESS_IMPACT_KEYWORDS = [
    "revenue", "profit", "efficiency", "productivity", "quality",
    "customer satisfaction", "cost reduction",
]

# ==============================================
# TECHNOLOGY
# ==============================================

PROGRAMMING_LANGUAGES = [
    "javascript", "typescript", "python", "java", "c++", "c#", "go", "rust",
    "ruby", "php", "swift", "kotlin", "scala", "r", "matlab", "perl",
]

FRAMEWORKS = [
    "react", "angular", "vue", "next.js", "nuxt", "express", "django", "flask",
    "spring", "spring boot", "rails", ".net", "laravel", "fastapi", "nest.js", "svelte",
    "node.js", "nodejs", "redux", "graphql", "rest", "restful", "api", "hibernate",
]

DATABASES = [
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "dynamodb",
    "cassandra", "oracle", "sql server", "sqlite", "firebase", "supabase",
]

CLOUD_PLATFORMS = [
    "aws", "azure", "gcp", "google cloud", "heroku", "vercel", "netlify",
    "digitalocean", "cloudflare", "alibaba cloud", "ec2", "s3", "lambda",
    "cloud", "microservices", "serverless", "saas", "paas", "iaas",
]

DEVOPS_TOOLS = [
    "docker", "kubernetes", "jenkins", "github actions", "gitlab ci", "terraform",
    "ansible", "puppet", "chef", "circleci", "travis", "argo", "ci/cd", "cicd",
    "devops", "devsecops", "helm", "prometheus", "grafana", "nginx", "apache",
]

ALL_TECH_KEYWORDS = PROGRAMMING_LANGUAGES + FRAMEWORKS + DATABASES + CLOUD_PLATFORMS + DEVOPS_TOOLS

# Weighted categories for tech-stack completeness
TECH_STACK_CATEGORIES: Dict[str, Tuple[int, List[str]]] = {
    "programming": (30, ["javascript", "python", "java", "typescript", "c++", "c#", "go", "rust", "ruby", "php"]),
    "frameworks": (25, ["react", "angular", "vue", "node.js", "express", "django", "flask", "spring"]),
    "databases": (20, ["mysql", "postgresql", "mongodb", "redis", "elasticsearch", "dynamodb"]),
    "cloud": (15, ["aws", "azure", "gcp", "docker", "kubernetes", "terraform"]),
    "tools": (10, ["git", "jira", "jenkins", "webpack", "npm", "yarn"]),
}

# Skills recognised when counting unique skills in free text
COMMON_SKILLS = [
    "javascript", "typescript", "python", "java", "c++", "c#", "go", "rust", "ruby", "php",
    "react", "angular", "vue", "node", "express", "django", "flask", "spring",
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch",
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "git", "jira", "agile", "scrum", "rest", "graphql", "api",
    "html", "css", "sass", "tailwind", "bootstrap",
    "machine learning", "tensorflow", "pytorch", "pandas", "numpy",
    "tableau", "power bi", "excel", "sql",
]

# ==============================================
# EDUCATION & CERTIFICATIONS
# ==============================================

PRESTIGIOUS_INSTITUTIONS = [
    "mit", "stanford", "harvard", "berkeley", "caltech", "princeton", "yale",
    "columbia", "cornell", "carnegie mellon", "georgia tech", "university of michigan",
    "iit", "nit", "bits", "iisc", "oxford", "cambridge", "eth zurich",
]

RELEVANT_DEGREE_FIELDS = [
    "computer science", "engineering", "information technology",
    "software", "data science", "mathematics",
]

CERT_CATEGORIES: Dict[str, List[str]] = {
    "cloud": ["aws", "azure", "gcp", "google cloud", "cloud practitioner", "solutions architect"],
    "security": ["cissp", "cism", "ceh", "security+", "comptia security", "oscp"],
    "project_management": ["pmp", "prince2", "scrum master", "csm", "psm", "safe", "agile"],
    "language": ["toefl", "ielts", "jlpt", "dele", "delf"],
}

KNOWN_CERT_PROVIDERS = [
    "aws", "microsoft", "google", "cisco", "comptia", "pmi", "scrum.org", "oracle", "salesforce",
]

# ==============================================
# SECTIONS
# ==============================================

CANONICAL_SECTION_ORDER = [
    "header", "summary", "skills", "experience",
    "projects", "education", "certifications", "achievements",
]

CRITICAL_SECTIONS = ["summary", "skills", "experience"]
