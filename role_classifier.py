# role_classifier.py
# Role, domain and seniority classification of a job description
#
# Keyword counting over fixed tables. Scores are deterministic: the same
# JD always yields the same classification.

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

# role -> (keywords, multiplier); table order breaks ties
ROLE_KEYWORDS: Dict[str, Tuple[List[str], float]] = {
    "backend": ([
        "backend", "api", "rest", "graphql", "microservices", "server", "node.js", "python", "java",
        "go", "spring", "django", "flask", "express", "database", "sql", "postgresql", "mongodb",
        "redis", "kafka", "rabbitmq", "architecture", "scalability",
    ], 1.0),
    "frontend": ([
        "frontend", "react", "angular", "vue", "javascript", "typescript", "html", "css", "ui", "ux",
        "responsive", "web", "component", "redux", "next.js", "webpack", "vite", "tailwind",
        "bootstrap", "sass", "accessibility",
    ], 1.0),
    "fullstack": ([
        "fullstack", "full-stack", "full stack", "mern", "mean", "end-to-end",
        "frontend and backend", "web application",
    ], 1.0),
    "mobile": ([
        "mobile", "ios", "android", "react native", "flutter", "swift", "kotlin", "xamarin",
        "app development", "mobile app",
    ], 1.0),
    "devops": ([
        "devops", "ci/cd", "jenkins", "docker", "kubernetes", "aws", "azure", "gcp", "terraform",
        "ansible", "pipeline", "deployment", "infrastructure", "cloud", "monitoring", "prometheus",
        "grafana",
    ], 1.0),
    "data": ([
        "data engineer", "data analyst", "etl", "data pipeline", "spark", "hadoop", "airflow",
        "snowflake", "bigquery", "data warehouse", "analytics", "tableau", "power bi", "sql",
        "data modeling",
    ], 1.0),
    "ai-ml": ([
        "machine learning", "ai", "ml", "deep learning", "tensorflow", "pytorch", "nlp",
        "computer vision", "neural network", "model", "data science", "scikit-learn", "keras",
        "transformers", "llm",
    ], 1.0),
    "qa": ([
        "qa", "quality assurance", "testing", "automation", "selenium", "cypress", "jest", "test",
        "bug", "quality",
    ], 1.0),
    "security": ([
        "security", "cybersecurity", "penetration", "vulnerability", "encryption", "authentication",
        "authorization", "owasp", "soc", "siem",
    ], 1.0),
    "embedded": ([
        "embedded", "firmware", "iot", "microcontroller", "rtos", "c", "c++", "hardware", "arduino",
        "raspberry pi",
    ], 1.0),
    "general": (["software engineer", "software developer", "developer", "engineer", "programmer"], 0.5),
}

# domain -> (JD keywords, company-name indicators)
DOMAIN_KEYWORDS: Dict[str, Tuple[List[str], List[str]]] = {
    "fintech": ([
        "fintech", "financial", "banking", "payment", "trading", "blockchain", "cryptocurrency",
        "wallet", "fraud", "compliance", "stripe", "plaid",
    ], ["bank", "capital", "securities", "insurance", "credit"]),
    "healthcare": ([
        "healthcare", "medical", "health", "patient", "hospital", "clinic", "pharma", "hipaa", "hl7",
        "fhir", "telehealth", "ehr", "emr",
    ], ["care", "med", "health", "bio"]),
    "ecommerce": ([
        "ecommerce", "e-commerce", "retail", "shopping", "cart", "checkout", "inventory",
        "marketplace", "shopify", "magento", "woocommerce", "product catalog",
    ], ["shop", "store", "retail", "marketplace"]),
    "saas": ([
        "saas", "b2b", "subscription", "multi-tenant", "cloud platform", "api platform",
        "enterprise software",
    ], ["software as a service", "subscription", "tenant"]),
    "gaming": (["gaming", "game", "unity", "unreal", "multiplayer", "esports", "gamedev"],
               ["game", "play", "gaming"]),
    "social": ([
        "social media", "social network", "community", "messaging", "chat", "content", "feed",
        "newsfeed",
    ], ["social", "community", "network"]),
    "education": ([
        "education", "edtech", "learning", "lms", "course", "student", "teacher", "classroom",
        "e-learning",
    ], ["edu", "learn", "school", "university"]),
    "enterprise": (["enterprise", "erp", "crm", "enterprise software", "b2b", "sap", "salesforce", "oracle"],
                   ["enterprise", "business"]),
    "startup": (["startup", "seed", "series a", "venture", "mvp", "early-stage"], ["startup", "founding"]),
    "general": (["technology", "software", "digital", "tech"], []),
}

# level -> (keywords, (min years, max years), responsibility verbs); junior to senior order
SENIORITY_KEYWORDS: Dict[str, Tuple[List[str], Tuple[int, int], List[str]]] = {
    "intern": (["intern", "internship", "trainee", "co-op"], (0, 0), ["assist", "support", "learn"]),
    "fresher": (["fresher", "entry-level", "graduate", "junior developer", "associate"], (0, 1),
                ["develop", "implement", "contribute"]),
    "junior": (["junior", "jr.", "associate"], (1, 3), ["build", "develop", "maintain", "debug"]),
    "mid": (["software engineer", "developer", "engineer"], (3, 6), ["design", "architect", "optimize", "mentor"]),
    "senior": (["senior", "sr.", "lead engineer"], (6, 10),
               ["lead", "architect", "design", "mentor", "drive", "establish"]),
    "lead": (["lead", "team lead", "tech lead", "engineering lead"], (8, 15),
             ["lead", "manage", "guide", "mentor", "strategize", "define"]),
    "principal": (["principal", "staff engineer", "distinguished"], (10, 20),
                  ["define", "establish", "influence", "drive strategy", "mentor teams"]),
    "architect": (["architect", "chief", "principal architect", "solutions architect"], (10, 25),
                  ["architect", "define architecture", "strategic", "enterprise-wide"]),
}

SENIOR_LEVELS = ["senior", "lead", "principal", "architect"]
YEARS_PATTERN = re.compile(r"(\d+)\+?\s*years?", re.IGNORECASE)


@dataclass
class RoleClassification:
    role_type: str
    confidence: float
    secondary_roles: List[str] = field(default_factory=list)
    domain_type: str = "general"
    domain_confidence: float = 0
    seniority: str = "mid"
    seniority_confidence: float = 0
    keywords: List[str] = field(default_factory=list)
    tone: str = "balanced"
    focus_areas: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


def _count(keyword: str, text: str) -> int:
    # keywords like "jr." and "c++" end in a non-word character
    return len(re.findall(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", text, re.IGNORECASE))


def _pick(scores: Dict[str, float]) -> str:
    best, best_score = "general", 0.0
    for key, score in scores.items():
        if score > best_score and key != "general":
            best, best_score = key, score
    return best


def role_scores(jd_lower: str) -> Dict[str, float]:
    scores = {
        role: sum(_count(k, jd_lower) for k in keywords) * weight
        for role, (keywords, weight) in ROLE_KEYWORDS.items()
    }
    if scores["fullstack"] > 0:
        scores["fullstack"] += (scores["backend"] + scores["frontend"]) * 0.3
    return scores


def domain_scores(jd_lower: str, company_name: Optional[str] = None) -> Dict[str, float]:
    company = (company_name or "").lower()
    scores = {}
    for domain, (keywords, indicators) in DOMAIN_KEYWORDS.items():
        score = sum(_count(k, jd_lower) * 2 for k in keywords)
        if company:
            score += sum(5 for ind in indicators if ind in company)
        scores[domain] = score
    return scores


def classify_seniority(jd_lower: str) -> Tuple[str, float]:
    years_found = [int(y) for y in YEARS_PATTERN.findall(jd_lower)]

    best, best_score = "mid", 0
    for level, (keywords, (low, high), verbs) in SENIORITY_KEYWORDS.items():
        score = sum(_count(k, jd_lower) * 5 for k in keywords)
        score += sum(_count(v, jd_lower) * 2 for v in verbs)
        score += sum(10 for y in years_found if low <= y <= high)
        # later (more senior) levels win ties
        if score > 0 and score >= best_score:
            best, best_score = level, score

    return best, min(best_score / 20, 1.0)


def _tone(seniority: str, domain: str) -> str:
    if seniority in ("intern", "fresher", "junior"):
        return "balanced"
    if seniority in ("principal", "architect", "lead"):
        return "formal"
    if domain in ("fintech", "healthcare", "enterprise"):
        return "formal"
    if domain in ("gaming", "startup", "social"):
        return "casual"
    return "balanced"


def _focus_areas(role: str, domain: str, seniority: str) -> List[str]:
    if seniority in SENIOR_LEVELS:
        areas = ["Architecture & Design", "Technical Leadership", "Mentorship"]
    elif seniority == "mid":
        areas = ["Development & Implementation", "Code Quality", "Collaboration"]
    else:
        areas = ["Learning & Growth", "Implementation", "Best Practices"]

    areas += {
        "backend": ["Scalability", "Performance", "System Design"],
        "frontend": ["User Experience", "Responsive Design", "Accessibility"],
        "fullstack": ["End-to-End Development", "API Design", "System Integration"],
        "devops": ["CI/CD", "Infrastructure", "Automation"],
        "ai-ml": ["Model Development", "Data Processing", "Algorithm Optimization"],
    }.get(role, [])
    areas += {
        "fintech": ["Security & Compliance", "Fraud Prevention"],
        "healthcare": ["HIPAA Compliance", "Data Privacy"],
        "ecommerce": ["Inventory Management", "Payment Integration"],
    }.get(domain, [])
    return areas[:6]


def classify_role(job_description: str, company_name: Optional[str] = None) -> RoleClassification:
    """Classify a JD into role type, domain and seniority."""
    jd_lower = (job_description or "").lower()

    roles = role_scores(jd_lower)
    role = _pick(roles)
    secondary = [
        r for r, s in sorted(
            ((r, s) for r, s in roles.items() if r not in (role, "general")),
            key=lambda item: -item[1],
        )[:2]
        if s > 2
    ]

    domains = domain_scores(jd_lower, company_name)
    domain = _pick(domains)
    seniority, seniority_confidence = classify_seniority(jd_lower)

    role_keywords, _ = ROLE_KEYWORDS[role]
    matched = [k for k in role_keywords if k in jd_lower][:10]

    return RoleClassification(
        role_type=role,
        confidence=roles.get(role, 0),
        secondary_roles=secondary,
        domain_type=domain,
        domain_confidence=domains.get(domain, 0),
        seniority=seniority,
        seniority_confidence=seniority_confidence,
        keywords=matched,
        tone=_tone(seniority, domain),
        focus_areas=_focus_areas(role, domain, seniority),
    )


def get_optimization_strategy(classification: RoleClassification) -> Dict:
    keyword_weight = 1.0
    metric_emphasis = "performance"
    verbs = ["Developed", "Implemented", "Built"]

    if classification.seniority in SENIOR_LEVELS:
        verbs = ["Architected", "Led", "Established", "Drove", "Defined", "Spearheaded"]
        metric_emphasis = "leadership"
    elif classification.seniority == "mid":
        verbs = ["Designed", "Implemented", "Optimized", "Engineered"]
        metric_emphasis = "impact"

    project_focus = {
        "backend": ["APIs", "Microservices", "Databases", "Scalability"],
        "frontend": ["UI Components", "Responsive Design", "User Experience", "Accessibility"],
        "fullstack": ["End-to-End Features", "API Integration", "Full-Stack Applications"],
        "devops": ["CI/CD Pipelines", "Infrastructure", "Automation", "Monitoring"],
        "ai-ml": ["ML Models", "Data Pipelines", "Algorithm Optimization"],
    }.get(classification.role_type, [])
    project_focus = list(project_focus)
    if classification.role_type == "backend":
        keyword_weight = 1.2

    if classification.domain_type == "fintech":
        project_focus += ["Payment Systems", "Fraud Detection"]
    elif classification.domain_type == "healthcare":
        project_focus += ["Patient Data Systems", "Compliance"]

    return {
        "keyword_weight": keyword_weight,
        "metric_emphasis": metric_emphasis,
        "action_verb_style": verbs,
        "project_focus": project_focus,
    }
