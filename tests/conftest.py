# conftest.py
# Shared fixtures: temporary SQLite database, API client and sample resumes

import os
import tempfile

# Configure before the service modules are imported
_DB_DIR = tempfile.mkdtemp(prefix="resumetier-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["RT_API_KEY"] = "test-key"
os.environ["RT_MAX_BULK"] = "3"

import pytest
from fastapi.testclient import TestClient

from database import init_db
from resume_models import parse_resume_data

SAMPLE_RESUME = """Jane Smith
jane.smith@example.com | (555) 123-4567 | linkedin.com/in/janesmith
San Francisco, CA

SUMMARY
Backend engineer with 6 years of experience building Python services and cloud infrastructure.

SKILLS
Python, Django, Flask, PostgreSQL, Redis, AWS, Docker, Kubernetes, Terraform, Git, REST, GraphQL

EXPERIENCE
Senior Software Engineer, Acme Corp, Jan 2021 - Present
- Developed a caching layer in Redis, improving API throughput by 40%
- Led migration of 12 services to Kubernetes, cutting deploy time from 30 to 5 minutes
- Designed REST APIs serving 2M requests per day with 99.9% uptime
Software Engineer, Initech, Jun 2018 - Dec 2020
- Built data pipelines in Python processing 500K records daily
- Implemented CI/CD with GitHub Actions, reducing release failures by 25%
- Optimized PostgreSQL queries, lowering p95 latency by 60%

PROJECTS
Open Source Task Queue
- Created a lightweight task queue in Python with 300+ GitHub stars

EDUCATION
B.S. Computer Science, State University, 2018

CERTIFICATIONS
AWS Certified Solutions Architect
"""

SAMPLE_JD = (
    "Senior Backend Engineer, 6+ years of experience. Build REST APIs with Python and PostgreSQL, "
    "design microservices and run them on AWS with Docker and Kubernetes."
)

SAMPLE_RESUME_DATA = {
    "name": "Jane Smith",
    "email": "jane.smith@example.com",
    "phone": "(555) 123-4567",
    "workExperience": [
        {
            "role": "Senior Software Engineer",
            "company": "Acme Corp",
            "year": "2021 - Present",
            "bullets": [
                "Developed a caching layer in Redis, improving API throughput by 40%",
                "Led migration of 12 services to Kubernetes, cutting deploy time from 30 to 5 minutes",
            ],
        },
        {
            "role": "Software Engineer",
            "company": "Initech",
            "year": "2018 - 2020",
            "bullets": ["Built data pipelines in Python processing 500K records daily"],
        },
    ],
    "projects": [
        {"title": "Task Queue", "bullets": ["Created a lightweight task queue in Python with 300+ GitHub stars"]},
    ],
    "skills": [{"category": "Languages", "list": ["Python", "SQL"]}],
    "education": [{"degree": "B.S. Computer Science", "school": "State University", "year": "2018"}],
    "certifications": ["AWS Certified Solutions Architect"],
}


@pytest.fixture
def sample_resume_text():
    return SAMPLE_RESUME


@pytest.fixture
def sample_jd():
    return SAMPLE_JD


@pytest.fixture
def sample_resume_data():
    return parse_resume_data(SAMPLE_RESUME_DATA)


@pytest.fixture
def raw_resume_data():
    return dict(SAMPLE_RESUME_DATA)


@pytest.fixture(scope="session")
def client():
    from auto_score_service import app

    init_db()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return {"x-api-key": "test-key"}
