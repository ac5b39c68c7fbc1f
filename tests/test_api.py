# test_api.py
# HTTP layer against a temporary SQLite database

import asyncio
import io
import os
from unittest.mock import patch

import pytest

from auto_score_service import read_upload
from bullet_length_fixer import MAX_BULLET_LENGTH

LONG_BULLET = (
    "Was responsible for successfully leading the migration of 40 legacy services to Kubernetes "
    "in order to reduce hosting costs, resulting in savings of $120,000 per year and 35% faster deploys"
)


def _upload(name, text):
    return ("files", (name, io.BytesIO(text.encode("utf-8")), "text/plain"))


class TestPublicEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["rubric_version"] == "2.0-220metrics"
        assert "version" in body

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"


class TestScore:

    def test_requires_api_key(self, client, sample_resume_text):
        response = client.post("/score", json={"resume_text": sample_resume_text})
        assert response.status_code == 403

        response = client.post("/score", json={"resume_text": sample_resume_text}, headers={"x-api-key": "nope"})
        assert response.status_code == 403

    def test_score_and_fetch(self, client, auth_headers, sample_resume_text, raw_resume_data, sample_jd):
        response = client.post("/score", headers=auth_headers, json={
            "resume_text": sample_resume_text,
            "resume_data": raw_resume_data,
            "job_description": sample_jd,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert 0 <= body["overall"] <= 100

        stored = client.get(f"/analyses/{body['analysis_id']}", headers=auth_headers)
        assert stored.status_code == 200
        assert stored.json()["overall_score"] == body["overall"]
        assert stored.json()["candidate_name"] == "Jane Smith"
        assert stored.json()["has_job_description"]

    def test_insufficient_input_is_not_an_error(self, client, auth_headers):
        response = client.post("/score", headers=auth_headers, json={"resume_text": "Jane Smith", "save": False})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "insufficient_input"
        assert "analysis_id" not in body

    def test_invalid_resume_data(self, client, auth_headers, sample_resume_text):
        response = client.post("/score", headers=auth_headers, json={
            "resume_text": sample_resume_text,
            "resume_data": {"workExperience": "not a list"},
        })

        assert response.status_code == 422
        assert response.json()["detail"]["errors"][0]["loc"][0] == "workExperience"

    def test_invalid_user_type(self, client, auth_headers, sample_resume_text):
        response = client.post("/score", headers=auth_headers, json={
            "resume_text": sample_resume_text, "user_type": "wizard",
        })
        assert response.status_code == 422


class TestUploads:

    def test_score_auto_txt(self, client, auth_headers, sample_resume_text):
        response = client.post(
            "/score_auto",
            headers=auth_headers,
            files={"file": ("jane.txt", io.BytesIO(sample_resume_text.encode("utf-8")), "text/plain")},
            data={"user_type": "experienced"},
        )

        assert response.status_code == 200
        assert response.json()["analysis_id"]

    def test_unsupported_extension(self, client, auth_headers):
        response = client.post(
            "/score_auto",
            headers=auth_headers,
            files={"file": ("resume.exe", io.BytesIO(b"MZ"), "application/octet-stream")},
        )

        assert response.status_code == 400
        assert "Unsupported file type" in response.json()["detail"]

    def test_bulk_limit(self, client, auth_headers, sample_resume_text):
        files = [_upload(f"r{i}.txt", sample_resume_text) for i in range(4)]
        response = client.post("/score_bulk", headers=auth_headers, files=files)

        assert response.status_code == 400

    def test_bulk_collects_failures(self, client, auth_headers, sample_resume_text):
        files = [_upload("good.txt", sample_resume_text), _upload("bad.rtf", "{\\rtf1}")]
        response = client.post("/score_bulk", headers=auth_headers, files=files)

        assert response.status_code == 200
        body = response.json()
        assert body["total_files"] == 2
        assert body["successful"] == 1
        assert body["failed"] == 1
        assert body["errors"][0]["filename"] == "bad.rtf"


class TestAnalysisEndpoints:

    def test_classify_role(self, client, auth_headers):
        response = client.post("/classify_role", headers=auth_headers, json={
            "job_description": "Senior Backend Engineer, 6+ years, REST APIs, PostgreSQL, microservices, AWS",
        })

        body = response.json()
        assert body["role_type"] == "backend"
        assert body["seniority"] == "senior"
        assert "action_verb_style" in body["optimization_strategy"]

    def test_score_evidence(self, client, auth_headers, sample_resume_text, sample_jd):
        response = client.post("/score_evidence", headers=auth_headers, json={
            "resume_text": sample_resume_text, "job_description": sample_jd,
        })

        assert response.status_code == 200
        body = response.json()
        assert len(body["components"]) + len(body["blocked_scores"]) == 5
        assert "skill_gaps" in body

    def test_formatting(self, client, auth_headers, sample_resume_text):
        response = client.post("/formatting", headers=auth_headers, json={
            "resume_text": sample_resume_text, "column_count": 3,
        })

        body = response.json()
        assert body["ats_compatibility"] == "Low"
        assert body["violations"] == []
        assert body["fix_first"]

    def test_fix_bullets(self, client, auth_headers):
        response = client.post("/fix_bullets", headers=auth_headers, json={
            "resume_data": {"workExperience": [{"role": "Engineer", "bullets": [LONG_BULLET]}]},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["count"] == 1
        bullets = body["resume_data"]["workExperience"][0]["bullets"]
        assert all(len(b) <= MAX_BULLET_LENGTH for b in bullets)


class TestHistory:

    def test_history_and_filters(self, client, auth_headers, sample_resume_text):
        client.post("/score", headers=auth_headers, json={"resume_text": sample_resume_text})

        response = client.get("/analyses/history", headers=auth_headers, params={"limit": 5})
        body = response.json()
        assert response.status_code == 200
        assert body["total"] >= 1
        assert len(body["results"]) <= 5
        assert "report" not in body["results"][0]

        empty = client.get("/analyses/history", headers=auth_headers, params={"match_band": "No Such Band"})
        assert empty.json()["total"] == 0

    def test_history_rejects_bad_dates(self, client, auth_headers):
        response = client.get("/analyses/history", headers=auth_headers, params={"start_date": "yesterday"})
        assert response.status_code == 400

    def test_unknown_analysis(self, client, auth_headers):
        response = client.get("/analyses/does-not-exist", headers=auth_headers)
        assert response.status_code == 404

    def test_export_csv(self, client, auth_headers, sample_resume_text):
        client.post("/score", headers=auth_headers, json={"resume_text": sample_resume_text})

        response = client.get("/analyses/export", headers=auth_headers, params={"format": "csv"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0].startswith("Candidate,Filename,Status,Score")

    def test_export_json(self, client, auth_headers):
        response = client.get("/analyses/export", headers=auth_headers, params={"format": "json"})

        body = response.json()
        assert body["total_analyses"] == len(body["analyses"])

    def test_export_rejects_unknown_format(self, client, auth_headers):
        response = client.get("/analyses/export", headers=auth_headers, params={"format": "xml"})
        assert response.status_code == 422


class _Upload:
    def __init__(self, filename, content=None):
        self.filename = filename
        self.content = content

    async def read(self):
        if self.content is None:
            raise OSError("client disconnected")
        return self.content


class TestReadUpload:

    def test_temp_file_removed_after_extraction(self):
        with patch("auto_score_service.os.remove", wraps=os.remove) as remove:
            text, size_kb = asyncio.run(read_upload(_Upload("resume.txt", b"Jane Smith, backend engineer")))

        assert text == "Jane Smith, backend engineer"
        assert size_kb == 0.0
        assert not os.path.exists(remove.call_args[0][0])

    def test_temp_file_removed_when_read_fails(self):
        with patch("auto_score_service.os.remove", wraps=os.remove) as remove:
            with pytest.raises(OSError):
                asyncio.run(read_upload(_Upload("resume.txt")))

        remove.assert_called_once()
        assert not os.path.exists(remove.call_args[0][0])
