# test_enhanced_scoring_service.py

from unittest.mock import patch

import pytest

from education_analyzer import EducationCertificationAnalyzer
from enhanced_scoring_service import EnhancedScoringService, fallback_tier
from normal_mode_scoring import get_aligned_match_band
from projects_analyzer import ProjectsAnalyzer
from resume_models import ScoringInput, parse_resume_data
from scoring_tables import NORMALIZED_WEIGHTS, TIER_DEFINITIONS


@pytest.fixture
def scoring_input(sample_resume_text, sample_resume_data, sample_jd):
    return ScoringInput(
        resume_text=sample_resume_text,
        resume_data=sample_resume_data,
        job_description=sample_jd,
        filename="jane.pdf",
    )


class TestScore:

    def test_full_report(self, scoring_input):
        result = EnhancedScoringService.score(scoring_input)
        report = result.score

        assert result.ok
        assert 0 <= report["overall"] <= 100
        assert report["match_band"] == get_aligned_match_band(report["overall"])
        assert set(report["tier_scores"]) == set(TIER_DEFINITIONS)
        assert report["analyzer_errors"] == []
        assert report["weighting_mode"] == "JD"
        assert not report["is_fresher_role"]
        assert len(report["actions"]) <= 10
        assert len(report["recommendations"]) <= 10

    def test_tier_weights_sum_to_100(self, scoring_input):
        tiers = EnhancedScoringService.score(scoring_input).score["tier_scores"]

        assert sum(t["weight"] for t in tiers.values()) == pytest.approx(100)

    def test_critical_metrics_bounds(self, scoring_input):
        critical = EnhancedScoringService.score(scoring_input).score["critical_metrics"]

        assert critical["max_critical_score"] == 19
        assert 0 <= critical["total_critical_score"] <= 19

    def test_fresher_user_type(self, scoring_input):
        scoring_input.user_type = "student"
        report = EnhancedScoringService.score(scoring_input).score

        assert report["candidate_level"] == "fresher"
        assert report["is_fresher_role"]
        assert report["tier_scores"]["experience"]["weight"] == 0
        keys = [row["key"] for row in report["breakdown"]]
        assert "competitive" not in keys and "culture_fit" not in keys
        assert keys[0] == "skills_keywords"

    def test_general_mode_without_jd(self, scoring_input):
        scoring_input.job_description = None
        report = EnhancedScoringService.score(scoring_input).score

        assert report["weighting_mode"] == "GENERAL"
        assert isinstance(report["section_insights"], list)
        assert "bullet_clarity_score" in report["writing_quality"]


class TestLevelWeights:

    def test_experienced_candidate_keeps_level_weights(self, scoring_input):
        """A senior JD that mentions internal platforms is not a fresher role"""
        scoring_input.job_description = (
            "Senior Backend Engineer building internal platforms for international teams. "
            "6+ years of experience with Python, PostgreSQL and AWS."
        )
        report = EnhancedScoringService.score(scoring_input).score
        experience = report["tier_scores"]["experience"]

        assert not report["is_fresher_role"]
        assert experience["weight"] == NORMALIZED_WEIGHTS[report["candidate_level"]]["experience"]
        assert experience["weight"] > 0

    def test_junior_without_jd_uses_junior_table(self, sample_resume_text):
        data = parse_resume_data({
            "workExperience": [{"role": "Software Engineer", "company": "Initech", "year": "2020 - 2023",
                                "bullets": ["Built data pipelines in Python processing 500K records daily"]}],
        })
        report = EnhancedScoringService.score(ScoringInput(resume_text=sample_resume_text, resume_data=data)).score
        weights = {key: tier["weight"] for key, tier in report["tier_scores"].items() if key != "red_flags"}

        assert report["candidate_level"] == "junior"
        assert weights == NORMALIZED_WEIGHTS["junior"]

    def test_student_uses_fresher_table(self, scoring_input):
        scoring_input.user_type = "student"
        tiers = EnhancedScoringService.score(scoring_input).score["tier_scores"]

        assert tiers["skills_keywords"]["weight"] == NORMALIZED_WEIGHTS["fresher"]["skills_keywords"]


class TestAnalyzerFallback:

    def test_failing_analyzer_is_replaced(self, scoring_input):
        """One broken analyzer never fails the whole run"""
        with patch.object(ProjectsAnalyzer, "analyze", side_effect=RuntimeError("boom")):
            result = EnhancedScoringService.score(scoring_input)

        projects = result.score["tier_scores"]["projects"]
        assert result.ok
        assert result.score["analyzer_errors"] == ["projects"]
        assert projects["fallback"]
        assert projects["percentage"] == 20
        assert projects["top_issues"] == ["Projects analysis incomplete - limited data available"]

    def test_education_failure_drops_both_tiers(self, scoring_input):
        with patch.object(EducationCertificationAnalyzer, "analyze", side_effect=ValueError("bad")):
            report = EnhancedScoringService.score(scoring_input).score

        assert set(report["analyzer_errors"]) == {"education", "certifications"}
        assert report["tier_scores"]["education"]["fallback"]
        assert report["tier_scores"]["certifications"]["fallback"]

    def test_fallback_tier_shape(self):
        tier = fallback_tier("skills_keywords")

        assert tier.max_score == 40
        assert tier.score == 8
        assert tier.metrics_passed == 8
        assert tier.fallback


class TestInsufficientInput:

    def test_short_resume(self):
        result = EnhancedScoringService.score(ScoringInput(resume_text="Jane Smith jane@example.com Python"))
        report = result.score

        assert not result.ok
        assert result.status == "insufficient_input"
        assert report["overall"] <= 35
        assert report["auto_reject_risk"]
        assert report["red_flags"][0]["name"] == "Incomplete Resume"
        assert report["confidence"] == "Low"
        assert "Resume text too short" in result.reason
        assert result.quality["quality"] == "invalid"

    def test_to_dict_merges_status(self):
        data = EnhancedScoringService.score(ScoringInput(resume_text="")).to_dict()

        assert data["status"] == "insufficient_input"
        assert data["tier_scores"] == {}
        assert data["reason"]
