# test_normal_mode_scoring.py

import pytest

from experience_analyzer import analyze_experience
from normal_mode_scoring import (
    InputQualityAssessment,
    apply_normalized_weights,
    assess_input_quality,
    calculate_adjusted_score,
    calculate_aligned_confidence,
    get_aligned_interview_probability,
    get_aligned_match_band,
    get_normalized_weights,
)
from resume_models import CandidateLevel, build_tier_score
from scoring_tables import NORMALIZED_WEIGHTS, TIER_DEFINITIONS

SCENARIO_RESUME = """John Doe
john@x.com
555-1234
EXPERIENCE
Developed a caching layer, improving throughput by 40%.
SKILLS
Python, AWS, Docker"""

# twenty words, no sections, no technical terms
NO_SECTIONS = (
    "hello this is a short note about my weekend of gardening and cooking "
    "in the summer with family and friends"
)


def _quality(label: str, **metrics) -> InputQualityAssessment:
    return InputQualityAssessment(
        is_valid=label != "invalid",
        quality=label,
        quality_score=50,
        rubric_quality=label,
        content_metrics=metrics,
    )


class TestInputQualityGate:

    def test_short_text_is_invalid(self):
        """Anything under fifty words never passes the gate"""
        result = assess_input_quality("Python developer " * 20)

        assert result.content_metrics["word_count"] < 50
        assert result.is_valid is False
        assert result.quality == "invalid"

    def test_minimal_resume_signals(self):
        result = assess_input_quality(SCENARIO_RESUME)
        m = result.content_metrics

        assert m["has_contact_info"]
        assert m["has_experience"]
        assert m["has_skills"]
        assert result.rubric_quality in ("fair", "good", "excellent")
        # too short to score
        assert result.quality == "invalid"

    def test_minimal_resume_experience_is_quantified(self):
        assert analyze_experience(SCENARIO_RESUME).metrics_usage_ratio == 1.0

    def test_no_sections_reports_issues(self):
        result = assess_input_quality(NO_SECTIONS)

        assert len(NO_SECTIONS.split()) == 20
        assert any(i.startswith("Resume text too short") for i in result.issues)
        assert "No substantive content detected" in result.issues
        assert result.quality == "invalid"

    def test_full_resume_is_valid(self, sample_resume_text, sample_resume_data):
        result = assess_input_quality(sample_resume_text, sample_resume_data)

        assert result.is_valid
        assert result.quality in ("good", "excellent")
        assert result.issues == []

    def test_empty_input_never_raises(self):
        result = assess_input_quality(None)

        assert result.quality == "invalid"
        assert result.content_metrics["word_count"] == 0


class TestNormalizedWeights:

    @pytest.mark.parametrize("level", list(CandidateLevel))
    def test_weights_sum_to_100(self, level):
        weights = get_normalized_weights(level)

        assert sum(weights.values()) == pytest.approx(100)
        assert weights == NORMALIZED_WEIGHTS[level.value]

    @pytest.mark.parametrize("level", list(CandidateLevel))
    def test_applied_weights_sum_to_100(self, level):
        tiers = {
            key: build_tier_score(number, name, 5, 10, 1, 1, 1)
            for key, (number, name) in TIER_DEFINITIONS.items()
            if key != "red_flags"
        }
        weighted = apply_normalized_weights(tiers, level)

        assert sum(t.weight for t in weighted.values()) == pytest.approx(100)
        # percentages untouched, contributions recomputed
        assert all(t.percentage == 50 for t in weighted.values())
        assert sum(t.weighted_contribution for t in weighted.values()) == pytest.approx(50)

    def test_unknown_level_falls_back_to_mid(self):
        assert get_normalized_weights("principal") == NORMALIZED_WEIGHTS["mid"]

    def test_fresher_weights_drop_experience(self):
        assert get_normalized_weights(CandidateLevel.FRESHER)["experience"] == 0


class TestScoreAdjustment:

    def test_adjustment_is_monotonic_in_quality(self):
        """For a fixed base, better input never scores lower"""
        base = 72
        scores = [
            calculate_adjusted_score(base, _quality(label), "mid").final_score
            for label in ("excellent", "good", "fair", "poor", "invalid")
        ]

        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 72
        assert scores[-1] == round(72 * 0.4)

    def test_fresher_bonus(self):
        quality = _quality("good", has_projects=True, unique_skill_count=6)

        adjustment = calculate_adjusted_score(60, quality, "fresher")

        assert adjustment.candidate_level_bonus == 5
        assert adjustment.final_score == round(60 * 0.95 + 5)
        assert "Fresher bonus" in adjustment.explanation

    def test_score_is_clamped(self):
        quality = _quality("excellent", has_projects=True, unique_skill_count=12)

        assert calculate_adjusted_score(99, quality, "fresher").final_score == 100


class TestBands:

    @pytest.mark.parametrize("score,band,probability", [
        (95, "Excellent Match", "75-90%"),
        (80, "Very Good Match", "60-75%"),
        (55, "Below Average", "15-30%"),
        (5, "Minimal Match", "0-1%"),
    ])
    def test_match_band(self, score, band, probability):
        assert get_aligned_match_band(score) == band
        assert get_aligned_interview_probability(score) == probability

    @pytest.mark.parametrize("score,confidence", [(90, "High"), (75, "High"), (65, "Medium"), (10, "Low")])
    def test_confidence(self, score, confidence):
        assert calculate_aligned_confidence(score) == confidence
