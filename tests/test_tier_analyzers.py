# test_tier_analyzers.py
# Bounds and shape checks for the individual tier analyzers

import pytest

from education_analyzer import EducationCertificationAnalyzer
from fit_analyzers import CompetitiveAnalyzer, CultureFitAnalyzer, QualitativeAnalyzer
from hybrid_matcher import cosine_similarity, identify_skill_gaps, match_jd_to_resume, similarity_matrix
from projects_analyzer import ProjectsAnalyzer
from quality_analyzer import analyze_section_quality, tech_stack_completeness
from resume_models import KEYWORD_TIER_COLORS
from section_detector import split_sections
from skills_keywords_analyzer import (
    SkillsKeywordsAnalyzer,
    classify_keyword_tier,
    find_missing_keywords,
    keyword_match_rate,
)
from structure_analyzers import BasicStructureAnalyzer, BasicStructureInput, ContentStructureAnalyzer


def _within(tier):
    assert 0 <= tier.score <= tier.max_score
    assert 0 <= tier.percentage <= 100
    assert tier.metrics_passed <= tier.metrics_total
    assert len(tier.top_issues) <= 5


@pytest.mark.parametrize("analyzer,number,max_score", [
    (ProjectsAnalyzer, 7, 15),
    (CompetitiveAnalyzer, 9, 15),
    (CultureFitAnalyzer, 10, 20),
    (QualitativeAnalyzer, 11, 10),
])
def test_text_analyzers(analyzer, number, max_score, sample_resume_text, sample_resume_data, sample_jd):
    tier = analyzer.analyze(sample_resume_text, sample_resume_data, sample_jd).tier_score

    assert tier.tier_number == number
    assert tier.max_score == max_score
    _within(tier)


@pytest.mark.parametrize("analyzer", [ProjectsAnalyzer, CompetitiveAnalyzer, CultureFitAnalyzer, QualitativeAnalyzer])
def test_empty_input(analyzer):
    _within(analyzer.analyze("").tier_score)


class TestStructure:

    def test_basic_structure(self, sample_resume_text):
        result = BasicStructureAnalyzer.analyze(BasicStructureInput(resume_text=sample_resume_text, filename="jane.pdf"))

        assert result.tier_score.tier_number == 1
        _within(result.tier_score)

    def test_layout_hints_cost_points(self, sample_resume_text):
        clean = BasicStructureAnalyzer.analyze(BasicStructureInput(resume_text=sample_resume_text))
        busy = BasicStructureAnalyzer.analyze(BasicStructureInput(
            resume_text=sample_resume_text, has_tables=True, has_graphics=True, has_multiple_columns=True,
        ))

        assert busy.tier_score.score <= clean.tier_score.score

    def test_content_structure(self, sample_resume_text, sample_resume_data):
        result = ContentStructureAnalyzer.analyze(sample_resume_text, sample_resume_data)

        assert result.tier_score.tier_number == 2
        _within(result.tier_score)


class TestEducation:

    def test_combined(self, sample_resume_text, sample_resume_data, sample_jd):
        result = EducationCertificationAnalyzer.analyze(sample_resume_text, sample_resume_data, sample_jd)

        assert result.education.tier_number == 4
        assert result.certifications.tier_number == 5
        assert result.combined_max == 20
        assert result.combined_score == pytest.approx(result.education.score + result.certifications.score, abs=0.02)
        _within(result.education)
        _within(result.certifications)


class TestSkillsKeywords:

    def test_keyword_tiers(self):
        assert classify_keyword_tier(0, 9) == "critical"
        assert classify_keyword_tier(4, 9) == "important"
        assert classify_keyword_tier(8, 9) == "nice_to_have"

    def test_missing_keywords(self):
        missing = find_missing_keywords("Python developer", ["python", "kafka", "rust"])

        assert [m.keyword for m in missing] == ["kafka", "rust"]
        assert missing[0].tier == "important"
        assert missing[0].color == KEYWORD_TIER_COLORS["important"]
        assert missing[1].tier == "nice_to_have"

    def test_match_rate(self):
        assert keyword_match_rate("Python developer", []) == 100
        assert keyword_match_rate("Python developer", ["python", "kafka"]) == 50

    def test_without_jd(self, sample_resume_text, sample_resume_data):
        result = SkillsKeywordsAnalyzer.analyze(sample_resume_text, sample_resume_data)

        assert result.keyword_match_rate == 100
        assert result.missing_keywords == []
        assert result.tier_score.tier_number == 6
        _within(result.tier_score)


class TestQuality:

    def test_section_quality(self, sample_resume_text):
        metrics = analyze_section_quality(split_sections(sample_resume_text), "Backend Engineer")

        assert 0 <= metrics.bullet_clarity_score <= 100
        assert 0 <= metrics.metrics_usage_ratio <= 1
        assert metrics.weak_verb_count >= 0

    def test_non_tech_role_skips_stack_check(self):
        assert tech_stack_completeness("", "Sales Manager") == 85


class TestHybridMatcher:

    def test_identical_text(self):
        assert cosine_similarity("python kafka", "python kafka") == pytest.approx(1.0)
        assert cosine_similarity("", "python") == 0.0

    def test_similarity_matrix(self):
        """TF-IDF rows per query, one column per document"""
        scores = similarity_matrix(["python kafka"], ["python kafka streaming", "sales management"])

        assert len(scores) == 1 and len(scores[0]) == 2
        assert scores[0][0] > 0.5
        assert scores[0][1] == 0.0
        assert similarity_matrix([], ["python"]) == []

    def test_stop_words_only(self):
        assert cosine_similarity("the and of", "the and of") == 0.0

    def test_empty_inputs(self):
        result = match_jd_to_resume("", "")

        assert result.overall_coverage == 0.0
        assert result.matches == []
        assert identify_skill_gaps(result)["gap_percentage"] == 0.0

    def test_coverage_bounds(self, sample_resume_text, sample_jd):
        result = match_jd_to_resume(sample_jd, sample_resume_text)

        assert 0.0 <= result.overall_coverage <= 1.0
        assert result.summary["matched"] + result.summary["unmatched"] == result.summary["total_requirements"]
