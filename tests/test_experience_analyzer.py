# test_experience_analyzer.py

import pytest

from experience_analyzer import (
    ExperienceAnalyzer,
    analyze_bullets,
    analyze_experience,
    extract_experience_bullets,
    extract_experience_section,
    score_bullet_impact,
    suggest_bullet_improvements,
)


class TestExperienceExtraction:

    def test_header_line_preferred_over_summary_mention(self, sample_resume_text):
        """'6 years of experience' in the summary must not be taken as the section"""
        section = extract_experience_section(sample_resume_text)

        assert section.startswith("EXPERIENCE")
        assert "PROJECTS" not in section

    def test_glyph_bullets(self, sample_resume_text):
        bullets = extract_experience_bullets(extract_experience_section(sample_resume_text))

        assert len(bullets) == 6
        assert bullets[0] == "Developed a caching layer in Redis, improving API throughput by 40%"

    def test_plain_lines_used_without_glyphs(self):
        section = "EXPERIENCE\nBuilt an internal billing dashboard for finance\nshort line\n"

        assert extract_experience_bullets(section) == ["Built an internal billing dashboard for finance"]

    def test_no_section(self):
        assert extract_experience_section("Just a paragraph about hobbies") == ""
        assert analyze_experience("").total_bullets == 0


class TestExperienceMetrics:

    def test_sample_resume(self, sample_resume_text):
        metrics = analyze_experience(sample_resume_text)

        assert metrics.total_bullets == 6
        assert metrics.action_verb_ratio == 1.0
        assert metrics.metrics_usage_ratio == pytest.approx(5 / 6)
        assert metrics.strong_action_verbs_count == 6

    def test_weak_bullets_raise_issues(self):
        metrics = analyze_bullets([
            "Responsible for the internal reporting tools",
            "Worked on the customer support portal",
        ])

        assert metrics.metrics_usage_ratio == 0
        assert "Too few bullet points - aim for 3-5 per role" in metrics.issues
        assert 'Avoid starting bullets with "Responsible for" (found in 1 bullets)' in metrics.issues

    def test_impact_is_capped(self):
        bullet = "Led a revenue initiative that achieved 30% growth in sales"
        assert 0 < score_bullet_impact(bullet) <= 100

    def test_suggestions(self):
        suggestions = suggest_bullet_improvements([
            "Responsible for onboarding flows",
            "Worked on search ranking",
            "Helped migrate the database",
            "Worked on billing",
        ])

        assert len(suggestions) == 3
        assert suggestions[0] == "Managed onboarding flows resulting in [specific outcome/metric]"


class TestExperienceTier:

    def test_tier_score_bounds(self, sample_resume_text):
        result = ExperienceAnalyzer.analyze(sample_resume_text)
        tier = result.tier_score

        assert tier.tier_number == 3
        assert tier.max_score == 100
        assert 0 <= tier.percentage <= 100
        assert tier.metrics_total == 1

    def test_structured_bullets_take_precedence(self):
        result = ExperienceAnalyzer.analyze("", ["Reduced cloud spend by 35% through rightsizing"])

        assert result.metrics.total_bullets == 1
        assert result.metrics.metrics_usage_ratio == 1.0
