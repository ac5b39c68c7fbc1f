# test_evidence_locked_scorer.py

from evidence_locked_scorer import (
    determine_grade,
    generate_evidence_report,
    score_formatting,
    score_quantification,
    score_with_evidence,
)


class TestEvidenceLockedScore:

    def test_all_blocked_scores_zero(self):
        """No evidence anywhere: every component is blocked rather than zeroed"""
        result = score_with_evidence("", "")

        assert result.overall == 0
        assert result.components == []
        assert len(result.blocked_scores) == 5
        assert all(b.endswith("(no evidence)") for b in result.blocked_scores)
        assert result.grade == "poor"

    def test_overall_uses_only_backed_components(self, sample_resume_text, sample_jd):
        result = score_with_evidence(sample_resume_text, sample_jd)

        assert all(c.has_evidence for c in result.components)
        assert len(result.components) + len(result.blocked_scores) == 5
        assert 0 <= result.overall <= 100

    def test_to_dict_and_report(self, sample_resume_text, sample_jd):
        result = score_with_evidence(sample_resume_text, sample_jd)
        data = result.to_dict()

        assert data["overall"] == result.overall
        assert set(data["evidence_summary"]) >= {"resume_evidence", "jd_evidence", "semantic_evidence"}
        assert generate_evidence_report(result).startswith("=== EVIDENCE-LOCKED SCORING REPORT ===")


class TestComponents:

    def test_quantification_counts_metric_bullets(self):
        text = "- Reduced costs by 30%\n- Wrote documentation for the team"
        component = score_quantification(text)

        assert len(component.evidence) == 1
        assert component.score == 100

    def test_formatting_without_structure(self):
        component = score_formatting("plain text with nothing else")

        assert component.evidence == []
        assert component.score == 25

    def test_grades(self):
        assert determine_grade(95) == "excellent"
        assert determine_grade(80) == "good"
        assert determine_grade(60) == "fair"
        assert determine_grade(59) == "poor"
