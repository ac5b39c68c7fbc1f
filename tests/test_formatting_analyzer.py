# test_formatting_analyzer.py

from unittest.mock import patch

from formatting_analyzer import (
    DocumentLayout,
    analyze_formatting,
    generate_summary,
    improvement_priority,
    validate_assessment,
)
from resume_models import ExtractionMode

CLEAN_TEXT = "EXPERIENCE\n- Built payment services in Python\n\nEDUCATION\nB.S. Computer Science"


class TestAnalyzeFormatting:

    def test_clean_document(self):
        assessment = analyze_formatting(DocumentLayout(text=CLEAN_TEXT))

        assert assessment.issues == []
        assert assessment.overall_score == 100
        assert assessment.ats_compatibility == "High"
        assert generate_summary(assessment).startswith("Excellent formatting!")

    def test_severe_issue_forces_low(self):
        """Any severe issue means Low compatibility and a consistent assessment"""
        assessment = analyze_formatting(DocumentLayout(text=CLEAN_TEXT, column_count=3))

        assert any(i.severity == "Severe" for i in assessment.issues)
        assert assessment.ats_compatibility == "Low"
        assert validate_assessment(assessment) == []
        assert assessment.recommendations[0].startswith("Consider generating a new ATS-friendly resume")

    def test_ocr_is_severe(self):
        assessment = analyze_formatting(DocumentLayout(text=CLEAN_TEXT, extraction_mode=ExtractionMode.OCR))

        assert [i.type for i in assessment.issues] == ["graphics"]
        assert assessment.ats_compatibility == "Low"

    def test_penalties_add_up(self):
        assessment = analyze_formatting(
            DocumentLayout(text=CLEAN_TEXT + "\n\n     spaced     out", column_count=2, table_count=1)
        )

        total = assessment.penalties.total_penalty
        assert total == sum(i.penalty for i in assessment.issues)
        assert total == sum(assessment.penalties.severity_breakdown.values())
        assert assessment.overall_score == max(0, 100 - total)
        assert validate_assessment(assessment) == []

    def test_failure_returns_fallback(self):
        with patch("formatting_analyzer.detect_layout_issues", side_effect=RuntimeError("boom")):
            assessment = analyze_formatting(DocumentLayout(text=CLEAN_TEXT))

        assert assessment.fallback
        assert assessment.overall_score == 50
        assert assessment.ats_compatibility == "Medium"


class TestPriority:

    def test_severe_first(self):
        assessment = analyze_formatting(
            DocumentLayout(text=CLEAN_TEXT, column_count=2, textbox_count=5, table_count=1)
        )

        ordered = improvement_priority(assessment.issues)
        assert ordered[0].severity == "Severe"
        assert ordered[-1].severity == "Minor"
