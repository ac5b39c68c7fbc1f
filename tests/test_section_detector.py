# test_section_detector.py

from section_detector import (
    count_bullets,
    count_words,
    detect_sections,
    get_section_insights,
    match_section_header,
    split_sections,
)

OUT_OF_ORDER = """EDUCATION
B.S. Computer Science, State University
EXPERIENCE
Developed services for the payments team
"""


class TestDetectSections:

    def test_canonical_order_detected(self, sample_resume_text):
        """A resume laid out in canonical order has no order issues"""
        analysis = detect_sections(sample_resume_text)

        assert analysis.present_sections == [
            "header", "summary", "skills", "experience", "projects", "education", "certifications",
        ]
        assert analysis.missing_sections == ["achievements"]
        assert analysis.section_order_correct
        assert analysis.order_issues == []

    def test_identical_text_gives_identical_result(self, sample_resume_text):
        first = detect_sections(sample_resume_text)
        second = detect_sections(sample_resume_text)

        assert first.to_dict() == second.to_dict()
        assert first.sections == second.sections

    def test_header_block_collects_contact_lines(self, sample_resume_text):
        header = split_sections(sample_resume_text)["header"]

        assert "Jane Smith" in header
        assert "jane.smith@example.com" in header

    def test_out_of_order_sections_are_penalized(self):
        analysis = detect_sections(OUT_OF_ORDER)

        assert analysis.present_sections == ["education", "experience"]
        assert not analysis.section_order_correct
        assert {i.section for i in analysis.order_issues} == {"education", "experience"}
        assert all(i.penalty == 2 for i in analysis.order_issues)

    def test_empty_text(self):
        analysis = detect_sections("")

        assert analysis.present_sections == []
        assert len(analysis.missing_sections) == 8


class TestHelpers:

    def test_long_line_is_never_a_header(self):
        assert match_section_header("Work Experience") == "experience"
        assert match_section_header(
            "Experience with distributed systems and large scale data processing pipelines"
        ) is None

    def test_count_words_ignores_numbers(self):
        assert count_words("Hello, world! 123 foo-bar") == 3

    def test_count_bullets_deduplicates(self):
        text = "- Built the billing service\n- Built the billing service\n* Wrote the deployment docs"
        assert count_bullets(text) == 2

    def test_insights_for_sparse_resume(self):
        insights = get_section_insights(detect_sections(OUT_OF_ORDER))

        assert any(i.startswith("Critical sections missing: summary, skills") for i in insights)
        assert any(i.startswith("Section order could be improved") for i in insights)
