# test_red_flags_and_level.py

from datetime import datetime

import pytest

from candidate_level import (
    detect_candidate_level,
    is_fresher_role,
    only_internships,
    required_years,
    total_experience_years,
)
from red_flag_detector import GROUP_START_IDS, RedFlagDetector, employment_gaps, skill_decay
from resume_models import CandidateLevel, parse_resume_data


def _jobs(*spans, role="Software Engineer"):
    return parse_resume_data({
        "workExperience": [{"role": role, "company": "Acme", "year": span, "bullets": []} for span in spans],
    })


class TestRedFlagDetector:

    def test_employment_gap_flag(self):
        """A three year gap between roles is flagged first with id 1"""
        result = RedFlagDetector.analyze("Jane Smith", _jobs("2021 - Present", "2015 - 2018"))
        first = result.red_flags[0]

        assert first.id == 1
        assert first.type == "employment"
        assert first.name == "Unexplained Employment Gap"
        assert first.description == "1 gap(s) > 6 months detected"

    def test_group_ids_start_at_offsets(self):
        result = RedFlagDetector.analyze("Jane Smith", _jobs("2021 - Present", "2015 - 2018"))
        formatting = [f for f in result.red_flags if f.type == "formatting"]

        assert formatting
        assert formatting[0].id == GROUP_START_IDS["formatting"]
        ids = [f.id for f in result.red_flags]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_tier_reflects_penalty(self):
        result = RedFlagDetector.analyze("Jane Smith", _jobs("2021 - Present", "2015 - 2018"))

        assert result.total_penalty == sum(f.penalty for f in result.red_flags)
        assert result.total_penalty < 0
        assert result.tier_score.score == max(0, 30 - abs(result.total_penalty))
        assert result.tier_score.metrics_passed == 30 - len(result.red_flags)
        assert len(result.tier_score.top_issues) <= 5

    def test_empty_input_never_raises(self):
        result = RedFlagDetector.analyze("")

        assert result.tier_score.max_score == 30
        assert all(f.type == "formatting" for f in result.red_flags)

    def test_employment_gaps(self):
        assert employment_gaps(_jobs("2021 - Present", "2015 - 2018")) == [36]
        assert employment_gaps(_jobs("2019 - Present", "2015 - 2019")) == []

    def test_skill_decay(self):
        this_year = datetime.now().year
        old = parse_resume_data({"certifications": ["AWS Certified Developer 2012"]})
        fresh = parse_resume_data({"certifications": [f"AWS Certified Developer {this_year - 1}"]})

        assert skill_decay(old)
        assert not skill_decay(fresh)


class TestCandidateLevel:

    def test_fresher_wording(self):
        result = detect_candidate_level("Final year student seeking first role in data science")

        assert result.level == CandidateLevel.FRESHER
        assert result.confidence == 95

    @pytest.mark.parametrize("span,level", [
        ("2015 - 2025", CandidateLevel.SENIOR),
        ("2019 - 2025", CandidateLevel.MID),
        ("2022 - 2025", CandidateLevel.JUNIOR),
    ])
    def test_level_from_history(self, span, level):
        assert detect_candidate_level("Backend engineer", _jobs(span)).level == level

    def test_internships_only(self):
        result = detect_candidate_level("Backend engineer", _jobs("2024 - 2025", role="Software Intern"))

        assert result.level == CandidateLevel.FRESHER
        assert "Only internship experience found" in result.signals

    def test_internship_titles(self):
        assert only_internships(_jobs("2024 - 2025", role="Software Engineering Internship"))
        assert not only_internships(_jobs("2019 - 2025", role="Internal Tools Engineer"))

    def test_total_experience_years(self):
        data = _jobs("2018 - 2020", "18 months")
        assert total_experience_years(data) == pytest.approx(3.5)

    def test_years_from_text(self):
        result = detect_candidate_level("Engineer with 9 years of experience in distributed systems")
        assert result.level == CandidateLevel.SENIOR


class TestFresherRole:

    def test_user_type_wins(self):
        assert is_fresher_role(CandidateLevel.SENIOR, user_type="student")
        assert not is_fresher_role(CandidateLevel.FRESHER, user_type="experienced")

    def test_jd_wording(self):
        assert is_fresher_role(CandidateLevel.MID, "Graduate program for new grads")
        assert not is_fresher_role(CandidateLevel.JUNIOR, "5+ years of experience with Python")

    def test_jd_keywords_match_whole_words(self):
        """Words like internal or undergraduate are not fresher wording"""
        senior_jd = (
            "Senior Backend Engineer building internal platforms for international teams. "
            "6+ years of experience with Python and AWS"
        )
        assert not is_fresher_role(CandidateLevel.SENIOR, senior_jd)
        assert not is_fresher_role(CandidateLevel.MID, "Undergraduate degree in Computer Science preferred")
        assert is_fresher_role(CandidateLevel.MID, "Summer intern for the platform team")

    def test_junior_defaults_to_fresher_role(self):
        assert is_fresher_role(CandidateLevel.JUNIOR)
        assert not is_fresher_role(CandidateLevel.MID)

    def test_required_years(self):
        assert required_years("At least 3 years in Go") == 3
        assert required_years("No prior experience needed") is None
