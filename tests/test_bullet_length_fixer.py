# test_bullet_length_fixer.py

from bullet_length_fixer import (
    MAX_BULLET_LENGTH,
    apply_fixes,
    compress_bullet,
    extract_metric_tokens,
    fix_long_bullet,
    generate_fix_report,
    scan_bullets,
    violation_summary,
)
from resume_models import parse_resume_data

LONG_BULLET = (
    "Was responsible for successfully leading the migration of 40 legacy services to Kubernetes "
    "in order to reduce hosting costs, resulting in savings of $120,000 per year and 35% faster deploys"
)


def _data(*bullets):
    return parse_resume_data({
        "workExperience": [{"role": "Engineer", "company": "Acme", "year": "2020 - 2023", "bullets": list(bullets)}],
    })


class TestFixLongBullet:

    def test_short_bullet_is_untouched(self):
        """Bullets within the limit are a no-op"""
        bullet = "Reduced API latency by 40% with a Redis cache"
        fix = fix_long_bullet(bullet)

        assert fix.strategy == "none"
        assert fix.after == [bullet]
        assert fix.metrics_preserved and fix.star_preserved

    def test_long_bullet_is_shortened(self):
        assert len(LONG_BULLET) > MAX_BULLET_LENGTH
        fix = fix_long_bullet(LONG_BULLET)

        assert fix.strategy in ("compress", "split")
        assert all(length <= MAX_BULLET_LENGTH for length in fix.length_after)

    def test_preserved_metrics_survive(self):
        fix = fix_long_bullet(LONG_BULLET)
        if fix.metrics_preserved:
            joined = " ".join(fix.after).replace(",", "").lower()
            for token in extract_metric_tokens(LONG_BULLET):
                assert token in joined or token in extract_metric_tokens(" ".join(fix.after))

    def test_compress_drops_filler(self):
        compressed = compress_bullet("Worked on the billing system in order to utilized new tooling")

        assert "worked on" not in compressed.lower()
        assert "in order to" not in compressed.lower()
        assert "used" in compressed


class TestScanAndApply:

    def test_scan_finds_violations(self):
        analysis = scan_bullets(_data("Shipped the new onboarding flow", LONG_BULLET))

        assert analysis.total_bullets == 2
        assert len(analysis.violations) == 1
        assert analysis.violations[0].location == "work_experience[0].bullets[1]"
        assert violation_summary(analysis)["sections"] == ["work_experience"]

    def test_apply_returns_fixed_copy(self):
        data = _data(LONG_BULLET, "Shipped the new onboarding flow")
        analysis = scan_bullets(data)

        fixed = apply_fixes(data, analysis)

        # input is never mutated
        assert data.work_experience[0].bullets[0] == LONG_BULLET
        assert all(len(b) <= MAX_BULLET_LENGTH for b in fixed.work_experience[0].bullets)
        assert fixed.work_experience[0].bullets[-1] == "Shipped the new onboarding flow"
        assert analysis.stats_before_after["violation_count"] == {"before": 1, "after": 0}
        assert len(analysis.fixes_applied) == 1

    def test_nothing_to_fix(self):
        data = _data("Shipped the new onboarding flow")
        analysis = scan_bullets(data)
        fixed = apply_fixes(data, analysis)

        assert fixed == data
        assert not violation_summary(analysis)["has_violations"]
        assert generate_fix_report(analysis).startswith("=== ATS BULLET LENGTH ANALYSIS ===")
