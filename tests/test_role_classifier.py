# test_role_classifier.py

from role_classifier import classify_role, classify_seniority, get_optimization_strategy


class TestClassifyRole:

    def test_senior_backend(self):
        """Plain senior backend JD without industry wording"""
        result = classify_role("Senior Backend Engineer, 6+ years, REST APIs, PostgreSQL, microservices, AWS")

        assert result.role_type == "backend"
        assert result.seniority == "senior"
        assert result.domain_type == "general"
        assert "backend" in result.keywords

    def test_company_name_hints_domain(self):
        result = classify_role("Backend engineer building payment APIs", company_name="Acme Bank")

        assert result.domain_type == "fintech"
        assert result.tone == "formal"

    def test_empty_description(self):
        result = classify_role("")

        assert result.role_type == "general"
        assert result.seniority == "mid"
        assert result.confidence == 0

    def test_to_dict_round_trips_fields(self):
        data = classify_role("Frontend developer with React and TypeScript").to_dict()

        assert data["role_type"] == "frontend"
        assert isinstance(data["focus_areas"], list)


class TestSeniority:

    def test_years_drive_seniority(self):
        level, confidence = classify_seniority("we need someone with 10 years in distributed systems")

        assert level in ("senior", "lead", "principal", "architect")
        assert 0 < confidence <= 1.0

    def test_abbreviated_titles(self):
        """Abbreviated Sr. / Jr. titles count even when followed by a space"""
        assert classify_seniority("sr. backend engineer to build rest apis")[0] == "senior"
        assert classify_seniority("jr. qa tester for our web team")[0] == "junior"


class TestOptimizationStrategy:

    def test_senior_backend_strategy(self):
        strategy = get_optimization_strategy(
            classify_role("Senior Backend Engineer, 6+ years, REST APIs, PostgreSQL, microservices, AWS")
        )

        assert strategy["metric_emphasis"] == "leadership"
        assert "Architected" in strategy["action_verb_style"]
        assert strategy["keyword_weight"] == 1.2
        assert "Microservices" in strategy["project_focus"]
