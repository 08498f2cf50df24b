"""Tests for carrier search and health-based recommendations."""

import pytest

from src.tools.carriers import (
    CoverageFilter,
    Suitability,
    build_health_profile,
    calculate_bmi,
    get_carrier,
    parse_height_inches,
    recommend_carriers,
    search_carriers,
)


def _by_name(recs):
    return {r.carrier: r for r in recs}


class TestSearch:
    def test_empty_term_returns_all(self, bundled_carriers):
        assert len(search_carriers(bundled_carriers)) == len(bundled_carriers)

    def test_name_search_case_insensitive(self, bundled_carriers):
        results = search_carriers(bundled_carriers, "OMAHA")
        assert [c.id for c in results] == ["mutual_of_omaha"]

    def test_location_search(self, bundled_carriers):
        results = search_carriers(bundled_carriers, "texas")
        assert [c.name for c in results] == ["Liberty Bankers"]

    def test_coverage_filter(self, bundled_carriers):
        graded = search_carriers(bundled_carriers, coverage=CoverageFilter.GRADED)
        assert graded
        assert all(c.coverage_types.graded for c in graded)
        rop = search_carriers(bundled_carriers, coverage="rop")
        assert [c.name for c in rop] == ["Liberty Bankers"]

    def test_get_carrier_by_id_or_name(self, bundled_carriers):
        assert get_carrier(bundled_carriers, "foresters").name == "Foresters"
        assert get_carrier(bundled_carriers, "baltimore life").id == "baltimore_life"
        assert get_carrier(bundled_carriers, "unknown") is None


class TestHealthProfile:
    @pytest.mark.parametrize("height,inches", [
        ("5'8", 68), ("5' 8\"", 68), ("6'", 72), ("64", 64), ("", 0), ("tall", 0),
    ])
    def test_parse_height(self, height, inches):
        assert parse_height_inches(height) == inches

    def test_bmi(self):
        assert calculate_bmi("5'4", 150) == 25.7
        assert calculate_bmi("", 150) is None
        assert calculate_bmi("5'4", "heavy") is None

    def test_profile_flags(self):
        profile = build_health_profile({
            "customer_age": "70", "diabetes": "Yes", "diabetes_treatment": "Insulin",
            "diabetes_complications": "Yes",
        })
        assert profile.age == 70
        assert profile.insulin
        assert profile.high_risk

    def test_plain_diabetes_not_high_risk(self):
        assert not build_health_profile({"diabetes": "Yes"}).high_risk

    @pytest.mark.parametrize("age", ["inf", "-inf", "1e400", "nan", float("inf"), "sixty"])
    def test_unusable_age_is_zero(self, age):
        assert build_health_profile({"customer_age": age}).age == 0


class TestRecommendations:
    def test_healthy_senior(self):
        recs = recommend_carriers({"customer_age": 66, "tobacco_use": "No"})
        names = _by_name(recs)
        assert names["Mutual of Omaha"].suitability == Suitability.EXCELLENT
        assert "Senior-friendly underwriting" in names["Mutual of Omaha"].reasons
        assert "Foresters" not in names

    def test_sorted_best_first(self):
        recs = recommend_carriers({"customer_age": 66, "blood_pressure": "Yes"})
        ranks = [r.suitability for r in recs]
        order = [Suitability.EXCELLENT, Suitability.GOOD, Suitability.FAIR, Suitability.POOR]
        assert ranks == sorted(ranks, key=order.index)

    def test_high_risk_routes_to_graded(self):
        recs = recommend_carriers({"customer_age": 68, "stroke_history": "Yes"})
        names = _by_name(recs)
        assert "Mutual of Omaha" not in names
        assert names["Foresters"].suitability == Suitability.GOOD
        assert names["Pioneer American"].suitability == Suitability.FAIR

    def test_insulin_note(self):
        recs = recommend_carriers({
            "customer_age": 60, "diabetes": "Yes", "diabetes_treatment": "Insulin",
        })
        assert "insulin" in _by_name(recs)["Baltimore Life"].notes.lower()

    def test_blood_pressure_note(self):
        recs = recommend_carriers({"customer_age": 60, "blood_pressure": "Yes"})
        assert _by_name(recs)["Mutual of Omaha"].notes is not None

    def test_age_out_of_every_range(self):
        assert recommend_carriers({"customer_age": 17}) == []

    @pytest.mark.parametrize("age", ["inf", "1e400", float("inf")])
    def test_non_finite_age_does_not_raise(self, age):
        recs = recommend_carriers({"customer_age": age, "stroke_history": "Yes"})
        assert isinstance(recs, list)
