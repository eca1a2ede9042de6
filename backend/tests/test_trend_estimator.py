"""
Trend estimation tests.
"""

from pregnancy_forecast.modules.trend_estimator import calculate_trend
from pregnancy_forecast.modules.visit_normalizer import validate_visits


def _visits(*rows):
    return validate_visits([dict(row) for row in rows])


class TestCalculateTrend:

    def test_fewer_than_two_visits_is_flat(self):
        assert calculate_trend([], "maternal_weight") == 0
        assert calculate_trend(_visits({"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 60}),
                               "maternal_weight") == 0

    def test_slope_between_first_and_last_by_gestational_age(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 30, "MATERNAL_WEIGHT": 70},
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 65},
            {"GESTATIONAL_AGE_WEEKS": 25, "MATERNAL_WEIGHT": 90},
        )
        assert calculate_trend(visits, "maternal_weight") == 0.5

    def test_negative_slope(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 16, "HEMOGLOBIN_LEVEL": 12.0},
            {"GESTATIONAL_AGE_WEEKS": 26, "HEMOGLOBIN_LEVEL": 11.0},
        )
        assert abs(calculate_trend(visits, "hemoglobin_level") - (-0.1)) < 1e-9

    def test_identical_gestational_age_is_flat(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 60},
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 64},
        )
        assert calculate_trend(visits, "maternal_weight") == 0

    def test_missing_endpoint_value_is_flat(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 60},
            {"GESTATIONAL_AGE_WEEKS": 24},
        )
        assert calculate_trend(visits, "maternal_weight") == 0

    def test_accepts_wire_field_name(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 10, "FETAL_HEART_RATE": 160},
            {"GESTATIONAL_AGE_WEEKS": 30, "FETAL_HEART_RATE": 140},
        )
        assert calculate_trend(visits, "FETAL_HEART_RATE") == -1

    def test_does_not_reorder_input(self):
        visits = _visits(
            {"GESTATIONAL_AGE_WEEKS": 30, "MATERNAL_WEIGHT": 70},
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 65},
        )
        calculate_trend(visits, "maternal_weight")
        assert [v.gestational_age_weeks for v in visits] == [30, 20]
