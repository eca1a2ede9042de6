from typing import List

from pregnancy_forecast.models import VisitRecord
from pregnancy_forecast.modules.visit_normalizer import sort_by_gestational_age


def calculate_trend(visits: List[VisitRecord], field: str) -> float:
    """
    Per-week slope of a numeric visit field between the earliest and the
    latest visit by gestational age.

    Args:
        visits: Normalized visits, in any order
        field: Attribute name (``maternal_weight``) or wire name
            (``MATERNAL_WEIGHT``) of the metric

    Returns:
        Slope in metric units per week, or 0 when fewer than two visits
        exist, either endpoint lacks the metric, or the visits share one
        gestational age
    """
    if len(visits) < 2:
        return 0

    attribute = _resolve_field(field)
    ordered = sort_by_gestational_age(visits)
    first, last = ordered[0], ordered[-1]

    first_value = getattr(first, attribute, None)
    last_value = getattr(last, attribute, None)
    if not first_value or not last_value:
        return 0

    week_diff = last.gestational_age_weeks - first.gestational_age_weeks
    return (last_value - first_value) / week_diff if week_diff > 0 else 0


def _resolve_field(field: str) -> str:
    for name, info in VisitRecord.model_fields.items():
        if field == name or field == info.alias:
            return name
    return field
