"""
Progression Projector - week-by-week vital sign trajectories to term

Projects maternal weight, fundal height, hemoglobin, blood pressure and
fetal heart rate from the latest visit up to week 40. Measurement jitter is
drawn from an injected ``random.Random`` so a seeded generator reproduces a
trajectory exactly.
"""
import logging
import math
import random
from typing import List, Optional

from pregnancy_forecast.models import (
    BaselineVitals,
    ProgressionPoint,
    ProgressionSeries,
    VisitRecord,
)
from pregnancy_forecast.modules.blood_pressure import parse_blood_pressure
from pregnancy_forecast.modules.rounding import round_half_up, round_value
from pregnancy_forecast.modules.trend_estimator import calculate_trend
from pregnancy_forecast.modules.visit_normalizer import latest_visit

logger = logging.getLogger(__name__)

TERM_WEEK = 40

# Weekly drift applied to the baseline
WEIGHT_GAIN_PER_WEEK = 0.35
HB_DECLINE_PER_WEEK = 0.05
SYSTOLIC_RISE_PER_WEEK = 0.25
DIASTOLIC_RISE_PER_WEEK = 0.15

HB_FLOOR = 10.5
FHR_BOUNDS = (120, 160)

# Scaling of the patient's own slope when blended into the projection
WEIGHT_TREND_FACTOR = 0.1
HB_TREND_FACTOR = 0.02


def generate_progression_data(
    start_week: float,
    weeks_to_project: float,
    baseline: BaselineVitals,
    rng: random.Random
) -> ProgressionSeries:
    """
    Project all six series from ``start_week`` without patient trends.

    Args:
        start_week: Gestational age the projection starts after
        weeks_to_project: Number of weeks to emit; a fractional count emits
            its whole weeks only
        baseline: Starting vitals
        rng: Source of measurement jitter

    Returns:
        ProgressionSeries with one point per projected week per metric
    """
    series = ProgressionSeries()

    for i in range(1, int(math.floor(weeks_to_project)) + 1):
        week = start_week + i

        series.weight.append(ProgressionPoint(
            week=week,
            value=round_value(baseline.weight + i * WEIGHT_GAIN_PER_WEEK, 1),
        ))
        series.fundal.append(ProgressionPoint(
            week=week,
            value=round_value(week + rng.uniform(-1, 1), 1),
        ))
        series.hb.append(ProgressionPoint(
            week=week,
            value=round_value(max(HB_FLOOR, baseline.hb - i * HB_DECLINE_PER_WEEK), 1),
        ))
        series.systolic.append(ProgressionPoint(
            week=week,
            value=round_half_up(baseline.bp.systolic + i * SYSTOLIC_RISE_PER_WEEK + rng.uniform(-1, 1)),
        ))
        series.diastolic.append(ProgressionPoint(
            week=week,
            value=round_half_up(baseline.bp.diastolic + i * DIASTOLIC_RISE_PER_WEEK + rng.uniform(-1, 1)),
        ))

        fhr = baseline.fhr + math.sin(i / 3) * 2 + rng.uniform(-1.5, 1.5)
        fhr = min(FHR_BOUNDS[1], max(FHR_BOUNDS[0], fhr))
        series.fetal_hr.append(ProgressionPoint(week=week, value=round_half_up(fhr)))

    return series


def generate_progression(
    visits: List[VisitRecord],
    current_ga: float,
    weeks_to_project: float,
    rng: Optional[random.Random] = None
) -> ProgressionSeries:
    """Project from the latest visit, blending in the patient's weight and Hb slopes."""
    rng = rng or random.Random()
    latest = latest_visit(visits)

    baseline = BaselineVitals(
        weight=latest.maternal_weight or 60,
        fundal=latest.fundal_height or current_ga,
        hb=latest.hemoglobin_level or 11.5,
        fhr=latest.fetal_heart_rate or 145,
        bp=parse_blood_pressure(latest.blood_pressure),
    )

    weight_trend = calculate_trend(visits, 'maternal_weight')
    hb_trend = calculate_trend(visits, 'hemoglobin_level')
    logger.debug(f"Projection trends: weight={weight_trend:.3f}/wk hb={hb_trend:.3f}/wk")

    series = generate_progression_data(current_ga, weeks_to_project, baseline, rng)

    return series.model_copy(update={
        'weight': _apply_trend(series.weight, current_ga, weight_trend * WEIGHT_TREND_FACTOR),
        'hb': _apply_trend(series.hb, current_ga, hb_trend * HB_TREND_FACTOR),
    })


def _apply_trend(points: List[ProgressionPoint], current_ga: float, slope: float) -> List[ProgressionPoint]:
    return [
        ProgressionPoint(
            week=p.week,
            value=round_value(p.value + (p.week - current_ga) * slope, 1),
        )
        for p in points
    ]
