"""
Delivery outcome model.

Turns the six risk scores into a delivery-type distribution, a delivery-mode
distribution, and the expected gestational age and birth weight at delivery.
Each probability is rounded independently after normalization, so the
rounded values may miss 1.0 by up to 0.02.
"""
import logging
from typing import Dict

from pregnancy_forecast.models import (
    DeliveryModeDistribution,
    DeliveryTypeDistribution,
    PatientRecord,
    RiskScoreSet,
)
from pregnancy_forecast.modules.rounding import round_probability, round_value

logger = logging.getLogger(__name__)

MAX_CSECTION_RISK = 0.7

# Baseline healthy full-term outcome
BASELINE_GA_WEEKS = 39.2
BASELINE_BIRTH_WEIGHT_KG = 3.3

GA_BOUNDS = (35.0, 40.0)
BIRTH_WEIGHT_BOUNDS = (2.5, 4.0)


def calculate_delivery_type(scores: RiskScoreSet) -> DeliveryTypeDistribution:
    values = [score for _, score in scores.items()]
    total_risk = sum(values) / len(values)

    full_term = max(0.4, 0.80 - total_risk * 0.3)
    premature = min(0.4, 0.15 + total_risk * 0.2)
    mortality_risk = min(0.2, 0.05 + total_risk * 0.1)

    total = full_term + premature + mortality_risk

    return DeliveryTypeDistribution(
        full_term=round_probability(full_term / total),
        premature=round_probability(premature / total),
        mortality_risk=round_probability(mortality_risk / total),
    )


def calculate_delivery_mode(scores: RiskScoreSet, patient: PatientRecord) -> DeliveryModeDistribution:
    nulliparous_weight = 0.1 if _is_nulliparous(patient.parity) else 0

    c_section_risk = min(
        MAX_CSECTION_RISK,
        scores.hypertension * 0.4
        + scores.growth_restriction * 0.3
        + scores.bmi_risk * 0.2
        + nulliparous_weight
    )

    return DeliveryModeDistribution(
        normal=round_probability(1 - c_section_risk),
        c_section=round_probability(c_section_risk),
    )


def calculate_expected_delivery(
    scores: RiskScoreSet,
    delivery_type: DeliveryTypeDistribution
) -> Dict[str, float]:
    """
    Expected gestational age (weeks) and birth weight (kg) at delivery.

    Returns:
        {'expected_gestational_age': float, 'expected_birth_weight': float},
        clamped to 35-40 weeks and 2.5-4.0 kg and rounded to one decimal
    """
    expected_ga = BASELINE_GA_WEEKS
    expected_weight = BASELINE_BIRTH_WEIGHT_KG

    if delivery_type.premature > 0.3:
        expected_ga = 36.5
    elif delivery_type.premature > 0.15:
        expected_ga = 38.0

    if scores.growth_restriction > 0.5:
        expected_weight -= 0.5
    if scores.hypertension > 0.5:
        expected_weight -= 0.3
    if scores.anemia > 0.5:
        expected_weight -= 0.2
    # Prematurity penalty applies to the adjusted age
    if expected_ga < 37.5:
        expected_weight -= 0.4

    expected_ga = min(GA_BOUNDS[1], max(GA_BOUNDS[0], expected_ga))
    expected_weight = min(BIRTH_WEIGHT_BOUNDS[1], max(BIRTH_WEIGHT_BOUNDS[0], expected_weight))

    return {
        'expected_gestational_age': round_value(expected_ga, 1),
        'expected_birth_weight': round_value(expected_weight, 1),
    }


def _is_nulliparous(parity) -> bool:
    if isinstance(parity, str):
        return parity == '0'
    return parity is not None and not isinstance(parity, bool) and parity == 0
