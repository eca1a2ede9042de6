from typing import Optional

from pregnancy_forecast.models import (
    DeliveryModeDistribution,
    DeliveryTypeDistribution,
    RiskScoreSet,
)
from pregnancy_forecast.modules.rounding import round_half_up


RISK_NAMES = {
    'anemia': 'anemia',
    'hypertension': 'hypertension',
    'growthRestriction': 'fetal growth restriction',
    'pretermRisk': 'preterm delivery',
    'maternalAgeRisk': 'maternal age',
    'bmiRisk': 'BMI-related',
}

SUMMARY_TEMPLATES = {
    'low': (
        "Patient shows stable progression with {full_term}% likelihood of full-term "
        "normal delivery. Continue routine antenatal monitoring."
    ),
    'moderate': (
        "Moderate {risk_name} risk noted. {full_term}% chance of full-term delivery "
        "with increased monitoring recommended."
    ),
    'high': (
        "Elevated {risk_name} risk requires close monitoring. {premature}% premature "
        "delivery risk. Consider specialist consultation."
    ),
}


def generate_summary(
    scores: RiskScoreSet,
    delivery_type: DeliveryTypeDistribution,
    delivery_mode: Optional[DeliveryModeDistribution] = None
) -> str:
    """
    One-sentence summary built around the highest-scoring risk.

    Ties go to the risk listed first. ``delivery_mode`` is accepted for
    callers that have it; the current templates do not use it.
    """
    primary_risk, primary_score = max(scores.items(), key=lambda item: item[1])

    if primary_score > 0.7:
        risk_level = 'high'
    elif primary_score > 0.4:
        risk_level = 'moderate'
    else:
        risk_level = 'low'

    return SUMMARY_TEMPLATES[risk_level].format(
        risk_name=format_risk_name(primary_risk),
        full_term=round_half_up(delivery_type.full_term * 100),
        premature=round_half_up(delivery_type.premature * 100),
    )


def format_risk_name(risk_key: str) -> str:
    return RISK_NAMES.get(risk_key, risk_key)
