"""
Prediction Engine - rule-based delivery outcome and progression forecast

Single entry point for a prediction request. Each call threads its own
normalized visit list through every stage, so nothing is shared between
requests.
"""
import logging
import random
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, List, Optional

from pregnancy_forecast.models import (
    BaselineVitals,
    DeliveryModeDistribution,
    DeliveryTypeDistribution,
    PredictionMetadata,
    PredictionResult,
    VisitRecord,
)
from pregnancy_forecast.modules.delivery_model import (
    calculate_delivery_mode,
    calculate_delivery_type,
    calculate_expected_delivery,
)
from pregnancy_forecast.modules.progression_projector import (
    TERM_WEEK,
    generate_progression,
    generate_progression_data,
)
from pregnancy_forecast.modules.risk_scorer import calculate_risk_scores
from pregnancy_forecast.modules.summary_writer import generate_summary
from pregnancy_forecast.modules.visit_normalizer import (
    latest_visit,
    normalize_patient,
    validate_visits,
)

logger = logging.getLogger(__name__)

ENGINE_SOURCE = "rule-based-engine"
FALLBACK_SOURCE = "fallback-model"
FALLBACK_START_WEEK = 12
FALLBACK_SUMMARY = (
    "Using standard pregnancy progression model - insufficient patient data "
    "for personalized prediction."
)


class PredictionState(str, Enum):
    NO_DATA = "NO_DATA"
    AT_TERM = "AT_TERM"
    NORMAL = "NORMAL"


def select_state(visits: List[VisitRecord]) -> PredictionState:
    latest = latest_visit(visits)
    if latest is None:
        return PredictionState.NO_DATA
    if TERM_WEEK - latest.gestational_age_weeks <= 0:
        return PredictionState.AT_TERM
    return PredictionState.NORMAL


def generate_prediction(
    visits: Any,
    patient: Any,
    rng: Optional[random.Random] = None,
    now: Optional[Callable[[], datetime]] = None
) -> PredictionResult:
    """
    Build a delivery and progression forecast from a visit history.

    Args:
        visits: Raw visit objects (malformed entries are dropped)
        patient: Raw patient object (may be empty)
        rng: Jitter source for the projection; a seeded ``random.Random``
            makes the result reproducible
        now: Clock for ``metadata.generatedAt`` (defaults to UTC now)

    Returns:
        PredictionResult. Falls back to the standard model when there are no
        usable visits or the pregnancy is already at term.
    """
    rng = rng or random.Random()
    validated = validate_visits(visits)
    state = select_state(validated)

    if state is PredictionState.NO_DATA:
        logger.info("No usable visits - returning standard progression model")
        return get_fallback_prediction(rng=rng, now=now)
    if state is PredictionState.AT_TERM:
        logger.info("Latest visit at or past term - returning fallback without progression")
        return get_fallback_prediction(at_term=True, rng=rng, now=now)

    record = normalize_patient(patient)
    current_ga = latest_visit(validated).gestational_age_weeks
    weeks_to_project = TERM_WEEK - current_ga

    risk_scores = calculate_risk_scores(validated, record)
    delivery_type = calculate_delivery_type(risk_scores)
    delivery_mode = calculate_delivery_mode(risk_scores, record)
    expected = calculate_expected_delivery(risk_scores, delivery_type)
    progression = generate_progression(validated, current_ga, weeks_to_project, rng)
    summary = generate_summary(risk_scores, delivery_type, delivery_mode)

    logger.info(
        f"Prediction at {current_ga} weeks from {len(validated)} visit(s): "
        f"FullTerm={delivery_type.full_term} CSection={delivery_mode.c_section}"
    )

    return PredictionResult(
        delivery_type=delivery_type,
        delivery_mode=delivery_mode,
        progression=progression,
        summary=summary,
        expected_gestational_age=expected['expected_gestational_age'],
        expected_birth_weight=expected['expected_birth_weight'],
        risk_scores=risk_scores,
        metadata=PredictionMetadata(
            current_gestational_age=current_ga,
            weeks_projected=weeks_to_project,
            visit_count=len(validated),
            generated_at=_timestamp(now),
            source=ENGINE_SOURCE,
        ),
    )


def get_fallback_prediction(
    at_term: bool = False,
    rng: Optional[random.Random] = None,
    now: Optional[Callable[[], datetime]] = None
) -> PredictionResult:
    """Standard, non-personalized forecast; at term it carries no progression."""
    progression = None
    if not at_term:
        progression = generate_progression_data(
            FALLBACK_START_WEEK,
            TERM_WEEK - FALLBACK_START_WEEK,
            BaselineVitals(),
            rng or random.Random(),
        )

    return PredictionResult(
        delivery_type=DeliveryTypeDistribution(full_term=0.80, premature=0.15, mortality_risk=0.05),
        delivery_mode=DeliveryModeDistribution(normal=0.70, c_section=0.30),
        progression=progression,
        summary=FALLBACK_SUMMARY,
        expected_gestational_age=39.0,
        expected_birth_weight=3.2,
        is_fallback=True,
        metadata=PredictionMetadata(
            generated_at=_timestamp(now),
            source=FALLBACK_SOURCE,
        ),
    )


def _timestamp(now: Optional[Callable[[], datetime]] = None) -> str:
    moment = now() if now else datetime.now(timezone.utc)
    return moment.isoformat().replace('+00:00', 'Z')
