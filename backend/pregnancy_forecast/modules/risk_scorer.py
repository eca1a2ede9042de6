import logging
from typing import List, Optional, Union

from pregnancy_forecast.models import PatientRecord, RiskScoreSet, VisitRecord
from pregnancy_forecast.modules.blood_pressure import parse_blood_pressure
from pregnancy_forecast.modules.visit_normalizer import coerce_number, latest_visit

logger = logging.getLogger(__name__)

DEFAULT_MATERNAL_AGE = 25


def calculate_risk_scores(visits: List[VisitRecord], patient: PatientRecord) -> RiskScoreSet:
    latest = latest_visit(visits)
    if latest is None:
        return RiskScoreSet()

    scores = RiskScoreSet(
        anemia=_assess_anemia(latest.hemoglobin_level),
        hypertension=_assess_hypertension(latest.blood_pressure),
        growth_restriction=_assess_growth_restriction(
            latest.fundal_height, latest.gestational_age_weeks
        ),
        preterm_risk=_assess_preterm(latest.gestational_age_weeks, patient),
        maternal_age_risk=_assess_maternal_age(patient.age),
        bmi_risk=_assess_bmi(patient.bmi_value),
    )
    logger.debug(f"Risk scores at {latest.gestational_age_weeks} weeks: {scores.items()}")
    return scores


def has_preterm_history(patient: PatientRecord) -> bool:
    parity = patient.parity
    parous = parity == '1' or (coerce_number(parity) or 0) > 0
    history = patient.medical_history or ''
    return parous and 'preterm' in history.lower()


def _assess_anemia(hb: Optional[float]) -> float:
    # Zero Hb is indistinguishable from a missing reading and scores 0
    if not hb:
        return 0
    if hb < 10:
        return 0.8
    elif hb < 11:
        return 0.4
    return 0.1


def _assess_hypertension(bp_string: Optional[str]) -> float:
    if not bp_string:
        return 0

    bp = parse_blood_pressure(bp_string)
    if bp.systolic >= 140 or bp.diastolic >= 90:
        return 0.9
    elif bp.systolic >= 130 or bp.diastolic >= 85:
        return 0.6
    return 0.1


def _assess_growth_restriction(fundal_height: Optional[float], ga: Optional[float]) -> float:
    if not fundal_height or not ga:
        return 0

    difference = abs(fundal_height - ga)
    if difference > 4:
        return 0.7
    elif difference > 2:
        return 0.3
    return 0.1


def _assess_preterm(ga: float, patient: PatientRecord) -> float:
    if ga < 37 and has_preterm_history(patient):
        return 0.6
    elif ga < 32:
        return 0.3
    return 0.1


def _assess_maternal_age(age: Optional[Union[int, float]]) -> float:
    age = age or DEFAULT_MATERNAL_AGE
    if age < 18 or age > 35:
        return 0.4
    return 0.1


def _assess_bmi(bmi: Optional[float]) -> float:
    if not bmi:
        return 0
    if bmi < 18.5 or bmi > 30:
        return 0.5
    elif bmi > 25:
        return 0.3
    return 0.1
