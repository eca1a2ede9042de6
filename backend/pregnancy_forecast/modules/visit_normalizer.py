"""
Visit and patient normalization.

Raw records arrive as loosely-typed JSON objects. Only the recognized fields
are kept; falsy values (including a numeric 0) are treated as absent.
"""
import logging
import math
from collections.abc import Mapping
from typing import Any, List, Optional, Union

from pregnancy_forecast.models import BMICategory, PatientRecord, VisitRecord

logger = logging.getLogger(__name__)

_NUMERIC_VISIT_FIELDS = {
    'GESTATIONAL_AGE_WEEKS': 'gestational_age_weeks',
    'MATERNAL_WEIGHT': 'maternal_weight',
    'FUNDAL_HEIGHT': 'fundal_height',
    'HEMOGLOBIN_LEVEL': 'hemoglobin_level',
    'FETAL_HEART_RATE': 'fetal_heart_rate',
}

_TEXT_VISIT_FIELDS = {
    'BLOOD_PRESSURE': 'blood_pressure',
    'COMPLICATIONS': 'complications',
    'VISIT_DATE': 'visit_date',
}


def validate_visits(visits: Any) -> List[VisitRecord]:
    """
    Keep the recognized fields of each visit and drop visits without a
    positive gestational age.

    Args:
        visits: Sequence of visit-like mappings (anything else yields [])

    Returns:
        Normalized visits in input order
    """
    if not isinstance(visits, (list, tuple)):
        return []

    validated = []
    for index, visit in enumerate(visits):
        if isinstance(visit, VisitRecord):
            record = visit
        elif isinstance(visit, Mapping):
            record = _build_visit(visit)
        else:
            logger.debug(f"Skipping visit {index}: not an object")
            continue

        if record is None or record.gestational_age_weeks <= 0:
            logger.debug(f"Skipping visit {index}: no usable gestational age")
            continue

        validated.append(record)

    return validated


def _build_visit(visit: Mapping) -> Optional[VisitRecord]:
    fields = {}
    for key, name in _NUMERIC_VISIT_FIELDS.items():
        fields[name] = coerce_number(visit.get(key))
    for key, name in _TEXT_VISIT_FIELDS.items():
        fields[name] = _coerce_text(visit.get(key))

    if fields['gestational_age_weeks'] is None:
        return None
    return VisitRecord(**fields)


def normalize_patient(patient: Any) -> PatientRecord:
    if isinstance(patient, PatientRecord):
        return patient
    if not isinstance(patient, Mapping):
        return PatientRecord()

    return PatientRecord(
        patient_id=_coerce_text(patient.get('PATIENT_ID')),
        age=coerce_number(patient.get('AGE')),
        bmi_value=coerce_number(patient.get('BMI_VALUE')),
        bmi_status=BMICategory.resolve(patient.get('BMI_STATUS')),
        gravida=coerce_number(patient.get('GRAVIDA')),
        parity=_coerce_parity(patient.get('PARITY')),
        medical_history=_coerce_text(patient.get('MEDICAL_HISTORY')),
    )


def sort_by_gestational_age(visits: List[VisitRecord]) -> List[VisitRecord]:
    """Return a new list ordered by ascending gestational age (stable)."""
    return sorted(visits, key=lambda v: v.gestational_age_weeks)


def latest_visit(visits: List[VisitRecord]) -> Optional[VisitRecord]:
    if not visits:
        return None
    return sort_by_gestational_age(visits)[-1]


def coerce_number(value: Any) -> Optional[Union[int, float]]:
    """Numbers and numeric strings pass through; falsy or non-numeric is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    return value or None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None or value == '' or isinstance(value, bool):
        return None
    return value if isinstance(value, str) else str(value)


def _coerce_parity(value: Any) -> Optional[Union[int, float, str]]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, str)):
        return value
    return None
