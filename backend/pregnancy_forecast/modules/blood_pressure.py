import logging
import math
from typing import Any, Optional

from pregnancy_forecast.models import BloodPressure


logger = logging.getLogger(__name__)

DEFAULT_SYSTOLIC = 115
DEFAULT_DIASTOLIC = 70


def parse_blood_pressure(bp_string: Any) -> BloodPressure:
    """
    Parse a "systolic/diastolic" reading.

    Each half falls back to its default on its own, so "150/" keeps 150 over
    the default diastolic. Absent, empty or non-string input yields 115/70.
    Never raises.
    """
    if not bp_string or not isinstance(bp_string, str):
        return BloodPressure(systolic=DEFAULT_SYSTOLIC, diastolic=DEFAULT_DIASTOLIC)

    parts = bp_string.split('/')
    systolic = _parse_component(parts[0])
    diastolic = _parse_component(parts[1]) if len(parts) > 1 else None

    if systolic is None or diastolic is None:
        logger.debug(f"Blood pressure '{bp_string}' partially unparsable, using defaults")

    return BloodPressure(
        systolic=systolic or DEFAULT_SYSTOLIC,
        diastolic=diastolic or DEFAULT_DIASTOLIC,
    )


def _parse_component(text: str) -> Optional[float]:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value) or value == 0:
        return None
    return value
