"""
BMI Reference Table - population averages per BMI category

Weight averages follow a 16-point schedule (weeks 10-40); fundal height,
hemoglobin, systolic and diastolic follow a 15-point schedule (weeks 12-40).
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pregnancy_forecast.models import BMICategory
from pregnancy_forecast.modules.visit_normalizer import coerce_number

logger = logging.getLogger(__name__)

WEEKS_15: Tuple[int, ...] = (12, 14, 16, 18, 20, 22, 24, 26, 28, 30, 32, 34, 36, 38, 40)
WEEKS_16: Tuple[int, ...] = (10,) + WEEKS_15

_FUNDAL = (12, 14, 16, 18, 20, 22, 24, 26, 28, 30, 32, 34, 36, 38, 40)

BMI_AVERAGES: Dict[BMICategory, Dict[str, Tuple[float, ...]]] = {
    BMICategory.UNDERWEIGHT: {
        'weight': (50, 52, 54, 56, 58, 60, 62, 64, 66, 68, 70, 72, 74, 76, 78, 80),
        'fundal': _FUNDAL,
        'hemoglobin': (12.0, 11.8, 11.6, 11.4, 11.2, 11.0, 10.8, 10.6, 10.4, 10.2, 10.0, 9.8, 9.6, 9.4, 9.2),
        'systolic': (110, 112, 114, 116, 118, 120, 122, 124, 126, 128, 130, 132, 134, 136, 138),
        'diastolic': (70, 71, 72, 73, 74, 75, 76, 77, 78, 79, 80, 81, 82, 83, 84),
    },
    BMICategory.NORMAL: {
        'weight': (55, 57, 59, 61, 63, 65, 67, 69, 71, 73, 75, 77, 79, 81, 83, 85),
        'fundal': _FUNDAL,
        'hemoglobin': (12.2, 12.0, 11.8, 11.6, 11.4, 11.2, 11.0, 10.8, 10.6, 10.4, 10.2, 10.0, 9.8, 9.6, 9.4),
        'systolic': (115, 117, 119, 121, 123, 125, 127, 129, 131, 133, 135, 137, 139, 141, 143),
        'diastolic': (70, 71, 72, 73, 74, 75, 76, 77, 78, 79, 80, 81, 82, 83, 84),
    },
    BMICategory.OVERWEIGHT: {
        'weight': (65, 67, 69, 71, 73, 75, 77, 79, 81, 83, 85, 87, 89, 91, 93, 95),
        'fundal': _FUNDAL,
        'hemoglobin': (11.8, 11.6, 11.4, 11.2, 11.0, 10.8, 10.6, 10.4, 10.2, 10.0, 9.8, 9.6, 9.4, 9.2, 9.0),
        'systolic': (120, 122, 124, 126, 128, 130, 132, 134, 136, 138, 140, 142, 144, 146, 148),
        'diastolic': (75, 76, 77, 78, 79, 80, 81, 82, 83, 84, 85, 86, 87, 88, 89),
    },
    BMICategory.OBESE: {
        'weight': (75, 77, 79, 81, 83, 85, 87, 89, 91, 93, 95, 97, 99, 101, 103, 105),
        'fundal': _FUNDAL,
        'hemoglobin': (11.5, 11.3, 11.1, 10.9, 10.7, 10.5, 10.3, 10.1, 9.9, 9.7, 9.5, 9.3, 9.1, 8.9, 8.7),
        'systolic': (125, 127, 129, 131, 133, 135, 137, 139, 141, 143, 145, 147, 149, 151, 153),
        'diastolic': (80, 81, 82, 83, 84, 85, 86, 87, 88, 89, 90, 91, 92, 93, 94),
    },
}

METRIC_KEYS = {
    'weight': 'MATERNAL_WEIGHT',
    'fundal': 'FUNDAL_HEIGHT',
    'hemoglobin': 'HEMOGLOBIN_LEVEL',
    'systolic': 'BP_SYSTOLIC',
    'diastolic': 'BP_DIASTOLIC',
}


def get_bmi_averages(bmi_status: Any) -> Mapping[str, Tuple[float, ...]]:
    return BMI_AVERAGES[BMICategory.resolve(bmi_status)]


def get_metric_key(metric: str) -> Optional[str]:
    return METRIC_KEYS.get(metric)


def get_formatted_averages(bmi_status: Any = None) -> Dict[str, List[Dict[str, float]]]:
    """
    Week-tagged reference series for charting.

    Returns:
        {
            'averageWeight': [{'GESTATIONAL_AGE_WEEKS', 'AVG_WEIGHT'}, ...],
            'averageFundal': [{'GESTATIONAL_AGE_WEEKS', 'AVG_FUNDAL'}, ...],
            'averageHemoglobin': [{'GESTATIONAL_AGE_WEEKS', 'AVG_HB'}, ...],
            'averageBloodPressure': [{'GESTATIONAL_AGE_WEEKS', 'AVG_SYSTOLIC', 'AVG_DIASTOLIC'}, ...]
        }
    """
    averages = get_bmi_averages(bmi_status or BMICategory.NORMAL)

    return {
        'averageWeight': _zip_weeks(WEEKS_16, averages['weight'], 'AVG_WEIGHT'),
        'averageFundal': _zip_weeks(WEEKS_15, averages['fundal'], 'AVG_FUNDAL'),
        'averageHemoglobin': _zip_weeks(WEEKS_15, averages['hemoglobin'], 'AVG_HB'),
        'averageBloodPressure': [
            {
                'GESTATIONAL_AGE_WEEKS': week,
                'AVG_SYSTOLIC': systolic,
                'AVG_DIASTOLIC': diastolic,
            }
            for week, systolic, diastolic in zip(WEEKS_15, averages['systolic'], averages['diastolic'])
        ],
    }


def calculate_deviation(
    patient_series: List[Mapping[str, Any]],
    bmi_status: Any,
    metric: str
) -> List[Dict[str, Any]]:
    """
    Compare patient readings with the reference series for one metric.

    Readings are paired with reference values by position in the list, not
    by matching gestational week. Readings past the end of the reference
    series, and readings whose value is missing or zero, are skipped.

    Args:
        patient_series: Mappings with GESTATIONAL_AGE_WEEKS and the metric key
            (e.g. MATERNAL_WEIGHT for 'weight')
        bmi_status: BMI category name; unknown names use Normal
        metric: One of weight, fundal, hemoglobin, systolic, diastolic

    Returns:
        List of {week, patientValue, averageValue, deviation, deviationPercent}
    """
    metric_key = get_metric_key(metric)
    if metric_key is None:
        logger.warning(f"Unknown deviation metric '{metric}'")
        return []

    reference = get_bmi_averages(bmi_status)[metric]
    deviations = []

    for index, data_point in enumerate(patient_series or []):
        if index >= len(reference):
            break
        if not isinstance(data_point, Mapping):
            continue

        patient_value = coerce_number(data_point.get(metric_key))
        if not patient_value:
            continue

        average_value = reference[index]
        deviation = patient_value - average_value
        deviations.append({
            'week': data_point.get('GESTATIONAL_AGE_WEEKS'),
            'patientValue': patient_value,
            'averageValue': average_value,
            'deviation': deviation,
            'deviationPercent': deviation / average_value * 100,
        })

    return deviations


def _zip_weeks(weeks: Tuple[int, ...], values: Tuple[float, ...], key: str) -> List[Dict[str, float]]:
    return [{'GESTATIONAL_AGE_WEEKS': week, key: value} for week, value in zip(weeks, values)]
