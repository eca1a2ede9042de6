"""
PregnancyForecast Modules Package
Core components for delivery outcome and progression forecasting
"""

from .visit_normalizer import validate_visits, normalize_patient
from .blood_pressure import parse_blood_pressure
from .trend_estimator import calculate_trend
from .risk_scorer import calculate_risk_scores
from .delivery_model import (
    calculate_delivery_type,
    calculate_delivery_mode,
    calculate_expected_delivery
)
from .progression_projector import generate_progression, generate_progression_data
from .summary_writer import generate_summary, format_risk_name
from .bmi_reference import get_formatted_averages, calculate_deviation
from .prediction_engine import generate_prediction, get_fallback_prediction


__all__ = [
    'validate_visits',
    'normalize_patient',
    'parse_blood_pressure',
    'calculate_trend',
    'calculate_risk_scores',
    'calculate_delivery_type',
    'calculate_delivery_mode',
    'calculate_expected_delivery',
    'generate_progression',
    'generate_progression_data',
    'generate_summary',
    'format_risk_name',
    'get_formatted_averages',
    'calculate_deviation',
    'generate_prediction',
    'get_fallback_prediction',
]
