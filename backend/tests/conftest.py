"""
Shared fixtures for the PregnancyForecast test suite.
"""

import random
from datetime import datetime, timezone

import pytest


@pytest.fixture
def rng():
    """Seeded jitter source so projections are reproducible."""
    return random.Random(42)


@pytest.fixture
def fixed_now():
    return lambda: datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def low_risk_visit():
    return {
        "GESTATIONAL_AGE_WEEKS": 34,
        "MATERNAL_WEIGHT": 68.0,
        "FUNDAL_HEIGHT": 34,
        "HEMOGLOBIN_LEVEL": 12.0,
        "BLOOD_PRESSURE": "110/70",
        "FETAL_HEART_RATE": 142,
        "VISIT_DATE": "2026-02-20",
    }


@pytest.fixture
def low_risk_patient():
    return {"PATIENT_ID": "P-001", "AGE": 28, "BMI_VALUE": 22.0,
            "BMI_STATUS": "Normal", "PARITY": 1, "MEDICAL_HISTORY": "None"}


@pytest.fixture
def high_risk_visits():
    """Two visits; the latest has anemia, stage 2 BP and a large fundal gap."""
    return [
        {"GESTATIONAL_AGE_WEEKS": 24, "MATERNAL_WEIGHT": 80.0, "HEMOGLOBIN_LEVEL": 10.5,
         "BLOOD_PRESSURE": "135/85", "FUNDAL_HEIGHT": 25},
        {"GESTATIONAL_AGE_WEEKS": 30, "MATERNAL_WEIGHT": 83.0, "HEMOGLOBIN_LEVEL": 9.5,
         "BLOOD_PRESSURE": "150/95", "FUNDAL_HEIGHT": 36, "FETAL_HEART_RATE": 150},
    ]


@pytest.fixture
def high_risk_patient():
    return {"PATIENT_ID": "P-002", "BMI_VALUE": 32, "BMI_STATUS": "Obese", "PARITY": 0}
