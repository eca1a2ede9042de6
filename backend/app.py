"""
PregnancyForecast Backend API
=============================
POLICY: The rule-based prediction engine is the only source of forecasts.
Any unexpected failure answers with the standard fallback model instead of
an error status.
"""

import hashlib
import json
import logging
import random
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from pregnancy_forecast import __version__
from pregnancy_forecast.config.settings import get_settings
from pregnancy_forecast.modules.bmi_reference import (
    METRIC_KEYS,
    calculate_deviation,
    get_formatted_averages,
)
from pregnancy_forecast.modules.prediction_engine import (
    generate_prediction,
    get_fallback_prediction,
)

settings = get_settings()

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EMPTY_AVERAGES: Dict[str, list] = {
    'averageWeight': [],
    'averageFundal': [],
    'averageHemoglobin': [],
    'averageBloodPressure': [],
}


# ════════════════════════════════════════════════════════════════════════════
# DATA MODELS
# ════════════════════════════════════════════════════════════════════════════

class ProgressionRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={"example": {
        "patient": {"PATIENT_ID": "P-0042", "AGE": 29, "BMI_VALUE": 27.4,
                    "BMI_STATUS": "Overweight", "PARITY": 1,
                    "MEDICAL_HISTORY": "None"},
        "visits": [
            {"GESTATIONAL_AGE_WEEKS": 20, "MATERNAL_WEIGHT": 68.0,
             "FUNDAL_HEIGHT": 20, "HEMOGLOBIN_LEVEL": 11.4,
             "BLOOD_PRESSURE": "118/76", "FETAL_HEART_RATE": 148},
            {"GESTATIONAL_AGE_WEEKS": 24, "MATERNAL_WEIGHT": 70.1,
             "FUNDAL_HEIGHT": 25, "HEMOGLOBIN_LEVEL": 11.0,
             "BLOOD_PRESSURE": "124/80", "FETAL_HEART_RATE": 144},
        ],
    }})

    visits: List[Any] = Field(default_factory=list, description="Raw ANC visit records")
    patient: Dict[str, Any] = Field(default_factory=dict, description="Patient attributes")


class DeviationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, json_schema_extra={"example": {
        "bmiStatus": "Normal", "metric": "weight",
        "patientSeries": [
            {"GESTATIONAL_AGE_WEEKS": 10, "MATERNAL_WEIGHT": 56.0},
            {"GESTATIONAL_AGE_WEEKS": 12, "MATERNAL_WEIGHT": 58.5},
        ],
    }})

    patient_series: List[Dict[str, Any]] = Field(default_factory=list, alias="patientSeries")
    bmi_status: Optional[str] = Field(None, alias="bmiStatus")
    metric: str


# ════════════════════════════════════════════════════════════════════════════
# UTILITY FUNCTIONS
# ════════════════════════════════════════════════════════════════════════════

def derive_seed(request_data: dict) -> int:
    request_str = json.dumps(request_data, sort_keys=True, default=str)
    hash_hex = hashlib.sha256(request_str.encode()).hexdigest()[:8]
    return int(hash_hex, 16)


def projection_rng(request_data: dict) -> random.Random:
    if settings.projection_seed is not None:
        return random.Random(settings.projection_seed)
    if settings.deterministic_projection:
        return random.Random(derive_seed(request_data))
    return random.Random()


# ════════════════════════════════════════════════════════════════════════════
# FASTAPI APP + LIFESPAN
# ════════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("PregnancyForecast Backend API — Starting")
    logger.info(f"  Version   : {__version__}")
    logger.info(f"  Seed mode : {_seed_mode()}")
    logger.info("=" * 60)
    yield
    logger.info("Shutting down PregnancyForecast Backend API")


def _seed_mode() -> str:
    if settings.projection_seed is not None:
        return f"fixed ({settings.projection_seed})"
    return "per-request" if settings.deterministic_projection else "random"


app = FastAPI(
    title="PregnancyForecast Backend API",
    version=__version__,
    description="Rule-based delivery outcome and pregnancy progression forecasting",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ════════════════════════════════════════════════════════════════════════════
# ROUTES
# ════════════════════════════════════════════════════════════════════════════

@app.get("/")
async def root():
    return {
        "service": "PregnancyForecast Backend API",
        "version": __version__,
        "status":  "running",
    }


@app.get("/api/v1/health")
def health():
    return {
        "service":    "PregnancyForecast Backend",
        "status":     "ok",
        "engine":     "rule-based",
        "seed_mode":  _seed_mode(),
    }


@app.post("/api/v1/ongoing-progression")
def ongoing_progression(request: ProgressionRequest):
    """
    Rule-based delivery and progression forecast plus BMI reference averages.

    Never fails with a 5xx: any engine error returns the standard fallback
    with empty averages and the error message.
    """
    patient = request.patient
    logger.info(
        f"ongoing-progression: patient={patient.get('PATIENT_ID', 'Unknown')} "
        f"visits={len(request.visits)}"
    )

    try:
        rng = projection_rng(request.model_dump())
        prediction = generate_prediction(request.visits, patient, rng=rng)

        bmi_status = patient.get('BMI_STATUS') or 'Normal'
        logger.info(f"Calculating averages for BMI status: {bmi_status}")
        averages = get_formatted_averages(bmi_status)

        logger.info(f"✓ Prediction: {prediction.summary}")
        return {"success": True, **prediction.to_payload(), "averages": averages}

    except Exception as e:
        logger.error(f"Prediction error: {e}", exc_info=True)
        fallback = get_fallback_prediction()
        return {
            "success": True,
            **fallback.to_payload(),
            "averages": EMPTY_AVERAGES,
            "error": str(e),
        }


@app.get("/api/v1/bmi-averages/{bmi_status}")
def bmi_averages(bmi_status: str):
    return get_formatted_averages(bmi_status)


@app.post("/api/v1/bmi-deviation")
def bmi_deviation(request: DeviationRequest):
    if request.metric not in METRIC_KEYS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown metric '{request.metric}'. Expected one of: {', '.join(METRIC_KEYS)}"
        )
    deviations = calculate_deviation(request.patient_series, request.bmi_status, request.metric)
    return {"metric": request.metric, "deviations": deviations}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level=settings.log_level.lower(),
    )
