"""
Record types shared by the prediction engine and the API layer.

Field aliases are the wire names used by the calling collaborator, so every
record serializes with ``by_alias=True``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Number = Union[int, float]


class BMICategory(str, Enum):
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"

    @classmethod
    def resolve(cls, status: Any) -> "BMICategory":
        """Map a free-form status to a category, falling back to Normal."""
        if isinstance(status, cls):
            return status
        for category in cls:
            if category.value == status:
                return category
        return cls.NORMAL


class VisitRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    gestational_age_weeks: Number = Field(..., alias="GESTATIONAL_AGE_WEEKS")
    maternal_weight: Optional[Number] = Field(None, alias="MATERNAL_WEIGHT")
    fundal_height: Optional[Number] = Field(None, alias="FUNDAL_HEIGHT")
    hemoglobin_level: Optional[Number] = Field(None, alias="HEMOGLOBIN_LEVEL")
    blood_pressure: Optional[str] = Field(None, alias="BLOOD_PRESSURE")
    fetal_heart_rate: Optional[Number] = Field(None, alias="FETAL_HEART_RATE")
    complications: Optional[str] = Field(None, alias="COMPLICATIONS")
    visit_date: Optional[str] = Field(None, alias="VISIT_DATE")


class PatientRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    patient_id: Optional[str] = Field(None, alias="PATIENT_ID")
    age: Optional[Number] = Field(None, alias="AGE")
    bmi_value: Optional[Number] = Field(None, alias="BMI_VALUE")
    bmi_status: BMICategory = Field(BMICategory.NORMAL, alias="BMI_STATUS")
    gravida: Optional[Number] = Field(None, alias="GRAVIDA")
    # Kept as supplied; only 0 and "0" count as nulliparous
    parity: Optional[Union[int, float, str]] = Field(None, alias="PARITY")
    medical_history: Optional[str] = Field(None, alias="MEDICAL_HISTORY")


class BloodPressure(BaseModel):
    model_config = ConfigDict(frozen=True)

    systolic: float
    diastolic: float


class BaselineVitals(BaseModel):
    """Starting point for a week-by-week projection."""
    model_config = ConfigDict(frozen=True)

    weight: float = 60
    # Carried with the latest visit; projected fundal height follows the week
    fundal: float = 12
    hb: float = 11.5
    fhr: float = 145
    bp: BloodPressure = BloodPressure(systolic=115, diastolic=70)


class RiskScoreSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    anemia: float = Field(0, ge=0, le=1)
    hypertension: float = Field(0, ge=0, le=1)
    growth_restriction: float = Field(0, alias="growthRestriction", ge=0, le=1)
    preterm_risk: float = Field(0, alias="pretermRisk", ge=0, le=1)
    maternal_age_risk: float = Field(0, alias="maternalAgeRisk", ge=0, le=1)
    bmi_risk: float = Field(0, alias="bmiRisk", ge=0, le=1)

    def items(self) -> List[tuple]:
        """(wire name, score) pairs in declaration order."""
        return list(self.model_dump(by_alias=True).items())


class DeliveryTypeDistribution(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_term: float = Field(..., alias="FullTerm")
    premature: float = Field(..., alias="Premature")
    mortality_risk: float = Field(..., alias="MortalityRisk")


class DeliveryModeDistribution(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    normal: float = Field(..., alias="Normal")
    c_section: float = Field(..., alias="CSection")


class ProgressionPoint(BaseModel):
    week: Number
    value: Number


class ProgressionSeries(BaseModel):
    weight: List[ProgressionPoint] = Field(default_factory=list)
    fundal: List[ProgressionPoint] = Field(default_factory=list)
    hb: List[ProgressionPoint] = Field(default_factory=list)
    systolic: List[ProgressionPoint] = Field(default_factory=list)
    diastolic: List[ProgressionPoint] = Field(default_factory=list)
    fetal_hr: List[ProgressionPoint] = Field(default_factory=list)


class PredictionMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_gestational_age: Optional[Number] = Field(None, alias="currentGestationalAge")
    weeks_projected: Optional[Number] = Field(None, alias="weeksProjected")
    visit_count: Optional[int] = Field(None, alias="visitCount")
    generated_at: str = Field(..., alias="generatedAt")
    source: str


class PredictionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    delivery_type: DeliveryTypeDistribution = Field(..., alias="deliveryType")
    delivery_mode: DeliveryModeDistribution = Field(..., alias="deliveryMode")
    progression: Optional[ProgressionSeries] = None
    summary: str
    expected_gestational_age: float = Field(..., alias="expectedGestationalAge")
    expected_birth_weight: float = Field(..., alias="expectedBirthWeight")
    risk_scores: Optional[RiskScoreSet] = Field(None, alias="riskScores")
    is_fallback: Optional[bool] = Field(None, alias="isFallback")
    metadata: PredictionMetadata

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON contract consumed by the calling layer.

        Absent progression and risk scores render as empty objects, and
        ``isFallback`` only appears on fallback results.
        """
        payload = self.model_dump(by_alias=True, exclude_none=True)
        payload.setdefault("progression", {})
        payload.setdefault("riskScores", {})
        return payload
