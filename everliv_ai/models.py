"""
Pydantic request/response models for the EVERLIV AI analysis service.

Wire names are camelCase (what the frontend and the LLM prompts use);
Python attributes are snake_case. Both spellings are accepted on input.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BiomarkerStatus = Literal["normal", "high", "low", "critical"]
UrgencyLevel = Literal["low", "medium", "high"]

BIOMARKER_STATUSES: frozenset[str] = frozenset(("normal", "high", "low", "critical"))
URGENCY_LEVELS: frozenset[str] = frozenset(("low", "medium", "high"))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# --- Single biomarker ---

class NormalRange(FrozenCamelModel):
    min: float
    max: float


class BiomarkerAnalysisRequest(FrozenCamelModel):
    biomarker_name: str
    current_value: float
    unit: str
    normal_range: NormalRange
    status: BiomarkerStatus
    patient_age: Optional[int] = None
    patient_gender: Optional[str] = None
    patient_weight: Optional[float] = None
    existing_conditions: list[str] = []

    @field_validator("biomarker_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Biomarker name cannot be empty")
        return v.strip()


class BiomarkerRecommendations(FrozenCamelModel):
    analysis_text: str
    symptoms_to_watch: str
    supplements_with_dosages: str
    food_recommendations: str
    lifestyle_changes: str
    follow_up_advice: str


# --- Full blood panel ---

class BloodMarker(FrozenCamelModel):
    name: str
    value: str
    normal_range: str
    status: BiomarkerStatus
    recommendation: str
    education: str
    lifestyle_note: str


class SupplementSuggestion(FrozenCamelModel):
    name: str
    reason: str
    dosage: str
    duration: str


class EnhancedBloodAnalysisResults(FrozenCamelModel):
    markers: list[BloodMarker]
    supplements: list[SupplementSuggestion]
    general_recommendation: str
    risk_factors: list[str]
    follow_up_tests: list[str]
    urgency_level: UrgencyLevel
    next_checkup: str


# --- Personalised health recommendations ---

class HealthProfile(CamelModel):
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None  # cm
    weight: Optional[float] = None  # kg
    bmi: Optional[float] = None
    activity_level: Optional[str] = None
    goals: list[str] = []
    chronic_conditions: list[str] = []
    allergies: list[str] = []
    medications: list[str] = []
    supplements: list[str] = []


class MarkerSnapshot(CamelModel):
    """A marker the user already has on file, as fed into recommendations."""
    name: str
    value: str
    status: BiomarkerStatus


class RecommendationSection(FrozenCamelModel):
    title: str
    items: list[str]


class HealthRecommendations(FrozenCamelModel):
    disclaimer: str
    summary: str
    priority_areas: list[str]
    nutrition: RecommendationSection
    physical_activity: RecommendationSection
    lifestyle: RecommendationSection
    supplements: RecommendationSection
    action_plan: list[str]
    next_steps: list[str]


# --- HTTP request bodies ---

class AnalyzeTextRequest(CamelModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Analysis text cannot be empty")
        return v.strip()


class AnalyzeImageRequest(CamelModel):
    image_base64: str
    mime_type: str = "image/jpeg"

    @field_validator("image_base64")
    @classmethod
    def image_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Image data is required")
        return v.strip()


class HealthRecommendationsRequest(CamelModel):
    profile: Optional[HealthProfile] = None
    blood_markers: list[MarkerSnapshot] = Field(default_factory=list)


class ImageConsultationRequest(AnalyzeImageRequest):
    question: Optional[str] = None


class ImageConsultationResponse(CamelModel):
    analysis: str
