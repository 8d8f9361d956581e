"""
Validation and normalization of DeepSeek output.

This is the boundary between untrusted model text and typed results.
The normalize_* functions walk every expected field and substitute a safe
default for anything missing or invalid; they never raise. The *_from_raw
functions additionally parse the completion text and hand over to the
fallback generator when it is not a JSON object.
"""
import math
from typing import Any, Callable, Optional, TypeVar

from pydantic.alias_generators import to_snake

from .fallbacks import (
    biomarker_fallback,
    blood_analysis_fallback,
    health_recommendations_fallback,
    DISCLAIMER_TEXT,
)
from .json_utils import MalformedOutputError, parse_json_object
from .knowledge_base import education_for
from .models import (
    BIOMARKER_STATUSES,
    URGENCY_LEVELS,
    BiomarkerAnalysisRequest,
    BiomarkerRecommendations,
    BloodMarker,
    EnhancedBloodAnalysisResults,
    HealthRecommendations,
    RecommendationSection,
    SupplementSuggestion,
)
from .structured_logging import StructuredLogger

logger = StructuredLogger(__name__)

T = TypeVar("T")

PLACEHOLDER_TEXT = "Информация временно недоступна. Проконсультируйтесь с врачом."

DEFAULT_STATUS = "normal"
DEFAULT_URGENCY = "low"
DEFAULT_MARKER_NAME = "Неизвестный показатель"
DEFAULT_MARKER_VALUE = "Не указано"
DEFAULT_NORMAL_RANGE = "Не указан"
DEFAULT_NEXT_CHECKUP = "Через 3 месяца"


# --- field-level rules ---

def _pick(data: dict, key: str) -> Any:
    """Read a camelCase key, falling back to its snake_case spelling."""
    if key in data:
        return data[key]
    return data.get(to_snake(key))


def normalize_text(value: Any, default: Optional[str] = PLACEHOLDER_TEXT) -> Optional[str]:
    """Non-empty strings pass through untouched, finite numbers are
    stringified, everything else becomes ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, float):
        return str(value) if math.isfinite(value) else default
    if isinstance(value, int):
        # str() refuses integers past the interpreter's digit limit
        try:
            return str(value)
        except ValueError:
            return default
    if isinstance(value, str) and value.strip():
        return value
    return default


def normalize_enum(value: Any, allowed: frozenset[str], default: str) -> str:
    if isinstance(value, str) and value in allowed:
        return value
    return default


def normalize_string_list(value: Any) -> list[str]:
    """Keep usable string items; anything that is not a list becomes []."""
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        text = normalize_text(item, default=None)
        if text is not None:
            items.append(text)
    return items


def normalize_object_list(value: Any, normalize: Callable[[dict], T]) -> list[T]:
    if not isinstance(value, list):
        return []
    return [normalize(item) for item in value if isinstance(item, dict)]


def _as_dict(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


# --- single biomarker ---

def normalize_biomarker_recommendations(data: Any) -> BiomarkerRecommendations:
    data = _as_dict(data)
    return BiomarkerRecommendations(
        analysis_text=normalize_text(_pick(data, "analysisText")),
        symptoms_to_watch=normalize_text(_pick(data, "symptomsToWatch")),
        supplements_with_dosages=normalize_text(_pick(data, "supplementsWithDosages")),
        food_recommendations=normalize_text(_pick(data, "foodRecommendations")),
        lifestyle_changes=normalize_text(_pick(data, "lifestyleChanges")),
        follow_up_advice=normalize_text(_pick(data, "followUpAdvice")),
    )


# --- blood panel ---

def normalize_marker(data: dict) -> BloodMarker:
    name = normalize_text(_pick(data, "name"), default=DEFAULT_MARKER_NAME)
    education = normalize_text(_pick(data, "education"), default=None)
    if education is None:
        education = education_for(name) or PLACEHOLDER_TEXT
    return BloodMarker(
        name=name,
        value=normalize_text(_pick(data, "value"), default=DEFAULT_MARKER_VALUE),
        normal_range=normalize_text(_pick(data, "normalRange"), default=DEFAULT_NORMAL_RANGE),
        status=normalize_enum(_pick(data, "status"), BIOMARKER_STATUSES, DEFAULT_STATUS),
        recommendation=normalize_text(_pick(data, "recommendation")),
        education=education,
        lifestyle_note=normalize_text(_pick(data, "lifestyleNote")),
    )


def normalize_supplement(data: dict) -> SupplementSuggestion:
    return SupplementSuggestion(
        name=normalize_text(_pick(data, "name")),
        reason=normalize_text(_pick(data, "reason")),
        dosage=normalize_text(_pick(data, "dosage")),
        duration=normalize_text(_pick(data, "duration")),
    )


def normalize_blood_analysis(data: Any) -> EnhancedBloodAnalysisResults:
    data = _as_dict(data)
    return EnhancedBloodAnalysisResults(
        markers=normalize_object_list(_pick(data, "markers"), normalize_marker),
        supplements=normalize_object_list(_pick(data, "supplements"), normalize_supplement),
        general_recommendation=normalize_text(_pick(data, "generalRecommendation")),
        risk_factors=normalize_string_list(_pick(data, "riskFactors")),
        follow_up_tests=normalize_string_list(_pick(data, "followUpTests")),
        urgency_level=normalize_enum(_pick(data, "urgencyLevel"), URGENCY_LEVELS, DEFAULT_URGENCY),
        next_checkup=normalize_text(_pick(data, "nextCheckup"), default=DEFAULT_NEXT_CHECKUP),
    )


# --- personalised recommendations ---

# key -> (default title, default items); empty item lists are replaced too
SECTION_DEFAULTS: dict[str, tuple[str, list[str]]] = {
    "nutrition": ("Питание", [
        "Сбалансируйте рацион",
        "Увеличьте потребление овощей и фруктов",
    ]),
    "physicalActivity": ("Физическая активность", [
        "Минимум 30 минут умеренной активности в день",
        "Регулярные прогулки на свежем воздухе",
    ]),
    "lifestyle": ("Образ жизни", [
        "Соблюдайте режим сна (7-9 часов)",
        "Управляйте стрессом",
    ]),
    "supplements": ("Витамины и добавки", [
        "Проконсультируйтесь с врачом перед приемом любых добавок",
    ]),
}

DEFAULT_SUMMARY = "На основе анализа ваших данных подготовлены персонализированные рекомендации для улучшения здоровья."
DEFAULT_PRIORITY_AREAS = ["Общее укрепление здоровья", "Профилактика заболеваний"]
DEFAULT_ACTION_PLAN = ["Начните с небольших изменений в питании", "Добавьте физическую активность"]
DEFAULT_NEXT_STEPS = ["Контролируйте показатели здоровья", "Обратитесь к врачу для детальной консультации"]


def _list_or_default(value: Any, default: list[str]) -> list[str]:
    return normalize_string_list(value) or list(default)


def normalize_section(key: str, value: Any) -> RecommendationSection:
    default_title, default_items = SECTION_DEFAULTS[key]
    value = _as_dict(value)
    return RecommendationSection(
        title=normalize_text(value.get("title"), default=default_title),
        items=_list_or_default(value.get("items"), default_items),
    )


def normalize_health_recommendations(data: Any) -> HealthRecommendations:
    data = _as_dict(data)
    return HealthRecommendations(
        disclaimer=normalize_text(_pick(data, "disclaimer"), default=DISCLAIMER_TEXT),
        summary=normalize_text(_pick(data, "summary"), default=DEFAULT_SUMMARY),
        priority_areas=_list_or_default(_pick(data, "priorityAreas"), DEFAULT_PRIORITY_AREAS),
        nutrition=normalize_section("nutrition", _pick(data, "nutrition")),
        physical_activity=normalize_section("physicalActivity", _pick(data, "physicalActivity")),
        lifestyle=normalize_section("lifestyle", _pick(data, "lifestyle")),
        supplements=normalize_section("supplements", _pick(data, "supplements")),
        action_plan=_list_or_default(_pick(data, "actionPlan"), DEFAULT_ACTION_PLAN),
        next_steps=_list_or_default(_pick(data, "nextSteps"), DEFAULT_NEXT_STEPS),
    )


# --- raw completion text ---

def _parse_or_none(raw: Any, kind: str) -> Optional[dict]:
    try:
        return parse_json_object(raw)
    except MalformedOutputError as e:
        logger.warning(
            "Unusable model output, using fallback",
            failure_kind="malformed_output",
            analysis=kind,
            error=str(e),
        )
        return None


def biomarker_recommendations_from_raw(
    raw: Any, request: BiomarkerAnalysisRequest
) -> BiomarkerRecommendations:
    data = _parse_or_none(raw, "biomarker")
    if data is None:
        return biomarker_fallback(request.biomarker_name, request.status)
    return normalize_biomarker_recommendations(data)


def blood_analysis_from_raw(raw: Any) -> EnhancedBloodAnalysisResults:
    data = _parse_or_none(raw, "blood_panel")
    if data is None:
        return blood_analysis_fallback()
    return normalize_blood_analysis(data)


def health_recommendations_from_raw(raw: Any) -> HealthRecommendations:
    data = _parse_or_none(raw, "health_recommendations")
    if data is None:
        return health_recommendations_fallback()
    return normalize_health_recommendations(data)
