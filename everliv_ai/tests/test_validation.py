"""Tests for normalization of model output into typed results."""
import json
import sys

import pytest

from everliv_ai.fallbacks import (
    biomarker_fallback,
    blood_analysis_fallback,
    health_recommendations_fallback,
)
from everliv_ai.models import (
    BIOMARKER_STATUSES,
    URGENCY_LEVELS,
    BiomarkerAnalysisRequest,
)
from everliv_ai.validation import (
    DEFAULT_NEXT_CHECKUP,
    PLACEHOLDER_TEXT,
    SECTION_DEFAULTS,
    biomarker_recommendations_from_raw,
    blood_analysis_from_raw,
    health_recommendations_from_raw,
    normalize_biomarker_recommendations,
    normalize_blood_analysis,
    normalize_health_recommendations,
    normalize_string_list,
    normalize_text,
)

FULL_PANEL = {
    "markers": [
        {
            "name": "Гемоглобин",
            "value": "105 г/л",
            "normalRange": "120-140 г/л",
            "status": "low",
            "recommendation": "Сдать ферритин и начать прием железа по назначению врача",
            "education": "Гемоглобин переносит кислород",
            "lifestyleNote": "Больше красного мяса и зелени",
        },
        {
            "name": "Глюкоза",
            "value": "5.1 ммоль/л",
            "normalRange": "3.3-5.5 ммоль/л",
            "status": "normal",
            "recommendation": "Поддерживать текущий рацион",
            "education": "Основной источник энергии",
            "lifestyleNote": "Умеренная активность",
        },
    ],
    "supplements": [
        {
            "name": "Железо",
            "reason": "Низкий гемоглобин",
            "dosage": "100 мг в день",
            "duration": "3 месяца",
        }
    ],
    "generalRecommendation": "Обратите внимание на признаки анемии",
    "riskFactors": ["Железодефицитная анемия"],
    "followUpTests": ["Ферритин", "Сывороточное железо"],
    "urgencyLevel": "medium",
    "nextCheckup": "Через 6 недель",
}

FULL_RECOMMENDATIONS = {
    "analysisText": "Гемоглобин снижен.",
    "symptomsToWatch": "Слабость",
    "supplementsWithDosages": "Железо 100 мг",
    "foodRecommendations": "Говядина",
    "lifestyleChanges": "Прогулки",
    "followUpAdvice": "Пересдать через месяц",
}

HEMOGLOBIN_LOW = BiomarkerAnalysisRequest(
    biomarker_name="Гемоглобин",
    current_value=105,
    unit="г/л",
    normal_range={"min": 120, "max": 140},
    status="low",
)


def assert_fully_populated(value):
    """No None leaves and no empty strings anywhere in a dumped result."""
    if isinstance(value, dict):
        for item in value.values():
            assert_fully_populated(item)
    elif isinstance(value, list):
        for item in value:
            assert_fully_populated(item)
    else:
        assert value is not None
        if isinstance(value, str):
            assert value.strip()


class TestFieldRules:
    """Test the per-field normalization helpers."""

    def test_text_kept_exactly(self):
        assert normalize_text("  с пробелами  ") == "  с пробелами  "

    @pytest.mark.parametrize("value", [None, "", "   ", True, [], {}, ["a"]])
    def test_text_defaults(self, value):
        assert normalize_text(value) == PLACEHOLDER_TEXT

    def test_numbers_stringified(self):
        assert normalize_text(130) == "130"
        assert normalize_text(5.5) == "5.5"

    def test_non_finite_number_defaults(self):
        assert normalize_text(float("nan")) == PLACEHOLDER_TEXT

    @pytest.mark.parametrize("value", [10 ** 400, -(10 ** 400)])
    def test_int_beyond_float_range_stringified(self, value):
        assert normalize_text(value) == str(value)

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no int digit limit")
    def test_int_past_digit_limit_defaults(self):
        limit = sys.get_int_max_str_digits()
        if not limit:
            pytest.skip("int digit limit disabled")
        assert normalize_text(10 ** (limit + 1)) == PLACEHOLDER_TEXT

    def test_string_list_filters_items(self):
        assert normalize_string_list(["a", "", None, 3, {"x": 1}, "b"]) == ["a", "3", "b"]

    @pytest.mark.parametrize("value", [None, "a", 1, {"a": 1}])
    def test_string_list_non_list(self, value):
        assert normalize_string_list(value) == []


class TestNormalizeBloodAnalysis:
    """Test normalize_blood_analysis and blood_analysis_from_raw."""

    def test_round_trip_preserves_values(self):
        result = normalize_blood_analysis(FULL_PANEL)
        assert result.model_dump(by_alias=True) == FULL_PANEL

    def test_empty_object_gets_defaults(self):
        result = normalize_blood_analysis({})
        assert result.markers == []
        assert result.supplements == []
        assert result.general_recommendation == PLACEHOLDER_TEXT
        assert result.risk_factors == []
        assert result.follow_up_tests == []
        assert result.urgency_level == "low"
        assert result.next_checkup == DEFAULT_NEXT_CHECKUP

    def test_markers_not_an_array(self):
        result = blood_analysis_from_raw('{"markers": "not-an-array"}')
        assert result.markers == []
        assert result == normalize_blood_analysis({})

    def test_wrong_types_everywhere(self):
        raw = json.dumps({
            "markers": 5,
            "supplements": {"name": "x"},
            "generalRecommendation": ["a"],
            "riskFactors": "высокий холестерин",
            "followUpTests": None,
            "urgencyLevel": 3,
            "nextCheckup": False,
        })
        result = blood_analysis_from_raw(raw)
        assert result == normalize_blood_analysis({})
        assert_fully_populated(result.model_dump())

    @pytest.mark.parametrize("status", ["HIGH", "elevated", "critical ", "", None, 1, ["low"]])
    def test_invalid_status_coerced_to_normal(self, status):
        result = normalize_blood_analysis({"markers": [{"name": "АЛТ", "status": status}]})
        assert result.markers[0].status == "normal"

    @pytest.mark.parametrize("status", sorted(BIOMARKER_STATUSES))
    def test_valid_status_kept(self, status):
        result = normalize_blood_analysis({"markers": [{"name": "АЛТ", "status": status}]})
        assert result.markers[0].status == status

    @pytest.mark.parametrize("urgency", ["urgent", "Medium", "critical", "", None, 2])
    def test_invalid_urgency_coerced_to_low(self, urgency):
        assert normalize_blood_analysis({"urgencyLevel": urgency}).urgency_level == "low"

    @pytest.mark.parametrize("urgency", sorted(URGENCY_LEVELS))
    def test_valid_urgency_kept(self, urgency):
        assert normalize_blood_analysis({"urgencyLevel": urgency}).urgency_level == urgency

    def test_marker_fields_defaulted_independently(self):
        result = normalize_blood_analysis({"markers": [{"value": 42}, "мусор", None]})
        assert len(result.markers) == 1
        marker = result.markers[0]
        assert marker.value == "42"
        assert marker.name
        assert marker.recommendation == PLACEHOLDER_TEXT
        assert marker.status == "normal"
        assert_fully_populated(marker.model_dump())

    def test_missing_education_enriched_from_reference(self):
        result = normalize_blood_analysis({"markers": [{"name": "Общий холестерин", "status": "high"}]})
        assert result.markers[0].education.startswith("Холестерин - липид")

    def test_unknown_marker_education_placeholder(self):
        result = normalize_blood_analysis({"markers": [{"name": "Гомоцистеин"}]})
        assert result.markers[0].education == PLACEHOLDER_TEXT

    def test_supplement_fields_defaulted(self):
        result = normalize_blood_analysis({"supplements": [{"name": "Магний"}]})
        supplement = result.supplements[0]
        assert supplement.name == "Магний"
        assert supplement.dosage == PLACEHOLDER_TEXT

    def test_snake_case_keys_accepted(self):
        result = normalize_blood_analysis({"urgency_level": "high", "risk_factors": ["Курение"]})
        assert result.urgency_level == "high"
        assert result.risk_factors == ["Курение"]

    def test_non_dict_input(self):
        assert normalize_blood_analysis(["not", "a", "dict"]) == normalize_blood_analysis({})

    @pytest.mark.parametrize("raw", ["", "not json", "[]", '{"markers": [', "null"])
    def test_unparseable_raw_uses_fallback(self, raw):
        assert blood_analysis_from_raw(raw) == blood_analysis_fallback()

    def test_code_fenced_raw_is_normalized(self):
        raw = "```json\n" + json.dumps(FULL_PANEL, ensure_ascii=False) + "\n```"
        assert blood_analysis_from_raw(raw).model_dump(by_alias=True) == FULL_PANEL

    def test_huge_int_leaves_normalized(self):
        result = normalize_blood_analysis({
            "markers": [{"name": "X", "value": 10 ** 400}],
            "riskFactors": [10 ** 400],
            "nextCheckup": 10 ** 400,
        })
        assert result.markers[0].value == str(10 ** 400)
        assert result.risk_factors == [str(10 ** 400)]
        assert_fully_populated(result.model_dump())

    def test_huge_int_in_raw(self):
        raw = '{"urgencyLevel": "high", "nextCheckup": 1' + "0" * 400 + "}"
        result = blood_analysis_from_raw(raw)
        assert result.urgency_level == "high"
        assert result.next_checkup == "1" + "0" * 400

    @pytest.mark.parametrize("raw", [
        '{"markers": [{"name": "X", "value": ' + "9" * 5001 + "}]}",
        "[" * 100000 + "]" * 100000,
        '{"markers": ' + "[" * 100000 + "]" * 100000 + "}",
    ])
    def test_extreme_raw_always_populated(self, raw):
        result = blood_analysis_from_raw(raw)
        assert result.urgency_level in URGENCY_LEVELS
        assert_fully_populated(result.model_dump())
        assert biomarker_recommendations_from_raw(raw, HEMOGLOBIN_LOW).analysis_text
        assert health_recommendations_from_raw(raw).action_plan


class TestNormalizeBiomarkerRecommendations:
    """Test normalize_biomarker_recommendations and its raw entry point."""

    def test_round_trip(self):
        result = normalize_biomarker_recommendations(FULL_RECOMMENDATIONS)
        assert result.model_dump(by_alias=True) == FULL_RECOMMENDATIONS

    def test_missing_fields_get_placeholder(self):
        result = normalize_biomarker_recommendations({"analysisText": "Гемоглобин снижен."})
        assert result.analysis_text == "Гемоглобин снижен."
        assert result.symptoms_to_watch == PLACEHOLDER_TEXT
        assert result.follow_up_advice == PLACEHOLDER_TEXT

    def test_wrong_types(self):
        result = normalize_biomarker_recommendations({
            "analysisText": None,
            "symptomsToWatch": ["Слабость"],
            "supplementsWithDosages": {"iron": "100mg"},
            "foodRecommendations": "",
            "lifestyleChanges": False,
            "followUpAdvice": 4,
        })
        assert_fully_populated(result.model_dump())
        assert result.follow_up_advice == "4"

    @pytest.mark.parametrize("raw", ["", "Не могу ответить", "[1, 2]"])
    def test_unparseable_raw_uses_keyed_fallback(self, raw):
        result = biomarker_recommendations_from_raw(raw, HEMOGLOBIN_LOW)
        assert result == biomarker_fallback("Гемоглобин", "low")

    def test_partial_raw_is_not_escalated_to_fallback(self):
        result = biomarker_recommendations_from_raw('{"analysisText": "Ок"}', HEMOGLOBIN_LOW)
        assert result.analysis_text == "Ок"
        assert result.symptoms_to_watch == PLACEHOLDER_TEXT


class TestNormalizeHealthRecommendations:
    """Test normalize_health_recommendations."""

    def test_empty_object_gets_section_defaults(self):
        result = normalize_health_recommendations({})
        assert result.nutrition.title == "Питание"
        assert result.nutrition.items == SECTION_DEFAULTS["nutrition"][1]
        assert result.priority_areas
        assert result.action_plan
        assert result.next_steps
        assert_fully_populated(result.model_dump())

    def test_empty_items_replaced(self):
        result = normalize_health_recommendations({"lifestyle": {"title": "Сон", "items": []}})
        assert result.lifestyle.title == "Сон"
        assert result.lifestyle.items == SECTION_DEFAULTS["lifestyle"][1]

    def test_valid_values_kept(self):
        payload = {
            "summary": "Всё хорошо",
            "priorityAreas": ["Сон"],
            "physicalActivity": {"title": "Активность", "items": ["Плавание"]},
            "nextSteps": ["Пересдать анализы"],
        }
        result = normalize_health_recommendations(payload)
        assert result.summary == "Всё хорошо"
        assert result.priority_areas == ["Сон"]
        assert result.physical_activity.items == ["Плавание"]
        assert result.next_steps == ["Пересдать анализы"]

    def test_unparseable_raw_uses_fallback(self):
        assert health_recommendations_from_raw("oops") == health_recommendations_fallback()
