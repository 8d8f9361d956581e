"""
Prompt construction for the DeepSeek calls.

Everything here is a pure function of its inputs: it formats patient data
into the templates from prompts.py and assembles the chat message list,
including inline base64 images as separate message parts.
"""
from typing import Iterable, Optional

from .models import BiomarkerAnalysisRequest, HealthProfile, MarkerSnapshot
from .prompts import (
    REFERENCE_RANGES,
    BIOMARKER_RECOMMENDATIONS_PROMPT,
    BLOOD_PANEL_SYSTEM_PROMPT,
    BLOOD_PANEL_TEXT_PROMPT,
    BLOOD_PANEL_IMAGE_PROMPT,
    HEALTH_RECOMMENDATIONS_SYSTEM_PROMPT,
    IMAGE_CONSULTATION_SYSTEM_PROMPT,
    IMAGE_CONSULTATION_DEFAULT_QUESTION,
)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
SUPPORTED_IMAGE_MIME_TYPES = frozenset(
    ("image/jpeg", "image/png", "image/gif", "image/webp")
)


def _format_number(value: float) -> str:
    """Render 130.0 as '130' and 5.25 as '5.25'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def normalize_image_mime_type(mime_type: Optional[str]) -> str:
    """Return a MIME type the vision endpoint accepts, defaulting to JPEG."""
    normalized = (mime_type or "").strip().lower()
    if normalized not in SUPPORTED_IMAGE_MIME_TYPES:
        return DEFAULT_IMAGE_MIME_TYPE
    return normalized


def format_reference_ranges(ranges: Iterable[tuple[str, str, str]] = REFERENCE_RANGES) -> str:
    """Format the reference-range table as one line per biomarker."""
    return "\n".join(f"- {name}: {normal} {unit}" for name, normal, unit in ranges)


def format_patient_data(request: BiomarkerAnalysisRequest) -> str:
    unit = request.unit
    low = _format_number(request.normal_range.min)
    high = _format_number(request.normal_range.max)
    lines = [
        f"- Биомаркер: {request.biomarker_name}",
        f"- Текущее значение: {_format_number(request.current_value)} {unit}",
        f"- Нормальный диапазон: {low}-{high} {unit}",
        f"- Статус: {request.status}",
    ]
    if request.patient_age is not None:
        lines.append(f"- Возраст: {request.patient_age} лет")
    if request.patient_gender:
        lines.append(f"- Пол: {request.patient_gender}")
    if request.patient_weight is not None:
        lines.append(f"- Вес: {_format_number(request.patient_weight)} кг")
    if request.existing_conditions:
        lines.append(f"- Хронические заболевания: {', '.join(request.existing_conditions)}")
    return "\n".join(lines)


def build_biomarker_prompt(request: BiomarkerAnalysisRequest) -> str:
    """Build the single-biomarker recommendation prompt."""
    return BIOMARKER_RECOMMENDATIONS_PROMPT.format(
        patient_data=format_patient_data(request),
        status=request.status,
    )


def build_biomarker_messages(request: BiomarkerAnalysisRequest) -> list[dict]:
    return [{"role": "user", "content": build_biomarker_prompt(request)}]


def image_part(image_base64: str, mime_type: Optional[str]) -> dict:
    """Inline image message part in the OpenAI-compatible multimodal format."""
    return {
        "type": "image_url",
        "image_url": {
            "url": f"data:{normalize_image_mime_type(mime_type)};base64,{image_base64}",
            "detail": "high",
        },
    }


def build_blood_panel_messages(
    text: Optional[str] = None,
    image_base64: Optional[str] = None,
    mime_type: Optional[str] = DEFAULT_IMAGE_MIME_TYPE,
) -> list[dict]:
    """Build the chat messages for a full blood-panel analysis.

    Exactly one of ``text`` or ``image_base64`` is expected. When an image is
    given, the user message carries a text part plus an inline image part;
    otherwise the free text is embedded in the instruction.
    """
    system_prompt = BLOOD_PANEL_SYSTEM_PROMPT.format(
        reference_ranges=format_reference_ranges()
    )
    messages: list[dict] = [{"role": "system", "content": system_prompt}]

    if image_base64:
        messages.append({
            "role": "user",
            "content": [
                {"type": "text", "text": BLOOD_PANEL_IMAGE_PROMPT},
                image_part(image_base64, mime_type),
            ],
        })
    else:
        messages.append({
            "role": "user",
            "content": BLOOD_PANEL_TEXT_PROMPT.format(text=text or ""),
        })
    return messages


def _join(items: list[str]) -> str:
    return ", ".join(items)


def format_health_profile(profile: HealthProfile) -> str:
    lines = ["**ПРОФИЛЬ ЗДОРОВЬЯ:**"]
    if profile.age is not None:
        lines.append(f"- Возраст: {profile.age} лет")
    if profile.gender:
        lines.append(f"- Пол: {profile.gender}")
    if profile.height is not None:
        lines.append(f"- Рост: {_format_number(profile.height)} см")
    if profile.weight is not None:
        lines.append(f"- Вес: {_format_number(profile.weight)} кг")
    if profile.bmi is not None:
        lines.append(f"- ИМТ: {profile.bmi:.1f}")
    if profile.activity_level:
        lines.append(f"- Уровень активности: {profile.activity_level}")
    if profile.goals:
        lines.append(f"- Цели: {_join(profile.goals)}")
    if profile.chronic_conditions:
        lines.append(f"- Хронические заболевания: {_join(profile.chronic_conditions)}")
    if profile.allergies:
        lines.append(f"- Аллергии: {_join(profile.allergies)}")
    if profile.medications:
        lines.append(f"- Принимаемые лекарства: {_join(profile.medications)}")
    if profile.supplements:
        lines.append(f"- Принимаемые добавки: {_join(profile.supplements)}")
    return "\n".join(lines)


def format_marker_groups(markers: list[MarkerSnapshot]) -> str:
    """Group markers into critical, abnormal and normal sections."""
    critical = [m for m in markers if m.status == "critical"]
    abnormal = [m for m in markers if m.status in ("high", "low")]
    normal = [m for m in markers if m.status == "normal"]

    sections = ["**РЕЗУЛЬТАТЫ АНАЛИЗОВ КРОВИ:**"]
    if critical:
        sections.append("\n⚠️ КРИТИЧЕСКИЕ ОТКЛОНЕНИЯ:")
        sections.extend(f"- {m.name}: {m.value} (КРИТИЧНО!)" for m in critical)
    if abnormal:
        sections.append("\n❗ ОТКЛОНЕНИЯ ОТ НОРМЫ:")
        sections.extend(
            f"- {m.name}: {m.value} ({'повышен' if m.status == 'high' else 'понижен'})"
            for m in abnormal
        )
    if normal:
        sections.append("\n✅ В ПРЕДЕЛАХ НОРМЫ:")
        sections.extend(f"- {m.name}: {m.value}" for m in normal)
    return "\n".join(sections)


def build_health_recommendations_prompt(
    profile: Optional[HealthProfile],
    markers: list[MarkerSnapshot],
) -> str:
    """Build the user prompt for personalised health recommendations."""
    parts = ["Проанализируй следующие данные о здоровье пользователя:\n"]
    if profile is not None:
        parts.append(format_health_profile(profile) + "\n")
    if markers:
        parts.append(format_marker_groups(markers))
    parts.append(
        "\nНа основе этих данных предоставь персонализированные рекомендации по улучшению здоровья. "
        "Обязательно учти все отклонения в анализах и особенности профиля пользователя. "
        "Если есть критические отклонения - это должно быть первым приоритетом в рекомендациях."
    )
    return "\n".join(parts)


def build_health_recommendations_messages(
    profile: Optional[HealthProfile],
    markers: list[MarkerSnapshot],
) -> list[dict]:
    return [
        {"role": "system", "content": HEALTH_RECOMMENDATIONS_SYSTEM_PROMPT},
        {"role": "user", "content": build_health_recommendations_prompt(profile, markers)},
    ]


def build_image_consultation_messages(
    image_base64: str,
    mime_type: Optional[str] = DEFAULT_IMAGE_MIME_TYPE,
    question: Optional[str] = None,
) -> list[dict]:
    """Build the dermatology consultation messages for a skin photo."""
    return [
        {"role": "system", "content": IMAGE_CONSULTATION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": (question or "").strip() or IMAGE_CONSULTATION_DEFAULT_QUESTION},
                image_part(image_base64, mime_type),
            ],
        },
    ]
