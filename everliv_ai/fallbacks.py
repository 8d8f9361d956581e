"""
Fallback results used when the DeepSeek call or its output cannot be
trusted. Every function here is deterministic and returns a complete,
schema-valid result.
"""
from .knowledge_base import lookup_biomarker
from .models import (
    BiomarkerRecommendations,
    BloodMarker,
    EnhancedBloodAnalysisResults,
    HealthRecommendations,
    RecommendationSection,
)

UNRECOGNIZED_MARKER_NAME = "Анализ не распознан"

CONSULT_DOCTOR_TEXT = "Обратитесь к врачу для интерпретации результатов анализа."

DISCLAIMER_TEXT = (
    "❗ Важно: Я — ваш ИИ-ассистент по здоровью. Мои рекомендации основаны на "
    "анализе предоставленных данных и не являются диагнозом или заменой "
    "консультации с врачом. Перед применением любых рекомендаций проконсультируйтесь "
    "со специалистом."
)


def generic_biomarker_fallback(biomarker_name: str) -> BiomarkerRecommendations:
    return BiomarkerRecommendations(
        analysis_text=f"Показатель {biomarker_name} требует индивидуальной интерпретации врача с учетом общего состояния здоровья.",
        symptoms_to_watch="Следите за общим самочувствием, обратитесь к врачу при появлении новых симптомов.",
        supplements_with_dosages="Консультация с врачом по поводу необходимых добавок и их дозировок.",
        food_recommendations="Сбалансированная диета с достаточным количеством белков, жиров, углеводов, витаминов и минералов.",
        lifestyle_changes="Регулярная физическая активность, полноценный сон, управление стрессом, отказ от вредных привычек.",
        follow_up_advice="Регулярный контроль показателя согласно рекомендациям лечащего врача.",
    )


def biomarker_fallback(biomarker_name: str, status: str) -> BiomarkerRecommendations:
    """Curated block for a known biomarker/status, else the generic block."""
    curated = lookup_biomarker(biomarker_name, status)
    if curated is not None:
        return curated
    return generic_biomarker_fallback(biomarker_name)


def blood_analysis_fallback() -> EnhancedBloodAnalysisResults:
    """Conservative panel result: one placeholder marker, medium urgency."""
    placeholder = BloodMarker(
        name=UNRECOGNIZED_MARKER_NAME,
        value="—",
        normal_range="—",
        status="normal",
        recommendation=CONSULT_DOCTOR_TEXT,
        education="Автоматическая расшифровка анализа временно недоступна. Результаты не были обработаны.",
        lifestyle_note="Придерживайтесь привычного режима до консультации с врачом.",
    )
    return EnhancedBloodAnalysisResults(
        markers=[placeholder],
        supplements=[],
        general_recommendation=(
            "Не удалось автоматически проанализировать результаты. "
            "Пожалуйста, обратитесь к лечащему врачу для расшифровки анализа."
        ),
        risk_factors=[],
        follow_up_tests=[],
        urgency_level="medium",
        next_checkup="По согласованию с лечащим врачом",
    )


def health_recommendations_fallback() -> HealthRecommendations:
    return HealthRecommendations(
        disclaimer=DISCLAIMER_TEXT,
        summary=(
            "Для получения персонализированных рекомендаций необходимо проанализировать "
            "ваши данные о здоровье. Пожалуйста, загрузите результаты анализов и "
            "заполните профиль здоровья."
        ),
        priority_areas=[
            "Общее укрепление здоровья",
            "Профилактика заболеваний",
            "Улучшение качества жизни",
        ],
        nutrition=RecommendationSection(title="Питание", items=[
            "Сбалансируйте рацион питания",
            "Увеличьте потребление овощей и фруктов",
            "Ограничьте потребление сахара и соли",
            "Пейте достаточное количество воды (30 мл на кг веса)",
        ]),
        physical_activity=RecommendationSection(title="Физическая активность", items=[
            "Минимум 150 минут умеренной активности в неделю",
            "Добавьте силовые упражнения 2 раза в неделю",
            "Делайте перерывы каждый час при сидячей работе",
            "Начните с простых упражнений и постепенно увеличивайте нагрузку",
        ]),
        lifestyle=RecommendationSection(title="Образ жизни", items=[
            "Соблюдайте режим сна (7-9 часов в сутки)",
            "Управляйте стрессом через медитацию или дыхательные практики",
            "Откажитесь от вредных привычек",
            "Проводите больше времени на свежем воздухе",
        ]),
        supplements=RecommendationSection(title="Витамины и добавки", items=[
            "Сдайте анализы на основные витамины и минералы",
            "Проконсультируйтесь с врачом перед приемом любых добавок",
            "Не превышайте рекомендуемые дозировки",
            "Отдавайте предпочтение получению витаминов из пищи",
        ]),
        action_plan=[
            "Шаг 1: Пройдите полное медицинское обследование",
            "Шаг 2: Заполните профиль здоровья в приложении",
            "Шаг 3: Загрузите результаты анализов",
            "Шаг 4: Начните с простых изменений в образе жизни",
            "Шаг 5: Отслеживайте прогресс и корректируйте план",
        ],
        next_steps=[
            "Запишитесь на консультацию к терапевту",
            "Сдайте общий анализ крови и биохимию",
            "Начните вести дневник питания",
            "Установите регулярные напоминания о физической активности",
            "Повторите анализы через 3 месяца для оценки динамики",
        ],
    )


IMAGE_CONSULTATION_FALLBACK = """📸 **Изображение получено для анализа**

К сожалению, сервис анализа изображений временно недоступен, но вы можете:

🔍 **Описать проблему текстом:**
- Где именно находится проблема на коже?
- Как долго это наблюдается?
- Есть ли зуд, боль или другие симптомы?
- Изменялся ли внешний вид со временем?

💊 **Общие рекомендации по уходу за кожей:**
- Избегайте расчесывания
- Содержите область в чистоте
- Используйте мягкие средства гигиены
- Избегайте воздействия солнца на проблемную зону

⚠️ **Обратитесь к врачу если:**
- Область быстро увеличивается
- Появилась боль или кровотечение
- Изменился цвет или форма
- Повысилась температура

Попробуйте описать проблему текстом - я смогу дать более конкретные советы!"""


def image_consultation_fallback() -> str:
    return IMAGE_CONSULTATION_FALLBACK
