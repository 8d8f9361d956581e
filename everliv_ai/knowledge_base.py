"""
Static, hand-curated reference content.

BIOMARKER_KNOWLEDGE_BASE maps biomarker name -> status -> recommendation
block and backs the single-biomarker fallback. MARKER_EDUCATION fills in
the education text of panel markers the model left without one. Both are
read-only.
"""
from types import MappingProxyType
from typing import Mapping, Optional

from .models import BiomarkerRecommendations

_HEMOGLOBIN = {
    "low": BiomarkerRecommendations(
        analysis_text="Пониженный уровень гемоглобина может указывать на железодефицитную анемию или другие нарушения кроветворения.",
        symptoms_to_watch="Слабость, быстрая утомляемость, одышка при нагрузке, бледность кожи, ломкость ногтей, странные пищевые пристрастия (лед, крахмал)",
        supplements_with_dosages="Железо (сульфат железа 325мг 1-2 раза в день), Витамин C (1000мг для усвоения железа), Фолиевая кислота (400мкг), Витамин B12 (1000мкг)",
        food_recommendations="Говядина, печень теленка, моллюски (устрицы, мидии), тунец, темная фасоль, шпинат, тыквенные семечки, темный шоколад, гранат",
        lifestyle_changes="Регулярные прогулки на свежем воздухе, дыхательные упражнения, избегание чрезмерных физических нагрузок до нормализации уровня",
        follow_up_advice="Контроль гемоглобина через 4-6 недель приема препаратов железа, консультация гематолога при отсутствии улучшений",
    ),
    "high": BiomarkerRecommendations(
        analysis_text="Повышенный уровень гемоглобина может указывать на обезвоживание, заболевания легких или нарушения кроветворения.",
        symptoms_to_watch="Головные боли, головокружение, нарушения зрения, покраснение кожи, повышенный риск тромбозов",
        supplements_with_dosages="Избегать препараты железа, Омега-3 (2г EPA/DHA для разжижения крови), Витамин E (400 МЕ)",
        food_recommendations="Увеличить потребление воды, ограничить красное мясо, увеличить овощи и фрукты, зеленый чай",
        lifestyle_changes="Регулярная сдача крови (по назначению врача), избегание курения, контроль артериального давления",
        follow_up_advice="Обследование у гематолога, исключение полицитемии, контроль показателей через 2-4 недели",
    ),
    "normal": BiomarkerRecommendations(
        analysis_text="Уровень гемоглобина находится в пределах нормы, что указывает на эффективный транспорт кислорода в организме.",
        symptoms_to_watch="Поддерживайте текущее состояние, следите за общим самочувствием",
        supplements_with_dosages="Профилактические дозы: Витамин C (500мг), Фолиевая кислота (200мкг), Витамин B12 (250мкг)",
        food_recommendations="Сбалансированная диета с достаточным количеством железа: нежирное мясо, рыба, бобовые, зеленые овощи",
        lifestyle_changes="Регулярная физическая активность, полноценный сон, управление стрессом",
        follow_up_advice="Плановый контроль гемоглобина раз в год при профилактических осмотрах",
    ),
}

_TOTAL_CHOLESTEROL = {
    "high": BiomarkerRecommendations(
        analysis_text="Повышенный уровень общего холестерина увеличивает риск сердечно-сосудистых заболеваний и требует коррекции.",
        symptoms_to_watch="Ксантомы (желтые пятна вокруг глаз), боли в ногах при ходьбе, стенокардия, повышенное артериальное давление",
        supplements_with_dosages="Омега-3 (2-3г EPA/DHA), Красный дрожжевой рис (600мг), Коэнзим Q10 (100мг), Берберин (500мг 3 раза в день), Растворимая клетчатка (10г)",
        food_recommendations="Овсянка, ячмень, бобовые (чечевица, нут), яблоки, авокадо, жирная рыба (лосось, скумбрия), грецкие орехи, оливковое масло",
        lifestyle_changes="Кардиотренировки 150 минут в неделю, контроль веса, отказ от курения, снижение стресса",
        follow_up_advice="Контроль липидного профиля через 6-8 недель диеты, консультация кардиолога при необходимости статинов",
    ),
    "normal": BiomarkerRecommendations(
        analysis_text="Уровень общего холестерина в норме, что соответствует низкому риску сердечно-сосудистых заболеваний.",
        symptoms_to_watch="Поддерживайте здоровый образ жизни для сохранения оптимального уровня",
        supplements_with_dosages="Профилактически: Омега-3 (1г EPA/DHA), Витамин D3 (2000 МЕ), Магний (300мг)",
        food_recommendations="Средиземноморская диета: рыба, овощи, фрукты, орехи, оливковое масло, цельные злаки",
        lifestyle_changes="Регулярная физическая активность, поддержание здорового веса, ограничение алкоголя",
        follow_up_advice="Контроль липидного профиля раз в 1-2 года при отсутствии факторов риска",
    ),
}

BIOMARKER_KNOWLEDGE_BASE: Mapping[str, Mapping[str, BiomarkerRecommendations]] = MappingProxyType({
    "Гемоглобин": MappingProxyType(_HEMOGLOBIN),
    "Общий холестерин": MappingProxyType(_TOTAL_CHOLESTEROL),
})


def lookup_biomarker(name: str, status: str) -> Optional[BiomarkerRecommendations]:
    """Exact name, then exact status. None when either is not on file."""
    by_status = BIOMARKER_KNOWLEDGE_BASE.get(name)
    if by_status is None:
        return None
    return by_status.get(status)


# (name fragments, education text); fragments are matched against the
# lower-cased marker name, first match wins.
MARKER_EDUCATION: tuple[tuple[tuple[str, ...], str], ...] = (
    (("гемоглобин", "hemoglobin"),
     "Гемоглобин - белок в эритроцитах, переносящий кислород. Норма: мужчины 130-160 г/л, женщины 120-140 г/л."),
    (("глюкоза", "glucose"),
     "Глюкоза - основной источник энергии для клеток. Норма натощак: 3.3-5.5 ммоль/л."),
    (("холестерин", "cholesterol"),
     "Холестерин - липид, необходимый для построения клеточных мембран. Норма общего холестерина: < 5.2 ммоль/л."),
    (("креатинин", "creatinine"),
     "Креатинин - продукт распада креатина в мышцах, показатель функции почек. Норма: мужчины 74-110 мкмоль/л, женщины 60-100 мкмоль/л."),
    (("эритроцит", "rbc", "red blood"),
     "Эритроциты - красные кровяные клетки, переносящие кислород. Норма: мужчины 4.0-5.5×10¹²/л, женщины 3.5-5.0×10¹²/л."),
    (("лейкоцит", "wbc", "white blood"),
     "Лейкоциты - белые кровяные клетки, защищающие организм от инфекций. Норма: 4.0-9.0×10⁹/л."),
    (("тромбоцит", "platelet", "plt"),
     "Тромбоциты - клетки крови, участвующие в свертывании. Норма: 150-400×10⁹/л."),
)


def education_for(marker_name: str) -> Optional[str]:
    lowered = marker_name.lower()
    for fragments, text in MARKER_EDUCATION:
        if any(fragment in lowered for fragment in fragments):
            return text
    return None
