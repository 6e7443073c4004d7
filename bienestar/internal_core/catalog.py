from __future__ import annotations

"""
Default questionnaire and wellbeing resources.

Design intent:
- Ship a usable weekly questionnaire covering all four categories.
- Keep question ids stable so stored answers stay interpretable.
- Map score categories to resource categories for personalized picks.
"""

from typing import Optional, Sequence

from bienestar.risk.classifier import CATEGORIES, ScoreSet

from .contracts import QuestionItem, ResourceItem

_QUESTION_TEXTS: list[tuple[str, str]] = [
    ("estres", "¿Con qué frecuencia experimentas ansiedad antes de exámenes o entregas?"),
    ("estres", "¿Te sientes nervioso/a o inquieto/a sin razón aparente?"),
    ("estres", "¿Tienes dificultades para dormir debido a preocupaciones académicas?"),
    ("estres", "¿Sientes tensión muscular o dolores de cabeza frecuentes?"),
    ("estres", "¿Te resulta difícil relajarte incluso en tu tiempo libre?"),
    ("agotamiento", "¿Te sientes emocionalmente agotado/a por tus estudios?"),
    ("agotamiento", "¿Te resulta difícil levantarte por las mañanas para ir a clases?"),
    ("agotamiento", "¿Te sientes mentalmente exhausto/a al final del día?"),
    ("agotamiento", "¿Qué tan difícil te resulta concentrarte en tus estudios?"),
    ("sobrecarga", "¿Con qué frecuencia te sientes abrumado/a por la carga de trabajo académico?"),
    ("sobrecarga", "¿Sientes que no tienes suficiente tiempo para completar tus tareas?"),
    ("sobrecarga", "¿Te preocupas constantemente por tu rendimiento académico?"),
    ("sobrecarga", "¿Experimentas cambios en tu apetito relacionados con la carga académica?"),
    ("burnout", "¿Has perdido interés o motivación en tus materias?"),
    ("burnout", "¿Sientes que tus estudios no tienen sentido o propósito?"),
    ("burnout", "¿Sientes que ya no disfrutas actividades que antes te gustaban?"),
    ("burnout", "¿Te sientes desconectado/a de tus compañeros de clase?"),
    ("burnout", "¿Tienes pensamientos negativos sobre tu futuro profesional?"),
    ("burnout", "¿Sientes que no importa cuánto te esfuerces, no es suficiente?"),
    ("burnout", "¿Experimentas sentimientos de desesperanza sobre tus estudios?"),
]

DEFAULT_QUESTIONS: list[QuestionItem] = [
    QuestionItem(id=index, texto=texto, categoria=categoria, orden=index)  # type: ignore[arg-type]
    for index, (categoria, texto) in enumerate(_QUESTION_TEXTS, start=1)
]

DEFAULT_RESOURCES: list[ResourceItem] = [
    ResourceItem(
        id=1,
        titulo="Técnicas de Respiración para el Estrés",
        descripcion="Ejercicios de respiración profunda para reducir la ansiedad y el estrés académico",
        tipo_recurso="VIDEO",
        url_contenido="https://www.youtube.com/watch?v=ejemplo1",
        categoria="Manejo del Estrés",
    ),
    ResourceItem(
        id=2,
        titulo="Gestión Efectiva del Tiempo de Estudio",
        descripcion="Estrategias para organizar mejor tu tiempo de estudio y aumentar la productividad",
        tipo_recurso="VIDEO",
        url_contenido="https://www.youtube.com/watch?v=ejemplo2",
        categoria="Productividad",
    ),
    ResourceItem(
        id=3,
        titulo="Mindfulness para Estudiantes",
        descripcion="Técnicas de atención plena adaptadas a la vida académica",
        tipo_recurso="VIDEO",
        url_contenido="https://www.youtube.com/watch?v=ejemplo3",
        categoria="Bienestar Mental",
    ),
    ResourceItem(
        id=4,
        titulo="Técnicas de Relajación Muscular Progresiva",
        descripcion="Ejercicios paso a paso para liberar la tensión física acumulada por el estrés",
        tipo_recurso="EJERCICIO",
        url_contenido="https://www.ejemplo.com/relajacion",
        categoria="Relajación",
    ),
    ResourceItem(
        id=5,
        titulo="Cómo Manejar la Ansiedad ante Exámenes",
        descripcion="Estrategias psicológicas para controlar los nervios durante las evaluaciones",
        tipo_recurso="ARTICULO",
        url_contenido="https://www.ejemplo.com/ansiedad-examenes",
        categoria="Manejo del Estrés",
    ),
    ResourceItem(
        id=6,
        titulo="Establecimiento de Metas Académicas Realistas",
        descripcion="Guía para fijar objetivos académicos alcanzables y mantener la motivación",
        tipo_recurso="ARTICULO",
        url_contenido="https://www.ejemplo.com/metas-academicas",
        categoria="Productividad",
    ),
    ResourceItem(
        id=7,
        titulo="Ejercicios de Meditación para Estudiantes",
        descripcion="Rutinas de meditación de 5 y 10 minutos diseñadas para estudiantes",
        tipo_recurso="TECNICA",
        url_contenido="https://www.ejemplo.com/meditacion",
        categoria="Bienestar Mental",
    ),
    ResourceItem(
        id=8,
        titulo="Técnica Pomodoro para Estudiar",
        descripcion="Método de gestión del tiempo que alterna períodos de trabajo con descansos",
        tipo_recurso="TECNICA",
        url_contenido="https://www.ejemplo.com/pomodoro",
        categoria="Productividad",
    ),
]

# Score at or above which a category gets targeted resources.
PERSONALIZED_SCORE = 6.0
GENERAL_FOCUS = "general"
GENERAL_RESOURCE_LIMIT = 10

RESOURCE_FOCUS: dict[str, tuple[str, ...]] = {
    "estres": ("Manejo del Estrés", "Relajación"),
    "agotamiento": ("Bienestar Mental", "Relajación"),
    "sobrecarga": ("Productividad",),
    "burnout": ("Bienestar Mental",),
    GENERAL_FOCUS: ("Bienestar Mental", "Relajación"),
}


def personalized_resources(
    resources: Sequence[ResourceItem],
    scores: Optional[ScoreSet],
    *,
    threshold: float = PERSONALIZED_SCORE,
) -> tuple[list[str], list[ResourceItem]]:
    """
    Pick resources for the categories a student scores high on.

    Without scores, or with no category at `threshold`, the general selection
    is returned instead (at most GENERAL_RESOURCE_LIMIT items).
    """
    focus: list[str] = []
    if scores is not None:
        focus = [name for name in CATEGORIES if getattr(scores, name) >= threshold]
    if not focus:
        focus = [GENERAL_FOCUS]

    wanted = {categoria for name in focus for categoria in RESOURCE_FOCUS[name]}
    selected = sorted(
        (item for item in resources if item.categoria in wanted),
        key=lambda item: (item.categoria, item.titulo),
    )
    if focus == [GENERAL_FOCUS]:
        selected = selected[:GENERAL_RESOURCE_LIMIT]
    return focus, selected
