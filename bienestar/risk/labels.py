from __future__ import annotations

"""
Static display tables keyed by wire literals.

Design intent:
- Give clients one source for tier/category/priority wording.
- Carry semantic tones only; presentation styling stays client-side.
"""

from typing import Any

RISK_LEVELS: dict[str, dict[str, str]] = {
    "BAJO": {
        "label": "Bajo",
        "tone": "success",
        "description": "Nivel de riesgo bajo. Continúa con tus hábitos saludables.",
    },
    "MEDIO": {
        "label": "Medio",
        "tone": "warning",
        "description": "Nivel de riesgo medio. Se recomienda atención y seguimiento.",
    },
    "ALTO": {
        "label": "Alto",
        "tone": "danger",
        "description": "Nivel de riesgo alto. Se sugiere buscar apoyo profesional.",
    },
}

CATEGORY_LABELS: dict[str, str] = {
    "estres": "Estrés",
    "agotamiento": "Agotamiento",
    "sobrecarga": "Sobrecarga",
    "burnout": "Burnout",
}

ALERT_PRIORITY_LABELS: dict[str, str] = {
    "BAJA": "Baja",
    "MEDIA": "Media",
    "ALTA": "Alta",
    "CRITICA": "Crítica",
}

ANSWER_SCALE: list[dict[str, Any]] = [
    {"valor": 0, "etiqueta": "Nunca", "descripcion": "No he experimentado esto"},
    {"valor": 1, "etiqueta": "Rara vez", "descripcion": "Muy ocasionalmente"},
    {"valor": 2, "etiqueta": "A veces", "descripcion": "De vez en cuando"},
    {"valor": 3, "etiqueta": "Frecuentemente", "descripcion": "Varias veces por semana"},
    {"valor": 4, "etiqueta": "Siempre", "descripcion": "Constantemente o diariamente"},
]

RESOURCE_TYPE_LABELS: dict[str, str] = {
    "VIDEO": "Video",
    "ARTICULO": "Artículo",
    "EJERCICIO": "Ejercicio",
    "TECNICA": "Técnica",
}


def score_tone(score: float) -> str:
    # Same cut points as the tier thresholds, applied to a single score.
    if score >= 7:
        return "danger"
    if score >= 5:
        return "warning"
    return "success"


def all_labels() -> dict[str, Any]:
    return {
        "niveles_riesgo": RISK_LEVELS,
        "categorias": CATEGORY_LABELS,
        "prioridades_alerta": ALERT_PRIORITY_LABELS,
        "escala_respuestas": ANSWER_SCALE,
        "tipos_recurso": RESOURCE_TYPE_LABELS,
    }
