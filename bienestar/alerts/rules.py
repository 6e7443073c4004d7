from __future__ import annotations

"""
Derive coordinator alerts from evaluation scores.

Design intent:
- Rule-driven, deterministic alert generation per evaluation.
- Keep messages short, Spanish, and quote the score that triggered them.
- Rank and group alerts so coordinators see the most urgent first.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Sequence

from bienestar.risk.classifier import RiskTier, ScoreSet, average, classify
from bienestar.risk.scoring import DEFAULT_DETERIORATION_THRESHOLD, detect_deterioration

CRITICAL_CATEGORY_SCORE = 8.0
COMBINED_OVERLOAD_SCORE = 7.0


class AlertKind(str, Enum):
    ESTRES_CRITICO = "ESTRES_CRITICO"
    BURNOUT_CRITICO = "BURNOUT_CRITICO"
    SOBRECARGA_AGOTAMIENTO = "SOBRECARGA_AGOTAMIENTO"
    RIESGO_ALTO_GENERAL = "RIESGO_ALTO_GENERAL"
    DETERIORO_PROGRESIVO = "DETERIORO_PROGRESIVO"
    PRIMERA_EVALUACION_ALTA = "PRIMERA_EVALUACION_ALTA"


class AlertPriority(str, Enum):
    BAJA = "BAJA"
    MEDIA = "MEDIA"
    ALTA = "ALTA"
    CRITICA = "CRITICA"


PRIORITY_ORDER: tuple[AlertPriority, ...] = (
    AlertPriority.BAJA,
    AlertPriority.MEDIA,
    AlertPriority.ALTA,
    AlertPriority.CRITICA,
)

_PRIORITY_BASE_URGENCY = {
    AlertPriority.CRITICA: 40,
    AlertPriority.ALTA: 30,
    AlertPriority.MEDIA: 20,
    AlertPriority.BAJA: 10,
}


@dataclass(frozen=True)
class AlertDraft:
    tipo: AlertKind
    mensaje: str
    nivel_prioridad: AlertPriority


@dataclass(frozen=True)
class Recommendations:
    immediate: list[str]
    short_term: list[str]
    long_term: list[str]


def build_alerts(
    scores: ScoreSet,
    previous: ScoreSet | None = None,
    *,
    deterioration_threshold: float = DEFAULT_DETERIORATION_THRESHOLD,
) -> list[AlertDraft]:
    alerts: list[AlertDraft] = []

    if scores.estres >= CRITICAL_CATEGORY_SCORE:
        alerts.append(
            AlertDraft(
                tipo=AlertKind.ESTRES_CRITICO,
                mensaje=(
                    f"Niveles críticos de estrés detectados ({scores.estres:.1f}/10). "
                    "Se recomienda atención inmediata y considerar técnicas de manejo del estrés."
                ),
                nivel_prioridad=AlertPriority.ALTA,
            )
        )

    if scores.burnout >= CRITICAL_CATEGORY_SCORE:
        alerts.append(
            AlertDraft(
                tipo=AlertKind.BURNOUT_CRITICO,
                mensaje=(
                    f"Signos severos de burnout académico detectados ({scores.burnout:.1f}/10). "
                    "Es crucial buscar apoyo psicológico profesional."
                ),
                nivel_prioridad=AlertPriority.CRITICA,
            )
        )

    if scores.agotamiento >= COMBINED_OVERLOAD_SCORE and scores.sobrecarga >= COMBINED_OVERLOAD_SCORE:
        alerts.append(
            AlertDraft(
                tipo=AlertKind.SOBRECARGA_AGOTAMIENTO,
                mensaje=(
                    f"Combinación peligrosa de sobrecarga académica ({scores.sobrecarga:.1f}/10) "
                    f"y agotamiento ({scores.agotamiento:.1f}/10) detectada. "
                    "Se sugiere revisión urgente de la carga académica."
                ),
                nivel_prioridad=AlertPriority.ALTA,
            )
        )

    tier = classify(scores)
    if tier is RiskTier.ALTO:
        alerts.append(
            AlertDraft(
                tipo=AlertKind.RIESGO_ALTO_GENERAL,
                mensaje=(
                    "Múltiples factores de riesgo psicosocial detectados con promedio general de "
                    f"{average(scores):.1f}/10. Se sugiere evaluación psicológica profesional."
                ),
                nivel_prioridad=AlertPriority.ALTA,
            )
        )

    if previous is not None:
        deterioration = detect_deterioration(scores, previous, threshold=deterioration_threshold)
        if deterioration.detected:
            alerts.append(
                AlertDraft(
                    tipo=AlertKind.DETERIORO_PROGRESIVO,
                    mensaje=(
                        f"Deterioro progresivo detectado: {deterioration.details}. "
                        "Monitoreo cercano recomendado."
                    ),
                    nivel_prioridad=AlertPriority.MEDIA,
                )
            )
    elif tier is RiskTier.ALTO:
        alerts.append(
            AlertDraft(
                tipo=AlertKind.PRIMERA_EVALUACION_ALTA,
                mensaje=(
                    "Primera evaluación muestra niveles altos de riesgo. "
                    "Se recomienda seguimiento inmediato y recursos de apoyo."
                ),
                nivel_prioridad=AlertPriority.MEDIA,
            )
        )

    return alerts


def recommendations_for(kinds: Iterable[AlertKind | str]) -> Recommendations:
    immediate: list[str] = []
    short_term: list[str] = []
    long_term: list[str] = []

    for raw in kinds:
        kind = AlertKind(raw)
        if kind is AlertKind.ESTRES_CRITICO:
            immediate.append("Aplicar técnicas de respiración y relajación")
            short_term.append("Programar sesión con servicio de bienestar estudiantil")
            long_term.append("Implementar estrategias de manejo del estrés")
        elif kind is AlertKind.BURNOUT_CRITICO:
            immediate.append("Contactar servicio de apoyo psicológico")
            short_term.append("Evaluar reducción temporal de carga académica")
            long_term.append("Desarrollar plan de recuperación y prevención")
        elif kind is AlertKind.SOBRECARGA_AGOTAMIENTO:
            immediate.append("Revisar y priorizar tareas académicas")
            short_term.append("Implementar técnicas de gestión del tiempo")
            long_term.append("Establecer límites saludables en compromisos académicos")
        else:
            short_term.append("Monitorear de cerca el progreso del estudiante")

    return Recommendations(
        immediate=_dedupe(immediate),
        short_term=_dedupe(short_term),
        long_term=_dedupe(long_term),
    )


def urgency(
    *,
    priority: AlertPriority | str,
    kind: AlertKind | str,
    created_at: datetime,
    recent_alerts: Sequence[Any] = (),
    now: datetime | None = None,
) -> int:
    """
    Score how soon a coordinator should look at an alert.

    recent_alerts items need `tipo` and `leida` attributes; each unread one of
    the same kind adds 5. Age subtracts 2 per day, capped at 20.
    """

    score = _PRIORITY_BASE_URGENCY.get(AlertPriority(priority), 0)
    kind_value = AlertKind(kind)
    similar = [
        item for item in recent_alerts
        if AlertKind(item.tipo) is kind_value and not item.leida
    ]
    score += len(similar) * 5

    current = now or datetime.now(timezone.utc)
    days = max(0, (current - created_at).days)
    score -= min(days * 2, 20)
    return max(score, 0)


def max_priority(priorities: Iterable[AlertPriority | str]) -> AlertPriority:
    best = AlertPriority.BAJA
    for raw in priorities:
        value = AlertPriority(raw)
        if PRIORITY_ORDER.index(value) > PRIORITY_ORDER.index(best):
            best = value
    return best


def priority_rank(priority: AlertPriority | str) -> int:
    # CRITICA first when sorting ascending.
    return len(PRIORITY_ORDER) - 1 - PRIORITY_ORDER.index(AlertPriority(priority))


def group_by_student(alerts: Sequence[Any]) -> list[dict[str, Any]]:
    grouped: dict[int, dict[str, Any]] = {}
    for alert in alerts:
        entry = grouped.setdefault(
            alert.estudiante_id,
            {
                "estudiante_id": alert.estudiante_id,
                "alertas": [],
                "total_alertas": 0,
                "alertas_no_leidas": 0,
                "max_prioridad": AlertPriority.BAJA,
            },
        )
        entry["alertas"].append(alert)
        entry["total_alertas"] += 1
        if not alert.leida:
            entry["alertas_no_leidas"] += 1
        entry["max_prioridad"] = max_priority([entry["max_prioridad"], alert.nivel_prioridad])
    return list(grouped.values())


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        output.append(item)
    return output
