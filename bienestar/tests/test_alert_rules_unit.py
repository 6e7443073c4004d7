from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from bienestar.alerts.rules import (
    AlertKind,
    AlertPriority,
    build_alerts,
    group_by_student,
    max_priority,
    recommendations_for,
    urgency,
)
from bienestar.risk.classifier import ScoreSet


def _scores(estres: float, agotamiento: float, sobrecarga: float, burnout: float) -> ScoreSet:
    return ScoreSet(estres=estres, agotamiento=agotamiento, sobrecarga=sobrecarga, burnout=burnout)


def test_low_scores_generate_no_alerts() -> None:
    assert build_alerts(_scores(2, 2, 2, 2)) == []


def test_all_max_first_evaluation_generates_every_rule_in_order() -> None:
    alerts = build_alerts(_scores(10, 10, 10, 10))
    assert [item.tipo for item in alerts] == [
        AlertKind.ESTRES_CRITICO,
        AlertKind.BURNOUT_CRITICO,
        AlertKind.SOBRECARGA_AGOTAMIENTO,
        AlertKind.RIESGO_ALTO_GENERAL,
        AlertKind.PRIMERA_EVALUACION_ALTA,
    ]
    assert [item.nivel_prioridad for item in alerts] == [
        AlertPriority.ALTA,
        AlertPriority.CRITICA,
        AlertPriority.ALTA,
        AlertPriority.ALTA,
        AlertPriority.MEDIA,
    ]
    assert "10.0/10" in alerts[0].mensaje


def test_category_thresholds_are_inclusive() -> None:
    kinds = [item.tipo for item in build_alerts(_scores(8.0, 0, 0, 0))]
    assert kinds == [AlertKind.ESTRES_CRITICO]

    kinds = [item.tipo for item in build_alerts(_scores(7.99, 0, 0, 7.99))]
    assert kinds == []

    kinds = [item.tipo for item in build_alerts(_scores(0, 7.0, 7.0, 0))]
    assert kinds == [AlertKind.SOBRECARGA_AGOTAMIENTO]

    kinds = [item.tipo for item in build_alerts(_scores(0, 7.0, 6.9, 0))]
    assert kinds == []


def test_high_risk_with_previous_skips_first_evaluation_alert() -> None:
    previous = _scores(7, 7, 7, 7)
    alerts = build_alerts(_scores(7, 7, 7, 7), previous)
    kinds = [item.tipo for item in alerts]
    assert AlertKind.RIESGO_ALTO_GENERAL in kinds
    assert AlertKind.PRIMERA_EVALUACION_ALTA not in kinds
    assert AlertKind.DETERIORO_PROGRESIVO not in kinds


def test_progressive_deterioration_alert() -> None:
    alerts = build_alerts(_scores(5, 5, 5, 5), _scores(2.5, 2.5, 2.5, 2.5))
    assert len(alerts) == 1
    assert alerts[0].tipo is AlertKind.DETERIORO_PROGRESIVO
    assert alerts[0].nivel_prioridad is AlertPriority.MEDIA
    assert "estres: +2.5 puntos" in alerts[0].mensaje


def test_deterioration_threshold_is_configurable() -> None:
    alerts = build_alerts(_scores(5, 5, 5, 5), _scores(2.5, 2.5, 2.5, 2.5), deterioration_threshold=3.0)
    assert alerts == []


def test_recommendations_per_alert_kind() -> None:
    recs = recommendations_for([AlertKind.ESTRES_CRITICO, "RIESGO_ALTO_GENERAL", AlertKind.DETERIORO_PROGRESIVO])
    assert recs.immediate == ["Aplicar técnicas de respiración y relajación"]
    assert recs.short_term == [
        "Programar sesión con servicio de bienestar estudiantil",
        "Monitorear de cerca el progreso del estudiante",
    ]
    assert recs.long_term == ["Implementar estrategias de manejo del estrés"]


def test_urgency_combines_priority_history_and_age() -> None:
    now = datetime(2026, 10, 14, 12, tzinfo=timezone.utc)
    history = [
        SimpleNamespace(tipo="ESTRES_CRITICO", leida=False),
        SimpleNamespace(tipo="ESTRES_CRITICO", leida=True),
        SimpleNamespace(tipo="BURNOUT_CRITICO", leida=False),
    ]
    assert urgency(priority="CRITICA", kind="BURNOUT_CRITICO", created_at=now, now=now) == 40
    assert (
        urgency(priority="ALTA", kind="ESTRES_CRITICO", created_at=now, recent_alerts=history, now=now)
        == 35
    )
    assert urgency(priority="MEDIA", kind="DETERIORO_PROGRESIVO", created_at=now - timedelta(days=3), now=now) == 14
    assert urgency(priority="BAJA", kind="DETERIORO_PROGRESIVO", created_at=now - timedelta(days=30), now=now) == 0


def test_max_priority_and_grouping() -> None:
    assert max_priority([]) is AlertPriority.BAJA
    assert max_priority(["MEDIA", "CRITICA", "ALTA"]) is AlertPriority.CRITICA

    alerts = [
        SimpleNamespace(estudiante_id=1, leida=False, nivel_prioridad="MEDIA"),
        SimpleNamespace(estudiante_id=2, leida=True, nivel_prioridad="ALTA"),
        SimpleNamespace(estudiante_id=1, leida=True, nivel_prioridad="CRITICA"),
    ]
    grouped = {entry["estudiante_id"]: entry for entry in group_by_student(alerts)}
    assert grouped[1]["total_alertas"] == 2
    assert grouped[1]["alertas_no_leidas"] == 1
    assert grouped[1]["max_prioridad"] is AlertPriority.CRITICA
    assert grouped[2]["alertas_no_leidas"] == 0
    assert grouped[2]["max_prioridad"] is AlertPriority.ALTA
