from datetime import datetime, timedelta, timezone

from bienestar.alerts.rules import AlertKind, AlertPriority
from bienestar.internal_core.contracts import (
    AlertRecord,
    EvaluationRecord,
    ScoreSetModel,
    StudentRecord,
)
from bienestar.risk.classifier import RiskTier
from bienestar.stats.summary import (
    alert_stats,
    career_distribution,
    category_averages,
    general_average,
    risk_by_semester,
    risk_distribution,
    weekly_trends,
)

NOW = datetime(2026, 10, 14, 12, tzinfo=timezone.utc)


def _student(student_id: int, tier: RiskTier | None) -> StudentRecord:
    return StudentRecord(
        id=student_id,
        nombre_completo=f"Estudiante {student_id}",
        correo=f"e{student_id}@universidad.edu",
        carrera="Psicología",
        semestre=2,
        estado_riesgo=tier,
        fecha_registro=NOW,
    )


def _evaluation(evaluation_id: int, estres: float, burnout: float) -> EvaluationRecord:
    puntajes = ScoreSetModel(estres=estres, agotamiento=0.0, sobrecarga=0.0, burnout=burnout)
    return EvaluationRecord(
        id=evaluation_id,
        estudiante_id=evaluation_id,
        fecha_evaluacion=NOW,
        puntajes=puntajes,
        promedio_general=(estres + burnout) / 4,
        nivel_riesgo=RiskTier.BAJO,
    )


def _alert(alert_id: int, priority: AlertPriority, kind: AlertKind, age_days: float, leida: bool = False) -> AlertRecord:
    return AlertRecord(
        id=alert_id,
        estudiante_id=1,
        tipo=kind,
        mensaje="m",
        nivel_prioridad=priority,
        leida=leida,
        fecha_alerta=NOW - timedelta(days=age_days),
    )


def test_risk_distribution_counts_unevaluated_students() -> None:
    students = [
        _student(1, RiskTier.ALTO),
        _student(2, RiskTier.BAJO),
        _student(3, None),
        _student(4, RiskTier.ALTO),
    ]
    assert risk_distribution(students) == {"bajo": 1, "medio": 0, "alto": 2, "sin_evaluar": 1}


def test_category_and_general_averages() -> None:
    evaluations = [_evaluation(1, 8.0, 4.0), _evaluation(2, 5.0, 3.5)]
    averages = category_averages(evaluations)
    assert averages == {"estres": 6.5, "agotamiento": 0.0, "sobrecarga": 0.0, "burnout": 3.8}
    assert general_average(evaluations) == 2.6


def test_averages_of_empty_population_are_zero() -> None:
    assert category_averages([]) == {"estres": 0.0, "agotamiento": 0.0, "sobrecarga": 0.0, "burnout": 0.0}
    assert general_average([]) == 0.0


def test_alert_stats_window_and_grouping() -> None:
    alerts = [
        _alert(1, AlertPriority.ALTA, AlertKind.ESTRES_CRITICO, 0),
        _alert(2, AlertPriority.ALTA, AlertKind.ESTRES_CRITICO, 1, leida=True),
        _alert(3, AlertPriority.CRITICA, AlertKind.BURNOUT_CRITICO, 1),
        _alert(4, AlertPriority.MEDIA, AlertKind.DETERIORO_PROGRESIVO, 45),
    ]
    stats = alert_stats(alerts, now=NOW, days=30)

    assert stats["total"] == 3
    assert stats["dias"] == 30
    assert stats["por_prioridad"] == [
        {"nivel_prioridad": "CRITICA", "cantidad": 1, "no_leidas": 1},
        {"nivel_prioridad": "ALTA", "cantidad": 2, "no_leidas": 1},
    ]
    assert stats["por_tipo"] == [
        {"tipo": "ESTRES_CRITICO", "cantidad": 2},
        {"tipo": "BURNOUT_CRITICO", "cantidad": 1},
    ]
    assert stats["tendencia_diaria"] == [
        {"fecha": "2026-10-13", "cantidad": 2},
        {"fecha": "2026-10-14", "cantidad": 1},
    ]


def _dated_evaluation(evaluation_id: int, when: datetime, estres: float, burnout: float) -> EvaluationRecord:
    return _evaluation(evaluation_id, estres, burnout).model_copy(update={"fecha_evaluacion": when})


def test_weekly_trends_group_by_sunday_week() -> None:
    evaluations = [
        # Saturday before the current week.
        _dated_evaluation(1, datetime(2026, 10, 10, 9, tzinfo=timezone.utc), 4.0, 2.0),
        _dated_evaluation(2, datetime(2026, 10, 11, 1, tzinfo=timezone.utc), 6.0, 3.0),
        _dated_evaluation(3, datetime(2026, 10, 14, 8, tzinfo=timezone.utc), 7.0, 5.0),
        _dated_evaluation(4, NOW - timedelta(weeks=9), 10.0, 10.0),
    ]
    assert weekly_trends(evaluations, now=NOW) == [
        {"semana": "2026-10-04", "evaluaciones": 1, "promedio_estres": 4.0, "promedio_burnout": 2.0},
        {"semana": "2026-10-11", "evaluaciones": 2, "promedio_estres": 6.5, "promedio_burnout": 4.0},
    ]


def test_career_distribution_averages_evaluated_students() -> None:
    scored = _student(1, RiskTier.ALTO).model_copy(
        update={
            "carrera": "Medicina",
            "puntajes_actuales": ScoreSetModel(estres=8.0, agotamiento=1.0, sobrecarga=1.0, burnout=6.0),
        }
    )
    unscored = _student(2, None).model_copy(update={"carrera": "Medicina"})
    other = _student(3, None)
    assert career_distribution([scored, unscored, other]) == [
        {"carrera": "Medicina", "cantidad": 2, "promedio_estres": 8.0, "promedio_burnout": 6.0},
        {"carrera": "Psicología", "cantidad": 1, "promedio_estres": None, "promedio_burnout": None},
    ]


def test_risk_by_semester_counts_tiers() -> None:
    students = [
        _student(1, RiskTier.ALTO),
        _student(2, RiskTier.BAJO),
        _student(3, None),
        _student(4, RiskTier.ALTO).model_copy(update={"semestre": 1}),
    ]
    assert risk_by_semester(students) == [
        {"semestre": 1, "estado_riesgo": "ALTO", "cantidad": 1},
        {"semestre": 2, "estado_riesgo": None, "cantidad": 1},
        {"semestre": 2, "estado_riesgo": "BAJO", "cantidad": 1},
        {"semestre": 2, "estado_riesgo": "ALTO", "cantidad": 1},
    ]
