from __future__ import annotations

"""
Aggregate statistics for the coordinator dashboard.

Design intent:
- Summarize current risk across students without exposing answers.
- Count alerts per priority, type and day inside a rolling window.
- Break students down by week, career and semester for coordinators.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Sequence

from bienestar.alerts.rules import PRIORITY_ORDER, priority_rank
from bienestar.internal_core.contracts import AlertRecord, EvaluationRecord, StudentRecord
from bienestar.internal_core.weekly_limit import week_start
from bienestar.risk.classifier import CATEGORIES


def risk_distribution(students: Sequence[StudentRecord]) -> dict[str, int]:
    counts = {"bajo": 0, "medio": 0, "alto": 0, "sin_evaluar": 0}
    for student in students:
        if student.estado_riesgo is None:
            counts["sin_evaluar"] += 1
        else:
            counts[student.estado_riesgo.value.lower()] += 1
    return counts


def category_averages(evaluations: Sequence[EvaluationRecord]) -> dict[str, float]:
    if not evaluations:
        return {name: 0.0 for name in CATEGORIES}
    totals = {name: 0.0 for name in CATEGORIES}
    for item in evaluations:
        for name in CATEGORIES:
            totals[name] += float(getattr(item.puntajes, name))
    return {name: round(total / len(evaluations), 1) for name, total in totals.items()}


def general_average(evaluations: Sequence[EvaluationRecord]) -> float:
    if not evaluations:
        return 0.0
    return round(sum(item.promedio_general for item in evaluations) / len(evaluations), 1)


def alert_stats(
    alerts: Sequence[AlertRecord],
    *,
    now: datetime,
    days: int = 30,
) -> dict[str, Any]:
    since = now - timedelta(days=days)
    window = [item for item in alerts if item.fecha_alerta >= since]

    by_priority: dict[str, dict[str, Any]] = {}
    for item in window:
        key = item.nivel_prioridad.value
        bucket = by_priority.setdefault(
            key, {"nivel_prioridad": key, "cantidad": 0, "no_leidas": 0}
        )
        bucket["cantidad"] += 1
        if not item.leida:
            bucket["no_leidas"] += 1
    priority_rows = sorted(by_priority.values(), key=lambda row: priority_rank(row["nivel_prioridad"]))

    type_counts = Counter(item.tipo.value for item in window)
    type_rows = [
        {"tipo": tipo, "cantidad": count}
        for tipo, count in sorted(type_counts.items(), key=lambda pair: (-pair[1], pair[0]))
    ]

    day_counts = Counter(item.fecha_alerta.date().isoformat() for item in window)
    day_rows = [{"fecha": day, "cantidad": count} for day, count in sorted(day_counts.items())]

    return {
        "dias": days,
        "por_prioridad": priority_rows,
        "por_tipo": type_rows,
        "tendencia_diaria": day_rows,
        "total": len(window),
        "prioridades": [item.value for item in reversed(PRIORITY_ORDER)],
    }


def weekly_trends(
    evaluations: Sequence[EvaluationRecord],
    *,
    now: datetime,
    weeks: int = 8,
) -> list[dict[str, Any]]:
    """Per-week evaluation count and mean estres/burnout, oldest week first."""
    since = now - timedelta(weeks=weeks)
    buckets: dict[str, dict[str, float]] = {}
    for item in evaluations:
        if item.fecha_evaluacion < since:
            continue
        key = week_start(item.fecha_evaluacion).date().isoformat()
        bucket = buckets.setdefault(key, {"evaluaciones": 0, "estres": 0.0, "burnout": 0.0})
        bucket["evaluaciones"] += 1
        bucket["estres"] += item.puntajes.estres
        bucket["burnout"] += item.puntajes.burnout
    return [
        {
            "semana": key,
            "evaluaciones": int(bucket["evaluaciones"]),
            "promedio_estres": round(bucket["estres"] / bucket["evaluaciones"], 1),
            "promedio_burnout": round(bucket["burnout"] / bucket["evaluaciones"], 1),
        }
        for key, bucket in sorted(buckets.items())
    ]


def career_distribution(students: Sequence[StudentRecord]) -> list[dict[str, Any]]:
    grouped: dict[str, list[StudentRecord]] = {}
    for student in students:
        grouped.setdefault(student.carrera, []).append(student)

    rows: list[dict[str, Any]] = []
    for carrera in sorted(grouped):
        members = grouped[carrera]
        scored = [item.puntajes_actuales for item in members if item.puntajes_actuales is not None]
        rows.append(
            {
                "carrera": carrera,
                "cantidad": len(members),
                "promedio_estres": round(sum(s.estres for s in scored) / len(scored), 1) if scored else None,
                "promedio_burnout": round(sum(s.burnout for s in scored) / len(scored), 1) if scored else None,
            }
        )
    return rows


def risk_by_semester(students: Sequence[StudentRecord]) -> list[dict[str, Any]]:
    counts = Counter((item.semestre, item.estado_riesgo) for item in students)
    # Unevaluated students sort before BAJO within a semester.
    ordered = sorted(
        counts.items(),
        key=lambda pair: (pair[0][0], -1 if pair[0][1] is None else pair[0][1].severity),
    )
    return [
        {
            "semestre": semestre,
            "estado_riesgo": tier.value if tier is not None else None,
            "cantidad": count,
        }
        for (semestre, tier), count in ordered
    ]
