from __future__ import annotations

"""
HTTP API surface for the bienestar service.

Design intent:
- Keep API orchestration thin and typed.
- Delegate scoring, classification and alert rules to domain modules.
- Translate domain exceptions into HTTP status codes at this boundary only.
"""

import logging
from datetime import datetime
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bienestar.alerts.rules import (
    AlertPriority,
    build_alerts,
    group_by_student,
    recommendations_for,
    urgency,
)
from bienestar.internal_core.audit import log_activity
from bienestar.internal_core.catalog import DEFAULT_QUESTIONS, DEFAULT_RESOURCES, personalized_resources
from bienestar.internal_core.config import AppConfig, load_config
from bienestar.internal_core.contracts import (
    AlertRecord,
    AnswerItem,
    EvaluationRecord,
    QuestionItem,
    ResourceItem,
    ScoreSetModel,
    StudentRecord,
)
from bienestar.internal_core.store import InMemoryStore
from bienestar.internal_core.weekly_limit import check_weekly_limit, week_start
from bienestar.risk.classifier import RiskTier, average, classify
from bienestar.risk.labels import ANSWER_SCALE, RISK_LEVELS, all_labels, score_tone
from bienestar.risk.scoring import ScoringError, score_answers, trend
from bienestar.stats.summary import (
    alert_stats,
    career_distribution,
    category_averages,
    general_average,
    risk_by_semester,
    risk_distribution,
    weekly_trends,
)


class ClassifyResponse(BaseModel):
    nivel_riesgo: RiskTier
    promedio_general: float
    etiqueta: str
    descripcion: str


class StudentCreateRequest(BaseModel):
    nombre_completo: str = Field(min_length=2, max_length=255)
    correo: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    carrera: str = Field(min_length=2, max_length=255)
    semestre: int = Field(ge=1, le=12)


class EvaluationSubmitRequest(BaseModel):
    respuestas: list[AnswerItem] = Field(min_length=1, max_length=200)
    tiempo_completado: int | None = Field(default=None, ge=0)


class RecommendationsPayload(BaseModel):
    immediate: list[str] = Field(default_factory=list)
    short_term: list[str] = Field(default_factory=list)
    long_term: list[str] = Field(default_factory=list)


class EvaluationSubmitResponse(BaseModel):
    evaluacion: EvaluationRecord
    alertas: list[AlertRecord] = Field(default_factory=list)
    resumen: str
    prioridad: Literal["urgent", "moderate", "low"]
    recomendaciones: RecommendationsPayload


class PaginationInfo(BaseModel):
    total: int = Field(ge=0)
    pagina: int = Field(ge=1)
    limite: int = Field(ge=1)
    total_paginas: int = Field(ge=0)


class EvaluationHistoryResponse(BaseModel):
    evaluaciones: list[EvaluationRecord] = Field(default_factory=list)
    paginacion: PaginationInfo


class QuestionnaireResponse(BaseModel):
    preguntas: list[QuestionItem] = Field(default_factory=list)
    por_categoria: dict[str, list[QuestionItem]] = Field(default_factory=dict)
    escala: list[dict[str, Any]] = Field(default_factory=list)
    total_preguntas: int = Field(ge=0)


class ResourcesResponse(BaseModel):
    categorias: list[str] = Field(default_factory=list)
    recursos: dict[str, list[ResourceItem]] = Field(default_factory=dict)


class PersonalizedResourcesResponse(BaseModel):
    categorias_prioritarias: list[str] = Field(default_factory=list)
    recursos: list[ResourceItem] = Field(default_factory=list)


class WeeklyStatusPayload(BaseModel):
    puede_evaluar: bool
    evaluaciones_semana: int = Field(ge=0)
    limite: int = Field(ge=1)
    razon: str | None = None
    proxima_disponible: datetime | None = None


class StudentDashboardResponse(BaseModel):
    estudiante: StudentRecord
    evaluacion_semanal: WeeklyStatusPayload
    estadisticas: dict[str, Any] = Field(default_factory=dict)
    evaluaciones_recientes: list[EvaluationRecord] = Field(default_factory=list)
    alertas_activas: list[AlertRecord] = Field(default_factory=list)


class AlertListItem(AlertRecord):
    estudiante_nombre: str = ""
    urgencia: int = Field(default=0, ge=0)


class AlertListResponse(BaseModel):
    alertas: list[AlertListItem] = Field(default_factory=list)
    paginacion: PaginationInfo


class MarkAlertsReadRequest(BaseModel):
    alert_ids: list[int] = Field(min_length=1, max_length=500)


class MarkAlertsReadResponse(BaseModel):
    actualizadas: int = Field(ge=0)


class CoordinatorStudentItem(BaseModel):
    estudiante: StudentRecord
    alertas_no_leidas: int = Field(ge=0)
    ultima_evaluacion: EvaluationRecord | None = None


class CoordinatorStudentDetailResponse(BaseModel):
    estudiante: StudentRecord
    evaluaciones: list[EvaluationRecord] = Field(default_factory=list)
    alertas: list[AlertRecord] = Field(default_factory=list)
    tendencia: str
    recomendaciones: RecommendationsPayload


app = FastAPI(title="bienestar backend service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_COORDINATOR_ACTOR = "coordinador"


def _get_config() -> AppConfig:
    existing = getattr(app.state, "config", None)
    if isinstance(existing, AppConfig):
        return existing
    created = load_config()
    logging.getLogger("bienestar").setLevel(created.BIENESTAR_LOG_LEVEL.upper())
    setattr(app.state, "config", created)
    return created


def _get_store() -> InMemoryStore:
    existing = getattr(app.state, "store", None)
    if isinstance(existing, InMemoryStore):
        return existing
    config = _get_config()
    if config.BIENESTAR_SEED_CATALOG:
        created = InMemoryStore(questions=DEFAULT_QUESTIONS, resources=DEFAULT_RESOURCES)
    else:
        created = InMemoryStore()
    setattr(app.state, "store", created)
    return created


def _require_student(store: InMemoryStore, student_id: int) -> StudentRecord:
    try:
        return store.get_student(student_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Estudiante no encontrado: {student_id}") from exc


def _pagination(total: int, pagina: int, limite: int) -> PaginationInfo:
    return PaginationInfo(
        total=total,
        pagina=pagina,
        limite=limite,
        total_paginas=(total + limite - 1) // limite,
    )


def _summary_for(tier: RiskTier, promedio: float) -> tuple[str, Literal["urgent", "moderate", "low"]]:
    rounded = round(promedio)
    if tier is RiskTier.ALTO:
        return (
            f"Tu evaluación indica un nivel de riesgo ALTO ({rounded}/10). "
            "Es importante que busques apoyo profesional y implementes estrategias de manejo inmediatas.",
            "urgent",
        )
    if tier is RiskTier.MEDIO:
        return (
            f"Tu evaluación muestra un nivel de riesgo MEDIO ({rounded}/10). "
            "Es recomendable implementar técnicas de manejo del estrés y monitorear tu bienestar.",
            "moderate",
        )
    return (
        f"Tu evaluación indica un nivel de riesgo BAJO ({rounded}/10). "
        "Mantén tus hábitos actuales de autocuidado.",
        "low",
    )


def _weekly_status(store: InMemoryStore, student_id: int) -> WeeklyStatusPayload:
    config = _get_config()
    now = store.now()
    used = store.count_evaluations_since(student_id, week_start(now))
    status = check_weekly_limit(used, config.BIENESTAR_WEEKLY_EVALUATION_LIMIT, now)
    return WeeklyStatusPayload(
        puede_evaluar=status.allowed,
        evaluaciones_semana=status.used,
        limite=status.limit,
        razon=status.reason,
        proxima_disponible=None if status.allowed else status.next_window,
    )


def _student_trend(store: InMemoryStore, student_id: int) -> str:
    items, _ = store.list_evaluations(student_id, limit=2)
    latest = items[0].puntajes.to_score_set() if items else None
    previous = items[1].puntajes.to_score_set() if len(items) > 1 else None
    return trend(latest, previous)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/risk/classify", response_model=ClassifyResponse)
async def risk_classify(payload: ScoreSetModel) -> ClassifyResponse:
    scores = payload.to_score_set()
    tier = classify(scores)
    info = RISK_LEVELS[tier.value]
    return ClassifyResponse(
        nivel_riesgo=tier,
        promedio_general=average(scores),
        etiqueta=info["label"],
        descripcion=info["description"],
    )


@app.get("/catalog/labels")
async def catalog_labels() -> dict[str, Any]:
    return all_labels()


@app.get("/evaluations/questions", response_model=QuestionnaireResponse)
async def evaluation_questions() -> QuestionnaireResponse:
    questions = _get_store().list_questions()
    grouped: dict[str, list[QuestionItem]] = {}
    for item in questions:
        grouped.setdefault(item.categoria, []).append(item)
    return QuestionnaireResponse(
        preguntas=questions,
        por_categoria=grouped,
        escala=ANSWER_SCALE,
        total_preguntas=len(questions),
    )


@app.get("/resources", response_model=ResourcesResponse)
async def list_resources() -> ResourcesResponse:
    grouped: dict[str, list[ResourceItem]] = {}
    for item in _get_store().list_resources():
        grouped.setdefault(item.categoria or "General", []).append(item)
    return ResourcesResponse(categorias=list(grouped.keys()), recursos=grouped)


@app.get("/students/{student_id}/resources", response_model=PersonalizedResourcesResponse)
async def student_resources(student_id: int) -> PersonalizedResourcesResponse:
    store = _get_store()
    _require_student(store, student_id)
    latest = store.latest_evaluation(student_id)
    focus, resources = personalized_resources(
        store.list_resources(),
        latest.puntajes.to_score_set() if latest is not None else None,
    )
    return PersonalizedResourcesResponse(categorias_prioritarias=focus, recursos=resources)


@app.post("/students", response_model=StudentRecord, status_code=201)
async def create_student(payload: StudentCreateRequest) -> StudentRecord:
    store = _get_store()
    try:
        student = store.create_student(
            nombre_completo=payload.nombre_completo,
            correo=payload.correo,
            carrera=payload.carrera,
            semestre=payload.semestre,
        )
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    logger.info("student_registered student_id=%s carrera=%s", student.id, student.carrera)
    return student


@app.get("/students/{student_id}", response_model=StudentRecord)
async def get_student(student_id: int) -> StudentRecord:
    return _require_student(_get_store(), student_id)


@app.post(
    "/students/{student_id}/evaluations",
    response_model=EvaluationSubmitResponse,
    status_code=201,
)
async def submit_evaluation(student_id: int, payload: EvaluationSubmitRequest) -> EvaluationSubmitResponse:
    store = _get_store()
    config = _get_config()
    _require_student(store, student_id)

    weekly = _weekly_status(store, student_id)
    if not weekly.puede_evaluar:
        logger.info(
            "evaluation_rejected student_id=%s reason=weekly_limit used=%s limit=%s",
            student_id,
            weekly.evaluaciones_semana,
            weekly.limite,
        )
        raise HTTPException(status_code=429, detail=weekly.razon)

    try:
        scores = score_answers(
            store.question_categories(),
            [(item.pregunta_id, item.valor) for item in payload.respuestas],
        )
    except ScoringError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    previous = store.latest_evaluation(student_id)
    evaluation = store.record_evaluation(
        student_id,
        scores,
        respuestas=payload.respuestas,
        tiempo_completado=payload.tiempo_completado,
    )
    drafts = build_alerts(
        scores,
        previous.puntajes.to_score_set() if previous is not None else None,
        deterioration_threshold=config.BIENESTAR_DETERIORATION_THRESHOLD,
    )
    alerts = [store.add_alert(student_id, draft, evaluation_id=evaluation.id) for draft in drafts]

    logger.info(
        "evaluation_recorded student_id=%s evaluation_id=%s tier=%s average=%.2f alerts=%s",
        student_id,
        evaluation.id,
        evaluation.nivel_riesgo.value,
        evaluation.promedio_general,
        len(alerts),
    )

    resumen, prioridad = _summary_for(evaluation.nivel_riesgo, evaluation.promedio_general)
    recommendations = recommendations_for(item.tipo for item in alerts)
    return EvaluationSubmitResponse(
        evaluacion=evaluation,
        alertas=alerts,
        resumen=resumen,
        prioridad=prioridad,
        recomendaciones=RecommendationsPayload(
            immediate=recommendations.immediate,
            short_term=recommendations.short_term,
            long_term=recommendations.long_term,
        ),
    )


@app.get("/students/{student_id}/evaluations", response_model=EvaluationHistoryResponse)
async def evaluation_history(
    student_id: int,
    pagina: int = Query(default=1, ge=1),
    limite: int | None = Query(default=None, ge=1),
) -> EvaluationHistoryResponse:
    store = _get_store()
    _require_student(store, student_id)
    page_size = _get_config().clamp_page_size(limite)
    items, total = store.list_evaluations(
        student_id,
        offset=(pagina - 1) * page_size,
        limit=page_size,
    )
    return EvaluationHistoryResponse(
        evaluaciones=items,
        paginacion=_pagination(total, pagina, page_size),
    )


@app.get("/students/{student_id}/dashboard", response_model=StudentDashboardResponse)
async def student_dashboard(student_id: int) -> StudentDashboardResponse:
    store = _get_store()
    student = _require_student(store, student_id)
    recent, total = store.list_evaluations(student_id, limit=5)
    all_items, _ = store.list_evaluations(student_id)
    active_alerts = store.list_alerts(estudiante_id=student_id, leida=False)
    current = student.puntajes_actuales.model_dump() if student.puntajes_actuales else {}

    return StudentDashboardResponse(
        estudiante=student,
        evaluacion_semanal=_weekly_status(store, student_id),
        estadisticas={
            "total_evaluaciones": total,
            "promedios": category_averages(all_items),
            "promedio_general": general_average(all_items),
            "tendencia": _student_trend(store, student_id),
            "tonos": {name: score_tone(value) for name, value in current.items()},
        },
        evaluaciones_recientes=recent,
        alertas_activas=active_alerts[:3],
    )


@app.get("/coordinators/dashboard")
async def coordinator_dashboard() -> dict[str, Any]:
    store = _get_store()
    config = _get_config()
    log_activity(store, _COORDINATOR_ACTOR, "ver_dashboard_coordinador")

    students = store.list_students()
    latest = store.latest_evaluations_by_student()
    alerts = store.list_alerts()
    names = {item.id: item.nombre_completo for item in students}
    high_risk = [item for item in students if item.estado_riesgo is RiskTier.ALTO]
    recent_alerts = sorted(alerts, key=lambda item: (item.fecha_alerta, item.id), reverse=True)[:10]

    return {
        "resumen_general": {
            "total_estudiantes": len(students),
            "distribucion_riesgo": risk_distribution(students),
            "promedios_categoria": category_averages(latest),
            "promedio_general": general_average(latest),
            "alertas_no_leidas": sum(1 for item in alerts if not item.leida),
        },
        "estudiantes_riesgo_alto": high_risk[:10],
        "alertas_recientes": [
            {**item.model_dump(mode="json"), "estudiante_nombre": names.get(item.estudiante_id, "")}
            for item in recent_alerts
        ],
        "estadisticas_alertas": alert_stats(
            alerts,
            now=store.now(),
            days=config.BIENESTAR_ALERT_STATS_DAYS,
        ),
        "tendencias_semanales": weekly_trends(store.list_all_evaluations(), now=store.now()),
        "distribucion_carrera": career_distribution(students),
        "riesgo_por_semestre": risk_by_semester(students),
    }


@app.get("/coordinators/students", response_model=list[CoordinatorStudentItem])
async def coordinator_students(
    filtro_riesgo: RiskTier | None = Query(default=None),
) -> list[CoordinatorStudentItem]:
    store = _get_store()
    filtro = filtro_riesgo.value if filtro_riesgo else None
    log_activity(store, _COORDINATOR_ACTOR, "ver_lista_estudiantes", f"filtro={filtro}")
    output: list[CoordinatorStudentItem] = []
    for student in store.list_students(riesgo=filtro_riesgo):
        output.append(
            CoordinatorStudentItem(
                estudiante=student,
                alertas_no_leidas=len(store.list_alerts(estudiante_id=student.id, leida=False)),
                ultima_evaluacion=store.latest_evaluation(student.id),
            )
        )
    return output


@app.get("/coordinators/students/{student_id}", response_model=CoordinatorStudentDetailResponse)
async def coordinator_student_detail(student_id: int) -> CoordinatorStudentDetailResponse:
    store = _get_store()
    student = _require_student(store, student_id)
    log_activity(store, _COORDINATOR_ACTOR, "ver_detalles_estudiante", f"student_id={student_id}")
    evaluations, _ = store.list_evaluations(student_id)
    alerts = store.list_alerts(estudiante_id=student_id)
    recommendations = recommendations_for(item.tipo for item in alerts if not item.leida)
    return CoordinatorStudentDetailResponse(
        estudiante=student,
        evaluaciones=evaluations,
        alertas=alerts,
        tendencia=_student_trend(store, student_id),
        recomendaciones=RecommendationsPayload(
            immediate=recommendations.immediate,
            short_term=recommendations.short_term,
            long_term=recommendations.long_term,
        ),
    )


@app.get("/alerts", response_model=AlertListResponse)
async def list_alerts(
    leida: bool | None = Query(default=None),
    nivel_prioridad: AlertPriority | None = Query(default=None),
    estudiante_id: int | None = Query(default=None, ge=1),
    pagina: int = Query(default=1, ge=1),
    limite: int | None = Query(default=None, ge=1),
) -> AlertListResponse:
    store = _get_store()
    log_activity(store, _COORDINATOR_ACTOR, "ver_alertas")
    alerts = store.list_alerts(leida=leida, nivel_prioridad=nivel_prioridad, estudiante_id=estudiante_id)
    page_size = _get_config().clamp_page_size(limite)
    start = (pagina - 1) * page_size
    page = alerts[start : start + page_size]

    now = store.now()
    names = {item.id: item.nombre_completo for item in store.list_students()}
    history: dict[int, list[AlertRecord]] = {}
    items: list[AlertListItem] = []
    for alert in page:
        if alert.estudiante_id not in history:
            history[alert.estudiante_id] = store.list_alerts(estudiante_id=alert.estudiante_id)
        others = [item for item in history[alert.estudiante_id] if item.id != alert.id]
        items.append(
            AlertListItem(
                **alert.model_dump(),
                estudiante_nombre=names.get(alert.estudiante_id, ""),
                urgencia=urgency(
                    priority=alert.nivel_prioridad,
                    kind=alert.tipo,
                    created_at=alert.fecha_alerta,
                    recent_alerts=others,
                    now=now,
                ),
            )
        )
    return AlertListResponse(alertas=items, paginacion=_pagination(len(alerts), pagina, page_size))


@app.get("/alerts/grouped")
async def grouped_alerts(leida: bool | None = Query(default=None)) -> list[dict[str, Any]]:
    store = _get_store()
    names = {item.id: item for item in store.list_students()}
    output: list[dict[str, Any]] = []
    for entry in group_by_student(store.list_alerts(leida=leida)):
        student = names.get(entry["estudiante_id"])
        output.append(
            {
                **entry,
                "estudiante_nombre": student.nombre_completo if student else "",
                "estudiante_correo": student.correo if student else "",
                "estudiante_carrera": student.carrera if student else "",
            }
        )
    return output


@app.get("/alerts/stats")
async def alerts_stats(dias: int | None = Query(default=None, ge=1, le=365)) -> dict[str, Any]:
    store = _get_store()
    days = dias or _get_config().BIENESTAR_ALERT_STATS_DAYS
    return alert_stats(store.list_alerts(), now=store.now(), days=days)


@app.patch("/alerts/read-multiple", response_model=MarkAlertsReadResponse)
async def mark_alerts_read(payload: MarkAlertsReadRequest) -> MarkAlertsReadResponse:
    store = _get_store()
    updated = store.mark_alerts_read(payload.alert_ids)
    log_activity(store, _COORDINATOR_ACTOR, "marcar_alertas_leidas", f"count={updated}")
    return MarkAlertsReadResponse(actualizadas=updated)


@app.patch("/alerts/{alert_id}/read", response_model=AlertRecord)
async def mark_alert_read(alert_id: int) -> AlertRecord:
    store = _get_store()
    try:
        alert = store.mark_alert_read(alert_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Alerta no encontrada: {alert_id}") from exc
    log_activity(store, _COORDINATOR_ACTOR, "marcar_alerta_leida", f"alert_id={alert_id}")
    return alert
