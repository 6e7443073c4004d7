from __future__ import annotations

from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bienestar.alerts.rules import AlertDraft, AlertPriority, priority_rank
from bienestar.risk.classifier import RiskTier, ScoreSet, average, classify

from .contracts import (
    ActivityEvent,
    AlertRecord,
    AnswerItem,
    EvaluationRecord,
    QuestionItem,
    ResourceItem,
    ScoreSetModel,
    StudentRecord,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    def __init__(
        self,
        *,
        questions: Sequence[QuestionItem] = (),
        resources: Sequence[ResourceItem] = (),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._clock = clock or _utc_now
        self._lock = RLock()
        self._students: Dict[int, StudentRecord] = {}
        self._evaluations: Dict[int, EvaluationRecord] = {}
        self._alerts: Dict[int, AlertRecord] = {}
        self._activity: List[ActivityEvent] = []
        self._questions: List[QuestionItem] = sorted(questions, key=lambda item: item.orden)
        self._resources: List[ResourceItem] = list(resources)
        self._next_ids = {"student": 1, "evaluation": 1, "alert": 1}

    def now(self) -> datetime:
        return self._clock()

    def _next_id(self, kind: str) -> int:
        value = self._next_ids[kind]
        self._next_ids[kind] = value + 1
        return value

    # Catalog

    def list_questions(self) -> List[QuestionItem]:
        with self._lock:
            return list(self._questions)

    def question_categories(self) -> Dict[int, str]:
        with self._lock:
            return {item.id: item.categoria for item in self._questions}

    def list_resources(self) -> List[ResourceItem]:
        with self._lock:
            return sorted(self._resources, key=lambda item: (item.categoria, item.titulo))

    # Students

    def create_student(
        self,
        *,
        nombre_completo: str,
        correo: str,
        carrera: str,
        semestre: int,
    ) -> StudentRecord:
        normalized_email = correo.strip().lower()
        with self._lock:
            if any(item.correo == normalized_email for item in self._students.values()):
                raise ValueError(f"Student already registered: {normalized_email}")
            record = StudentRecord(
                id=self._next_id("student"),
                nombre_completo=nombre_completo.strip(),
                correo=normalized_email,
                carrera=carrera.strip(),
                semestre=semestre,
                fecha_registro=self.now(),
            )
            self._students[record.id] = record
            return record.model_copy(deep=True)

    def get_student(self, student_id: int) -> StudentRecord:
        with self._lock:
            student = self._students.get(student_id)
            if student is None:
                raise KeyError(f"Unknown student_id: {student_id}")
            return student.model_copy(deep=True)

    def list_students(self, *, riesgo: Optional[RiskTier] = None) -> List[StudentRecord]:
        with self._lock:
            items = [
                item.model_copy(deep=True)
                for item in self._students.values()
                if riesgo is None or item.estado_riesgo == riesgo
            ]
        return sorted(items, key=lambda item: item.id)

    # Evaluations

    def record_evaluation(
        self,
        student_id: int,
        scores: ScoreSet,
        *,
        respuestas: Sequence[AnswerItem] = (),
        tiempo_completado: Optional[int] = None,
    ) -> EvaluationRecord:
        with self._lock:
            student = self._students.get(student_id)
            if student is None:
                raise KeyError(f"Unknown student_id: {student_id}")
            now = self.now()
            tier = classify(scores)
            puntajes = ScoreSetModel.from_score_set(scores)
            record = EvaluationRecord(
                id=self._next_id("evaluation"),
                estudiante_id=student_id,
                fecha_evaluacion=now,
                puntajes=puntajes,
                promedio_general=average(scores),
                nivel_riesgo=tier,
                respuestas=list(respuestas),
                tiempo_completado=tiempo_completado,
            )
            self._evaluations[record.id] = record
            self._students[student_id] = student.model_copy(
                update={
                    "estado_riesgo": tier,
                    "puntajes_actuales": puntajes,
                    "fecha_ultima_evaluacion": now,
                }
            )
            return record.model_copy(deep=True)

    def _student_evaluations(self, student_id: int) -> List[EvaluationRecord]:
        # Newest first; id breaks ties between evaluations in the same instant.
        return sorted(
            (item for item in self._evaluations.values() if item.estudiante_id == student_id),
            key=lambda item: (item.fecha_evaluacion, item.id),
            reverse=True,
        )

    def list_evaluations(
        self,
        student_id: int,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List[EvaluationRecord], int]:
        with self._lock:
            if student_id not in self._students:
                raise KeyError(f"Unknown student_id: {student_id}")
            items = self._student_evaluations(student_id)
            total = len(items)
            end = None if limit is None else offset + limit
            return [item.model_copy(deep=True) for item in items[offset:end]], total

    def latest_evaluation(self, student_id: int) -> Optional[EvaluationRecord]:
        items, _ = self.list_evaluations(student_id, limit=1)
        return items[0] if items else None

    def count_evaluations_since(self, student_id: int, since: datetime) -> int:
        with self._lock:
            return sum(
                1
                for item in self._evaluations.values()
                if item.estudiante_id == student_id and item.fecha_evaluacion >= since
            )

    def list_all_evaluations(self, *, since: Optional[datetime] = None) -> List[EvaluationRecord]:
        with self._lock:
            items = [
                item.model_copy(deep=True)
                for item in self._evaluations.values()
                if since is None or item.fecha_evaluacion >= since
            ]
        return sorted(items, key=lambda item: (item.fecha_evaluacion, item.id))

    def latest_evaluations_by_student(self) -> List[EvaluationRecord]:
        with self._lock:
            latest: Dict[int, EvaluationRecord] = {}
            for item in self._evaluations.values():
                current = latest.get(item.estudiante_id)
                if current is None or (item.fecha_evaluacion, item.id) > (
                    current.fecha_evaluacion,
                    current.id,
                ):
                    latest[item.estudiante_id] = item
            return [item.model_copy(deep=True) for item in latest.values()]

    # Alerts

    def add_alert(
        self,
        student_id: int,
        draft: AlertDraft,
        *,
        evaluation_id: Optional[int] = None,
    ) -> AlertRecord:
        with self._lock:
            if student_id not in self._students:
                raise KeyError(f"Unknown student_id: {student_id}")
            record = AlertRecord(
                id=self._next_id("alert"),
                estudiante_id=student_id,
                evaluacion_id=evaluation_id,
                tipo=draft.tipo,
                mensaje=draft.mensaje,
                nivel_prioridad=draft.nivel_prioridad,
                fecha_alerta=self.now(),
            )
            self._alerts[record.id] = record
            return record.model_copy(deep=True)

    def list_alerts(
        self,
        *,
        leida: Optional[bool] = None,
        nivel_prioridad: Optional[AlertPriority] = None,
        estudiante_id: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[AlertRecord]:
        with self._lock:
            items = [
                item.model_copy(deep=True)
                for item in self._alerts.values()
                if (leida is None or item.leida == leida)
                and (nivel_prioridad is None or item.nivel_prioridad == nivel_prioridad)
                and (estudiante_id is None or item.estudiante_id == estudiante_id)
                and (since is None or item.fecha_alerta >= since)
            ]
        # Highest priority first, newest first within a priority.
        items.sort(key=lambda item: (item.fecha_alerta, item.id), reverse=True)
        items.sort(key=lambda item: priority_rank(item.nivel_prioridad))
        return items

    def mark_alert_read(self, alert_id: int) -> AlertRecord:
        with self._lock:
            alert = self._alerts.get(alert_id)
            if alert is None:
                raise KeyError(f"Unknown alert_id: {alert_id}")
            if not alert.leida:
                alert = alert.model_copy(update={"leida": True, "fecha_leida": self.now()})
                self._alerts[alert_id] = alert
            return alert.model_copy(deep=True)

    def mark_alerts_read(self, alert_ids: Sequence[int]) -> int:
        updated = 0
        with self._lock:
            for alert_id in dict.fromkeys(alert_ids):
                if alert_id not in self._alerts:
                    continue
                self.mark_alert_read(alert_id)
                updated += 1
        return updated

    # Activity

    def append_activity(self, event: ActivityEvent) -> None:
        with self._lock:
            self._activity.append(event)

    def list_activity(self) -> List[ActivityEvent]:
        with self._lock:
            return list(self._activity)
