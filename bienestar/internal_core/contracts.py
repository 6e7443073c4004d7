from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from bienestar.alerts.rules import AlertKind, AlertPriority
from bienestar.risk.classifier import RiskTier, ScoreSet

Category = Literal["estres", "agotamiento", "sobrecarga", "burnout"]


class ScoreSetModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    estres: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)
    agotamiento: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)
    sobrecarga: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)
    burnout: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)

    def to_score_set(self) -> ScoreSet:
        return ScoreSet.from_mapping(self.model_dump())

    @classmethod
    def from_score_set(cls, scores: ScoreSet) -> "ScoreSetModel":
        return cls(**scores.as_dict())


class StudentRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    nombre_completo: str
    correo: str
    carrera: str
    semestre: int = Field(ge=1, le=12)
    estado_riesgo: Optional[RiskTier] = None
    puntajes_actuales: Optional[ScoreSetModel] = None
    fecha_ultima_evaluacion: Optional[datetime] = None
    activo: bool = True
    fecha_registro: datetime


class QuestionItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    texto: str
    categoria: Category
    orden: int


class ResourceItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    titulo: str
    descripcion: str
    tipo_recurso: Literal["VIDEO", "ARTICULO", "EJERCICIO", "TECNICA"]
    url_contenido: str
    categoria: str


class AnswerItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pregunta_id: int = Field(ge=1)
    valor: int = Field(ge=0, le=4)


class EvaluationRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    estudiante_id: int
    fecha_evaluacion: datetime
    puntajes: ScoreSetModel
    promedio_general: float
    nivel_riesgo: RiskTier
    respuestas: List[AnswerItem] = Field(default_factory=list)
    tiempo_completado: Optional[int] = None


class AlertRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    estudiante_id: int
    evaluacion_id: Optional[int] = None
    tipo: AlertKind
    mensaje: str
    nivel_prioridad: AlertPriority
    leida: bool = False
    fecha_alerta: datetime
    fecha_leida: Optional[datetime] = None


class ActivityEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ts_iso: str
    actor: str
    action: str
    detail: str = ""
