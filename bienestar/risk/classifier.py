from __future__ import annotations

"""
Map a student's four category scores to a discrete risk tier.

Design intent:
- Keep classification a pure, total function over validated ScoreSets.
- Reject invalid scores at construction so classify never has to.
- Boundary values (5.0, 7.0) belong to the higher tier.
"""

import math
from dataclasses import dataclass
from enum import Enum

SCORE_MIN = 0.0
SCORE_MAX = 10.0
ALTO_THRESHOLD = 7.0
MEDIO_THRESHOLD = 5.0

CATEGORIES: tuple[str, ...] = ("estres", "agotamiento", "sobrecarga", "burnout")


class RiskTier(str, Enum):
    BAJO = "BAJO"
    MEDIO = "MEDIO"
    ALTO = "ALTO"

    @property
    def severity(self) -> int:
        return _SEVERITY[self.value]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {"BAJO": 0, "MEDIO": 1, "ALTO": 2}


@dataclass(frozen=True)
class ScoreSet:
    estres: float
    agotamiento: float
    sobrecarga: float
    burnout: float

    def __post_init__(self) -> None:
        for name in CATEGORIES:
            _validate_score(name, getattr(self, name))

    def as_dict(self) -> dict[str, float]:
        return {name: float(getattr(self, name)) for name in CATEGORIES}

    @classmethod
    def from_mapping(cls, raw: dict[str, object]) -> "ScoreSet":
        missing = [name for name in CATEGORIES if name not in raw]
        if missing:
            raise ValueError(f"Missing category scores: {', '.join(missing)}")
        return cls(**{name: raw[name] for name in CATEGORIES})  # type: ignore[arg-type]


def average(scores: ScoreSet) -> float:
    return (scores.estres + scores.agotamiento + scores.sobrecarga + scores.burnout) / 4


def classify(scores: ScoreSet) -> RiskTier:
    value = average(scores)
    if value >= ALTO_THRESHOLD:
        return RiskTier.ALTO
    if value >= MEDIO_THRESHOLD:
        return RiskTier.MEDIO
    return RiskTier.BAJO


def _validate_score(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"ScoreSet.{name} must be a number, got {type(value).__name__}")
    if math.isnan(value):
        raise ValueError(f"ScoreSet.{name} must not be NaN")
    if value < SCORE_MIN or value > SCORE_MAX:
        raise ValueError(f"ScoreSet.{name} must be within [0, 10], got {value}")
