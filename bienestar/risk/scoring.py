from __future__ import annotations

"""
Turn questionnaire answers into category scores and compare evaluations.

Design intent:
- Answers use a 0..4 frequency scale; category scores live on 0..10.
- Every category is unit-weighted; no question or category weighting.
- Comparisons between evaluations are deterministic and explainable.
"""

from dataclasses import dataclass
from typing import Literal, Mapping, Sequence

from bienestar.risk.classifier import CATEGORIES, ScoreSet, average

ANSWER_MIN = 0
ANSWER_MAX = 4
ANSWER_TO_SCORE = 10.0 / ANSWER_MAX
DEFAULT_DETERIORATION_THRESHOLD = 1.5
TREND_DELTA = 1.0

Trend = Literal["empeorando", "mejorando", "estable", "sin_datos"]


class ScoringError(ValueError):
    pass


@dataclass(frozen=True)
class CategoryIncrease:
    category: str
    previous: float
    current: float

    @property
    def delta(self) -> float:
        return self.current - self.previous


@dataclass(frozen=True)
class DeteriorationResult:
    increases: list[CategoryIncrease]

    @property
    def detected(self) -> bool:
        return bool(self.increases)

    @property
    def details(self) -> str:
        return ", ".join(f"{item.category}: +{item.delta:.1f} puntos" for item in self.increases)


def score_answers(
    question_categories: Mapping[int, str],
    answers: Sequence[tuple[int, int]],
) -> ScoreSet:
    """
    Average answers per category and rescale to 0..10.

    question_categories maps question id -> category; answers are
    (question id, value) pairs. A category without answers scores 0.
    """

    grouped: dict[str, list[int]] = {name: [] for name in CATEGORIES}
    for question_id, value in answers:
        category = question_categories.get(question_id)
        if category is None:
            raise ScoringError(f"Unknown question id: {question_id}")
        if category not in grouped:
            raise ScoringError(f"Question {question_id} has unknown category: {category}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScoringError(f"Answer for question {question_id} must be an integer")
        if value < ANSWER_MIN or value > ANSWER_MAX:
            raise ScoringError(
                f"Answer for question {question_id} must be within [{ANSWER_MIN}, {ANSWER_MAX}], got {value}"
            )
        grouped[category].append(value)

    scores = {
        name: (sum(values) / len(values)) * ANSWER_TO_SCORE if values else 0.0
        for name, values in grouped.items()
    }
    return ScoreSet(**scores)


def general_average(scores: ScoreSet) -> float:
    return average(scores)


def detect_deterioration(
    current: ScoreSet,
    previous: ScoreSet,
    *,
    threshold: float = DEFAULT_DETERIORATION_THRESHOLD,
) -> DeteriorationResult:
    increases: list[CategoryIncrease] = []
    for name in CATEGORIES:
        now = float(getattr(current, name))
        before = float(getattr(previous, name))
        if now - before >= threshold:
            increases.append(CategoryIncrease(category=name, previous=before, current=now))
    return DeteriorationResult(increases=increases)


def trend(latest: ScoreSet | None, previous: ScoreSet | None) -> Trend:
    if latest is None or previous is None:
        return "sin_datos"
    change = general_average(latest) - general_average(previous)
    if change > TREND_DELTA:
        return "empeorando"
    if change < -TREND_DELTA:
        return "mejorando"
    return "estable"
