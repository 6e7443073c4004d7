import pytest

from bienestar.internal_core.contracts import ScoreSetModel
from bienestar.risk.classifier import CATEGORIES, RiskTier, ScoreSet, average, classify


def _uniform(value: float) -> ScoreSet:
    return ScoreSet(estres=value, agotamiento=value, sobrecarga=value, burnout=value)


def test_classify_boundaries_belong_to_higher_tier() -> None:
    assert classify(_uniform(7.0)) is RiskTier.ALTO
    assert classify(_uniform(6.999)) is RiskTier.MEDIO
    assert classify(_uniform(5.0)) is RiskTier.MEDIO
    assert classify(_uniform(4.999)) is RiskTier.BAJO


def test_classify_extremes() -> None:
    assert classify(ScoreSet(estres=10, agotamiento=10, sobrecarga=10, burnout=10)) is RiskTier.ALTO
    assert classify(ScoreSet(estres=0, agotamiento=0, sobrecarga=0, burnout=0)) is RiskTier.BAJO


def test_classify_uses_unweighted_average() -> None:
    scores = ScoreSet(estres=10, agotamiento=10, sobrecarga=0, burnout=0)
    assert average(scores) == 5.0
    assert classify(scores) is RiskTier.MEDIO
    assert classify(ScoreSet(estres=0, agotamiento=0, sobrecarga=10, burnout=10)) is RiskTier.MEDIO


def test_classify_is_idempotent() -> None:
    scores = ScoreSet(estres=6.5, agotamiento=7.25, sobrecarga=8.0, burnout=6.0)
    assert average(scores) == 6.9375
    assert classify(scores) == classify(scores)
    assert classify(scores) is RiskTier.MEDIO

    scores = ScoreSet(estres=7.0, agotamiento=7.25, sobrecarga=8.0, burnout=6.0)
    assert classify(scores) is RiskTier.ALTO


def test_classify_is_monotonic_in_each_category() -> None:
    grid = [0.0, 2.5, 4.999, 5.0, 6.999, 7.0, 8.5, 10.0]
    for base in grid:
        for name in CATEGORIES:
            previous_tier = None
            for value in grid:
                raw = {category: base for category in CATEGORIES}
                raw[name] = value
                tier = classify(ScoreSet(**raw))
                if previous_tier is not None:
                    assert tier >= previous_tier
                previous_tier = tier


def test_risk_tier_order_and_literals() -> None:
    assert RiskTier.BAJO < RiskTier.MEDIO < RiskTier.ALTO
    assert max([RiskTier.MEDIO, RiskTier.ALTO, RiskTier.BAJO]) is RiskTier.ALTO
    assert [tier.value for tier in RiskTier] == ["BAJO", "MEDIO", "ALTO"]
    assert RiskTier("MEDIO") is RiskTier.MEDIO


def test_score_set_rejects_out_of_range_and_non_numeric() -> None:
    with pytest.raises(ValueError):
        _uniform(10.5)
    with pytest.raises(ValueError):
        _uniform(-0.1)
    with pytest.raises(ValueError):
        ScoreSet(estres="7", agotamiento=1, sobrecarga=1, burnout=1)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        ScoreSet(estres=True, agotamiento=1, sobrecarga=1, burnout=1)
    with pytest.raises(ValueError):
        _uniform(float("nan"))


def test_score_set_from_mapping_requires_all_categories() -> None:
    scores = ScoreSet.from_mapping({"estres": 1, "agotamiento": 2, "sobrecarga": 3, "burnout": 4})
    assert scores.as_dict() == {"estres": 1.0, "agotamiento": 2.0, "sobrecarga": 3.0, "burnout": 4.0}
    with pytest.raises(ValueError, match="burnout"):
        ScoreSet.from_mapping({"estres": 1, "agotamiento": 2, "sobrecarga": 3})


def test_wire_model_builds_score_set() -> None:
    model = ScoreSetModel(estres=8.0, agotamiento=7.0, sobrecarga=7.0, burnout=6.0)
    scores = model.to_score_set()
    assert isinstance(scores, ScoreSet)
    assert classify(scores) is RiskTier.ALTO


def test_score_set_is_immutable() -> None:
    scores = _uniform(3.0)
    with pytest.raises(AttributeError):
        scores.estres = 9.0  # type: ignore[misc]
