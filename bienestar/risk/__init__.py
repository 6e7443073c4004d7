"""
Risk interpretation boundary for the bienestar service.

Design intent:
- Convert questionnaire answers into bounded category scores.
- Classify scores into BAJO/MEDIO/ALTO with fixed, inclusive thresholds.
- Keep every function pure so callers may share them freely.
"""
from .classifier import CATEGORIES, RiskTier, ScoreSet, average, classify

__all__ = ["CATEGORIES", "RiskTier", "ScoreSet", "average", "classify"]
