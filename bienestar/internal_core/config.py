from __future__ import annotations

import os
from dataclasses import dataclass


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class AppConfig:
    BIENESTAR_LOG_LEVEL: str
    BIENESTAR_WEEKLY_EVALUATION_LIMIT: int
    BIENESTAR_DETERIORATION_THRESHOLD: float
    BIENESTAR_ALERT_STATS_DAYS: int
    BIENESTAR_PAGE_SIZE_DEFAULT: int
    BIENESTAR_PAGE_SIZE_MAX: int
    BIENESTAR_SEED_CATALOG: bool

    def clamp_page_size(self, requested: int | None) -> int:
        if requested is None:
            return self.BIENESTAR_PAGE_SIZE_DEFAULT
        return max(1, min(self.BIENESTAR_PAGE_SIZE_MAX, int(requested)))


def load_config() -> AppConfig:
    page_size_max = max(1, _getenv_int("BIENESTAR_PAGE_SIZE_MAX", 100))
    return AppConfig(
        BIENESTAR_LOG_LEVEL=_getenv_str("BIENESTAR_LOG_LEVEL", "INFO"),
        BIENESTAR_WEEKLY_EVALUATION_LIMIT=max(
            1, _getenv_int("BIENESTAR_WEEKLY_EVALUATION_LIMIT", 2)
        ),
        BIENESTAR_DETERIORATION_THRESHOLD=_getenv_float("BIENESTAR_DETERIORATION_THRESHOLD", 1.5),
        BIENESTAR_ALERT_STATS_DAYS=max(1, _getenv_int("BIENESTAR_ALERT_STATS_DAYS", 30)),
        BIENESTAR_PAGE_SIZE_DEFAULT=min(
            page_size_max, max(1, _getenv_int("BIENESTAR_PAGE_SIZE_DEFAULT", 10))
        ),
        BIENESTAR_PAGE_SIZE_MAX=page_size_max,
        BIENESTAR_SEED_CATALOG=_getenv_bool("BIENESTAR_SEED_CATALOG", True),
    )
