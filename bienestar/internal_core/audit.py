from __future__ import annotations

import datetime as _dt

from .contracts import ActivityEvent
from .store import InMemoryStore


def _ts_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def _sanitize_detail(detail: str) -> str:
    # Never include answers or free text about a student in detail.
    detail = (detail or "").replace("\n", " ").strip()
    if len(detail) > 200:
        detail = detail[:200] + "…"
    return detail


def log_activity(
    store: InMemoryStore,
    actor: str,
    action: str,
    detail: str = "",
) -> None:
    event = ActivityEvent(
        ts_iso=_ts_iso(),
        actor=actor,
        action=action,
        detail=_sanitize_detail(detail),
    )
    store.append_activity(event)
