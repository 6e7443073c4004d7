"""
API orchestration boundary for the bienestar backend.

Design intent:
- Expose thin, typed endpoints for students, evaluations, alerts and stats.
- Keep request validation explicit and failure modes predictable.
"""
