"""
bienestar backend package.

Design intent:
- Classify student wellness questionnaires into BAJO/MEDIO/ALTO risk tiers.
- Keep domain modules (risk/alerts/stats) independent from the HTTP layer.
"""
