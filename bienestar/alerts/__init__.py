"""
Alert boundary for the bienestar service.

Design intent:
- Turn each evaluation into zero or more coordinator alerts.
- Keep alert rules independent from storage and HTTP concerns.
"""
