"""API Layer — FastAPI routes, auth dependency and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every router is mounted behind the bearer-secret dependency
"""
