"""API Layer — FastAPI routes, dependencies, middleware, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON with a `success` flag
"""
