"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes never touch the ORM; they call an injected ActivityStore
    - All error bodies share the shape {"error": <message>, "code": <code>}
"""
