"""Infrastructure Layer — persistence, HTTP client, and cross-cutting concerns.

Invariants:
    - Stores implement core.store_protocol.ActivityStore and raise core.errors types
    - External failures mapped to typed errors at this boundary
"""
