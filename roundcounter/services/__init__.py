"""Services Layer — imperative shell around the pure client view state.

Invariants:
    - Services perform IO (HTTP) and delegate every state change to core/view_state.py
"""
