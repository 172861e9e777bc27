"""RoundCounter — single-user activity and lap counter.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
