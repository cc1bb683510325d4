"""SpinRound — round-based spin-the-wheel competition service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
