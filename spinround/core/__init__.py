"""Core Layer — pure event rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure; randomness and time are passed in
"""
