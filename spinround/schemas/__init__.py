"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary; wire format is camelCase
    - Domain bounds (marks 0–100, capacity >= 1) are enforced here

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
