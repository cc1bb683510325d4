"""Infrastructure Layer — database access, repositories, logging and the change feed.

Invariants:
    - SQLAlchemy errors are mapped to DatabaseError at the session boundary
"""
