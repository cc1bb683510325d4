"""Services Layer — the imperative shell around core rules.

Invariants:
    - One service per component (assignment engine, reveal gate, session
      resolver, event state store, marks sheet)
    - Services own the transaction: they commit, routes never do
    - Change events are published only after a successful commit
"""
