"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/, or db/
    - All functions are pure and deterministic given their inputs (time is a parameter)

Design Decisions:
    - Functional core separated from imperative shell
"""
