"""Task Board Package — ordering and time-tracking engine behind a Kanban board.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
