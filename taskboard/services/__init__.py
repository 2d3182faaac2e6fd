"""Services Layer — the imperative shell around core/.

Invariants:
    - One class per component: ContainerRegistry, TaskStore, OrderingEngine,
      SessionManager, BoardProjection
    - Each instance wraps one AsyncSession (one request); no state survives it
    - Invariant-sensitive writes are conditional statements evaluated at write time
"""
