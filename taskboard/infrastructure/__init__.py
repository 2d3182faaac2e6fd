"""Infrastructure Layer — database access, identity resolution, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All store errors mapped to core/errors.py types at this boundary
"""
