"""Database Declarations — the SQLAlchemy Base shared by every model and migration.

Invariants:
    - Engines and sessions live in infrastructure/database.py, not here

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests
"""
