"""Root conftest — shared test configuration."""

import os

# Tests never touch the production database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SEED_DEFAULT_CONTAINERS", "false")
