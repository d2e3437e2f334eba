"""Root conftest: shared test configuration."""

import os

# Ensure tests never touch a real database or use production-strength hashing
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
