"""Root conftest — shared test configuration."""

import os

# Settings are cached on first use; pin them before anything imports spinround
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("API_SECRET", "test-secret")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")
os.environ.setdefault("LOG_FORMAT", "text")
