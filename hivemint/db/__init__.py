"""Database Infrastructure — SQLAlchemy Base for the SQL hive store backend.

Invariants:
    - Only used when HIVE_STORE_BACKEND=sql
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite by default, asyncpg for PostgreSQL deployments
"""
