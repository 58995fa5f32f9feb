"""ORM Models — SQLAlchemy declarative models for the SQL hive store.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all
"""

from hivemint.models.hive import HiveRow  # noqa: F401
