"""ORM Models: SQLAlchemy declarative models for users, services and subscriptions.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table's key column is `id`: one canonical schema, no alternate names

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from latt.models.user import User  # noqa: F401
from latt.models.service import Service  # noqa: F401
from latt.models.subscription import Subscription  # noqa: F401
