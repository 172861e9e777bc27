"""ORM Models — SQLAlchemy declarative models for activities and laps.

Invariants:
    - All models inherit from Base (db/base.py)
    - Activity is the aggregate root; every Lap is scoped by activity_id

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from roundcounter.models.activity import Activity  # noqa: F401
from roundcounter.models.lap import Lap  # noqa: F401
