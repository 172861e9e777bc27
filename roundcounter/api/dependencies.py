"""API Dependencies — wires a request-scoped ActivityStore into route handlers.

Invariants:
    - One store per request, bound to that request's database session
    - Tests replace get_db (SQL store on a test engine) or get_store (any ActivityStore)
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roundcounter.core.store_protocol import ActivityStore
from roundcounter.infrastructure.database import get_db
from roundcounter.infrastructure.sql_store import SqlActivityStore


async def get_store(db: AsyncSession = Depends(get_db)) -> ActivityStore:
    return SqlActivityStore(db)
