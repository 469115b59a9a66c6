"""Transaction Scope — one commit per create/update/cascade, full rollback on any error.

Invariants:
    - Commit happens only when the wrapped block finishes without raising
    - Any exception (domain or database) rolls back every statement of the block
    - Nested scopes do not commit: the outermost scope owns the commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_DEPTH_KEY = "bloodbank_tx_depth"


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Run the block as a single unit of work on `db`."""
    depth = db.info.get(_DEPTH_KEY, 0)
    db.info[_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            await db.commit()
    except Exception:
        if depth == 0:
            await db.rollback()
            logger.warning("Transaction rolled back")
        raise
    finally:
        db.info[_DEPTH_KEY] = depth
