"""Row Helpers — primary-key get / patch / delete returning affected counts.

Invariants:
    - patch_row and delete_row report the number of affected rows (0 means not found)
    - An empty patch touches nothing and reports 1 if the row exists, else 0
    - get_row always hits the database (populate_existing): bulk statements
      run with synchronize_session=False and must not leave stale objects visible
"""

from typing import Any, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


async def get_row(db: AsyncSession, model: type[ModelT], row_id: int) -> ModelT | None:
    return await db.get(model, row_id, populate_existing=True)


async def list_rows(db: AsyncSession, model: type[ModelT], *criteria) -> list[ModelT]:
    stmt = select(model).where(*criteria).order_by(model.id)
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return list(result.scalars().all())


async def patch_row(
    db: AsyncSession, model: type[Base], row_id: int, fields: dict[str, Any],
) -> int:
    if not fields:
        found = await db.scalar(select(model.id).where(model.id == row_id))
        return 0 if found is None else 1
    result = await db.execute(
        update(model)
        .where(model.id == row_id)
        .values(**fields)
        .execution_options(synchronize_session=False),
    )
    return result.rowcount


async def delete_where(db: AsyncSession, model: type[Base], *criteria) -> int:
    result = await db.execute(
        delete(model)
        .where(*criteria)
        .execution_options(synchronize_session=False),
    )
    return result.rowcount


async def delete_row(db: AsyncSession, model: type[Base], row_id: int) -> int:
    return await delete_where(db, model, model.id == row_id)
