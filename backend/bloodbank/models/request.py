"""Request ORM — a health entity's need for units of one blood type.

Invariants:
    - quantity_needed > 0 and due_date in the future at creation (checked by RequestsService)
    - Fulfilling blood bags reference this row via blood_bags.request_id
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bloodbank.db.base import Base


class Request(Base):
    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    quantity_needed: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    blood_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bloods.id"), nullable=False,
    )
    health_entity_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("health_entities.id"), nullable=False, index=True,
    )
