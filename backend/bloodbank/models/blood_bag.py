"""BloodBag ORM — one physical donation unit fulfilling a request.

Invariants:
    - blood_id equals the referenced request's blood_id (checked by BloodBagsService)
    - quantity > 0 and expiration_date in the future at creation
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bloodbank.db.base import Base


class BloodBag(Base):
    __tablename__ = "blood_bags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    donation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    expiration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    blood_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bloods.id"), nullable=False,
    )
    donor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("donors.id"), nullable=False, index=True,
    )
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("requests.id"), nullable=False, index=True,
    )
