"""Blood ORM — lookup table of the 8 ABO x Rh combinations. Never mutated after seeding."""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bloodbank.db.base import Base


class Blood(Base):
    __tablename__ = "bloods"
    __table_args__ = (UniqueConstraint("type", "rh", name="uq_bloods_type_rh"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(2), nullable=False)
    rh: Mapped[str] = mapped_column(String(1), nullable=False)
