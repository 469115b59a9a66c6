"""Permission ORM — a named capability such as `donor_read`."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bloodbank.db.base import Base


class Permission(Base):
    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
