"""Shop models."""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class Shop(Base, TimestampMixin):
    """Registered shop owner.

    A row whose id equals an owner's id is what authorizes that owner.
    """

    __tablename__ = "shops"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)


class EmployeeCounter(Base, TimestampMixin):
    """Highest employee suffix consumed per shop.

    Kept apart from ``shops`` so numbering a shop never registers an owner.
    """

    __tablename__ = "employee_counters"

    shop_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    last_employee_number: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
