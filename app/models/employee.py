"""Employee models."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base

STATUS_CHECK = "status IN ('active', 'inactive', 'suspended')"


class Employee(Base):
    """Employee record table."""

    __tablename__ = "employees"

    # Directory uid
    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="employee", nullable=False)
    permissions: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    shop_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    shop_owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    temporary_password: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    employee_code: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False, index=True)
    is_batch_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    status_updated_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    password_reset_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    password_reset_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    __table_args__ = (
        CheckConstraint(STATUS_CHECK, name="status"),
    )


class ShopEmployee(Base):
    """Shop membership index."""

    __tablename__ = "shop_employees"

    shop_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    employee_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)
    date_added: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(STATUS_CHECK, name="status"),
    )
